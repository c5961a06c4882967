import pytest
from pydantic import ValidationError

from src.app.core.enums import SourceType
from src.config.settings import Settings


def test_s3_source_requires_bucket_and_key():
    with pytest.raises(ValidationError) as e:
        Settings(_env_file=None, csv_source=SourceType.S3)

    msg = str(e.value)
    assert "csv_s3_bucket" in msg
    assert "csv_s3_key" in msg


def test_s3_source_with_location_is_valid():
    s = Settings(
        _env_file=None,
        csv_source="s3",
        csv_s3_bucket="bucket",
        csv_s3_key="users.csv",
    )

    assert s.csv_source == SourceType.S3
    assert s.csv_s3_region == "eu-central-1"


@pytest.mark.parametrize("size", [0, -1, 100_001])
def test_batch_size_bounds(size):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, csv_batch_size=size)


def test_database_url_uses_asyncpg():
    s = Settings(_env_file=None, db_host="db", db_port=6543, db_name="n", db_user="u", db_password="p")

    assert s.database_url == "postgresql+asyncpg://u:p@db:6543/n"
