import io

import pytest
from botocore.exceptions import ClientError

from src.app.core.enums import SourceType
from src.app.core.exceptions import SourceError
from src.config.settings import Settings
from src.ingest.adapters.sources import (
    LocalFileSource,
    S3Config,
    S3Source,
    resolve_source,
)


class FakeS3Client:
    def __init__(self, data: bytes = b"", error: Exception | None = None) -> None:
        self.data = data
        self.error = error
        self.calls: list[dict] = []

    def get_object(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return {"Body": io.BytesIO(self.data)}


@pytest.mark.asyncio
async def test_local_source_reads_file(tmp_path):
    path = tmp_path / "users.csv"
    path.write_bytes(b"name,phone_number\nA,1\n")

    data = await LocalFileSource(path).fetch()

    assert data == b"name,phone_number\nA,1\n"


@pytest.mark.asyncio
async def test_local_source_missing_file_is_source_error(tmp_path):
    with pytest.raises(SourceError):
        await LocalFileSource(tmp_path / "nope.csv").fetch()


@pytest.mark.asyncio
async def test_s3_source_downloads_object():
    client = FakeS3Client(data=b"a,b\n1,2\n")
    source = S3Source(S3Config(bucket="bkt", key="path/users.csv"), client=client)

    data = await source.fetch()

    assert data == b"a,b\n1,2\n"
    assert client.calls == [{"Bucket": "bkt", "Key": "path/users.csv"}]


@pytest.mark.asyncio
async def test_s3_source_client_error_is_source_error():
    err = ClientError({"Error": {"Code": "NoSuchKey", "Message": "missing"}}, "GetObject")
    source = S3Source(S3Config(bucket="bkt", key="k"), client=FakeS3Client(error=err))

    with pytest.raises(SourceError):
        await source.fetch()


@pytest.mark.asyncio
async def test_s3_source_requires_bucket_and_key():
    client = FakeS3Client()
    source = S3Source(S3Config(bucket="", key="k"), client=client)

    with pytest.raises(SourceError):
        await source.fetch()
    assert client.calls == []


def test_resolve_source_defaults_to_local():
    settings = Settings(_env_file=None, csv_local_path="data/users.csv")

    source = resolve_source(settings)

    assert isinstance(source, LocalFileSource)
    assert str(source.path) == "data/users.csv"


def test_resolve_source_s3():
    settings = Settings(
        _env_file=None,
        csv_source=SourceType.S3,
        csv_s3_bucket="bkt",
        csv_s3_key="users.csv",
    )

    assert isinstance(resolve_source(settings), S3Source)
