from src.app.models import User


def test_timestamps_are_timezone_aware():
    columns = User.__table__.c

    assert columns.created_at.type.timezone is True
    assert columns.updated_at.type.timezone is True


def test_phone_number_is_unique_upsert_key():
    column = User.__table__.c.phone_number

    assert column.unique is True
    assert column.nullable is False
