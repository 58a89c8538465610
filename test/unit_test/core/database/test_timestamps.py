"""
Timestamp columns store naive UTC values.
"""

import pytest
from sqlalchemy import DateTime
from sqlmodel import SQLModel

from neurmatic.core.database.base import utc_now
from neurmatic.core.database.entities.users import User


def test_every_datetime_column_is_naive():
    columns = [
        column
        for table in SQLModel.metadata.tables.values()
        for column in table.columns
        if isinstance(column.type, DateTime)
    ]

    assert columns
    assert all(column.type.timezone is False for column in columns)
    assert isinstance(User.__table__.c.created_at.type, DateTime)
    assert isinstance(User.__table__.c.last_login_at.type, DateTime)


@pytest.mark.asyncio
async def test_naive_timestamps_round_trip(repos, session, make_user):
    user = await make_user("clock")
    stamp = utc_now()
    user.last_login_at = stamp
    await repos.users.update(user)
    user_id = user.id
    session.expire_all()

    reloaded = await repos.users.get_by_id(user_id)

    assert reloaded.created_at.tzinfo is None
    assert reloaded.last_login_at == stamp
