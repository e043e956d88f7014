import os
import tempfile
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Callable

import pytest


_tmp = Path(tempfile.mkdtemp(prefix="tutorbook-tests-"))
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_tmp / 'test.db'}"
os.environ["REDIS_URL"] = "redis://localhost:6379/15"
os.environ["TIMEZONE"] = "Africa/Johannesburg"
os.environ["SMTP_HOST"] = ""

from tests.fakes import FakeRedis, FakeStore  # noqa: E402
from tutorbook.database import DB, db  # noqa: E402


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
async def database() -> AsyncIterator[DB]:
    await db.create_tables()
    yield db
    await db.drop_tables()
    await db.engine.dispose()


@pytest.fixture
def db_session(database: DB) -> Callable[[], Any]:
    @asynccontextmanager
    async def open_session() -> AsyncIterator[DB]:
        db.create_session()
        try:
            yield db
            await db.commit()
        finally:
            await db.close()

    return open_session
