from datetime import time
from typing import AsyncIterator

import httpx
import pytest

from tests.fakes import OTHER_TUTOR, TUTOR, FakeRedis
from tutorbook import models
from tutorbook.dependencies import get_realtime, get_store
from tutorbook.engine.realtime import BookingPublisher, RealtimeSync
from tutorbook.main import app
from tutorbook.services.store import DatabaseStore


@pytest.fixture
async def seeded(db_session):
    async with db_session() as db:
        await db.add(models.Tutor(id=TUTOR, name="Grace", subject="Maths"))
        await db.add(models.Tutor(id=OTHER_TUTOR, name="Alan", subject=None))
        for day in range(7):
            await models.AvailabilityRule.create(TUTOR, day, time(9), time(12))
    return db_session


@pytest.fixture
async def client(seeded, fake_redis: FakeRedis) -> AsyncIterator[httpx.AsyncClient]:
    app.dependency_overrides[get_store] = lambda: DatabaseStore(publish=BookingPublisher(fake_redis))
    app.dependency_overrides[get_realtime] = lambda: RealtimeSync(fake_redis)
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
