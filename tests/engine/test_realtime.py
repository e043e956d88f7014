import asyncio
from unittest.mock import AsyncMock, MagicMock

from redis.exceptions import ConnectionError as RedisConnectionError

from tests.fakes import OTHER_TUTOR, TUTOR, FakeRedis, local
from tutorbook.engine.realtime import BookingPublisher, RealtimeSync, channel, dispatch
from tutorbook.exceptions.bookings import BookingFailedException
from tutorbook.schemas.bookings import BookingCreated


def event(tutor_id: str = TUTOR, hour: int = 10) -> BookingCreated:
    return BookingCreated(
        id=f"{tutor_id}-{hour}",
        tutor_id=tutor_id,
        start_time=local(2026, 10, 19, hour),
        end_time=local(2026, 10, 19, hour + 1),
    )


class Collector:
    def __init__(self) -> None:
        self.events: list[BookingCreated] = []
        self.received = asyncio.Event()

    async def __call__(self, event: BookingCreated) -> None:
        self.events.append(event)
        self.received.set()


async def test__dispatch_passes_bookings_of_tutor() -> None:
    collector = Collector()

    assert await dispatch(TUTOR, event().model_dump_json(), collector)
    assert collector.events == [event()]


async def test__dispatch_supports_sync_handlers() -> None:
    events: list[BookingCreated] = []

    assert await dispatch(TUTOR, event().model_dump_json(), events.append)
    assert events == [event()]


async def test__dispatch_ignores_other_tutors() -> None:
    collector = Collector()

    assert not await dispatch(TUTOR, event(OTHER_TUTOR).model_dump_json(), collector)
    assert collector.events == []


async def test__dispatch_ignores_malformed_payloads() -> None:
    collector = Collector()

    assert not await dispatch(TUTOR, "not json", collector)
    assert not await dispatch(TUTOR, '{"id": "x"}', collector)
    assert collector.events == []


async def test__publisher_sends_to_tutor_channel(fake_redis: FakeRedis) -> None:
    pubsub = fake_redis.pubsub()
    await pubsub.subscribe(channel(TUTOR))

    await BookingPublisher(fake_redis)(event())

    message = await pubsub.queue.get()
    assert message["channel"] == "bookings:tutor-1"
    assert BookingCreated.model_validate_json(message["data"]) == event()


async def test__publisher_survives_broken_connection() -> None:
    redis = MagicMock()
    redis.publish = AsyncMock(side_effect=RedisConnectionError("connection refused"))

    await BookingPublisher(redis)(event())

    redis.publish.assert_awaited_once()


async def test__subscription_receives_bookings(fake_redis: FakeRedis) -> None:
    collector = Collector()
    subscription = await RealtimeSync(fake_redis).subscribe(TUTOR, collector)

    await BookingPublisher(fake_redis)(event(OTHER_TUTOR))
    await BookingPublisher(fake_redis)(event())
    await asyncio.wait_for(collector.received.wait(), 1)

    assert collector.events == [event()]
    assert subscription.active

    await subscription.cancel()

    assert not subscription.active
    assert fake_redis.pubsubs == []


async def test__switch_cancels_previous_subscription(fake_redis: FakeRedis) -> None:
    realtime = RealtimeSync(fake_redis)
    first, second = Collector(), Collector()

    old = await realtime.switch(TUTOR, first)
    new = await realtime.switch(OTHER_TUTOR, second)

    assert not old.active
    assert new.active and realtime.subscription is new

    await BookingPublisher(fake_redis)(event())
    await BookingPublisher(fake_redis)(event(OTHER_TUTOR))
    await asyncio.wait_for(second.received.wait(), 1)

    assert first.events == []
    assert second.events == [event(OTHER_TUTOR)]

    await realtime.close()

    assert realtime.subscription is None
    assert not new.active


async def test__subscription_survives_failing_handler(fake_redis: FakeRedis) -> None:
    collector = Collector()
    failures = [BookingFailedException()]

    async def handler(event: BookingCreated) -> None:
        if failures:
            raise failures.pop()
        await collector(event)

    subscription = await RealtimeSync(fake_redis).subscribe(TUTOR, handler)

    await BookingPublisher(fake_redis)(event(hour=10))
    await BookingPublisher(fake_redis)(event(hour=11))
    await asyncio.wait_for(collector.received.wait(), 1)

    assert collector.events == [event(hour=11)]
    assert subscription.active

    await subscription.cancel()

    assert not subscription.active
    assert fake_redis.pubsubs == []
