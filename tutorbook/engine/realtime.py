"""Booking notifications between viewers of the same tutor, delivered through redis pub/sub."""

from __future__ import annotations

import asyncio
import inspect
from contextlib import suppress
from typing import Any, Awaitable, Callable

from pydantic import ValidationError
from redis.asyncio import Redis
from redis.asyncio.client import PubSub
from redis.exceptions import RedisError

from tutorbook.logger import get_logger
from tutorbook.schemas.bookings import BookingCreated


logger = get_logger(__name__)

BookingHandler = Callable[[BookingCreated], Awaitable[None] | None]


def channel(tutor_id: str) -> str:
    return f"bookings:{tutor_id}"


class BookingPublisher:
    def __init__(self, redis: Redis) -> None:
        self.redis = redis

    async def __call__(self, event: BookingCreated) -> None:
        # the booking is already committed at this point, so a broken connection must not fail the request
        try:
            await self.redis.publish(channel(event.tutor_id), event.model_dump_json())
        except RedisError:
            logger.exception("Could not publish booking %s of tutor %s", event.id, event.tutor_id)


class Subscription:
    """Handle of a running subscription to the bookings of one tutor."""

    def __init__(self, tutor_id: str, pubsub: PubSub, task: asyncio.Task[None]) -> None:
        self.tutor_id = tutor_id
        self._pubsub = pubsub
        self._task = task

    @property
    def active(self) -> bool:
        return not self._task.done()

    async def cancel(self) -> None:
        self._task.cancel()
        try:
            with suppress(asyncio.CancelledError):
                await self._task
        finally:
            await self._pubsub.unsubscribe(channel(self.tutor_id))
            await self._pubsub.aclose()
        logger.debug("Unsubscribed from bookings of tutor %s", self.tutor_id)


class RealtimeSync:
    """
    Forward booking notifications of the currently selected tutor to a handler.

    Delivery is at least once and unordered, handlers have to be idempotent.
    """

    def __init__(self, redis: Redis) -> None:
        self.redis = redis
        self.subscription: Subscription | None = None

    async def subscribe(self, tutor_id: str, on_booking: BookingHandler) -> Subscription:
        pubsub = self.redis.pubsub()
        await pubsub.subscribe(channel(tutor_id))
        task = asyncio.create_task(self._listen(tutor_id, pubsub, on_booking))
        logger.debug("Subscribed to bookings of tutor %s", tutor_id)
        return Subscription(tutor_id, pubsub, task)

    async def switch(self, tutor_id: str, on_booking: BookingHandler) -> Subscription:
        await self.close()
        self.subscription = await self.subscribe(tutor_id, on_booking)
        return self.subscription

    async def close(self) -> None:
        if self.subscription is not None:
            await self.subscription.cancel()
            self.subscription = None

    async def _listen(self, tutor_id: str, pubsub: PubSub, on_booking: BookingHandler) -> None:
        try:
            async for message in pubsub.listen():
                if message["type"] != "message":
                    continue
                try:
                    await dispatch(tutor_id, message["data"], on_booking)
                except Exception:
                    # a failing handler must not end the subscription
                    logger.exception("Could not handle booking notification of tutor %s", tutor_id)
        except RedisError:
            logger.exception("Lost subscription to bookings of tutor %s", tutor_id)


async def dispatch(tutor_id: str, data: Any, on_booking: BookingHandler) -> bool:
    """Pass a raw notification to the handler if it is a valid booking of the given tutor."""

    try:
        event = BookingCreated.model_validate_json(data)
    except ValidationError:
        logger.warning("Ignoring malformed booking notification: %r", data)
        return False

    if event.tutor_id != tutor_id:
        logger.debug("Ignoring booking %s of tutor %s", event.id, event.tutor_id)
        return False

    result = on_booking(event)
    if inspect.isawaitable(result):
        await result
    return True
