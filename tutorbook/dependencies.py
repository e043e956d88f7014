from tutorbook.engine.realtime import BookingPublisher, RealtimeSync
from tutorbook.redis import redis
from tutorbook.services.store import DatabaseStore


def get_store() -> DatabaseStore:
    return DatabaseStore(publish=BookingPublisher(redis))


def get_realtime() -> RealtimeSync:
    return RealtimeSync(redis)
