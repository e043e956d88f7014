from redis.asyncio import Redis

from tutorbook.settings import settings


redis: Redis = Redis.from_url(settings.redis_url, encoding="utf-8", decode_responses=True)
