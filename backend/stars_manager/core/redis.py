"""Redis connection used for login sessions."""

import redis

from stars_manager.config import settings


class RedisClient:
    """Lazily created, process-wide client; string responses, not bytes."""

    _client: redis.Redis | None = None

    @classmethod
    def get_client(cls) -> redis.Redis:
        if cls._client is None:
            cls._client = redis.from_url(
                settings.REDIS_URL,
                decode_responses=True,
                health_check_interval=30,
            )
        return cls._client

    @classmethod
    def close(cls) -> None:
        if cls._client is not None:
            cls._client.close()
            cls._client = None


def get_redis() -> redis.Redis:
    return RedisClient.get_client()
