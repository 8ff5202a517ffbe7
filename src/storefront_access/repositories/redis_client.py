import redis.asyncio as redis

from storefront_access.configs.settings import Settings
from storefront_access.configs.logging_config import get_logger

log = get_logger(__name__)


class RedisClient:
    """
    Owns the Redis connection for the application lifetime.

    Constructed in `create_app` and opened/closed by the startup and
    shutdown hooks.
    """

    def __init__(self, settings: Settings):
        self._settings = settings
        self.client: redis.Redis | None = None

    async def connect(self) -> None:
        try:
            log.info("redis.connect begin")
            self.client = redis.from_url(self._settings.redis_url, decode_responses=True)
            await self.client.ping()
            log.info("redis.connect done")
        except Exception as e:
            log.error("redis.connect failed error=%s", e)
            raise

    async def close(self) -> None:
        if self.client:
            await self.client.aclose()
            self.client = None
