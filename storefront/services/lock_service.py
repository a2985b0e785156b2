# storefront/services/lock_service.py
import redis

from storefront.utils.retry import redis_retry
from storefront.utils.settings import REDIS_URL
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

# compare-and-delete, runs atomically inside redis
# nobody can slip in between GET and DEL, so only the owner frees the lock
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""


def cart_checkout_key(cart_id: str) -> str:
    return f"cart:{cart_id}:checkout"


def order_settle_key(order_id: int) -> str:
    return f"order:{order_id}:settle"


class LockService:
    """
    - acquire a named lock for an owner token (SET NX EX)
    - release it only if the owner still holds it (lua)
    - locks expire on their own after ttl, no manual cleanup
    """

    def __init__(self, url: str | None = None):
        self.redis = redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @redis_retry()
    def acquire(self, key: str, owner: str, ttl: int) -> bool:
        logger.info(f"Acquire lock {key} for {owner}")
        # SET order:7:settle "<owner>" NX EX 60
        return bool(self.redis.set(name=key, value=owner, nx=True, ex=ttl))

    @redis_retry()
    def release(self, key: str, owner: str) -> bool:
        logger.info(f"Release lock {key} for {owner}")
        res = self.redis.eval(_RELEASE_LUA, 1, key, owner)
        return bool(res)


def release_quietly(lock_service: LockService, key: str, owner: str) -> None:
    """Release after the work is committed, a lock left behind expires on its own."""
    try:
        lock_service.release(key, owner)
    except redis.RedisError as e:
        logger.warning(f"Failed to release lock {key}: {e}")
