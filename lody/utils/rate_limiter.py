import logging
from typing import Optional
from redis import Redis, ConnectionPool
from redis.exceptions import RedisError
from lody.core.config import settings

logger = logging.getLogger(__name__)

# Redis-backed fixed-window limiter for waitlist signups
_pool: Optional[ConnectionPool] = None
_client: Optional[Redis] = None


def get_client() -> Redis:
    global _pool, _client
    if _client is None:
        _pool = ConnectionPool.from_url(settings.REDIS_URL, decode_responses=True)
        _client = Redis(connection_pool=_pool)
    return _client


def allow(key: str, limit: int, window_seconds: int) -> bool:
    """Return True if action under key is allowed within window, else False.

    Uses INCR + EXPIRE (nx) so the window starts at the first hit.
    """
    r = get_client()
    with r.pipeline() as pipe:
        pipe.incr(key, 1)
        pipe.expire(key, window_seconds, nx=True)
        count, _ = pipe.execute()
    return int(count) <= limit


def allow_signup(client_id: str, window_seconds: int = 60) -> bool:
    """Check the per-client signup budget. Always allowed when the limit is 0.

    Fails open: signups keep working while Redis is unreachable.
    """
    limit = settings.WAITLIST_RATE_LIMIT_PER_MINUTE
    if limit <= 0:
        return True
    key = f"waitlist:signup:{client_id or 'anonymous'}"
    try:
        return allow(key, limit, window_seconds)
    except RedisError as e:
        logger.warning(f"Rate limiter unavailable, allowing signup: {e}")
        return True
