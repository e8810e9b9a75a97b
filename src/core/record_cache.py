"""Persisted tier of the user records cache."""
import json
import logging
from typing import TYPE_CHECKING, Any, Protocol

from schemas.users_snapshot import UsersSnapshot

if TYPE_CHECKING:
    from core.redis import RedisClient

logger = logging.getLogger(__name__)

# Cache schema version - included in the cache key (e.g. "user_manager:v1:users").
# Bump when the UsersSnapshot layout changes so entries written by older code
# are never read back; they expire through the TTL.
CACHE_SCHEMA_VERSION = 1

USERS_CACHE_KEY = f"user_manager:v{CACHE_SCHEMA_VERSION}:users"

# Dict keys json.dumps accepts as they are
_JSON_KEY_TYPES = (str, int, float, bool, type(None))


def _stringify_keys(value: Any) -> Any:
    """Turn mapping keys JSON cannot hold (e.g. YAML dates) into strings."""
    if isinstance(value, dict):
        return {
            key if isinstance(key, _JSON_KEY_TYPES) else str(key): _stringify_keys(item)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [_stringify_keys(item) for item in value]
    return value


class RecordCache(Protocol):
    """Key/value contract the user store relies on."""

    async def fetch(self, key: str) -> UsersSnapshot | None:
        """Return the snapshot stored under key, or None on a miss."""
        ...

    async def save(self, key: str, snapshot: UsersSnapshot) -> None:
        """Store the snapshot under key."""
        ...


class RedisRecordCache:
    """
    Redis-backed record cache.

    Snapshots are stored as JSON. A missing client, a disabled client and any
    Redis failure all read as a cache miss, so listing falls back to a rescan.
    """

    def __init__(self, redis_client: "RedisClient | None", ttl: int) -> None:
        self._redis = redis_client
        self._ttl = ttl

    async def fetch(self, key: str) -> UsersSnapshot | None:
        """
        Fetch a snapshot.

        Args:
            key: Cache key, normally USERS_CACHE_KEY.

        Returns:
            The decoded snapshot, or None on a miss or an undecodable entry.
        """
        if self._redis is None:
            return None
        data = await self._redis.get(key)
        if not data:
            logger.debug("record_cache_miss key=%s", key)
            return None
        try:
            snapshot = UsersSnapshot.from_dict(json.loads(data))
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("record_cache_corrupt key=%s error=%s", key, e)
            return None
        logger.debug("record_cache_hit key=%s", key)
        return snapshot

    async def save(self, key: str, snapshot: UsersSnapshot) -> None:
        """
        Store a snapshot.

        Keys and values YAML parsed into non-JSON types are stringified. A
        snapshot that still cannot be serialised is not stored; the next
        listing rescans.
        """
        if self._redis is None:
            return
        try:
            data = json.dumps(_stringify_keys(snapshot.to_dict()), default=str)
        except (TypeError, ValueError, RecursionError) as e:
            logger.warning("record_cache_unserialisable key=%s error=%s", key, e)
            return
        await self._redis.setex(key, self._ttl, data)
        logger.debug(
            "record_cache_set key=%s users=%s modify_time=%s",
            key,
            len(snapshot.users),
            snapshot.modify_time,
        )
