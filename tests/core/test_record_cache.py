"""Tests for the Redis-backed record cache."""
import json
from datetime import date
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from core.record_cache import (
    CACHE_SCHEMA_VERSION,
    USERS_CACHE_KEY,
    RedisRecordCache,
)
from core.redis import RedisClient
from schemas.users_snapshot import UsersSnapshot
from services.user_store import UserStore


@pytest.fixture
def redis_mock() -> AsyncMock:
    return AsyncMock(spec=RedisClient)


class TestRedisRecordCache:
    """Tests for RedisRecordCache."""

    async def test__fetch__miss_returns_none(self, redis_mock: AsyncMock) -> None:
        redis_mock.get.return_value = None
        cache = RedisRecordCache(redis_mock, ttl=60)

        assert await cache.fetch(USERS_CACHE_KEY) is None

    async def test__save__serialises_snapshot_with_ttl(self, redis_mock: AsyncMock) -> None:
        cache = RedisRecordCache(redis_mock, ttl=60)
        snapshot = UsersSnapshot(
            modify_time=1700000000.25,
            users={"alice": {"email": "alice@example.com"}},
        )

        await cache.save(USERS_CACHE_KEY, snapshot)

        key, ttl, data = redis_mock.setex.await_args.args
        assert key == USERS_CACHE_KEY
        assert ttl == 60
        assert json.loads(data) == {
            "modify_time": 1700000000.25,
            "users": {"alice": {"email": "alice@example.com"}},
        }

    async def test__fetch__decodes_saved_snapshot(self, redis_mock: AsyncMock) -> None:
        """A saved snapshot reads back with the same timestamp and users."""
        cache = RedisRecordCache(redis_mock, ttl=60)
        snapshot = UsersSnapshot(modify_time=1700000000.5, users={"bob": {"state": "enabled"}})
        await cache.save(USERS_CACHE_KEY, snapshot)
        redis_mock.get.return_value = redis_mock.setex.await_args.args[2].encode()

        assert await cache.fetch(USERS_CACHE_KEY) == snapshot

    async def test__save__stringifies_non_json_values(self, redis_mock: AsyncMock) -> None:
        """Dates parsed from YAML are stored as strings."""
        cache = RedisRecordCache(redis_mock, ttl=60)

        await cache.save(
            USERS_CACHE_KEY,
            UsersSnapshot(modify_time=1.0, users={"eve": {"created": date(2024, 5, 1)}}),
        )

        data = json.loads(redis_mock.setex.await_args.args[2])
        assert data["users"]["eve"]["created"] == "2024-05-01"

    async def test__save__stringifies_non_json_keys(self, redis_mock: AsyncMock) -> None:
        """Mappings keyed by YAML dates are stored with string keys."""
        cache = RedisRecordCache(redis_mock, ttl=60)

        await cache.save(
            USERS_CACHE_KEY,
            UsersSnapshot(
                modify_time=1.0,
                users={
                    "eve": {
                        "logins": {date(2024, 1, 1): 3},
                        "history": [{date(2024, 2, 1): "ok"}],
                    },
                },
            ),
        )

        data = json.loads(redis_mock.setex.await_args.args[2])
        assert data["users"]["eve"]["logins"] == {"2024-01-01": 3}
        assert data["users"]["eve"]["history"] == [{"2024-02-01": "ok"}]

    async def test__save__unserialisable_snapshot_is_skipped(
        self, redis_mock: AsyncMock,
    ) -> None:
        """A self-referencing record is not stored and does not raise."""
        loop: list = []
        loop.append(loop)
        cache = RedisRecordCache(redis_mock, ttl=60)

        await cache.save(
            USERS_CACHE_KEY,
            UsersSnapshot(modify_time=1.0, users={"eve": {"loop": loop}}),
        )

        redis_mock.setex.assert_not_awaited()

    async def test__store_rescan__date_keyed_record_lists(
        self, redis_mock: AsyncMock, accounts_dir: Path,
    ) -> None:
        """Listing a record with date keys through the Redis cache succeeds and saves."""
        (accounts_dir / "eve.yaml").write_text("logins:\n  2024-01-01: 3\n")
        redis_mock.get.return_value = None
        store = UserStore(accounts_dir, RedisRecordCache(redis_mock, ttl=60))

        users = await store.list_users()

        assert users["eve"].data["logins"] == {date(2024, 1, 1): 3}
        data = json.loads(redis_mock.setex.await_args.args[2])
        assert data["users"]["eve"]["logins"] == {"2024-01-01": 3}

    @pytest.mark.parametrize(
        "payload",
        [b"not json", b'{"users": {}}', b'{"modify_time": 1, "users": []}'],
    )
    async def test__fetch__corrupt_entry_is_a_miss(
        self, redis_mock: AsyncMock, payload: bytes,
    ) -> None:
        redis_mock.get.return_value = payload
        cache = RedisRecordCache(redis_mock, ttl=60)

        assert await cache.fetch(USERS_CACHE_KEY) is None

    async def test__no_client__always_misses(self) -> None:
        """Without a Redis client saves are dropped and fetches miss."""
        cache = RedisRecordCache(None, ttl=60)

        await cache.save(USERS_CACHE_KEY, UsersSnapshot(modify_time=1.0))

        assert await cache.fetch(USERS_CACHE_KEY) is None

    async def test__disabled_client__always_misses(self) -> None:
        client = RedisClient("redis://localhost:6379", enabled=False)
        await client.connect()
        cache = RedisRecordCache(client, ttl=60)

        await cache.save(USERS_CACHE_KEY, UsersSnapshot(modify_time=1.0))

        assert await cache.fetch(USERS_CACHE_KEY) is None


def test__cache_key__includes_schema_version() -> None:
    assert f"v{CACHE_SCHEMA_VERSION}" in USERS_CACHE_KEY


def test__snapshot__is_stale() -> None:
    snapshot = UsersSnapshot(modify_time=100.0)

    assert snapshot.is_stale(100.5) is True
    assert snapshot.is_stale(100.0) is False
    assert snapshot.is_stale(99.0) is False
