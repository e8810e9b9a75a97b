"""Pytest fixtures for testing."""
from collections.abc import AsyncGenerator, Callable
from pathlib import Path
from typing import Any

import pytest
import yaml
from httpx import ASGITransport, AsyncClient

from core.config import Settings
from schemas.users_snapshot import UsersSnapshot
from services.user_store import UserStore


class InMemoryRecordCache:
    """Record cache kept in a dict, counting reads and writes."""

    def __init__(self) -> None:
        self.entries: dict[str, UsersSnapshot] = {}
        self.fetch_count = 0
        self.save_count = 0

    async def fetch(self, key: str) -> UsersSnapshot | None:
        self.fetch_count += 1
        return self.entries.get(key)

    async def save(self, key: str, snapshot: UsersSnapshot) -> None:
        self.save_count += 1
        self.entries[key] = snapshot


@pytest.fixture
def accounts_dir(tmp_path: Path) -> Path:
    """Empty accounts directory."""
    path = tmp_path / "accounts"
    path.mkdir()
    return path


@pytest.fixture
def write_account(accounts_dir: Path) -> Callable[..., Path]:
    """Write <username>.yaml into the accounts directory."""

    def _write(username: str, **data: Any) -> Path:
        path = accounts_dir / f"{username}.yaml"
        path.write_text(yaml.safe_dump(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def sample_accounts(write_account: Callable[..., Path]) -> None:
    """Three accounts with different states and access levels."""
    write_account(
        "admin",
        email="admin@example.com",
        fullname="Site Admin",
        state="enabled",
        hashed_password="$2y$10$abc",
        access={"admin": {"login": True, "super": True}},
    )
    write_account(
        "editor",
        email="editor@example.com",
        fullname="Eddie Editor",
        state="enabled",
        access={"admin": {"login": True}},
    )
    write_account(
        "guest",
        email="guest@example.com",
        fullname="Guest User",
        state="disabled",
        access={"site": {"login": True}},
    )


@pytest.fixture
def record_cache() -> InMemoryRecordCache:
    return InMemoryRecordCache()


@pytest.fixture
def store(accounts_dir: Path, record_cache: InMemoryRecordCache) -> UserStore:
    return UserStore(accounts_dir, record_cache)


@pytest.fixture
def settings(accounts_dir: Path) -> Settings:
    """Settings pointing at the test accounts directory, Redis disabled."""
    return Settings(
        _env_file=None,
        accounts_dir=accounts_dir,
        redis_enabled=False,
    )


@pytest.fixture
async def client(
    settings: Settings,
    record_cache: InMemoryRecordCache,
) -> AsyncGenerator[AsyncClient]:
    """Create a test client using the test settings and in-memory record cache."""
    from api.dependencies import get_record_cache
    from api.main import app
    from core.config import get_settings

    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_record_cache] = lambda: record_cache

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()
