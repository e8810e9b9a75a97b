"""Snapshot of the accounts directory stored in the records cache."""
from dataclasses import dataclass, field
from typing import Any


@dataclass
class UsersSnapshot:
    """
    Cached view of the accounts directory.

    The snapshot is valid while the directory modification time is not newer
    than modify_time. users maps username to the raw record data.

    IMPORTANT: When changing these fields, bump CACHE_SCHEMA_VERSION in
    core/record_cache.py so entries written with the old layout are ignored.
    """

    modify_time: float
    users: dict[str, dict[str, Any]] = field(default_factory=dict)

    def is_stale(self, modify_time: float) -> bool:
        """Whether the directory changed after this snapshot was taken."""
        return self.modify_time < modify_time

    def to_dict(self) -> dict[str, Any]:
        return {"modify_time": self.modify_time, "users": self.users}

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "UsersSnapshot":
        users = payload["users"]
        if not isinstance(users, dict):
            raise TypeError("users must be a mapping")
        return cls(modify_time=float(payload["modify_time"]), users=users)
