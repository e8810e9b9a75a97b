"""File-backed user account record."""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

ACCOUNT_FILE_EXTENSION = ".yaml"

# Never sent to the rendering layer
SECRET_FIELDS = frozenset({"password", "hashed_password"})


@dataclass
class UserAccount:
    """
    A user account stored as <accounts_dir>/<username>.yaml.

    The record format belongs to the host CMS; data is kept as the opaque
    mapping parsed from the file.
    """

    username: str
    path: Path
    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def load(cls, accounts_dir: Path, username: str) -> "UserAccount":
        """
        Load an account by username.

        A missing file yields an account with empty data whose file_exists()
        is False. Raises yaml.YAMLError if the file is not valid YAML and
        UnicodeDecodeError if it is not UTF-8.
        """
        path = accounts_dir / f"{username}{ACCOUNT_FILE_EXTENSION}"
        if not path.is_file():
            return cls(username=username, path=path)

        parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
        if not isinstance(parsed, dict):
            if parsed is not None:
                logger.warning(
                    "user_account_not_a_mapping username=%s type=%s",
                    username,
                    type(parsed).__name__,
                )
            parsed = {}
        return cls(username=username, path=path, data=parsed)

    def file_exists(self) -> bool:
        return self.path.is_file()

    def delete(self) -> None:
        """Remove the backing file."""
        self.path.unlink()

    def to_context(self) -> dict[str, Any]:
        """Mapping bound as `user` when evaluating filter expressions."""
        return {**self.data, "username": self.username}

    def to_public_dict(self) -> dict[str, Any]:
        """Mapping handed to the rendering layer, without password fields."""
        return {
            key: value
            for key, value in self.to_context().items()
            if key not in SECRET_FIELDS
        }
