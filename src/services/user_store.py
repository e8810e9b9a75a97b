"""Directory-backed store of user accounts with a two-tier cache."""
import asyncio
import logging
from pathlib import Path

import yaml

from core.record_cache import USERS_CACHE_KEY, RecordCache
from models.user_account import ACCOUNT_FILE_EXTENSION, UserAccount
from schemas.users_snapshot import UsersSnapshot
from services.exceptions import InvalidUsernameError

logger = logging.getLogger(__name__)

# Raised by UserAccount.load for a file that cannot be parsed into a record
UNREADABLE_RECORD_ERRORS = (yaml.YAMLError, UnicodeDecodeError)


def validate_username(username: str) -> str:
    """
    Ensure a username maps to a file directly inside the accounts directory.

    Raises:
        InvalidUsernameError: If the name is empty, hidden, or contains a path separator.
    """
    if not username or username.startswith(".") or "/" in username or "\\" in username:
        raise InvalidUsernameError(username)
    return username


class UserStore:
    """
    Lists, loads and deletes user accounts.

    Listing goes through two cache tiers:

    1. an in-memory memo, set on the first list_users() call and never
       revalidated for the lifetime of the store (one store per request);
    2. a persisted UsersSnapshot in the record cache, valid while the accounts
       directory modification time is not newer than the snapshot's.

    Deletion patches both tiers instead of forcing a rescan.
    """

    def __init__(self, accounts_dir: Path | None, cache: RecordCache) -> None:
        self._accounts_dir = accounts_dir
        self._cache = cache
        self._users: dict[str, UserAccount] | None = None

    @property
    def accounts_dir(self) -> Path | None:
        """The accounts directory, or None when unset or missing."""
        if self._accounts_dir is None or not self._accounts_dir.is_dir():
            return None
        return self._accounts_dir

    async def list_users(self) -> dict[str, UserAccount]:
        """
        Return all accounts keyed by username.

        An unset or missing accounts directory yields an empty mapping.
        """
        if self._users is not None:
            return self._users

        accounts_dir = self.accounts_dir
        if accounts_dir is None:
            logger.debug("accounts_dir_unavailable path=%s", self._accounts_dir)
            self._users = {}
            return self._users

        modify_time = accounts_dir.stat().st_mtime
        snapshot = await self._cache.fetch(USERS_CACHE_KEY)
        if snapshot is None or snapshot.is_stale(modify_time):
            logger.debug(
                "user_cache_rescan modify_time=%s cached_modify_time=%s",
                modify_time,
                snapshot.modify_time if snapshot else None,
            )
            users = await asyncio.to_thread(self._scan_directory, accounts_dir)
            await self._save_to_cache(users)
        else:
            logger.debug("user_cache_hit modify_time=%s", snapshot.modify_time)
            users = {
                username: UserAccount(
                    username=username,
                    path=accounts_dir / f"{username}{ACCOUNT_FILE_EXTENSION}",
                    data=data,
                )
                for username, data in snapshot.users.items()
            }

        self._users = users
        return users

    def load_user(self, username: str) -> UserAccount | None:
        """
        Load a single account straight from disk.

        Returns None when the accounts directory is unavailable. The returned
        account may not exist on disk; check file_exists().

        Raises:
            InvalidUsernameError: If the username cannot name an account file.
        """
        validate_username(username)
        accounts_dir = self.accounts_dir
        if accounts_dir is None:
            return None
        return UserAccount.load(accounts_dir, username)

    async def delete_user(self, username: str) -> bool:
        """
        Delete an account's file and drop it from both cache tiers.

        The persisted snapshot is patched and saved with the directory
        modification time read after the unlink. If the directory changes
        again for another reason, the next listing rescans and the patch is
        superseded.

        Returns:
            True if a file was deleted, False if there was nothing to delete.
        """
        try:
            user = self.load_user(username)
        except InvalidUsernameError:
            logger.warning("user_delete_rejected username=%r", username)
            return False
        except UNREADABLE_RECORD_ERRORS:
            # Unparseable records can still be deleted
            user = UserAccount(
                username=username,
                path=self._accounts_dir / f"{username}{ACCOUNT_FILE_EXTENSION}",
            )

        if user is None or not user.file_exists():
            logger.debug("user_delete_missing username=%s", username)
            return False

        users = await self.list_users()
        user.delete()
        users.pop(username, None)
        await self._save_to_cache(users)
        logger.info("user_deleted username=%s", username)
        return True

    async def usernames(self) -> dict[str, str]:
        """Map of username to username, for select fields."""
        return {username: username for username in await self.list_users()}

    async def count(self) -> int:
        return len(await self.list_users())

    def _scan_directory(self, accounts_dir: Path) -> dict[str, UserAccount]:
        users: dict[str, UserAccount] = {}
        for path in sorted(accounts_dir.iterdir()):
            if not path.name.endswith(ACCOUNT_FILE_EXTENSION) or not path.is_file():
                continue
            username = path.name[: -len(ACCOUNT_FILE_EXTENSION)].strip()
            try:
                validate_username(username)
                user = UserAccount.load(accounts_dir, username)
            except (InvalidUsernameError, *UNREADABLE_RECORD_ERRORS) as e:
                logger.warning("user_account_skipped file=%s error=%s", path.name, e)
                continue
            users[user.username] = user
        return users

    async def _save_to_cache(self, users: dict[str, UserAccount]) -> None:
        accounts_dir = self.accounts_dir
        if accounts_dir is None:
            return
        snapshot = UsersSnapshot(
            modify_time=accounts_dir.stat().st_mtime,
            users={username: user.data for username, user in users.items()},
        )
        await self._cache.save(USERS_CACHE_KEY, snapshot)
