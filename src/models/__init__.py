"""Account models."""
from models.user_account import ACCOUNT_FILE_EXTENSION, UserAccount

__all__ = ["ACCOUNT_FILE_EXTENSION", "UserAccount"]
