"""All-or-nothing filtering of user accounts."""
import logging
from dataclasses import dataclass

from models.user_account import UserAccount
from services.exceptions import FilterEvaluationError
from services.expression_evaluator import ExpressionEvaluator

logger = logging.getLogger(__name__)


@dataclass
class FilterResult:
    """Filtered accounts, or an empty mapping plus the error that aborted filtering."""

    users: dict[str, UserAccount]
    error: FilterEvaluationError | None = None


def filter_users(
    users: dict[str, UserAccount],
    expression: str,
    evaluator: ExpressionEvaluator,
) -> FilterResult:
    """
    Keep the accounts for which expression is truthy.

    The expression sees each account as the variable `user`. An empty
    expression returns the input mapping itself. If evaluation fails for any
    account, no partial result is returned: the result is empty and carries the
    error.
    """
    if not expression:
        return FilterResult(users=users)

    filtered: dict[str, UserAccount] = {}
    try:
        for username, user in users.items():
            if evaluator.evaluate(expression, {"user": user.to_context()}):
                filtered[username] = user
    except FilterEvaluationError as e:
        logger.info("user_filter_failed expression=%r error=%s", expression, e)
        return FilterResult(users={}, error=e)

    return FilterResult(users=filtered)
