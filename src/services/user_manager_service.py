"""Service layer for the user manager admin page."""
import logging

from core.config import Settings
from schemas.user_manager import (
    NavBadge,
    NavResponse,
    PaginationResponse,
    UserListParams,
    UserManagerResponse,
)
from services.expression_evaluator import ExpressionEvaluator
from services.pagination import ArrayPagination
from services.user_filter import filter_users
from services.user_store import UserStore

logger = logging.getLogger(__name__)

LOCATION = "user-manager"
REQUIRED_PERMISSION = "admin_addon_user_manager.users"
LIST_STYLES = ("grid", "list")


def resolve_list_style(requested: str | None, settings: Settings) -> str:
    """Requested style if recognised, otherwise the configured default."""
    if requested in LIST_STYLES:
        return requested
    return settings.default_list_style


async def build_user_list(
    store: UserStore,
    params: UserListParams,
    settings: Settings,
    evaluator: ExpressionEvaluator,
) -> UserManagerResponse:
    """
    Build the variables of the user list page.

    Lists accounts, applies the filter expression, then paginates. A failing
    filter yields an empty page and the error message in filter_exception.
    """
    users = await store.list_users()
    result = filter_users(users, params.filter, evaluator)

    pagination = ArrayPagination(list(result.users.values()), settings.per_page)
    window = pagination.paginate(params.page)

    return UserManagerResponse(
        fields=settings.add_user_fields,
        list_style=resolve_list_style(params.list_style, settings),
        filter=params.filter,
        filter_exception=str(result.error) if result.error else None,
        pagination=PaginationResponse(
            current=window.current,
            count=window.count,
            total=window.total,
            per_page=window.per_page,
            start_offset=window.start_offset,
            end_offset=window.end_offset,
        ),
        users=[user.to_public_dict() for user in window.rows],
    )


async def delete_user_task(store: UserStore, username: str) -> bool:
    """Delete an account; False means there was nothing to delete."""
    return await store.delete_user(username)


async def build_nav(store: UserStore) -> NavResponse:
    """Admin navigation entry, with the number of accounts as its badge."""
    return NavResponse(
        label="User Manager",
        location=LOCATION,
        icon="fa-user",
        authorize=REQUIRED_PERMISSION,
        badge=NavBadge(count=await store.count()),
    )
