"""User manager admin endpoints."""
from urllib.parse import urlsplit

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import RedirectResponse

from api.dependencies import get_expression_evaluator, get_settings, get_user_store
from core.config import Settings
from schemas.user_manager import NavResponse, UserListParams, UserManagerResponse
from services import user_manager_service
from services.expression_evaluator import ExpressionEvaluator
from services.user_store import UserStore

LIST_URL = f"/admin/{user_manager_service.LOCATION}"

router = APIRouter(prefix=LIST_URL, tags=["user-manager"])


def redirect_target(request: Request) -> str:
    """
    Where to send the admin after a task: the referring page if it is on this
    site, otherwise the user list.
    """
    referer = request.headers.get("referer")
    if not referer:
        return LIST_URL
    parts = urlsplit(referer)
    if parts.scheme or parts.netloc:
        same_origin = (
            parts.scheme == request.url.scheme and parts.netloc == request.url.netloc
        )
        return referer if same_origin else LIST_URL
    # Relative referrers must stay path-absolute on this host
    if referer.startswith("/") and not referer.startswith(("//", "/\\")):
        return referer
    return LIST_URL


@router.get("", response_model=UserManagerResponse)
async def list_users(
    filter_: str = Query(default="", alias="filter"),
    page: str | None = Query(default=None),
    list_style: str | None = Query(default=None, alias="listStyle"),
    store: UserStore = Depends(get_user_store),
    settings: Settings = Depends(get_settings),
    evaluator: ExpressionEvaluator = Depends(get_expression_evaluator),
) -> UserManagerResponse:
    """
    List user accounts.

    Query parameters:
    - filter: boolean expression evaluated with each account bound to `user`,
      e.g. `user.state == "enabled"`. An invalid expression returns no users and
      the error in `filterException`.
    - page: 1-based page number; invalid values resolve to page 1, values past
      the end to the last page.
    - listStyle: `grid` or `list`; anything else uses the configured default.
    """
    params = UserListParams(filter=filter_, page=page, list_style=list_style)
    return await user_manager_service.build_user_list(store, params, settings, evaluator)


@router.get("/nav", response_model=NavResponse)
async def get_nav(store: UserStore = Depends(get_user_store)) -> NavResponse:
    """Navigation entry for the admin menu, with a user count badge."""
    return await user_manager_service.build_nav(store)


@router.post("/{username}/delete")
async def delete_user(
    username: str,
    request: Request,
    store: UserStore = Depends(get_user_store),
) -> RedirectResponse:
    """Delete an account and redirect back to the referring page."""
    if not await user_manager_service.delete_user_task(store, username):
        raise HTTPException(status_code=404, detail="User not found")
    return RedirectResponse(
        url=redirect_target(request),
        status_code=303,
    )
