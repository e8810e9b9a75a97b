"""Pydantic schemas for user manager endpoints."""
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from core.config import ListStyle


class UserListParams(BaseModel):
    """
    Query parameters of the user list.

    page and list_style are kept as raw strings: invalid values fall back to
    defaults instead of failing validation.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    filter: str = ""
    page: str | None = None
    list_style: str | None = None


class PaginationResponse(BaseModel):
    """Pagination metadata; offsets are zero-based and inclusive."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    current: int
    count: int
    total: int
    per_page: int
    start_offset: int
    end_offset: int


class UserManagerResponse(BaseModel):
    """Variables handed to the rendering layer for the user list page."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    fields: list[dict[str, Any]]
    list_style: ListStyle
    filter: str
    filter_exception: str | None = None
    pagination: PaginationResponse
    users: list[dict[str, Any]]


class NavBadge(BaseModel):
    count: int


class NavResponse(BaseModel):
    """Admin navigation entry for the user manager."""

    label: str
    location: str
    icon: str
    authorize: str
    badge: NavBadge = Field(description="Badge showing the number of users")
