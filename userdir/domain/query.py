"""
Filter and pagination rules for user listings.

A list request is turned once into an immutable UserQuery. The same value is
handed to the page query and to the count query, so both see identical
predicates; only the page query applies order, limit and offset.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from userdir.core.config import Settings
from userdir.core.utils import simplify_string, simplify_string_list

DEFAULT_SORT_KEY = "create_time"
SORTABLE_COLUMNS = frozenset(
    {"create_time", "update_time", "status_time", "username", "email", "user_id"}
)
FILTER_COLUMNS = ("user_id", "username", "email", "phone_number", "status")


@dataclass
class ListUsersRequest:
    group_id: Sequence[str] = field(default_factory=list)
    user_id: Sequence[str] = field(default_factory=list)
    username: Sequence[str] = field(default_factory=list)
    email: Sequence[str] = field(default_factory=list)
    phone_number: Sequence[str] = field(default_factory=list)
    status: Sequence[str] = field(default_factory=list)
    sort_key: Optional[str] = None
    reverse: Optional[bool] = None
    limit: Optional[int] = None
    offset: Optional[int] = None


@dataclass(frozen=True)
class UserQuery:
    filters: tuple[tuple[str, tuple[str, ...]], ...] = ()
    sort_key: str = DEFAULT_SORT_KEY
    reverse: bool = True
    limit: int = 20
    offset: int = 0
    matches_nothing: bool = False


def get_limit(limit: Optional[int], settings: Settings) -> int:
    if limit is None or limit <= 0:
        return settings.default_limit
    return min(limit, settings.max_limit)


def get_offset(offset: Optional[int]) -> int:
    if offset is None or offset < 0:
        return 0
    return offset


def get_sort_key(sort_key: Optional[str]) -> str:
    key = (sort_key or "").strip()
    return key if key in SORTABLE_COLUMNS else DEFAULT_SORT_KEY


def build_user_query(
    request: ListUsersRequest,
    settings: Settings,
    resolve_user_ids: Callable[[list[str]], list[str]],
) -> UserQuery:
    """
    Normalize a list request into a bounded UserQuery.

    When group ids are given, the user-id filter becomes the group members,
    intersected with any explicitly requested user ids. An empty outcome marks
    the query as matching nothing rather than dropping the predicate.
    """
    group_ids = simplify_string_list(request.group_id)
    normalized = {
        "user_id": simplify_string_list(request.user_id),
        "username": simplify_string_list(request.username),
        # stored lower-cased, so filter values are folded the same way
        "email": simplify_string_list(simplify_string(value) for value in request.email or ()),
        "phone_number": simplify_string_list(simplify_string(value) for value in request.phone_number or ()),
        "status": simplify_string_list(request.status),
    }

    matches_nothing = False
    if group_ids:
        member_ids = resolve_user_ids(group_ids)
        requested = normalized["user_id"]
        if not requested:
            normalized["user_id"] = list(member_ids)
        else:
            members = set(member_ids)
            normalized["user_id"] = [user_id for user_id in requested if user_id in members]
        matches_nothing = not normalized["user_id"]

    filters = tuple(
        (column, tuple(normalized[column])) for column in FILTER_COLUMNS if normalized[column]
    )
    return UserQuery(
        filters=filters,
        sort_key=get_sort_key(request.sort_key),
        reverse=True if request.reverse is None else bool(request.reverse),
        limit=get_limit(request.limit, settings),
        offset=get_offset(request.offset),
        matches_nothing=matches_nothing,
    )
