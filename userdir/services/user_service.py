"""
User lifecycle use cases: create, modify, soft-delete, lookups and listings.

Concurrency notes:
- delete and modify racing on the same user resolve as last-write-wins; there
  is no optimistic concurrency check.
- the page and count statements of a listing are not read in one
  transaction, so under concurrent writes the total may drift slightly from
  the returned page.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError

from userdir.core.config import Settings, get_settings
from userdir.core.errors import InvalidArgumentError, StorageError
from userdir.core.security import verify_password
from userdir.core.utils import simplify_string_list
from userdir.db.session import get_session
from userdir.domain.query import ListUsersRequest, UserQuery, build_user_query
from userdir.domain.users import GroupRecord, UserRecord, UserUpdate
from userdir.repositories.membership_repository import MembershipRepository
from userdir.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass
class UserWithGroups:
    user: UserRecord
    groups: list[GroupRecord] = field(default_factory=list)


@dataclass
class UserPage:
    users: list[UserRecord]
    total: int


@dataclass
class UserWithGroupsPage:
    users: list[UserWithGroups]
    total: int


class UserService:
    """Entry point for every user operation of the directory."""

    def __init__(
        self,
        users: Optional[UserRepository] = None,
        memberships: Optional[MembershipRepository] = None,
        settings: Optional[Settings] = None,
        session_factory: Callable[[], Any] = get_session,
    ) -> None:
        self.session_factory = session_factory
        self.users = users or UserRepository(session_factory)
        self.memberships = memberships or MembershipRepository(session_factory)
        self.settings = settings or get_settings()

    # -------------------------------------- mutations --------------------------------------
    def create_user(
        self,
        username: str,
        email: str,
        phone_number: str = "",
        description: str = "",
        password: str = "",
        extra: Optional[Mapping[str, Any]] = None,
    ) -> str:
        user = self.users.create(username, email, phone_number, description, password, extra)
        return user.user_id

    def delete_users(self, user_ids: Sequence[str]) -> list[str]:
        """
        Soft-delete users and drop their group bindings in one transaction.

        Either both effects are committed or neither is. Deleting an already
        deleted user succeeds and keeps it deleted.
        """
        ids = simplify_string_list(user_ids)
        if not ids:
            logger.error("Delete users failed: empty user id")
            raise InvalidArgumentError("empty user id")

        with self.session_factory() as session:
            try:
                self.memberships.delete_bindings(session, ids)
            except SQLAlchemyError as exc:
                session.rollback()
                logger.error("Delete user group binding of %s failed: %s", ids, exc)
                raise StorageError(f"Delete user group binding failed: {exc}") from exc

            try:
                self.users.mark_deleted(session, ids, datetime.now(timezone.utc))
            except SQLAlchemyError as exc:
                session.rollback()
                logger.error("Update user status of %s failed: %s", ids, exc)
                raise StorageError(f"Update user status failed: {exc}") from exc

            try:
                session.commit()
            except SQLAlchemyError as exc:
                session.rollback()
                logger.error("Delete users %s failed: %s", ids, exc)
                raise StorageError(f"Delete users failed: {exc}") from exc

        return ids

    def modify_user(
        self,
        user_id: str,
        *,
        username: Optional[str] = None,
        email: Optional[str] = None,
        phone_number: Optional[str] = None,
        description: Optional[str] = None,
        extra: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """Apply only the non-empty fields; update_time is always refreshed."""
        self.users.get(user_id)
        changes = UserUpdate.from_request(
            username=username,
            email=email,
            phone_number=phone_number,
            description=description,
            extra=extra,
        )
        self.users.update(user_id, changes)
        return user_id

    # -------------------------------------- lookups --------------------------------------
    def get_user(self, user_id: str) -> UserRecord:
        return self.users.get(user_id).to_record()

    def get_user_with_group(self, user_id: str) -> UserWithGroups:
        user = self.get_user(user_id)
        return UserWithGroups(user=user, groups=self._groups_of(user_id))

    def _groups_of(self, user_id: str) -> list[GroupRecord]:
        groups = self.memberships.get_groups_by_user_ids([user_id])
        return [group.to_record() for group in groups]

    def verify_password(self, user_id: str, password: str) -> bool:
        user = self.users.get(user_id)
        return verify_password(password, user.password)

    def build_query(self, request: ListUsersRequest) -> UserQuery:
        return build_user_query(request, self.settings, self.memberships.get_user_ids_by_group_ids)

    def list_users(self, request: ListUsersRequest) -> UserPage:
        query = self.build_query(request)
        if query.matches_nothing:
            return UserPage(users=[], total=0)
        users = [user.to_record() for user in self.users.list_page(query)]
        total = self.users.count(query)
        return UserPage(users=users, total=total)

    def list_users_with_group(self, request: ListUsersRequest) -> UserWithGroupsPage:
        """Listing enriched with groups; one resolution per returned user, in page order."""
        page = self.list_users(request)
        enriched: list[UserWithGroups] = []
        for user in page.users:
            try:
                groups = self._groups_of(user.user_id)
            except StorageError:
                logger.error("Get user [%s] groups failed", user.user_id)
                raise
            enriched.append(UserWithGroups(user=user, groups=groups))
        return UserWithGroupsPage(users=enriched, total=page.total)
