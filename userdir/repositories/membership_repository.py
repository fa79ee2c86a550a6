"""Read-only projections over user/group bindings, plus removal during user deletion."""
from __future__ import annotations

import logging
from typing import Any, Callable, Sequence

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from userdir.core.errors import StorageError
from userdir.core.utils import simplify_string_list
from userdir.db.models import Group, UserGroupBinding
from userdir.db.session import get_session

logger = logging.getLogger(__name__)


class MembershipRepository:
    def __init__(self, session_factory: Callable[[], Any] = get_session) -> None:
        self.session_factory = session_factory

    def get_groups_by_user_ids(self, user_ids: Sequence[str]) -> list[Group]:
        """Groups reachable from any of the given users, each listed once."""
        ids = simplify_string_list(user_ids)
        if not ids:
            return []
        member_of = select(UserGroupBinding.group_id).where(UserGroupBinding.user_id.in_(ids))
        stmt = (
            select(Group)
            .where(Group.group_id.in_(member_of))
            .order_by(Group.create_time, Group.group_id)
        )
        with self.session_factory() as session:
            try:
                return list(session.execute(stmt).scalars().all())
            except SQLAlchemyError as exc:
                logger.error("Get groups of users %s failed: %s", ids, exc)
                raise StorageError(f"Get groups of users failed: {exc}") from exc

    def get_user_ids_by_group_ids(self, group_ids: Sequence[str]) -> list[str]:
        """Members of any of the given groups, each listed once in binding order."""
        ids = simplify_string_list(group_ids)
        if not ids:
            return []
        stmt = (
            select(UserGroupBinding.user_id)
            .where(UserGroupBinding.group_id.in_(ids))
            .order_by(UserGroupBinding.create_time, UserGroupBinding.binding_id)
        )
        with self.session_factory() as session:
            try:
                rows = session.execute(stmt).scalars().all()
            except SQLAlchemyError as exc:
                logger.error("Get users of groups %s failed: %s", ids, exc)
                raise StorageError(f"Get users of groups failed: {exc}") from exc
        return simplify_string_list(rows)

    def delete_bindings(self, session: Session, user_ids: Sequence[str]) -> None:
        """Remove every binding of the given users inside the caller's unit of work."""
        session.execute(
            delete(UserGroupBinding)
            .where(UserGroupBinding.user_id.in_(list(user_ids)))
            .execution_options(synchronize_session=False)
        )
