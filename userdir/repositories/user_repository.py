"""Data access for user rows backed by SQLAlchemy."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional, Sequence

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from userdir.core.errors import StorageError, UserNotFoundError
from userdir.core.security import hash_password
from userdir.core.utils import new_user_id, simplify_string
from userdir.db.models import User
from userdir.db.session import get_session
from userdir.domain.query import UserQuery
from userdir.domain.users import STATUS_ACTIVE, STATUS_DELETED, UserUpdate, encode_extra

logger = logging.getLogger(__name__)


def _conditions(query: UserQuery) -> list:
    return [getattr(User, column).in_(values) for column, values in query.filters]


class UserRepository:
    """Sole writer of user rows."""

    def __init__(self, session_factory: Callable[[], Any] = get_session) -> None:
        self.session_factory = session_factory

    def create(
        self,
        username: str,
        email: str,
        phone_number: str,
        description: str,
        password: str,
        extra: Optional[Mapping[str, Any]] = None,
    ) -> User:
        now = datetime.now(timezone.utc)
        entity = User(
            user_id=new_user_id(),
            username=username or "",
            email=simplify_string(email),
            phone_number=simplify_string(phone_number),
            description=description or "",
            password=hash_password(password) if password else "",
            extra=encode_extra(extra),
            status=STATUS_ACTIVE,
            status_time=now,
            create_time=now,
            update_time=now,
        )
        with self.session_factory() as session:
            try:
                session.add(entity)
                session.commit()
                session.refresh(entity)
            except SQLAlchemyError as exc:
                session.rollback()
                logger.error("Insert user failed: %s", exc)
                raise StorageError(f"Insert user failed: {exc}") from exc
            return entity

    def get(self, user_id: str) -> User:
        with self.session_factory() as session:
            try:
                user = session.get(User, user_id)
            except SQLAlchemyError as exc:
                logger.error("Get user [%s] failed: %s", user_id, exc)
                raise StorageError(f"Get user [{user_id}] failed: {exc}") from exc
        if user is None:
            logger.error("Get user [%s] failed: not found", user_id)
            raise UserNotFoundError(user_id)
        return user

    def update(self, user_id: str, changes: UserUpdate) -> int:
        values = changes.values()
        values["update_time"] = datetime.now(timezone.utc)
        stmt = (
            update(User)
            .where(User.user_id == user_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        with self.session_factory() as session:
            try:
                result = session.execute(stmt)
                session.commit()
            except SQLAlchemyError as exc:
                session.rollback()
                logger.error("Update user [%s] failed: %s", user_id, exc)
                raise StorageError(f"Update user [{user_id}] failed: {exc}") from exc
            return result.rowcount

    def list_page(self, query: UserQuery) -> list[User]:
        column = getattr(User, query.sort_key)
        order = (column.desc(), User.user_id.desc()) if query.reverse else (column.asc(), User.user_id.asc())
        stmt = (
            select(User)
            .where(*_conditions(query))
            .order_by(*order)
            .offset(query.offset)
            .limit(query.limit)
        )
        with self.session_factory() as session:
            try:
                return list(session.execute(stmt).scalars().all())
            except SQLAlchemyError as exc:
                logger.error("List users failed: %s", exc)
                raise StorageError(f"List users failed: {exc}") from exc

    def count(self, query: UserQuery) -> int:
        stmt = select(func.count()).select_from(User).where(*_conditions(query))
        with self.session_factory() as session:
            try:
                return int(session.execute(stmt).scalar_one())
            except SQLAlchemyError as exc:
                logger.error("List users count failed: %s", exc)
                raise StorageError(f"List users count failed: {exc}") from exc

    def mark_deleted(self, session: Session, user_ids: Sequence[str], now: datetime) -> None:
        """Flip status inside the caller's unit of work; commit is left to the caller."""
        session.execute(
            update(User)
            .where(User.user_id.in_(list(user_ids)))
            .values(status=STATUS_DELETED, status_time=now, update_time=now)
            .execution_options(synchronize_session=False)
        )
