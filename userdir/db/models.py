"""SQLAlchemy models for users, groups and their membership bindings."""
from __future__ import annotations

import json

from sqlalchemy import (
    Column,
    DateTime,
    String,
    Text,
    UniqueConstraint,
    func,
)

from userdir.domain.users import STATUS_ACTIVE, GroupRecord, UserRecord
from .session import Base


class User(Base):
    __tablename__ = "user"

    user_id = Column(String(50), primary_key=True)
    username = Column(String(255), nullable=False, default="")
    email = Column(String(255), nullable=False, default="", index=True)
    phone_number = Column(String(50), nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    password = Column(Text, nullable=False, default="")
    extra = Column(Text, nullable=True)
    status = Column(String(32), default=STATUS_ACTIVE, nullable=False, index=True)
    status_time = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    create_time = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    update_time = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def extra_dict(self) -> dict:
        if not self.extra:
            return {}
        try:
            value = json.loads(self.extra)
        except ValueError:
            return {}
        return value if isinstance(value, dict) else {}

    def to_record(self) -> UserRecord:
        """Outward record; the password hash is left behind."""
        return UserRecord(
            user_id=self.user_id,
            username=self.username,
            email=self.email,
            phone_number=self.phone_number,
            description=self.description,
            status=self.status,
            extra=self.extra_dict(),
            status_time=self.status_time,
            create_time=self.create_time,
            update_time=self.update_time,
        )


class Group(Base):
    __tablename__ = "group"

    group_id = Column(String(50), primary_key=True)
    group_name = Column(String(255), nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    status = Column(String(32), default=STATUS_ACTIVE, nullable=False)
    create_time = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    update_time = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def to_record(self) -> GroupRecord:
        return GroupRecord(
            group_id=self.group_id,
            group_name=self.group_name,
            description=self.description,
            status=self.status,
            create_time=self.create_time,
            update_time=self.update_time,
        )


class UserGroupBinding(Base):
    __tablename__ = "user_group_binding"
    __table_args__ = (UniqueConstraint("user_id", "group_id", name="uq_user_group_binding"),)

    binding_id = Column(String(50), primary_key=True)
    user_id = Column(String(50), nullable=False, index=True)
    group_id = Column(String(50), nullable=False, index=True)
    create_time = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
