"""Domain helpers for user records and their partial updates."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional

from userdir.core.utils import simplify_string

STATUS_ACTIVE = "active"
STATUS_DELETED = "deleted"


def encode_extra(extra: Optional[Mapping[str, Any]]) -> Optional[str]:
    if not extra:
        return None
    return json.dumps(dict(extra), ensure_ascii=False, sort_keys=True)


@dataclass(frozen=True)
class UserUpdate:
    """
    Fields a modify request may touch. None means "leave the column alone".

    Values are stored already normalized: email and phone number simplified,
    extra encoded as JSON text.
    """

    username: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    description: Optional[str] = None
    extra: Optional[str] = None

    @classmethod
    def from_request(
        cls,
        *,
        username: Optional[str] = None,
        email: Optional[str] = None,
        phone_number: Optional[str] = None,
        description: Optional[str] = None,
        extra: Optional[Mapping[str, Any]] = None,
    ) -> "UserUpdate":
        return cls(
            username=username or None,
            email=simplify_string(email) or None,
            phone_number=simplify_string(phone_number) or None,
            description=description or None,
            extra=encode_extra(extra),
        )

    def values(self) -> dict[str, str]:
        present = {
            "username": self.username,
            "email": self.email,
            "phone_number": self.phone_number,
            "description": self.description,
            "extra": self.extra,
        }
        return {column: value for column, value in present.items() if value is not None}


@dataclass(frozen=True)
class GroupRecord:
    group_id: str
    group_name: str
    description: str
    status: str
    create_time: Optional[datetime] = None
    update_time: Optional[datetime] = None


@dataclass(frozen=True)
class UserRecord:
    """What callers get back for a user. The password hash never leaves the store layer."""

    user_id: str
    username: str
    email: str
    phone_number: str
    description: str
    status: str
    extra: dict = field(default_factory=dict)
    status_time: Optional[datetime] = None
    create_time: Optional[datetime] = None
    update_time: Optional[datetime] = None
