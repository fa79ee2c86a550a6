"""
String helpers applied to caller-supplied identifiers before they reach a query.
"""

from __future__ import annotations

import secrets
from typing import Iterable, Optional

USER_ID_PREFIX = "usr-"


def simplify_string(value: Optional[str]) -> str:
    """Trim and lower-case a single value (emails, phone numbers)."""
    return (value or "").strip().lower()


def simplify_string_list(values: Optional[Iterable[str]]) -> list[str]:
    """
    Trim every entry, drop empties and duplicates, keep first-seen order.

    An empty result means "no filter on this field", never "match nothing".
    """
    result: list[str] = []
    seen: set[str] = set()
    for value in values or ():
        item = (value or "").strip()
        if not item or item in seen:
            continue
        seen.add(item)
        result.append(item)
    return result


def new_user_id() -> str:
    return USER_ID_PREFIX + secrets.token_hex(6)
