"""
Shared fixtures: a temporary SQLite database per test plus helpers to seed
groups and bindings, which are written by collaborators outside this package.
"""
from __future__ import annotations

import secrets
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Make the userdir package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from userdir.core import config as core_config  # noqa: E402
from userdir.db import create_tables  # noqa: E402
from userdir.db import models  # noqa: E402
from userdir.db import session as db_session  # noqa: E402


@pytest.fixture()
def temp_db(tmp_path, monkeypatch):
    """Point DATABASE_URL at a temporary SQLite file and reset cached settings/engine."""
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    core_config.get_settings.cache_clear()
    db_session.reset_engine()
    create_tables.drop_all()
    create_tables.create_all()

    yield db_file

    try:
        create_tables.drop_all()
    except Exception:
        pass
    db_session.reset_engine()
    core_config.get_settings.cache_clear()


@pytest.fixture()
def add_group(temp_db):
    def _add(group_id: str, name: str = "") -> str:
        with db_session.get_session() as session:
            session.add(models.Group(group_id=group_id, group_name=name or group_id))
            session.commit()
        return group_id

    return _add


@pytest.fixture()
def bind(temp_db):
    def _bind(user_id: str, group_id: str) -> None:
        with db_session.get_session() as session:
            session.add(
                models.UserGroupBinding(
                    binding_id="ugb-" + secrets.token_hex(6),
                    user_id=user_id,
                    group_id=group_id,
                    create_time=datetime.now(timezone.utc),
                )
            )
            session.commit()

    return _bind


@pytest.fixture()
def bindings_of(temp_db):
    def _bindings(user_id: str) -> list[str]:
        with db_session.get_session() as session:
            rows = session.query(models.UserGroupBinding).filter_by(user_id=user_id).all()
            return sorted(row.group_id for row in rows)

    return _bindings
