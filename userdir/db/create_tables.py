"""Create or drop the directory schema (users, groups, bindings)."""
from __future__ import annotations

import logging
import sys

from sqlalchemy.exc import SQLAlchemyError

from userdir.core.logging import configure_logging
from .session import Base, get_engine
from . import models  # noqa: F401  # registers tables on Base.metadata

logger = logging.getLogger(__name__)


def create_all() -> None:
    Base.metadata.create_all(bind=get_engine())


def drop_all() -> None:
    Base.metadata.drop_all(bind=get_engine())


def main(argv: list[str] | None = None) -> int:
    configure_logging()
    args = sys.argv[1:] if argv is None else argv
    try:
        if args[:1] == ["--drop"]:
            drop_all()
            logger.info("Directory tables dropped.")
        else:
            create_all()
            logger.info("Directory tables created.")
    except SQLAlchemyError as exc:
        logger.error("Schema operation failed: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
