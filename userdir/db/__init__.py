"""Store plumbing for the user directory: declarative base, engine and the default session factory."""

from .session import Base, get_engine, get_session, reset_engine

__all__ = ["Base", "get_engine", "get_session", "reset_engine"]
