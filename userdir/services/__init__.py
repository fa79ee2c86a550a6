"""
Use cases of the user directory.

Services orchestrate repositories; callers (whatever transport fronts the
directory) should go through them instead of touching sessions directly.
"""

from .user_service import UserService

__all__ = ["UserService"]
