"""
Persistence adapters.

Repositories receive a session factory at construction (defaulting to the
shared SQLAlchemy one) so services and tests can substitute the store client.
"""

from .membership_repository import MembershipRepository
from .user_repository import UserRepository

__all__ = ["MembershipRepository", "UserRepository"]
