"""Data-access core of the user directory (users, groups, memberships)."""
