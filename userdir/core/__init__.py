"""
Core utilities shared across the user directory.

This package hosts configuration helpers, the error taxonomy surfaced to
callers, logging setup, password hashing and the string normalizers applied
to caller-supplied identifiers.
"""
