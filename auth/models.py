"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Stores and routes do
the work; the API layer maps these to pydantic response models and never
serializes hashed_password.

Layer rule: no imports from api/ or core/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """A registered principal.

    email is the login identifier. The store keeps it lower-cased so the
    UNIQUE index enforces case-insensitive uniqueness.

    id is assigned by UserStore.create_user() and is None until then.
    """

    name: str
    email: str
    id: str | None = None
    hashed_password: str | None = None
    created_at: str | None = None


@dataclass
class AuthResult:
    """Outcome of a successful register or login: the user plus a fresh token."""

    user: User
    token: str
