"""
auth/errors.py -- Exception taxonomy for the auth core.

Two families:
  AuthError   -- domain failures raised by auth.service and auth.dependencies.
                 Each carries the HTTP status and a stable machine code; the
                 API layer maps them to {"success": false, "error": message}
                 without inspecting the concrete type.
  TokenError  -- verification failures raised by auth.tokens. These never
                 reach the HTTP layer directly: the request guard converts
                 every TokenError into UnauthorizedError.

StoreUnavailableError is raised by UserStore when the initial connection or
schema bootstrap fails. It is fatal at startup.

Layer rule: no imports from api/ or core/.
"""

from __future__ import annotations


class AuthError(Exception):
    """Base class for user-facing auth failures."""

    status_code: int = 400
    code: str = "auth_error"
    default_message: str = "Authentication error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInputError(AuthError):
    """Missing or malformed request input."""

    status_code = 400
    code = "validation_error"
    default_message = "Invalid input"


class DuplicateEmailError(AuthError):
    status_code = 409
    code = "duplicate_email"
    default_message = "User already exists"


class InvalidCredentialsError(AuthError):
    """Login failure.

    The message is fixed: "no such user" and "wrong password" must be
    indistinguishable to the caller.
    """

    status_code = 401
    code = "invalid_credentials"
    default_message = "Invalid email or password"

    def __init__(self) -> None:
        super().__init__()


class NoTokenError(AuthError):
    # Clients match on the "no token" substring.
    status_code = 401
    code = "no_token"
    default_message = "Not authorized, no token"


class UnauthorizedError(AuthError):
    status_code = 401
    code = "unauthorized"
    default_message = "Not authorized, token failed"


# ---------------------------------------------------------------------------
# Token verification
# ---------------------------------------------------------------------------


class TokenError(Exception):
    """Base class for token verification failures."""


class MalformedTokenError(TokenError):
    """Token cannot be split into header, payload and signature, or decoded."""


class InvalidSignatureError(TokenError):
    """Signature or algorithm does not match the configured secret."""


class ExpiredTokenError(TokenError):
    """Current time is at or past the token's exp claim."""


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class StoreUnavailableError(Exception):
    """The credential store could not be reached or initialized."""
