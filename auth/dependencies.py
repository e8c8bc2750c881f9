"""
auth/dependencies.py -- Request guard for protected routes.

authenticate_request() is the guard itself: a plain function from a header
mapping and a store to a User. It does not touch the request object, so it is
usable outside FastAPI and trivially unit-testable.

get_current_user() adapts it to FastAPI's dependency injection. Handlers
receive the acting user as an explicit parameter:

    @router.get("/protected")
    def route(user: User = Depends(get_current_user)): ...

Resolution happens once per request and is never cached across requests.

Layer rule: may import from fastapi (Request) because this module is part of
the FastAPI dependency injection system. No imports from api/.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from fastapi import Request

from auth.errors import NoTokenError, TokenError, UnauthorizedError
from auth.models import User
from auth.store import UserStore
from auth.tokens import decode_access_token

logger = logging.getLogger("userauth.auth")


def _bearer_token(headers: Mapping[str, str]) -> str | None:
    """Extract the token from an `Authorization: Bearer <token>` header."""
    header = headers.get("authorization") or headers.get("Authorization") or ""
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return credentials.strip() or None


def authenticate_request(headers: Mapping[str, str], store: UserStore) -> User:
    """Verify the bearer token in headers and return the user it names.

    Raises:
        NoTokenError:      no Authorization header, or not in Bearer form.
        UnauthorizedError: token malformed, forged, or expired; or the user
                           it names no longer exists.
    """
    token = _bearer_token(headers)
    if token is None:
        raise NoTokenError()

    try:
        user_id = decode_access_token(token)
    except TokenError as exc:
        logger.info("Rejected token: %s", type(exc).__name__)
        raise UnauthorizedError() from exc

    user = store.get_by_id(user_id)
    if user is None:
        raise UnauthorizedError("Not authorized, user not found")
    return user


def get_current_user(request: Request) -> User:
    """FastAPI dependency: require a valid bearer token.

    Declared sync so FastAPI runs it in the threadpool alongside the store read.
    """
    return authenticate_request(request.headers, request.app.state.user_store)
