"""
auth/service.py -- Registration and login orchestration.

register_user() and login_user() are the only places that combine the store,
the password hasher and the token issuer. Route handlers call these and map
the AuthResult (or AuthError) to HTTP; they never hash or compare passwords
themselves.

Both functions are synchronous: bcrypt and the store are blocking. FastAPI
runs plain `def` route handlers in its threadpool, so one slow hash does not
stall other requests on the event loop.
"""

from __future__ import annotations

import logging
import re

from sqlalchemy.exc import IntegrityError

from auth.errors import DuplicateEmailError, InvalidCredentialsError, InvalidInputError
from auth.models import AuthResult, User
from auth.store import UserStore
from auth.tokens import _DUMMY_HASH, create_access_token, hash_password, verify_password

logger = logging.getLogger("userauth.auth")

# local@domain.tld, no whitespace.
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

# bcrypt ignores (4.x) or rejects (5.x) input beyond this many bytes.
_BCRYPT_MAX_BYTES = 72


def _clean(value: str | None) -> str:
    return value.strip() if isinstance(value, str) else ""


def register_user(store: UserStore, name: str | None, email: str | None, password: str | None) -> AuthResult:
    """Create a user and return it with a fresh token.

    Raises:
        InvalidInputError:   a field is missing/blank, the email is not an
                             address, or the password is too long for bcrypt.
        DuplicateEmailError: the email is already registered, including the
                             case where a concurrent request won the insert.
    """
    name = _clean(name)
    email = _clean(email)
    password = password or ""
    if not name or not email or not password:
        raise InvalidInputError("Please provide name, email and password")
    if not _EMAIL_RE.match(email):
        raise InvalidInputError("Please provide a valid email address")
    if len(password.encode("utf-8")) > _BCRYPT_MAX_BYTES:
        raise InvalidInputError(f"Password must be at most {_BCRYPT_MAX_BYTES} bytes")

    if store.get_by_email(email) is not None:
        raise DuplicateEmailError()

    user = User(name=name, email=email, hashed_password=hash_password(password))
    try:
        user_id = store.create_user(user)
    except IntegrityError as exc:
        # Lost the race: another request inserted the same email between our
        # lookup and insert. The UNIQUE index decided the winner.
        raise DuplicateEmailError() from exc

    created = store.get_by_id(user_id)
    if created is None:
        raise RuntimeError(f"User {user_id} not found after insert")
    logger.info("Registered user %s", created.id)
    return AuthResult(user=created, token=create_access_token(created.id))


def login_user(store: UserStore, email: str | None, password: str | None) -> AuthResult:
    """Authenticate email + password and return the user with a fresh token.

    Always runs bcrypt whether or not the email exists:
    - Unknown email:  bcrypt runs against _DUMMY_HASH (same cost as a real check)
    - Wrong password: bcrypt runs against the real hash
    Both raise the same InvalidCredentialsError, so neither the message nor
    the response time reveals which case occurred.
    """
    email = _clean(email)
    password = password or ""
    if not email or not password:
        raise InvalidInputError("Please provide email and password")

    user = store.get_by_email(email)
    if user is None or user.hashed_password is None:
        # Equalize timing -- do NOT return early before running bcrypt
        verify_password(password, _DUMMY_HASH)
        raise InvalidCredentialsError()
    if not verify_password(password, user.hashed_password):
        raise InvalidCredentialsError()

    logger.info("Login: %s", user.id)
    return AuthResult(user=user, token=create_access_token(user.id))
