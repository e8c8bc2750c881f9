"""
auth/tokens.py -- Password hashing and JWT issue/verify utilities.

Security design decisions:
  JWT: python-jose with HS256. Tokens are signed with SECRET_KEY and carry
       the user id (sub), issue time (iat) and expiry (exp). Tokens are not
       persisted -- validity is signature + expiry only. Verification raises
       a specific TokenError subclass so callers can tell expired tokens
       apart from forged or garbled ones; the request guard collapses all of
       them into a single 401.

  Passwords: bcrypt. Its cost factor makes brute-force of a leaked hash
       expensive and every hash carries its own random salt. The _DUMMY_HASH
       constant enables timing equalization in login_user() so response time
       does not reveal whether an email is registered.

  SECRET_KEY: sourced from core.config.get_settings(), which refuses to
       start in production without one.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt

from auth.errors import ExpiredTokenError, InvalidSignatureError, MalformedTokenError
from core.config import get_settings

# ---------------------------------------------------------------------------
# Config -- read once at module load via the lru_cache singleton
# ---------------------------------------------------------------------------

_settings = get_settings()

_ALGORITHM = "HS256"

# ---------------------------------------------------------------------------
# Password hashing (bcrypt -- direct usage, no passlib wrapper)
# ---------------------------------------------------------------------------


def hash_password(plain: str) -> str:
    """Return a salted bcrypt hash of the given plaintext password.

    Raises ValueError on an empty password. bcrypt only looks at the first
    72 bytes; auth.service rejects longer input before it gets here.
    """
    if not plain:
        raise ValueError("Cannot hash an empty password")
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash.

    bcrypt.checkpw compares in constant time. A malformed stored hash is a
    mismatch, not an error.
    """
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except Exception:
        return False


# Timing equalization dummy hash.
# Computed once at module load so the first login attempt is not measurably
# slower than subsequent ones.
_DUMMY_HASH: str = hash_password("userauth_timing_dummy")


# ---------------------------------------------------------------------------
# JWT encode / decode
# ---------------------------------------------------------------------------


def create_access_token(user_id: str, ttl: timedelta | None = None) -> str:
    """Encode a signed JWT for user_id.

    Args:
        user_id: Opaque user ID assigned by the store. Stored as the sub claim.
        ttl:     Token lifetime. Defaults to Settings.token_expire_seconds.
    """
    if ttl is None:
        ttl = timedelta(seconds=_settings.token_expire_seconds)
    issued_at = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + ttl).timestamp()),
    }
    return jwt.encode(payload, _settings.secret_key, algorithm=_ALGORITHM)


def decode_access_token(token: str) -> str:
    """Verify a JWT and return the embedded user ID.

    Raises:
        MalformedTokenError:   not three segments, undecodable, no sub, or no finite exp.
        InvalidSignatureError: signature or algorithm mismatch.
        ExpiredTokenError:     now >= exp.
    """
    if not token or token.count(".") != 2:
        raise MalformedTokenError("Token must have three segments")
    try:
        jwt.get_unverified_header(token)
        claims = jwt.get_unverified_claims(token)
    except JWTError as exc:
        raise MalformedTokenError(str(exc)) from exc
    exp = claims.get("exp")
    if not isinstance(claims.get("sub"), str) or isinstance(exp, bool) or not isinstance(exp, (int, float)):
        raise MalformedTokenError("Token is missing sub or exp")
    if not math.isfinite(exp):
        raise MalformedTokenError("Token exp is not a finite timestamp")

    try:
        # exp is checked below so the boundary (now == exp) counts as expired.
        payload = jwt.decode(
            token,
            _settings.secret_key,
            algorithms=[_ALGORITHM],
            options={"verify_exp": False},
        )
    except ExpiredSignatureError as exc:
        raise ExpiredTokenError(str(exc)) from exc
    except JWTError as exc:
        raise InvalidSignatureError(str(exc)) from exc

    if datetime.now(timezone.utc).timestamp() >= payload["exp"]:
        raise ExpiredTokenError("Token has expired")
    return payload["sub"]
