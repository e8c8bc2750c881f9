"""
API request and response models for the auth service.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py, which
own the internal domain representation. Route handlers map between the two.

Request fields are Optional on purpose: presence and blank checks live in
auth.service so a missing field yields the same 400 message whether it was
omitted or sent empty. Pydantic still enforces types and upper bounds.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from auth.models import User

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Request body for POST /api/auth/register."""

    name: Optional[str] = Field(default=None, max_length=255)
    email: Optional[str] = Field(default=None, max_length=255)
    password: Optional[str] = Field(default=None, max_length=255)


class LoginRequest(BaseModel):
    """Request body for POST /api/auth/login."""

    email: Optional[str] = Field(default=None, max_length=255)
    password: Optional[str] = Field(default=None, max_length=255)


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class UserData(BaseModel):
    """Public fields of a user. Never includes the password hash."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    email: str

    @classmethod
    def from_user(cls, user: User) -> "UserData":
        return cls(id=user.id, name=user.name, email=user.email)


class AuthData(UserData):
    token: str


class ProfileData(UserData):
    created_at: str = ""

    @classmethod
    def from_user(cls, user: User) -> "ProfileData":
        return cls(id=user.id, name=user.name, email=user.email, created_at=user.created_at or "")


class AuthResponse(BaseModel):
    """Response for register and login."""

    model_config = ConfigDict(frozen=True)

    success: bool = True
    data: AuthData


class ProfileResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool = True
    data: ProfileData


class ProtectedResponse(BaseModel):
    """Response for GET /api/protected."""

    model_config = ConfigDict(frozen=True)

    success: bool = True
    message: str
    user: UserData


class WelcomeResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool = True
    message: str
    endpoints: dict[str, str]


class ErrorResponse(BaseModel):
    """Envelope returned on every 4xx/5xx response."""

    model_config = ConfigDict(frozen=True)

    success: bool = False
    error: str


class HealthResponse(BaseModel):
    """Response for GET /api/health."""

    model_config = ConfigDict(frozen=True)

    success: bool = True
    status: str = "healthy"
    version: str
    components: dict[str, str]
