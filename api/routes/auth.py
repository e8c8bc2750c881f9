"""
api/routes/auth.py -- Registration, login and profile endpoints.

Routes (mounted under /api):
  POST /api/auth/register  -- create account; 201 with user + token
  POST /api/auth/login     -- email/password login; 200 with user + token
  GET  /api/auth/profile   -- current user's profile (requires Bearer token)

Security:
  login_user() provides timing equalization and a single generic failure
  message -- use it, never inline get_by_email() + verify_password().
  Cache-Control: no-store on every response that carries a token.

Failures are raised as AuthError subclasses and rendered by the handler in
api/main.py; handlers here only build success responses.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response

from api.models import AuthData, AuthResponse, LoginRequest, ProfileData, ProfileResponse, RegisterRequest
from auth.dependencies import get_current_user
from auth.models import AuthResult, User
from auth.service import login_user, register_user
from auth.store import UserStore

# Auth policy:
# - POST /api/auth/register: public
# - POST /api/auth/login:    public
# - GET  /api/auth/profile:  requires auth (get_current_user)
router = APIRouter(prefix="/auth")


def _auth_response(result: AuthResult) -> AuthResponse:
    user = result.user
    return AuthResponse(data=AuthData(id=user.id, name=user.name, email=user.email, token=result.token))


@router.post("/register", response_model=AuthResponse, status_code=201)
def register(request: Request, response: Response, body: RegisterRequest) -> AuthResponse:
    """Register a new user and return it with a token."""
    user_store: UserStore = request.app.state.user_store
    result = register_user(user_store, body.name, body.email, body.password)
    response.headers["Cache-Control"] = "no-store"
    return _auth_response(result)


@router.post("/login", response_model=AuthResponse)
def login(request: Request, response: Response, body: LoginRequest) -> AuthResponse:
    """Authenticate with email and password.

    Wrong password and unknown email produce the same 401 body.
    """
    user_store: UserStore = request.app.state.user_store
    result = login_user(user_store, body.email, body.password)
    response.headers["Cache-Control"] = "no-store"
    return _auth_response(result)


@router.get("/profile", response_model=ProfileResponse)
def profile(current_user: User = Depends(get_current_user)) -> ProfileResponse:
    """Return the authenticated user's profile."""
    return ProfileResponse(data=ProfileData.from_user(current_user))
