"""
api/main.py -- FastAPI application entry point for the user auth service.

Run with:  python main.py
           uvicorn api.main:app --reload

Middleware stack (outermost to innermost):
  1. CORSMiddleware -- adds CORS headers for allowed browser origins
  2. log_requests   -- one access-log line per request with latency

Lifespan opens the credential store once at startup and disposes of it on
shutdown. If the store cannot be opened, startup fails and the server never
begins accepting requests.

Every error leaves the app as {"success": false, "error": "<message>"}.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.models import ErrorResponse, HealthResponse, ProtectedResponse, UserData, WelcomeResponse
from api.routes.auth import router as auth_router
from auth.dependencies import get_current_user
from auth.errors import AuthError, StoreUnavailableError
from auth.models import User
from auth.store import UserStore
from core.config import get_settings

API_VERSION = "1.0.0"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("userauth.api")

_settings = get_settings()

# ---------------------------------------------------------------------------
# Lifespan -- startup / shutdown
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the credential store before the first request; close it after the last.

    The store is attached to app.state and reached by route handlers and the
    request guard through request.app.state.user_store. It is never re-created
    while the process runs.
    """
    logger.info("User auth API starting up")
    try:
        app.state.user_store = UserStore(_settings.resolved_database_url)
    except StoreUnavailableError:
        logger.exception("Credential store unavailable -- refusing to start")
        raise
    logger.info("Credential store connected")

    yield

    app.state.user_store.close()
    logger.info("User auth API shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="User Auth API",
    description="Register, log in, and access JWT-protected resources.",
    version=API_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_origins,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "Authorization"],
    max_age=3600,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    status_code = 500  # stays 500 if call_next raises
    try:
        response = await call_next(request)
        status_code = response.status_code
    finally:
        ms = (time.perf_counter() - start) * 1000
        logger.info(
            "%s %s %d %.1fms %s",
            request.method,
            request.url.path,
            status_code,
            ms,
            request.client.host if request.client else "unknown",
        )
    return response


# ---------------------------------------------------------------------------
# Router registration
# ---------------------------------------------------------------------------

app.include_router(auth_router, prefix="/api", tags=["Auth"])


# ---------------------------------------------------------------------------
# Exception handlers
#
# All handlers return the same ErrorResponse envelope so clients can parse
# errors uniformly without inspecting status codes to choose a schema.
# ---------------------------------------------------------------------------


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


@app.exception_handler(AuthError)
async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    """Render domain failures from auth.service and the request guard."""
    return _error(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 400 when the body is not JSON or a field has the wrong type/size."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        if first.get("type") == "json_invalid":
            return _error(400, "Invalid JSON body")
        # loc is ("body", field, ...); integer parts are list indexes or byte offsets
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body" and not isinstance(p, int))
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = "Invalid request body"
    return _error(400, message)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Structured body for routing errors (unmatched path, wrong method)."""
    message = "not found" if exc.status_code == 404 else str(exc.detail)
    response = _error(exc.status_code, message)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected server errors.

    The raw exception goes to the log only, never to the response body.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return _error(500, "Server Error")


# ---------------------------------------------------------------------------
# Public routes
# ---------------------------------------------------------------------------


@app.get("/", response_model=WelcomeResponse, tags=["Meta"])
async def welcome() -> WelcomeResponse:
    """List the available endpoints."""
    return WelcomeResponse(
        message="Welcome to User Authentication API",
        endpoints={
            "register": "POST /api/auth/register",
            "login": "POST /api/auth/login",
            "profile": "GET /api/auth/profile (requires JWT token)",
            "protected": "GET /api/protected (requires JWT token)",
        },
    )


@app.get("/api/health", response_model=HealthResponse, tags=["Meta"])
def health(request: Request) -> HealthResponse:
    """Return liveness plus a database round-trip. No authentication required."""
    db_ok = request.app.state.user_store.ping()
    return HealthResponse(
        status="healthy" if db_ok else "degraded",
        version=API_VERSION,
        components={"app": "ok", "database": "ok" if db_ok else "error"},
    )


# ---------------------------------------------------------------------------
# Example protected route
# ---------------------------------------------------------------------------


@app.get("/api/protected", response_model=ProtectedResponse, tags=["Auth"])
def protected(current_user: User = Depends(get_current_user)) -> ProtectedResponse:
    """Echo the acting user. Any route can be protected the same way."""
    return ProtectedResponse(
        message="This is a protected route",
        user=UserData.from_user(current_user),
    )
