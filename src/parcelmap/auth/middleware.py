"""Authentication middleware and dependencies."""

from __future__ import annotations

from fastapi import HTTPException, Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response


class AuthMiddleware(BaseHTTPMiddleware):
    """Middleware that extracts a Bearer token and sets request.state.auth_user_id."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request.state.auth_user_id = None

        auth_header = request.headers.get("Authorization", "")
        if auth_header.startswith("Bearer "):
            token = auth_header[7:]
            provider = getattr(request.app.state, "auth_provider", None)
            if provider is not None:
                validation = provider.validate_token(token)
                if validation.valid:
                    request.state.auth_user_id = validation.user_id

        return await call_next(request)


def current_user(request: Request) -> str | None:
    """FastAPI dependency resolving the requesting user.

    When auth is enabled an anonymous request is rejected with 401. In
    the no-auth variant it resolves to None and records stay unowned.
    """
    user_id = getattr(request.state, "auth_user_id", None)
    settings = getattr(request.app.state, "settings", None)
    auth_enabled = settings.auth.enabled if settings is not None else True
    if auth_enabled and user_id is None:
        raise HTTPException(
            status_code=401,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user_id
