from __future__ import annotations

from fastapi import Header, HTTPException, Request, status
from fastapi.security.utils import get_authorization_scheme_param

from ..core.config import get_settings
from ..core.security import CurrentUser, local_user, user_from_token
from ..middlewares import principal_ctx_var


def _unauthorized(detail: str = "Unauthorized") -> None:
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _set_principal(request: Request, principal: str) -> None:
    principal_ctx_var.set(principal)
    request.state.principal = principal


async def require_user(
    request: Request,
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> CurrentUser:
    """Resolve the signed-in organiser from the identity provider's bearer token."""

    if authorization:
        scheme, credentials = get_authorization_scheme_param(authorization)
        if scheme.lower() != "bearer" or not credentials:
            _unauthorized("Bearer token required")
        try:
            user = user_from_token(credentials)
        except ValueError as exc:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=str(exc),
                headers={"WWW-Authenticate": "Bearer"},
            ) from exc
        _set_principal(request, f"user:{user.id}")
        return user

    if get_settings().AUTH_REQUIRED:
        _unauthorized("Authorization required")
    user = local_user()
    _set_principal(request, "anonymous")
    return user
