"""Caller identity for HTTP handlers.

Authentication happens upstream, at the identity provider / gateway, which
forwards the verified identity in `X-User-Id` and `X-User-Role`. Handlers
receive it as an `AuthContext` through FastAPI dependencies rather than
reading any global session state.
"""

from __future__ import annotations

import logging

from fastapi import Header, HTTPException, status

from app.enums import UserRole
from app.models.domain import AuthContext

logger = logging.getLogger(__name__)

USER_ID_HEADER = "X-User-Id"
USER_ROLE_HEADER = "X-User-Role"


def _parse_role(raw: str | None) -> UserRole:
    value = (raw or "").strip().lower()
    try:
        return UserRole(value) if value else UserRole.USER
    except ValueError:
        # Unknown roles get no extra privileges.
        logger.warning("Ignoring unknown user role %r", raw)
        return UserRole.USER


def optional_auth_context(
    x_user_id: str | None = Header(default=None),
    x_user_role: str | None = Header(default=None),
) -> AuthContext | None:
    """AuthContext when the request carries an identity, else None."""
    user_id = (x_user_id or "").strip()
    if not user_id:
        return None
    return AuthContext(user_id=user_id, role=_parse_role(x_user_role))


def require_auth_context(
    x_user_id: str | None = Header(default=None),
    x_user_role: str | None = Header(default=None),
) -> AuthContext:
    """AuthContext for the request, or 401 if there is no identity."""
    auth = optional_auth_context(x_user_id, x_user_role)
    if auth is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return auth


def auth_headers(auth: AuthContext | None) -> dict[str, str]:
    """Headers that carry an AuthContext on outgoing requests."""
    if auth is None:
        return {}
    return {USER_ID_HEADER: auth.user_id, USER_ROLE_HEADER: auth.role.value}
