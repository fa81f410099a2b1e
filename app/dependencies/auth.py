"""Authentication dependencies for FastAPI."""

from typing import Annotated

from fastapi import Depends, Header
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.config import settings
from app.core.exceptions import (
    AuthenticationError,
    InsufficientPermissionsError,
    InvalidAPIKeyError,
    InvalidTokenError,
)
from app.core.security import tokens_match, verify_access_token

ADMIN_ROLES = ("admin", "super_admin")


# JWT Bearer scheme
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_admin(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> dict:
    """
    Verify JWT token and return current dashboard user info.

    Returns:
        dict with user_id, role, email, name
    """
    if not credentials:
        raise AuthenticationError("Authorization header required")

    payload = verify_access_token(credentials.credentials)

    user_id = payload.get("sub")
    if not user_id:
        raise InvalidTokenError("Invalid token payload")

    if payload.get("role") not in ADMIN_ROLES:
        raise InsufficientPermissionsError(f"Required roles: {list(ADMIN_ROLES)}")

    return {
        "user_id": user_id,
        "role": payload.get("role"),
        "email": payload.get("email"),
        "name": payload.get("name"),
    }


async def verify_host_key(
    x_api_key: Annotated[str | None, Header()] = None,
) -> None:
    """
    Verify the shared key the host platform sends with events.

    Raises:
        InvalidAPIKeyError: Key missing, wrong, or not configured
    """
    if not settings.host_api_key:
        raise InvalidAPIKeyError("Host API key is not configured")

    if not x_api_key or not tokens_match(settings.host_api_key, x_api_key):
        raise InvalidAPIKeyError()


# Type aliases for cleaner dependency injection
AdminOnly = Annotated[dict, Depends(get_current_admin)]
HostKeyAuth = Depends(verify_host_key)
