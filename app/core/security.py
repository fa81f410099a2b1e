"""Security utilities - JWT, survey tokens, id generation."""

import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from app.core.config import settings
from app.core.exceptions import InvalidTokenError, TokenExpiredError


def generate_record_id(prefix: str) -> str:
    """Generate a prefixed record id, e.g. ``srv_1f2e3d4c5b6a7988``."""
    return f"{prefix}_{secrets.token_hex(8)}"


def generate_survey_token() -> str:
    """Generate the unguessable credential for a public survey link."""
    return secrets.token_hex(16)


def tokens_match(expected: str, provided: str) -> bool:
    """Constant-time comparison for shared secrets."""
    return secrets.compare_digest(expected.encode("utf-8"), provided.encode("utf-8"))


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a JWT access token.

    Args:
        data: Payload data (sub, role, email, name)
        expires_delta: Custom expiration time

    Returns:
        Encoded JWT token string
    """
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.jwt_access_token_expire_minutes
        )

    to_encode.update({
        "exp": expire,
        "iat": datetime.now(timezone.utc),
        "jti": str(uuid.uuid4()),
        "type": "access",
    })

    return jwt.encode(
        to_encode,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )


def decode_token(token: str) -> dict[str, Any]:
    """
    Decode and verify a JWT token.

    Raises:
        TokenExpiredError: If token has expired
        InvalidTokenError: If token is invalid
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
        return payload
    except jwt.ExpiredSignatureError:
        raise TokenExpiredError()
    except jwt.InvalidTokenError as e:
        raise InvalidTokenError(message=str(e))


def verify_access_token(token: str) -> dict[str, Any]:
    """
    Verify an access token and return payload.

    Raises:
        InvalidTokenError: If token type is not 'access'
    """
    payload = decode_token(token)

    if payload.get("type") != "access":
        raise InvalidTokenError(message="Invalid token type")

    return payload
