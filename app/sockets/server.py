"""Socket.IO server configuration and utilities."""

import socketio

from app.core.config import settings
from app.core.security import verify_access_token

ADMIN_NAMESPACE = "/admin"
ADMIN_ROLES = ("admin", "super_admin")


# Create Socket.IO async server
sio = socketio.AsyncServer(
    async_mode="asgi",
    cors_allowed_origins=settings.cors_origins if settings.is_production else "*",
    logger=settings.is_development,
    engineio_logger=settings.is_development,
    ping_timeout=60,
    ping_interval=25,
)


# Maps sid -> admin info
connected_admins: dict[str, dict] = {}


def get_channel_room(channel: str) -> str:
    """Get room name for a broadcast channel (e.g. ``admin``)."""
    return f"channel:{channel}"


class SocketAuth:
    """Socket authentication utilities."""

    @staticmethod
    async def authenticate_admin(auth_data: dict) -> dict | None:
        """
        Authenticate a dashboard admin from a JWT token.

        Args:
            auth_data: dict with 'token' key

        Returns:
            Admin info dict or None if invalid
        """
        token = auth_data.get("token")
        if not token:
            return None

        try:
            payload = verify_access_token(token)
        except Exception:
            return None

        if payload.get("role") not in ADMIN_ROLES:
            return None

        return {
            "user_id": payload.get("sub"),
            "role": payload.get("role"),
            "email": payload.get("email"),
            "name": payload.get("name"),
        }


# Import and register namespaces
from app.sockets.namespaces.admin import AdminNamespace

sio.register_namespace(AdminNamespace(ADMIN_NAMESPACE))
