"""Admin namespace - NPS dashboard notifications."""

import logging

import socketio

from app.sockets.server import SocketAuth, connected_admins, get_channel_room

logger = logging.getLogger(__name__)

ADMIN_CHANNEL = "admin"


class AdminNamespace(socketio.AsyncNamespace):
    """
    Admin namespace for dashboard events.

    Connected admins join the ``admin`` channel room and receive
    ``nps.response_received`` and ``nps.deactivated`` events.
    """

    async def on_connect(self, sid, environ, auth):
        """Handle admin connection."""
        if not auth:
            return False

        admin_info = await SocketAuth.authenticate_admin(auth)
        if not admin_info:
            return False

        connected_admins[sid] = admin_info
        await self.enter_room(sid, get_channel_room(ADMIN_CHANNEL))

        logger.info(f"[Admin] Connected: {sid} - {admin_info.get('email')}")
        return True

    async def on_disconnect(self, sid):
        """Handle admin disconnection."""
        admin_info = connected_admins.pop(sid, None)
        if admin_info:
            logger.info(f"[Admin] Disconnected: {sid} - {admin_info.get('email')}")
