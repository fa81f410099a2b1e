"""Outbound notifications for the admin dashboard."""

import logging
from abc import ABC, abstractmethod
from typing import Any

import socketio

from app.sockets.server import ADMIN_NAMESPACE, get_channel_room

logger = logging.getLogger(__name__)


class Broadcaster(ABC):
    """Publishes named events to a channel."""

    @abstractmethod
    async def broadcast(self, channel: str, event: str, payload: dict[str, Any]) -> None:
        """Publish ``event`` with ``payload``; must never raise."""
        pass


class SocketIOBroadcaster(Broadcaster):
    """Emits events to the channel room on the admin Socket.IO namespace."""

    def __init__(self, server: socketio.AsyncServer, namespace: str = ADMIN_NAMESPACE):
        self._server = server
        self._namespace = namespace

    async def broadcast(self, channel: str, event: str, payload: dict[str, Any]) -> None:
        try:
            await self._server.emit(
                event,
                payload,
                room=get_channel_room(channel),
                namespace=self._namespace,
            )
        except Exception as e:
            logger.error(f"Broadcast of {event} to {channel} failed: {e}")
