"""Base email transport interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class EmailMessage:
    """Outbound email.

    ``to`` is the host contact id; the host resolves it to an address.
    """

    to: str
    subject: str
    body: str


class EmailTransport(ABC):
    """Abstract base class for outbound email transports."""

    @abstractmethod
    async def send(self, message: EmailMessage) -> bool:
        """
        Deliver a message.

        Returns:
            True when the transport accepted the message
        """
        pass
