"""Mail integration module.

Survey emails go out through the host platform; this package only defines
the transport contract and the HTTP webhook implementation.
"""

from app.integrations.mail.base import EmailMessage, EmailTransport
from app.integrations.mail.factory import get_email_transport
from app.integrations.mail.webhook import WebhookEmailTransport

__all__ = [
    "EmailMessage",
    "EmailTransport",
    "get_email_transport",
    "WebhookEmailTransport",
]
