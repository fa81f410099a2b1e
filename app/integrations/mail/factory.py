"""Email transport factory."""

from app.core.config import settings
from app.integrations.mail.base import EmailTransport
from app.integrations.mail.webhook import WebhookEmailTransport


def get_email_transport() -> EmailTransport | None:
    """
    Get the configured email transport.

    Returns:
        A transport, or None when no mail webhook is configured
    """
    if not settings.mail_webhook_url:
        return None

    return WebhookEmailTransport(
        url=settings.mail_webhook_url,
        api_key=settings.host_api_key,
        timeout=settings.mail_timeout_seconds,
    )
