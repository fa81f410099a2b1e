"""Email transport that hands messages to the host's mail webhook."""

import logging
from dataclasses import asdict

import httpx

from app.integrations.mail.base import EmailMessage, EmailTransport

logger = logging.getLogger(__name__)


class WebhookEmailTransport(EmailTransport):
    """POSTs ``{to, subject, body}`` as JSON to the host mail endpoint."""

    def __init__(
        self,
        url: str,
        api_key: str = "",
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        self._url = url
        self._headers = {"X-API-Key": api_key} if api_key else {}
        self._timeout = timeout
        self._client = client

    async def send(self, message: EmailMessage) -> bool:
        try:
            if self._client is not None:
                response = await self._post(self._client, message)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await self._post(client, message)
        except httpx.HTTPError as e:
            logger.error(f"Mail webhook request failed for {message.to}: {e}")
            return False

        if response.is_success:
            return True

        logger.error(
            f"Mail webhook rejected message for {message.to}: HTTP {response.status_code}"
        )
        return False

    async def _post(self, client: httpx.AsyncClient, message: EmailMessage) -> httpx.Response:
        return await client.post(self._url, json=asdict(message), headers=self._headers)
