"""Outbound email through a transactional email HTTP API."""
from __future__ import annotations

import logging

import httpx

from catalog.domain.errors import UpstreamError

logger = logging.getLogger(__name__)


class ResendEmailGateway:
    """Sends email with the Resend HTTP API. No retries."""

    def __init__(self, api_key: str, api_url: str, client: httpx.Client) -> None:
        self._api_key = api_key
        self._api_url = api_url
        self._client = client

    def send(self, sender: str, to: str, subject: str, html: str) -> None:
        payload = {"from": sender, "to": [to], "subject": subject, "html": html}
        try:
            response = self._client.post(
                self._api_url,
                json=payload,
                headers={"Authorization": f"Bearer {self._api_key}"},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"Email API rejected message to {to}: {e.response.status_code} {e.response.text}")
            raise UpstreamError("Failed to send email", cause=e) from e
        except httpx.HTTPError as e:
            logger.error(f"Email API unreachable while sending to {to}: {e}")
            raise UpstreamError("Failed to send email", cause=e) from e
        logger.info(f"Email sent to {to}: {subject}")


class LoggingEmailGateway:
    """Used when no email API key is configured: logs instead of sending."""

    def send(self, sender: str, to: str, subject: str, html: str) -> None:
        logger.warning(f"Email delivery disabled; message from {sender} to {to}: {subject}\n{html}")
