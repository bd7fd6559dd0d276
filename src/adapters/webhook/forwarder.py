"""
Webhook forwarder adapter - Implements RecordForwarder protocol.

Posts each newly created seller record to the automation webhook that
generates the sales agreement PDF. The response body is ignored; only
success or failure matters.
"""

import logging
from typing import Any

import httpx

from src.domain.exceptions import ForwardingError

logger = logging.getLogger(__name__)


class WebhookRecordForwarder:
    """
    Implements RecordForwarder protocol via an HTTP POST.

    Uses structural subtyping - no explicit inheritance from Protocol.
    With no URL configured, forwarding is skipped with a warning.
    """

    def __init__(self, client: httpx.AsyncClient, url: str | None) -> None:
        self._client = client
        self._url = url

    async def forward(self, payload: dict[str, Any]) -> None:
        """
        POST the payload as JSON.

        Raises:
            ForwardingError: On transport failure or non-2xx response
        """
        if not self._url:
            logger.warning("No webhook URL configured, record %s not forwarded", payload.get("recordId"))
            return
        try:
            response = await self._client.post(self._url, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ForwardingError(f"Webhook returned {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise ForwardingError(f"Webhook request failed: {e}") from e
        logger.info("Forwarded record %s to webhook", payload.get("recordId"))
