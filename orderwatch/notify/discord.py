"""Discord webhook integration for buy order alerts."""

import logging

import httpx

from orderwatch import metrics
from orderwatch.notify.formatters import OrderAlert, format_discord_payload

logger = logging.getLogger(__name__)


class DiscordWebhook:
    """Best-effort Discord webhook client; delivery errors are never raised."""

    def __init__(self, webhook_url: str, timeout: float = 30.0):
        self.webhook_url = webhook_url.strip()
        self.timeout = timeout
        self._http_client: httpx.AsyncClient | None = None

    @property
    def configured(self) -> bool:
        return bool(self.webhook_url)

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.timeout)
        return self._http_client

    async def close(self):
        """Close HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def send(self, alert: OrderAlert) -> bool:
        """
        Post an alert to the webhook.

        Returns:
            True if Discord accepted the message, False otherwise
        """
        if not self.configured:
            logger.debug(f"Webhook not configured, dropping alert: {alert.title}")
            return False

        client = await self._get_client()

        try:
            response = await client.post(self.webhook_url, json=format_discord_payload(alert))
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"Discord alert error for {alert.title}: {e}")
            metrics.alerts_sent_total.labels(status="failed").inc()
            return False

        if response.status_code == 204 or response.is_success:
            logger.info(f"Sent Discord alert: {alert.title}")
            metrics.alerts_sent_total.labels(status="success").inc()
            return True

        logger.warning(
            f"Discord alert failed: {response.status_code} {response.text[:200]}"
        )
        metrics.alerts_sent_total.labels(status="failed").inc()
        return False
