"""
Slack Webhook Client Module

This module delivers formatted messages to a Slack incoming webhook.

Design Decisions:
- Use httpx for async HTTP requests, sharing the application's client
- Fail before any network call when the webhook URL is not configured
- Treat any non-success status as a hard failure; no retries
"""

from typing import Optional

import httpx

from workplace_relay.logging_config import get_logger
from workplace_relay.models import OutboundMessage
from workplace_relay.services.errors import ConfigurationMissingError, SlackWebhookError

logger = get_logger(__name__)


class SlackForwarder:
    """
    Posts messages to a Slack incoming webhook.

    Usage:
        forwarder = SlackForwarder(http_client, settings.slack_webhook_uri)
        await forwarder.send(message)
    """

    def __init__(self, http_client: httpx.AsyncClient, webhook_uri: Optional[str]):
        self._http_client = http_client
        self._webhook_uri = webhook_uri

    async def send(self, message: OutboundMessage) -> None:
        """
        Send a message to the configured webhook.

        Args:
            message: Rendered Slack message

        Raises:
            ConfigurationMissingError: If no webhook URL is configured
            SlackWebhookError: On network errors or a non-success status
        """
        if not self._webhook_uri:
            logger.error("Slack webhook URI not configured")
            raise ConfigurationMissingError(
                "SlackWebhookUri is not configured - unable to post to Slack"
            )

        try:
            response = await self._http_client.post(
                self._webhook_uri,
                json=message.to_payload(),
                headers={"Content-Type": "application/json"}
            )
        except httpx.HTTPError as e:
            logger.error(
                "Slack webhook request failed",
                error=str(e),
                error_type=type(e).__name__
            )
            raise SlackWebhookError(f"Slack webhook request failed: {e}") from e

        if not response.is_success:
            error_body = response.text
            logger.error(
                "Slack webhook error",
                status_code=response.status_code,
                error=error_body[:500]
            )
            raise SlackWebhookError(
                f"Slack webhook error: {response.status_code}",
                status_code=response.status_code,
                response_body=error_body
            )

        logger.debug("Posted message to Slack", status_code=response.status_code)
