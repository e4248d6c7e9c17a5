"""
Services Package

This package contains the outbound service modules of the relay:
- graph_client: Graph API name lookups
- message_formatter: Slack message rendering
- slack_client: Slack incoming webhook delivery
"""

from workplace_relay.services.errors import (
    ConfigurationMissingError,
    DownstreamError,
    GraphAPIError,
    SlackWebhookError,
)
from workplace_relay.services.graph_client import GraphClient
from workplace_relay.services.message_formatter import (
    MalformedPayloadError,
    announcement_text,
    format_message,
)
from workplace_relay.services.slack_client import SlackForwarder

__all__ = [
    "ConfigurationMissingError",
    "DownstreamError",
    "GraphAPIError",
    "SlackWebhookError",
    "GraphClient",
    "MalformedPayloadError",
    "announcement_text",
    "format_message",
    "SlackForwarder",
]
