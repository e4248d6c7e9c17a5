"""
Service Errors

Exceptions shared by the outbound service clients.
"""

from typing import Optional


class DownstreamError(Exception):
    """Base exception for failed calls to an external service."""
    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class GraphAPIError(DownstreamError):
    """Exception raised when a Graph API name lookup fails."""
    pass


class SlackWebhookError(DownstreamError):
    """Exception raised when the Slack webhook rejects a message."""
    pass


class ConfigurationMissingError(Exception):
    """Exception raised when a required setting is not configured."""
    pass
