"""
Graph API Client Module

This module resolves opaque Workplace identifiers (groups, people) to
display names through the Graph API.

Design Decisions:
- Use httpx for async HTTP requests, sharing the application's client
- Every lookup is a fresh request; nothing is cached
- No retries: any failure aborts the webhook request
- The access token travels as a query parameter and is never logged
"""

from typing import Optional

import httpx
from pydantic import ValidationError

from workplace_relay.config import Settings
from workplace_relay.logging_config import get_logger
from workplace_relay.models import NameLookupResult
from workplace_relay.services.errors import GraphAPIError

logger = get_logger(__name__)


class GraphClient:
    """
    Async Graph API client for name lookups.

    Usage:
        client = GraphClient(http_client, settings)
        name = await client.get_name("1234567890")
    """

    def __init__(self, http_client: httpx.AsyncClient, settings: Settings):
        """
        Initialize the Graph client.

        Args:
            http_client: Shared async HTTP client
            settings: Application settings with the access token
        """
        self._http_client = http_client
        self._base_url = settings.graph_api_base_url
        self._access_token: Optional[str] = settings.access_token

    async def lookup(self, object_id: str) -> NameLookupResult:
        """
        Look up the name of a Graph object.

        Args:
            object_id: Group, user or community identifier

        Returns:
            NameLookupResult with the object's id and name

        Raises:
            GraphAPIError: On network errors, non-success status
                or a malformed response
        """
        url = f"{self._base_url}/{object_id}"
        params = {"fields": "name", "access_token": self._access_token or ""}

        try:
            response = await self._http_client.get(url, params=params)
        except httpx.HTTPError as e:
            logger.error(
                "Graph API request failed",
                object_id=object_id,
                error=str(e),
                error_type=type(e).__name__
            )
            raise GraphAPIError(f"Graph API request failed: {e}") from e

        if not response.is_success:
            error_body = response.text
            logger.error(
                "Graph API error",
                object_id=object_id,
                status_code=response.status_code,
                error=error_body[:500]
            )
            raise GraphAPIError(
                f"Graph API error: {response.status_code}",
                status_code=response.status_code,
                response_body=error_body
            )

        try:
            result = NameLookupResult.model_validate_json(response.content)
        except ValidationError as e:
            logger.error(
                "Malformed Graph API response",
                object_id=object_id,
                error=str(e)
            )
            raise GraphAPIError(
                "Malformed Graph API response",
                status_code=response.status_code,
                response_body=response.text
            ) from e

        logger.debug("Resolved Graph object name", object_id=object_id)
        return result

    async def get_name(self, object_id: str) -> str:
        """Resolve an identifier to its display name."""
        result = await self.lookup(object_id)
        return result.name
