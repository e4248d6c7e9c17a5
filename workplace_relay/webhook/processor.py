"""
Workplace Relay Processor Module

This module decodes group-post payloads and relays every entry to Slack.
It coordinates the name lookups, message formatting and delivery.

Design Decisions:
- Entries are processed strictly in payload order
- Group and author names of one entry are resolved concurrently; a failed
  lookup cancels the other
- The first failure aborts the rest of the payload; entries already
  forwarded stay forwarded
"""

import asyncio
from typing import Tuple

from pydantic import ValidationError

from workplace_relay.logging_config import get_logger
from workplace_relay.models import Entry, InboundEnvelope
from workplace_relay.services.graph_client import GraphClient
from workplace_relay.services.message_formatter import MalformedPayloadError, format_message
from workplace_relay.services.slack_client import SlackForwarder

logger = get_logger(__name__)


def decode_payload(raw_body: bytes) -> InboundEnvelope:
    """
    Decode a raw webhook body into an envelope.

    Args:
        raw_body: Raw request body bytes

    Returns:
        Parsed InboundEnvelope

    Raises:
        MalformedPayloadError: If the body is empty, not JSON, or does not
            match the group-posts structure
    """
    if not raw_body:
        raise MalformedPayloadError("Empty webhook payload")

    try:
        return InboundEnvelope.model_validate_json(raw_body)
    except ValidationError as e:
        logger.error("Failed to decode webhook payload", error=str(e))
        raise MalformedPayloadError(f"Invalid payload: {e}") from e


class WorkplaceRelay:
    """
    Relays decoded Workplace entries to Slack.

    Usage:
        relay = WorkplaceRelay(graph_client, forwarder)
        forwarded = await relay.relay(envelope)
    """

    def __init__(self, graph_client: GraphClient, forwarder: SlackForwarder):
        self.graph_client = graph_client
        self.forwarder = forwarder

    @staticmethod
    def author_id(entry: Entry) -> str:
        """Get the author id of an entry's first change."""
        change = entry.first_change
        if change is None:
            raise MalformedPayloadError(f"Entry {entry.id} has no changes")
        if change.value.from_ is None:
            raise MalformedPayloadError(f"Entry {entry.id} has no author")
        return change.value.from_.id

    async def _resolve_names(self, group_id: str, author_id: str) -> Tuple[str, str]:
        """
        Resolve the group and author names concurrently.

        If either lookup fails the other is cancelled before the error
        propagates.
        """
        lookups = [
            asyncio.ensure_future(self.graph_client.get_name(group_id)),
            asyncio.ensure_future(self.graph_client.get_name(author_id)),
        ]
        try:
            group_name, author_name = await asyncio.gather(*lookups)
        finally:
            for lookup in lookups:
                if not lookup.done():
                    lookup.cancel()
        return group_name, author_name

    async def relay_entry(self, entry: Entry) -> None:
        """Resolve names for one entry, format it and forward it."""
        author_id = self.author_id(entry)

        group_name, author_name = await self._resolve_names(entry.id, author_id)

        message = format_message(entry, group_name, author_name)
        await self.forwarder.send(message)

        logger.info(
            "Forwarded Workplace entry",
            group_id=entry.id,
            author_id=author_id,
            verb=entry.changes[0].value.verb
        )

    async def relay(self, envelope: InboundEnvelope) -> int:
        """
        Relay every entry of an envelope in order.

        Returns:
            Number of entries forwarded
        """
        logger.info(
            "Relaying Workplace payload",
            object=envelope.object,
            num_entries=len(envelope.entry)
        )

        forwarded = 0
        for entry in envelope.entry:
            await self.relay_entry(entry)
            forwarded += 1

        return forwarded
