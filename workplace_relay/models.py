"""
Data Models Module

This module defines all Pydantic models used throughout the application.
Strong typing ensures data integrity and provides clear contracts between components.

Design Decisions:
- Inbound Workplace models are frozen and keep unknown keys, so a decoded
  envelope re-encodes to the same document
- Outbound Slack models mirror the Block Kit subset we actually send
- Clear separation between Workplace models, Graph models and Slack models
"""

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class _WorkplaceModel(BaseModel):
    """Base for inbound Workplace webhook models."""
    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)


# =============================================================================
# Workplace Webhook Models
# =============================================================================

class Community(_WorkplaceModel):
    """Workplace community the post belongs to."""
    id: str


class Author(_WorkplaceModel):
    """
    Author of a post (the "from" object).

    The name is never used for output; names are resolved live through
    the Graph API.
    """
    id: str
    name: Optional[str] = None


class Value(_WorkplaceModel):
    """
    Payload of a single group post change.

    Attributes:
        created_time: When the post was created
        community: Community reference
        from_: Post author (JSON key "from")
        message: Raw post text
        permalink_url: Link to the post
        post_id: Workplace post identifier
        target_type: Type of object the post targets
        type: Content type of the post
        verb: "add" for new posts, anything else (e.g. "edit") for edits
    """
    created_time: Optional[Union[str, int]] = None
    community: Optional[Community] = None
    from_: Optional[Author] = Field(default=None, alias="from")
    message: Optional[str] = None
    permalink_url: Optional[str] = None
    post_id: Optional[str] = None
    target_type: Optional[str] = None
    type: Optional[str] = None
    verb: Optional[str] = None

    @property
    def is_new_post(self) -> bool:
        """Check whether this change announces a new post."""
        return self.verb == "add"


class Change(_WorkplaceModel):
    """A single field change within an entry."""
    value: Value
    field: Optional[str] = None


class Entry(_WorkplaceModel):
    """
    Per-group batch of changes.

    The first change is the canonical one used for notifications.
    """
    id: str
    time: Optional[Union[int, str]] = None
    changes: List[Change] = []

    @property
    def first_change(self) -> Optional[Change]:
        """Get the canonical change, if any."""
        return self.changes[0] if self.changes else None


class InboundEnvelope(_WorkplaceModel):
    """Top-level group-posts webhook payload."""
    entry: List[Entry] = []
    object: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        """Re-encode the envelope using the original JSON keys."""
        return self.model_dump(by_alias=True, exclude_unset=True)


# =============================================================================
# Graph API Models
# =============================================================================

class NameLookupResult(BaseModel):
    """Result of a Graph API `?fields=name` lookup."""
    id: str
    name: str


# =============================================================================
# Slack Message Models
# =============================================================================

class TextObject(BaseModel):
    """Block Kit text object."""
    type: Literal["mrkdwn"] = "mrkdwn"
    text: str


class SectionBlock(BaseModel):
    """
    Block Kit section.

    A section carries either a single text object or a list of fields.
    """
    type: Literal["section"] = "section"
    text: Optional[TextObject] = None
    fields: Optional[List[TextObject]] = None


class OutboundMessage(BaseModel):
    """Message posted to the Slack incoming webhook."""
    text: str = Field(description="Fallback text shown in notifications")
    blocks: List[SectionBlock] = []

    def to_payload(self) -> Dict[str, Any]:
        """Serialize for the Slack webhook, omitting unset block parts."""
        return self.model_dump(exclude_none=True)
