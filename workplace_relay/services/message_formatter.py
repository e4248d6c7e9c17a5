"""
Message Formatter Module

Renders a Workplace entry into a Slack Block Kit message.

Only the first change of an entry is rendered. The message body is passed
through unescaped, so Slack markdown in a post is rendered as markdown.
"""

from workplace_relay.models import Entry, OutboundMessage, SectionBlock, TextObject


class MalformedPayloadError(Exception):
    """Exception raised when a webhook payload cannot be used."""
    pass


def announcement_text(group_name: str, is_new_post: bool) -> str:
    """Get the new-or-edited announcement line."""
    if is_new_post:
        return f"There is a new post in *{group_name}*!"
    return f"A post in *{group_name}* was edited"


def format_message(entry: Entry, group_name: str, author_name: str) -> OutboundMessage:
    """
    Build the Slack message for an entry.

    Args:
        entry: Decoded Workplace entry
        group_name: Resolved name of the entry's group
        author_name: Resolved name of the first change's author

    Returns:
        OutboundMessage with summary text and three sections

    Raises:
        MalformedPayloadError: If the entry has no changes
    """
    change = entry.first_change
    if change is None:
        raise MalformedPayloadError(f"Entry {entry.id} has no changes")

    value = change.value
    headline = announcement_text(group_name, value.is_new_post)

    return OutboundMessage(
        text=f"New post in workplace group '{group_name}'",
        blocks=[
            SectionBlock(
                text=TextObject(text=f"{headline}\n*<{value.permalink_url or ''}|Go to post>*")
            ),
            SectionBlock(text=TextObject(text=value.message or "")),
            SectionBlock(fields=[TextObject(text=f"*Posted by:* {author_name}")]),
        ]
    )
