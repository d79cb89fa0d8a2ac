"""Attribute accessors and predicates shared by listing and search."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from mockcms.content.models import ContentRecord
from mockcms.schema.models import PublishedState, TypeDescriptor

logger = logging.getLogger(__name__)

TEXT_FIELDS = ("name", "title", "headline", "text")


def attr(record: ContentRecord, name: str) -> object:
    return record.attributes.get(name)


def display_name(record: ContentRecord) -> str:
    """First non-empty of name, title, headline."""
    for field in TEXT_FIELDS[:3]:
        value = attr(record, field)
        if isinstance(value, str) and value:
            return value
    return ""


def searchable_text(record: ContentRecord) -> str:
    parts = [attr(record, f) for f in TEXT_FIELDS]
    return " ".join(p for p in parts if isinstance(p, str))


def parent_of(record: ContentRecord) -> str | None:
    value = attr(record, "parent")
    if value is None:
        value = attr(record, "parentId")
    return value if isinstance(value, str) else None


def parse_time(value: object) -> datetime | None:
    """Parse an ISO timestamp, assuming UTC when no offset is given."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            logger.debug("Ignoring unparseable timestamp %r", value)
            return None
    else:
        return None
    return parsed.replace(tzinfo=UTC) if parsed.tzinfo is None else parsed


def is_eligible_for_publishing(
    record: ContentRecord, descriptor: TypeDescriptor | None, now: datetime
) -> bool:
    """False when the record is not yet (or no longer) publicly visible."""
    if descriptor is not None and descriptor.has_published_state:
        if attr(record, "publishedState") != PublishedState.PUBLISHED:
            return False
    first_publish = parse_time(attr(record, "firstPublishTime"))
    if first_publish is not None and first_publish > now:
        return False
    return True


def is_active(record: ContentRecord) -> bool:
    return attr(record, "active") is not False


def in_channel(record: ContentRecord, channel: str, descriptor: TypeDescriptor | None = None) -> bool:
    """Channel match for single-channel and multi-channel attribute shapes.

    With a descriptor, channel-specific types are checked on ``channel``
    only and the rest on ``channels`` only.
    """
    single = attr(record, "channel")
    multi = attr(record, "channels")
    multi_match = isinstance(multi, list) and channel in multi
    if descriptor is None:
        return single == channel or multi_match
    if descriptor.channel_specific:
        return single == channel
    return multi_match
