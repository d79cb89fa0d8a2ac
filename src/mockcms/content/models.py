"""Content domain models: pure Pydantic v2 data types.

A ContentRecord is the published state of one (type, id) entity: the
caller's JSON payload plus the store-managed timestamps and the sequence
number used as the optimistic-concurrency token.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, JsonValue, TypeAdapter
from pydantic.alias_generators import to_camel

Payload = dict[str, JsonValue]

PAYLOAD_ADAPTER: TypeAdapter[Payload] = TypeAdapter(Payload)


class _WireModel(BaseModel):
    """Base for models exchanged with callers in camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, object]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class NotificationEvent(StrEnum):
    """Kinds of change notifications sent to the sink."""

    PUBLISHED = "published"
    UNPUBLISHED = "unpublished"


class ContentRecord(_WireModel):
    """Published content for one (type, id)."""

    type: str
    id: str
    content: Payload = Field(default_factory=dict)
    created: datetime
    updated: datetime
    sequence_number: int = 1

    @property
    def attributes(self) -> dict[str, JsonValue]:
        attrs = self.content.get("attributes")
        return attrs if isinstance(attrs, dict) else {}


class VersionEntry(_WireModel):
    """Metadata for one historical version, newest first in listings."""

    sequence_number: int
    created: datetime
    path: str
    published_by: str


class Reference(_WireModel):
    """One edge of the referenced-by graph."""

    id: str
    type: str
