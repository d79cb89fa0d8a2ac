"""Slug models: human-readable paths bound to content within a channel."""

from __future__ import annotations

from datetime import UTC, datetime
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def _as_utc(value: datetime) -> datetime:
    return value.replace(tzinfo=UTC) if value.tzinfo is None else value


class Slug(BaseModel):
    """A path assignment for a (value_type, value) pair in a channel."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    channel: str | None = None
    path: str
    value: str
    value_type: str
    publish_time: datetime

    @field_validator("publish_time")
    @classmethod
    def _normalize_publish_time(cls, value: datetime) -> datetime:
        return _as_utc(value)

    def same_target(self, value: str, value_type: str) -> bool:
        return self.value == value and self.value_type == value_type

    def to_wire(self) -> dict[str, object]:
        return self.model_dump(mode="json", by_alias=True)


class SlugRequest(BaseModel):
    """Body of a slug request.

    ``channels`` is the older list form; its first entry is used when
    ``channel`` is absent.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    desired_path: str | None = None
    path: str | None = None
    channel: str | None = None
    channels: list[str] | None = None
    value: str | None = None
    value_type: str | None = None
    publish_time: datetime | str | None = None

    @property
    def resolved_channel(self) -> str | None:
        if self.channel:
            return self.channel
        if self.channels:
            return self.channels[0]
        return None

    @property
    def resolved_path(self) -> str | None:
        return self.desired_path or self.path
