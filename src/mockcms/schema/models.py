"""Type descriptor models: caller-defined schemas for content types."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class PropertyKind(StrEnum):
    """Value kinds a property schema can describe."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATETIME = "datetime"
    OBJECT = "object"
    ARRAY = "array"
    REFERENCE = "reference"


class PublishedState(StrEnum):
    """Values of the derived ``publishedState`` attribute."""

    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    UNPUBLISHED = "UNPUBLISHED"


class PropertySchema(BaseModel):
    """A node in a type's property tree."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    type: PropertyKind = PropertyKind.STRING
    title: str = ""
    enum: list[str] | None = None
    reference: str | None = None  # referenced type name for REFERENCE
    properties: dict[str, PropertySchema] = Field(default_factory=dict)
    items: PropertySchema | None = None


class TypeDescriptor(BaseModel):
    """Schema-like metadata for one content type.

    The capability flags drive both schema derivation and query behaviour
    (channel scoping, publish eligibility, hierarchy).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str
    title: str = ""
    plural_title: str = ""
    properties: dict[str, PropertySchema] = Field(default_factory=dict)
    versioned: bool = False
    channel_specific: bool = False
    publishing_group_specific: bool = False
    hierarchical: bool = False
    has_published_state: bool = False
    exclude_from_publishing_events: bool = False

    def summary(self) -> dict[str, str]:
        """Short wire form used by the ``/types`` listing."""
        return {
            "name": self.name,
            "title": self.title or self.name,
            "pluralTitle": self.plural_title or self.title or self.name,
        }
