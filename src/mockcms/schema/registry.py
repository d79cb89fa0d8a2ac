"""Type registry and schema derivation.

Descriptors are stored in registration order.  On registration the
caller's descriptor is augmented with the standard attribute properties
every content type carries, plus the reference properties implied by its
capability flags.
"""

from __future__ import annotations

import logging

from mockcms.errors import ConflictError, UnknownTypeError
from mockcms.schema.models import (
    PropertyKind,
    PropertySchema,
    PublishedState,
    TypeDescriptor,
)

logger = logging.getLogger(__name__)

# Alias to avoid shadowing by TypeRegistry.list method
_list = list

ATTRIBUTES = "attributes"
CHANNEL_TYPE = "channel"
PUBLISHING_GROUP_TYPE = "publishing-group"


def derive_schema(descriptor: TypeDescriptor) -> TypeDescriptor:
    """Return a copy of *descriptor* with standard and flag-driven properties.

    Properties already defined by the caller are kept as-is.
    """
    derived = descriptor.model_copy(deep=True)
    if derived.channel_specific:
        derived.publishing_group_specific = True

    standard: dict[str, PropertySchema] = {
        "editedBy": PropertySchema(type=PropertyKind.STRING, title="Edited by"),
        "active": PropertySchema(type=PropertyKind.BOOLEAN, title="Active"),
        "created": PropertySchema(type=PropertyKind.DATETIME, title="Created"),
        "updated": PropertySchema(type=PropertyKind.DATETIME, title="Updated"),
    }
    if derived.has_published_state:
        standard["publishedState"] = PropertySchema(
            type=PropertyKind.STRING,
            title="Published state",
            enum=[s.value for s in PublishedState],
        )
    if derived.channel_specific:
        standard["channel"] = PropertySchema(
            type=PropertyKind.REFERENCE, title="Channel", reference=CHANNEL_TYPE
        )
    if derived.publishing_group_specific:
        standard["publishingGroup"] = PropertySchema(
            type=PropertyKind.REFERENCE,
            title="Publishing group",
            reference=PUBLISHING_GROUP_TYPE,
        )
    if derived.hierarchical:
        standard["parent"] = PropertySchema(
            type=PropertyKind.REFERENCE, title="Parent", reference=derived.name
        )

    attributes = derived.properties.get(ATTRIBUTES)
    if attributes is None:
        attributes = PropertySchema(type=PropertyKind.OBJECT, title="Attributes")
        derived.properties[ATTRIBUTES] = attributes
    for name, schema in standard.items():
        attributes.properties.setdefault(name, schema)

    return derived


class TypeRegistry:
    """Registered type descriptors keyed by name."""

    def __init__(self) -> None:
        self._types: dict[str, TypeDescriptor] = {}

    def register(self, descriptor: TypeDescriptor, allow_redefine: bool = False) -> TypeDescriptor:
        """Derive and install *descriptor*.

        Raises ConflictError if the name exists and *allow_redefine* is false.
        """
        if descriptor.name in self._types and not allow_redefine:
            raise ConflictError(f"type {descriptor.name!r} is already registered")
        derived = derive_schema(descriptor)
        self._types[derived.name] = derived
        logger.debug("Registered type %s", derived.name)
        return derived

    def ensure(self, name: str) -> TypeDescriptor:
        """Return the descriptor for *name*, registering a bare one if missing."""
        existing = self._types.get(name)
        if existing is not None:
            return existing
        return self.register(TypeDescriptor(name=name, title=name, plural_title=name))

    def get(self, name: str) -> TypeDescriptor:
        """Raises UnknownTypeError if *name* is not registered."""
        try:
            return self._types[name]
        except KeyError:
            raise UnknownTypeError(f"unknown type {name!r}") from None

    def find(self, name: str) -> TypeDescriptor | None:
        return self._types.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def list(self) -> _list[TypeDescriptor]:
        """Return descriptors in registration order."""
        return [t.model_copy(deep=True) for t in self._types.values()]

    def names(self) -> _list[str]:
        return [*self._types]

    def clear(self) -> None:
        self._types.clear()
