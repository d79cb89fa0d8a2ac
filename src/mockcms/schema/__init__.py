"""Type registry: content type descriptors and schema derivation."""

from mockcms.schema.models import (
    PropertyKind,
    PropertySchema,
    PublishedState,
    TypeDescriptor,
)
from mockcms.schema.registry import TypeRegistry, derive_schema

__all__ = [
    "PropertyKind",
    "PropertySchema",
    "PublishedState",
    "TypeDescriptor",
    "TypeRegistry",
    "derive_schema",
]
