"""Content domain: published records, working copies and versions."""

from mockcms.content.models import (
    ContentRecord,
    NotificationEvent,
    Payload,
    Reference,
    VersionEntry,
)
from mockcms.content.references import ReferenceResolver, scan_payload_references
from mockcms.content.store import ContentStore, is_valid_id
from mockcms.content.versions import VersionStore

__all__ = [
    "ContentRecord",
    "ContentStore",
    "NotificationEvent",
    "Payload",
    "Reference",
    "ReferenceResolver",
    "VersionEntry",
    "VersionStore",
    "is_valid_id",
    "scan_payload_references",
]
