"""Referenced-by resolution.

The repository asks a ``ReferenceResolver`` which stored content refers
to a given entity.  The default resolver walks every payload looking for
the entity id as a string value.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from mockcms.content.models import ContentRecord, Reference


class ReferenceResolver(Protocol):
    def __call__(self, target: ContentRecord, corpus: Iterable[ContentRecord]) -> list[Reference]: ...


def _contains_value(node: object, needle: str) -> bool:
    if isinstance(node, str):
        return node == needle
    if isinstance(node, dict):
        return any(_contains_value(v, needle) for v in node.values())
    if isinstance(node, list):
        return any(_contains_value(v, needle) for v in node)
    return False


def scan_payload_references(target: ContentRecord, corpus: Iterable[ContentRecord]) -> list[Reference]:
    """Return every record whose payload mentions ``target.id``."""
    refs: list[Reference] = []
    for record in corpus:
        if record.id == target.id and record.type == target.type:
            continue
        if _contains_value(record.content, target.id):
            refs.append(Reference(id=record.id, type=record.type))
    return refs
