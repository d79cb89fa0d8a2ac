"""In-memory content store with optimistic concurrency.

Holds the published record and the working copy of every (type, id).
Each successful write bumps the record's sequence number by one; a caller
passing ``if_sequence_number`` only wins when it saw the current one.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from datetime import datetime

from pydantic import ValidationError

from mockcms.content.models import PAYLOAD_ADAPTER, ContentRecord, Payload, Reference
from mockcms.content.versions import VersionStore
from mockcms.errors import ConflictError, InvalidIdError, InvalidRequestError, NotFoundError
from mockcms.schema.registry import TypeRegistry

logger = logging.getLogger(__name__)

UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)

# Alias to avoid shadowing by ContentStore.records method
_list = list


def is_valid_id(entity_id: str) -> bool:
    return bool(UUID_RE.match(entity_id))


def parse_payload(payload: object) -> Payload:
    """Validate a JSON object payload, returning a fresh copy.

    Raises InvalidRequestError for anything that is not a JSON object.
    """
    try:
        return PAYLOAD_ADAPTER.validate_python(payload)
    except ValidationError as exc:
        raise InvalidRequestError(f"content must be a JSON object: {exc}") from exc


class ContentStore:
    """Published content and working copies, keyed by type then id.

    Containers exist per registered type and keep insertion order, which
    is the order listings page through.
    """

    def __init__(
        self,
        types: TypeRegistry,
        versions: VersionStore,
        now: Callable[[], datetime],
    ) -> None:
        self._types = types
        self._versions = versions
        self._now = now
        self._records: dict[str, dict[str, ContentRecord]] = {}
        self._working_copies: dict[str, dict[str, Payload]] = {}
        self._references: dict[tuple[str, str], _list[Reference]] = {}
        # Last sequence per (type, id); kept across delete and type reset.
        self._last_sequence: dict[tuple[str, str], int] = {}

    # ── Private helpers ──────────────────────────────────────────

    def _validate(self, type_name: str, entity_id: str) -> dict[str, ContentRecord]:
        self.check(type_name, entity_id)
        return self._records.setdefault(type_name, {})

    def check(self, type_name: str, entity_id: str) -> None:
        """Raises InvalidIdError or UnknownTypeError."""
        if not is_valid_id(entity_id):
            raise InvalidIdError(f"{entity_id!r} is not a valid id")
        self._types.get(type_name)

    def _write(self, type_name: str, entity_id: str, payload: Payload) -> ContentRecord:
        container = self._records.setdefault(type_name, {})
        existing = container.get(entity_id)
        now = self._now()
        previous = self._last_sequence.get((type_name, entity_id), 0)
        record = ContentRecord(
            type=type_name,
            id=entity_id,
            content=payload,
            created=existing.created if existing else now,
            updated=now,
            sequence_number=previous + 1,
        )
        container[entity_id] = record
        self._last_sequence[(type_name, entity_id)] = record.sequence_number
        if self._types.get(type_name).versioned:
            self._versions.record_version(type_name, entity_id, record, now)
        logger.debug("Stored %s/%s at sequence %s", type_name, entity_id, record.sequence_number)
        return record

    # ── Containers ───────────────────────────────────────────────

    def reset_type(self, type_name: str) -> None:
        """Empty the content and working-copy containers of a type."""
        self._records[type_name] = {}
        self._working_copies[type_name] = {}
        for key in [k for k in self._references if k[0] == type_name]:
            del self._references[key]

    def clear(self) -> None:
        self._records.clear()
        self._working_copies.clear()
        self._references.clear()
        self._last_sequence.clear()
        self._versions.clear()

    # ── Write operations ─────────────────────────────────────────

    def put(
        self,
        type_name: str,
        entity_id: str,
        payload: Payload,
        if_sequence_number: int | None = None,
        clear_working_copy: bool = False,
    ) -> ContentRecord:
        """Replace the content of (type, id).

        Raises InvalidIdError, UnknownTypeError, or ConflictError when
        *if_sequence_number* does not match the stored record.
        """
        container = self._validate(type_name, entity_id)
        payload = parse_payload(payload)
        existing = container.get(entity_id)
        if (
            if_sequence_number is not None
            and existing is not None
            and existing.sequence_number != if_sequence_number
        ):
            raise ConflictError(
                f"{type_name}/{entity_id} is at sequence {existing.sequence_number}, "
                f"not {if_sequence_number}"
            )
        record = self._write(type_name, entity_id, payload)
        if clear_working_copy:
            self._working_copies.get(type_name, {}).pop(entity_id, None)
        return record

    def add(self, type_name: str, entity_id: str, payload: Payload) -> ContentRecord:
        """Seed content without id validation, registering the type if needed."""
        payload = parse_payload(payload)
        self._types.ensure(type_name)
        self._working_copies.setdefault(type_name, {})
        return self._write(type_name, entity_id, payload)

    def delete(self, type_name: str, entity_id: str) -> ContentRecord:
        """Remove (type, id) entirely.

        Raises NotFoundError if there is nothing to delete.
        """
        container = self._validate(type_name, entity_id)
        try:
            record = container.pop(entity_id)
        except KeyError:
            raise NotFoundError(f"{type_name}/{entity_id} not found") from None
        self._references.pop((type_name, entity_id), None)
        logger.debug("Deleted %s/%s", type_name, entity_id)
        return record

    def remove(self, type_name: str, entity_id: str) -> ContentRecord | None:
        """Drop (type, id) without validation; returns what was removed."""
        return self._records.get(type_name, {}).pop(entity_id, None)

    # ── Read operations ──────────────────────────────────────────

    def get(self, type_name: str, entity_id: str) -> ContentRecord:
        """Raises InvalidIdError, UnknownTypeError or NotFoundError."""
        container = self._validate(type_name, entity_id)
        try:
            return container[entity_id].model_copy(deep=True)
        except KeyError:
            raise NotFoundError(f"{type_name}/{entity_id} not found") from None

    def find(self, type_name: str, entity_id: str) -> ContentRecord | None:
        """Return the stored record or None, without validation."""
        record = self._records.get(type_name, {}).get(entity_id)
        return record.model_copy(deep=True) if record else None

    def records(self, type_name: str | None = None) -> _list[ContentRecord]:
        """Snapshot of stored records in insertion order.

        Without *type_name*, records of all types in type-registration order.
        """
        if type_name is not None:
            return [r.model_copy(deep=True) for r in self._records.get(type_name, {}).values()]
        ordered = self._types.names()
        ordered += [n for n in self._records if n not in ordered]
        return [
            r.model_copy(deep=True)
            for name in ordered
            for r in self._records.get(name, {}).values()
        ]

    # ── Working copies ───────────────────────────────────────────

    def put_working_copy(self, type_name: str, entity_id: str, payload: Payload) -> Payload:
        self._validate(type_name, entity_id)
        payload = parse_payload(payload)
        self._working_copies.setdefault(type_name, {})[entity_id] = payload
        return payload

    def add_working_copy(self, type_name: str, entity_id: str, payload: Payload) -> Payload:
        """Seed a working copy without id validation."""
        payload = parse_payload(payload)
        self._types.ensure(type_name)
        self._working_copies.setdefault(type_name, {})[entity_id] = payload
        return payload

    def get_working_copy(self, type_name: str, entity_id: str) -> Payload:
        """Raises NotFoundError if no working copy exists."""
        self._validate(type_name, entity_id)
        try:
            return self._working_copies.get(type_name, {})[entity_id]
        except KeyError:
            raise NotFoundError(f"no working copy for {type_name}/{entity_id}") from None

    def delete_working_copy(self, type_name: str, entity_id: str) -> None:
        """Raises NotFoundError if no working copy exists."""
        self._validate(type_name, entity_id)
        try:
            del self._working_copies.get(type_name, {})[entity_id]
        except KeyError:
            raise NotFoundError(f"no working copy for {type_name}/{entity_id}") from None

    def has_working_copy(self, type_name: str, entity_id: str) -> bool:
        return entity_id in self._working_copies.get(type_name, {})

    def peek_working_copy(self, type_name: str, entity_id: str) -> Payload | None:
        return self._working_copies.get(type_name, {}).get(entity_id)

    # ── Referenced-by edges ──────────────────────────────────────

    def add_reference(self, type_name: str, entity_id: str, reference: Reference) -> None:
        edges = self._references.setdefault((type_name, entity_id), [])
        if reference not in edges:
            edges.append(reference)

    def explicit_references(self, type_name: str, entity_id: str) -> _list[Reference]:
        return _list(self._references.get((type_name, entity_id), []))
