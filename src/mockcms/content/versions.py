"""Append-only version history for versioned content types."""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime

from mockcms.content.models import ContentRecord, VersionEntry
from mockcms.errors import NotFoundError

logger = logging.getLogger(__name__)

DEFAULT_PUBLISHED_BY = "fake-user"


class VersionStore:
    """Per-(type, id) version metadata and snapshots.

    Internal indices:
    - ``_entries``: (type, id) -> list[VersionEntry], newest first
    - ``_snapshots``: (type, id) -> {sequence_number: ContentRecord}
    """

    def __init__(self, published_by: str = DEFAULT_PUBLISHED_BY) -> None:
        self._published_by = published_by
        self._entries: dict[tuple[str, str], list[VersionEntry]] = defaultdict(list)
        self._snapshots: dict[tuple[str, str], dict[int, ContentRecord]] = defaultdict(dict)

    def record_version(self, type_name: str, entity_id: str, snapshot: ContentRecord, at: datetime) -> VersionEntry:
        """Prepend a metadata entry and keep a copy of *snapshot*."""
        key = (type_name, entity_id)
        seq = snapshot.sequence_number
        entry = VersionEntry(
            sequence_number=seq,
            created=at,
            path=f"/{type_name}/{entity_id}/versions/{seq}",
            published_by=self._published_by,
        )
        self._entries[key].insert(0, entry)
        self._snapshots[key][seq] = snapshot.model_copy(deep=True)
        logger.debug("Recorded version %s of %s/%s", seq, type_name, entity_id)
        return entry

    def list_versions(self, type_name: str, entity_id: str) -> list[VersionEntry]:
        """Return version metadata newest-first (empty when never versioned)."""
        return list(self._entries.get((type_name, entity_id), []))

    def get_version(self, type_name: str, entity_id: str, sequence_number: int) -> ContentRecord:
        """Return the exact historical snapshot.

        Raises NotFoundError if that version was never recorded.
        """
        snapshots = self._snapshots.get((type_name, entity_id), {})
        try:
            return snapshots[sequence_number].model_copy(deep=True)
        except KeyError:
            raise NotFoundError(
                f"no version {sequence_number} of {type_name}/{entity_id}"
            ) from None

    def clear(self) -> None:
        self._entries.clear()
        self._snapshots.clear()
