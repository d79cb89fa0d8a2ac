"""Content listing: filters, parent/child hierarchy and cursor paging."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime

from mockcms.content.models import ContentRecord
from mockcms.query.filters import (
    attr,
    display_name,
    in_channel,
    is_active,
    is_eligible_for_publishing,
    parent_of,
)
from mockcms.query.models import ActiveState, ListFilters, ListItem, ListPage
from mockcms.schema.models import TypeDescriptor

NO_PARENT = "none"


def _dedupe(records: Iterable[ContentRecord]) -> list[ContentRecord]:
    seen: set[str] = set()
    result: list[ContentRecord] = []
    for record in records:
        if record.id in seen:
            continue
        seen.add(record.id)
        result.append(record)
    return result


def _keep(
    record: ContentRecord,
    descriptor: TypeDescriptor | None,
    filters: ListFilters,
    now: datetime,
) -> bool:
    if filters.parent is not None:
        parent = parent_of(record)
        if filters.parent == NO_PARENT:
            if parent is not None:
                return False
        elif parent != filters.parent:
            return False
    if filters.keyword and filters.keyword.lower() not in display_name(record).lower():
        return False
    if filters.channel is not None and not in_channel(record, filters.channel, descriptor):
        return False
    if (
        filters.publishing_group is not None
        and attr(record, "publishingGroup") != filters.publishing_group
    ):
        return False
    if filters.only_published and not is_eligible_for_publishing(record, descriptor, now):
        return False
    if filters.active_state is not None:
        if is_active(record) != (filters.active_state == ActiveState.ACTIVE):
            return False
    if (
        filters.exclude_from_publishing_events
        and descriptor is not None
        and descriptor.exclude_from_publishing_events
    ):
        return False
    return True


def list_content(
    records: Iterable[ContentRecord],
    descriptors: Mapping[str, TypeDescriptor],
    filters: ListFilters,
    now: datetime,
) -> ListPage:
    """Filter, page and shape *records* for a listing response.

    *records* must already be in insertion order.  Items of every type are
    deduplicated by id, first occurrence winning.  ``next_cursor`` is only
    set when items remain beyond the returned page.
    """
    corpus = _dedupe(records)
    if filters.types:
        wanted = set(filters.types)
        corpus = [r for r in corpus if r.type in wanted]

    matched = [r for r in corpus if _keep(r, descriptors.get(r.type), filters, now)]

    start = filters.cursor
    end = start + filters.size if filters.size is not None else len(matched)
    page = matched[start:end]
    next_cursor = end if filters.size is not None and end < len(matched) else None

    parents = {parent_of(r) for r in corpus} - {None}
    items: list[ListItem] = []
    for record in page:
        descriptor = descriptors.get(record.type)
        with_children = filters.parent is not None or (
            descriptor is not None and descriptor.hierarchical
        )
        items.append(
            ListItem(
                id=record.id,
                type=record.type,
                sequence_number=record.sequence_number,
                content=record.content,
                has_children=(record.id in parents) if with_children else None,
            )
        )
    return ListPage(items=items, next_cursor=next_cursor)
