"""Keyword search and autocomplete over content records.

Matching is plain token containment; there is no relevance ranking.
Results keep corpus order unless a sort is requested.
"""

from __future__ import annotations

from collections.abc import Iterable

from mockcms.content.models import ContentRecord
from mockcms.errors import InvalidRequestError
from mockcms.query.filters import attr, display_name, in_channel, searchable_text
from mockcms.query.models import (
    AutocompleteQuery,
    SearchBehavior,
    SearchHit,
    SearchQuery,
    SearchResult,
    SortOrder,
)

MIN_AUTOCOMPLETE_LENGTH = 2


def tokenize(text: str) -> list[str]:
    return text.lower().split()


def matches_query(record: ContentRecord, tokens: list[str], behavior: SearchBehavior) -> bool:
    """Any-term substring match, or every token prefixing some content token."""
    if not tokens:
        return True
    text = searchable_text(record).lower()
    if behavior == SearchBehavior.PREFIX:
        content_tokens = text.split()
        return all(any(ct.startswith(qt) for ct in content_tokens) for qt in tokens)
    return any(qt in text for qt in tokens)


def _sort_value(record: ContentRecord, field: str) -> str:
    value = display_name(record) if field == "title" else attr(record, field)
    return "" if value is None else str(value)


def _hit(record: ContentRecord, with_content: bool) -> SearchHit:
    return SearchHit(
        id=record.id,
        type=record.type,
        title=display_name(record),
        sequence_number=record.sequence_number,
        content=record.content if with_content else None,
    )


def search(
    records: Iterable[ContentRecord],
    query: SearchQuery,
    default_size: int,
) -> SearchResult:
    """Run *query* over *records*.

    ``total`` counts every match; ``hits`` is the ``from``/``size`` slice.
    """
    tokens = tokenize(query.q)
    behavior = query.effective_behavior
    wanted = set(query.types) if query.types else None

    matched = [
        r for r in records
        if (wanted is None or r.type in wanted) and matches_query(r, tokens, behavior)
    ]
    # Stable sorts applied last-key-first give a multi-key ordering.
    for sort_spec in reversed(query.sort):
        matched.sort(
            key=lambda r, by=sort_spec.by: _sort_value(r, by),
            reverse=sort_spec.order == SortOrder.DESC,
        )

    size = query.size if query.size is not None else default_size
    page = matched[query.from_:query.from_ + size]
    return SearchResult(
        hits=[_hit(r, query.return_content) for r in page],
        total=len(matched),
    )


def autocomplete(records: Iterable[ContentRecord], query: AutocompleteQuery) -> list[SearchHit]:
    """Word-start match of ``keyword`` against display names.

    Raises InvalidRequestError when the keyword is shorter than two
    characters.
    """
    keyword = (query.keyword or "").strip()
    if len(keyword) < MIN_AUTOCOMPLETE_LENGTH:
        raise InvalidRequestError(
            f"keyword must be at least {MIN_AUTOCOMPLETE_LENGTH} characters"
        )
    needle = " " + keyword.lower()

    hits: list[SearchHit] = []
    for record in records:
        if needle not in " " + display_name(record).lower():
            continue
        if query.publishing_group is not None and attr(record, "publishingGroup") != query.publishing_group:
            continue
        if query.channel is not None and not in_channel(record, query.channel):
            continue
        hits.append(_hit(record, with_content=False))
    return hits
