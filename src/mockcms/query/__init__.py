"""Query engine: stateless listing, search and autocomplete."""

from mockcms.query.filters import is_eligible_for_publishing
from mockcms.query.listing import list_content
from mockcms.query.models import (
    ActiveState,
    AutocompleteQuery,
    ListFilters,
    ListItem,
    ListPage,
    SearchBehavior,
    SearchHit,
    SearchQuery,
    SearchResult,
    SortOrder,
    SortSpec,
)
from mockcms.query.search import autocomplete, search

__all__ = [
    "ActiveState",
    "AutocompleteQuery",
    "ListFilters",
    "ListItem",
    "ListPage",
    "SearchBehavior",
    "SearchHit",
    "SearchQuery",
    "SearchResult",
    "SortOrder",
    "SortSpec",
    "autocomplete",
    "is_eligible_for_publishing",
    "list_content",
    "search",
]
