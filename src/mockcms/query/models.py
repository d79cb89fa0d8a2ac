"""Query inputs and result pages."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, JsonValue, field_validator
from pydantic.alias_generators import to_camel


class _QueryModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ActiveState(StrEnum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class SearchBehavior(StrEnum):
    """How query tokens are matched against content text."""

    ANY = "any"
    PREFIX = "prefix"


class SortOrder(StrEnum):
    ASC = "asc"
    DESC = "desc"


class ListFilters(_QueryModel):
    """Filters and paging for a content listing."""

    parent: str | None = None
    keyword: str | None = None
    channel: str | None = None
    publishing_group: str | None = None
    only_published: bool = False
    active_state: ActiveState | None = None
    exclude_from_publishing_events: bool = False
    types: list[str] | None = Field(default=None, alias="type")
    cursor: int = Field(default=0, ge=0)
    size: int | None = Field(default=None, ge=1)

    @field_validator("types", mode="before")
    @classmethod
    def _single_type(cls, value: object) -> object:
        if isinstance(value, str):
            return [value]
        return value


class ListItem(_QueryModel):
    id: str
    type: str
    sequence_number: int
    content: dict[str, JsonValue]
    has_children: bool | None = None


class ListPage(_QueryModel):
    items: list[ListItem] = Field(default_factory=list)
    next_cursor: int | None = None


class SortSpec(_QueryModel):
    by: str
    order: SortOrder = SortOrder.ASC


class SearchQuery(_QueryModel):
    """Body of a search request."""

    q: str = ""
    behavior: SearchBehavior = SearchBehavior.ANY
    prefix_match_all_terms: bool = False
    types: list[str] | None = None
    sort: list[SortSpec] = Field(default_factory=list)
    from_: int = Field(default=0, ge=0, alias="from")
    size: int | None = Field(default=None, ge=0)
    return_content: bool = False

    @property
    def effective_behavior(self) -> SearchBehavior:
        if self.prefix_match_all_terms:
            return SearchBehavior.PREFIX
        return self.behavior


class SearchHit(_QueryModel):
    id: str
    type: str
    title: str
    sequence_number: int | None = None
    content: dict[str, JsonValue] | None = None


class SearchResult(_QueryModel):
    hits: list[SearchHit] = Field(default_factory=list)
    total: int = 0


class AutocompleteQuery(_QueryModel):
    keyword: str | None = None
    publishing_group: str | None = None
    channel: str | None = None
