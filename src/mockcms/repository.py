"""The in-memory content repository.

``Repository`` owns every piece of mutable state (types, content, working
copies, versions, slugs, user settings) and is the operation surface the
HTTP facade and tests call.  Each instance is independent; construct a
fresh one per test for isolation.

Every mutating operation runs under one re-entrant lock, including the
notification it triggers, so sequence numbers and slug uniqueness hold
under concurrent callers.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping, Sequence
from datetime import UTC, datetime
from typing import Any, TypeVar

from pydantic import BaseModel, JsonValue, ValidationError

from mockcms.config import MockCmsConfig
from mockcms.content.models import (
    ContentRecord,
    NotificationEvent,
    Payload,
    Reference,
    VersionEntry,
)
from mockcms.content.references import ReferenceResolver, scan_payload_references
from mockcms.content.store import ContentStore
from mockcms.content.versions import VersionStore
from mockcms.errors import InvalidRequestError, NotFoundError
from mockcms.notify import Notifier, NotificationSink
from mockcms.query.filters import is_eligible_for_publishing
from mockcms.query.listing import list_content
from mockcms.query.models import (
    AutocompleteQuery,
    ListFilters,
    ListPage,
    SearchHit,
    SearchQuery,
    SearchResult,
)
from mockcms.query.search import autocomplete as run_autocomplete
from mockcms.query.search import search as run_search
from mockcms.schema.models import TypeDescriptor
from mockcms.schema.registry import TypeRegistry
from mockcms.slugs.models import Slug
from mockcms.slugs.registry import SlugRegistry

logger = logging.getLogger(__name__)

_M = TypeVar("_M", bound=BaseModel)

# Alias to avoid shadowing by Repository.list method
_list = list


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


def parse_model(model: type[_M], data: _M | Mapping[str, Any] | None) -> _M:
    """Validate request input, mapping failures to InvalidRequestError."""
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data or {})
    except ValidationError as exc:
        raise InvalidRequestError(f"invalid {model.__name__}: {exc}") from exc


class Repository:
    """Content, slugs and types for one fake content backend."""

    def __init__(
        self,
        sink: NotificationSink | None = None,
        *,
        config: MockCmsConfig | None = None,
        now: Callable[[], datetime] | None = None,
        reference_resolver: ReferenceResolver = scan_payload_references,
    ) -> None:
        self.config = config or MockCmsConfig()
        self._now = now or _utcnow
        self._lock = threading.RLock()
        self._resolve_references = reference_resolver
        self.notifier = Notifier(sink, enabled=self.config.notifications.enabled)
        self.types = TypeRegistry()
        self.versions = VersionStore(published_by=self.config.store.published_by)
        self.content = ContentStore(self.types, self.versions, self._now)
        self.slugs = SlugRegistry(self._now)
        self._user_settings: dict[str, dict[str, dict[str, JsonValue]]] = {}

    def now(self) -> datetime:
        return self._now()

    def set_sink(self, sink: NotificationSink | None) -> None:
        self.notifier.sink = sink

    def clear(self) -> None:
        """Reset to an empty baseline (types, content, slugs, settings)."""
        with self._lock:
            self.types.clear()
            self.content.clear()
            self.slugs.clear()
            self._user_settings.clear()

    # ── Types ────────────────────────────────────────────────────

    def register_type(
        self,
        descriptor: TypeDescriptor | Mapping[str, Any],
        allow_redefine: bool = False,
    ) -> TypeDescriptor:
        """Install a type and empty its containers.

        Raises ConflictError when the type exists and *allow_redefine* is
        false.
        """
        parsed = parse_model(TypeDescriptor, descriptor)
        with self._lock:
            derived = self.types.register(parsed, allow_redefine=allow_redefine)
            self.content.reset_type(derived.name)
            logger.info("Type %s registered", derived.name)
            return derived

    def add_type(self, name: str) -> TypeDescriptor:
        """Register a bare type unless it already exists."""
        with self._lock:
            known = name in self.types
            descriptor = self.types.ensure(name)
            if not known:
                self.content.reset_type(name)
            return descriptor

    def list_types(self) -> _list[TypeDescriptor]:
        with self._lock:
            return self.types.list()

    def get_type(self, name: str) -> TypeDescriptor:
        with self._lock:
            return self.types.get(name).model_copy(deep=True)

    def clear_all(self) -> None:
        """Remove every type and its content containers."""
        with self._lock:
            self.types.clear()
            self.content.clear()

    # ── Content ──────────────────────────────────────────────────

    def put(
        self,
        type_name: str,
        entity_id: str,
        payload: Payload,
        if_sequence_number: int | None = None,
        clear_working_copy: bool | None = None,
    ) -> ContentRecord:
        """Write content and send a "published" notification."""
        if clear_working_copy is None:
            clear_working_copy = self.config.store.auto_clear_working_copy
        with self._lock:
            record = self.content.put(
                type_name, entity_id, payload, if_sequence_number, clear_working_copy
            )
            self.notifier.send(type_name, entity_id, NotificationEvent.PUBLISHED)
            return record

    def get(self, type_name: str, entity_id: str) -> ContentRecord:
        with self._lock:
            return self.content.get(type_name, entity_id)

    def delete(self, type_name: str, entity_id: str) -> None:
        """Remove content and send an "unpublished" notification."""
        with self._lock:
            self.content.delete(type_name, entity_id)
            self.notifier.send(type_name, entity_id, NotificationEvent.UNPUBLISHED)

    def add_content(
        self,
        type_name: str,
        entity_id: str,
        content: Payload,
        skip_events: bool = False,
    ) -> ContentRecord:
        """Seed content, registering its type on demand."""
        with self._lock:
            if type_name not in self.types:
                self.add_type(type_name)
            record = self.content.add(type_name, entity_id, content)
            if not skip_events:
                self.notifier.send(type_name, entity_id, NotificationEvent.PUBLISHED)
            return record

    def remove_content(self, type_name: str, entity_id: str) -> None:
        """Drop seeded content without validation, notifying "unpublished"."""
        with self._lock:
            self.content.remove(type_name, entity_id)
            self.notifier.send(type_name, entity_id, NotificationEvent.UNPUBLISHED)

    def list(
        self,
        type_name: str | None = None,
        filters: ListFilters | Mapping[str, Any] | None = None,
    ) -> ListPage:
        """List one type, or every type deduplicated by id."""
        parsed = parse_model(ListFilters, filters)
        if parsed.size is None and self.config.store.default_list_size is not None:
            parsed = parsed.model_copy(update={"size": self.config.store.default_list_size})
        with self._lock:
            if type_name is not None:
                self.types.get(type_name)
            records = self.content.records(type_name)
            descriptors = {t.name: t for t in self.types.list()}
        return list_content(records, descriptors, parsed, self._now())

    # ── Working copies ───────────────────────────────────────────

    def put_working_copy(self, type_name: str, entity_id: str, payload: Payload) -> Payload:
        with self._lock:
            return self.content.put_working_copy(type_name, entity_id, payload)

    def add_working_copy(self, type_name: str, entity_id: str, payload: Payload) -> Payload:
        with self._lock:
            if type_name not in self.types:
                self.add_type(type_name)
            return self.content.add_working_copy(type_name, entity_id, payload)

    def get_working_copy(self, type_name: str, entity_id: str) -> Payload:
        with self._lock:
            return self.content.get_working_copy(type_name, entity_id)

    def delete_working_copy(self, type_name: str, entity_id: str) -> None:
        with self._lock:
            self.content.delete_working_copy(type_name, entity_id)

    def has_working_copy(self, type_name: str, entity_id: str) -> bool:
        with self._lock:
            return self.content.has_working_copy(type_name, entity_id)

    # ── References ───────────────────────────────────────────────

    def add_reference(self, type_name: str, entity_id: str, reference: Reference | Mapping[str, Any]) -> None:
        parsed = parse_model(Reference, reference)
        with self._lock:
            self.content.add_reference(type_name, entity_id, parsed)

    def referenced_by(self, type_name: str, entity_id: str) -> _list[Reference]:
        """Explicit edges first, then whatever the resolver finds.

        Raises NotFoundError when the content itself does not exist.
        """
        with self._lock:
            target = self.content.get(type_name, entity_id)
            explicit = self.content.explicit_references(type_name, entity_id)
            corpus = self.content.records()
        refs = explicit + [r for r in self._resolve_references(target, corpus) if r not in explicit]
        return refs

    # ── Versions ─────────────────────────────────────────────────

    def list_versions(self, type_name: str, entity_id: str) -> _list[VersionEntry]:
        with self._lock:
            self.content.check(type_name, entity_id)
            return self.versions.list_versions(type_name, entity_id)

    def get_version(self, type_name: str, entity_id: str, sequence_number: int) -> ContentRecord:
        with self._lock:
            self.content.check(type_name, entity_id)
            return self.versions.get_version(type_name, entity_id, sequence_number)

    # ── Slugs ────────────────────────────────────────────────────

    def request_slug(self, payload: Mapping[str, Any]) -> Slug:
        """Assign a path, then notify "published" for eligible target content."""
        with self._lock:
            slug, created = self.slugs.request(dict(payload))
            if self.config.slugs.notify_on_request:
                target = self.content.find(slug.value_type, slug.value)
                descriptor = self.types.find(slug.value_type)
                if target is not None and is_eligible_for_publishing(target, descriptor, self._now()):
                    self.notifier.send(slug.value_type, slug.value, NotificationEvent.PUBLISHED)
            logger.debug("Slug request for %s resolved (created=%s)", slug.path, created)
            return slug

    def add_path(self, slug: Mapping[str, Any] | Slug) -> Slug:
        with self._lock:
            return self.slugs.add_path(slug)

    def remove_path(self, channel: str | None, value: str, path: str) -> int:
        with self._lock:
            return self.slugs.remove_paths(channel, value, path)

    def get_slug(self, slug_id: str) -> Slug:
        with self._lock:
            return self.slugs.get(slug_id)

    def delete_slug(self, slug_id: str) -> Slug:
        with self._lock:
            return self.slugs.delete(slug_id)

    def slugs_by_value(self, value: str) -> _list[Slug]:
        with self._lock:
            return self.slugs.by_value(value)

    def slugs_by_values(self, values: Sequence[str] | None) -> dict[str, _list[Slug]]:
        with self._lock:
            return self.slugs.by_values(values)

    def search_slugs(
        self,
        channel: str | None = None,
        path: str | None = None,
        value_type: str | None = None,
        value: str | None = None,
    ) -> _list[Slug]:
        with self._lock:
            return self.slugs.search(channel=channel, path=path, value_type=value_type, value=value)

    # ── Search ───────────────────────────────────────────────────

    def search(
        self,
        query: SearchQuery | Mapping[str, Any] | None = None,
        type_name: str | None = None,
    ) -> SearchResult:
        """Search the whole corpus, or one type when *type_name* is given."""
        parsed = parse_model(SearchQuery, query)
        with self._lock:
            if type_name is not None:
                self.types.get(type_name)
            records = self.content.records(type_name)
        return run_search(records, parsed, self.config.store.default_search_size)

    def autocomplete(
        self,
        type_name: str,
        query: AutocompleteQuery | Mapping[str, Any],
    ) -> _list[SearchHit]:
        parsed = parse_model(AutocompleteQuery, query)
        with self._lock:
            self.types.get(type_name)
            records = self.content.records(type_name)
        return run_autocomplete(records, parsed)

    # ── User settings ────────────────────────────────────────────

    def put_user_setting(self, user_id: str, type_name: str, key: str, value: JsonValue) -> JsonValue:
        with self._lock:
            self._user_settings.setdefault(user_id, {}).setdefault(type_name, {})[key] = value
            return value

    def get_user_setting(self, user_id: str, type_name: str, key: str) -> JsonValue:
        """Raises NotFoundError for an unknown user, type or key."""
        with self._lock:
            try:
                return self._user_settings[user_id][type_name][key]
            except KeyError:
                raise NotFoundError(f"no setting {user_id}/{type_name}/{key}") from None

    def delete_user_setting(self, user_id: str, type_name: str, key: str) -> None:
        """Raises NotFoundError for an unknown user, type or key."""
        with self._lock:
            try:
                del self._user_settings[user_id][type_name][key]
            except KeyError:
                raise NotFoundError(f"no setting {user_id}/{type_name}/{key}") from None

    # ── Peek ─────────────────────────────────────────────────────

    def peek_content(self, type_name: str, entity_id: str) -> ContentRecord | None:
        with self._lock:
            return self.content.find(type_name, entity_id)

    def peek_paths(self) -> _list[Slug]:
        with self._lock:
            return self.slugs.peek()

    def peek_working_copy(self, type_name: str, entity_id: str) -> Payload | None:
        with self._lock:
            return self.content.peek_working_copy(type_name, entity_id)

    def peek_types(self) -> _list[str]:
        with self._lock:
            return self.types.names()
