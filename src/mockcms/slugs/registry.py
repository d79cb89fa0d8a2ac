"""Slug registry: channel-scoped path uniqueness with reverse lookup.

At most one slug may bind a (channel, path) pair.  Requesting the exact
same binding again is a no-op; requesting the path for a different value
is a conflict.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import datetime

from pydantic import ValidationError

from mockcms.errors import ConflictError, InvalidRequestError, NotFoundError
from mockcms.slugs.models import Slug, SlugRequest

logger = logging.getLogger(__name__)


class SlugRegistry:
    """Ordered collection of slugs."""

    def __init__(self, now: Callable[[], datetime]) -> None:
        self._now = now
        self._slugs: list[Slug] = []

    # ── Private helpers ──────────────────────────────────────────

    def _find_path(self, channel: str | None, path: str) -> Slug | None:
        for slug in self._slugs:
            if slug.channel == channel and slug.path == path:
                return slug
        return None

    def _index(self, slug_id: str) -> int:
        for i, slug in enumerate(self._slugs):
            if slug.id == slug_id:
                return i
        raise NotFoundError(f"slug {slug_id!r} not found")

    # ── Write operations ─────────────────────────────────────────

    def request(self, payload: dict[str, object] | SlugRequest) -> tuple[Slug, bool]:
        """Resolve a slug request.

        Returns the assigned slug and whether it was newly created.
        Raises InvalidRequestError for malformed bodies and ConflictError
        when the path is bound to a different value in the channel.
        """
        try:
            req = payload if isinstance(payload, SlugRequest) else SlugRequest.model_validate(payload)
        except ValidationError as exc:
            raise InvalidRequestError(f"invalid slug request: {exc}") from exc

        path = req.resolved_path
        if not path or not req.value or not req.value_type:
            raise InvalidRequestError("desiredPath, value and valueType are required")
        if req.publish_time == "":
            raise InvalidRequestError("publishTime must not be empty")
        channel = req.resolved_channel

        existing = self._find_path(channel, path)
        if existing is not None:
            if not existing.same_target(req.value, req.value_type):
                raise ConflictError(f"{path!r} is taken in channel {channel!r}")
            logger.debug("Slug %s already assigned to %s", path, req.value)
            return existing.model_copy(), False

        try:
            slug = Slug(
                channel=channel,
                path=path,
                value=req.value,
                value_type=req.value_type,
                publish_time=req.publish_time if req.publish_time is not None else self._now(),
            )
        except ValidationError as exc:
            raise InvalidRequestError(f"invalid publishTime: {req.publish_time!r}") from exc
        self._slugs.append(slug)
        logger.debug("Assigned slug %s in %s to %s", path, channel, req.value)
        return slug.model_copy(), True

    def add_path(self, payload: dict[str, object] | Slug) -> Slug:
        """Seed a slug directly, bypassing conflict detection."""
        if isinstance(payload, dict):
            if "channels" in payload:
                raise InvalidRequestError("slug.channels is deprecated, use slug.channel instead")
            data = dict(payload)
            if not data.get("publishTime") and not data.get("publish_time"):
                data["publishTime"] = self._now()
            try:
                slug = Slug.model_validate(data)
            except ValidationError as exc:
                raise InvalidRequestError(f"invalid slug: {exc}") from exc
        else:
            slug = payload
        self._slugs.append(slug)
        return slug.model_copy()

    def remove_paths(self, channel: str | None, value: str, path: str) -> int:
        """Remove every slug matching (channel, value, path); returns the count."""
        before = len(self._slugs)
        self._slugs = [
            s for s in self._slugs
            if not (s.channel == channel and s.value == value and s.path == path)
        ]
        return before - len(self._slugs)

    def delete(self, slug_id: str) -> Slug:
        """Raises NotFoundError if no slug has *slug_id*."""
        return self._slugs.pop(self._index(slug_id))

    def clear(self) -> None:
        self._slugs.clear()

    # ── Read operations ──────────────────────────────────────────

    def get(self, slug_id: str) -> Slug:
        """Raises NotFoundError if no slug has *slug_id*."""
        return self._slugs[self._index(slug_id)].model_copy()

    def by_value(self, value: str) -> list[Slug]:
        """Slugs pointing at *value*, most recently published first."""
        matches = [s.model_copy() for s in self._slugs if s.value == value]
        matches.sort(key=lambda s: s.publish_time, reverse=True)
        return matches

    def by_values(self, values: Sequence[str] | None) -> dict[str, list[Slug]]:
        """Map each requested value to its slugs.

        Raises InvalidRequestError unless *values* is a list of strings.
        """
        if values is None:
            raise InvalidRequestError("values is required")
        if not isinstance(values, (list, tuple)) or not all(isinstance(v, str) for v in values):
            raise InvalidRequestError("values must be a list of strings")
        result: dict[str, list[Slug]] = {v: [] for v in values}
        for slug in self._slugs:
            if slug.value in result:
                result[slug.value].append(slug.model_copy())
        return result

    def search(
        self,
        channel: str | None = None,
        path: str | None = None,
        value_type: str | None = None,
        value: str | None = None,
    ) -> list[Slug]:
        """Exact-match conjunction over the filters that were given."""
        results: list[Slug] = []
        for slug in self._slugs:
            if channel is not None and slug.channel != channel:
                continue
            if path is not None and slug.path != path:
                continue
            if value_type is not None and slug.value_type != value_type:
                continue
            if value is not None and slug.value != value:
                continue
            results.append(slug.model_copy())
        return results

    def peek(self) -> list[Slug]:
        return [s.model_copy() for s in self._slugs]
