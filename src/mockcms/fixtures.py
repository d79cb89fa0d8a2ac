"""Fixture files: seed a repository from YAML or JSON.

A fixture is a mapping with optional ``types``, ``content``,
``workingCopies`` and ``slugs`` lists::

    types:
      - name: article
        versioned: true
    content:
      - type: article
        id: 6f1c...
        content: {attributes: {name: Hello}}
    slugs:
      - channel: web
        path: /hello
        value: 6f1c...
        valueType: article
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, JsonValue
from pydantic.alias_generators import to_camel

from mockcms.errors import StoreError
from mockcms.repository import Repository

logger = logging.getLogger(__name__)


class FixtureError(Exception):
    """Raised when a fixture file cannot be read or applied."""


class ContentFixture(BaseModel):
    type: str
    id: str
    content: dict[str, JsonValue] = Field(default_factory=dict)


class Fixture(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    types: list[dict[str, Any]] = Field(default_factory=list)
    content: list[ContentFixture] = Field(default_factory=list)
    working_copies: list[ContentFixture] = Field(default_factory=list)
    slugs: list[dict[str, Any]] = Field(default_factory=list)


def load_fixture(path: Path) -> Fixture:
    """Parse a ``.yaml``/``.yml`` or ``.json`` fixture file."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise FixtureError(f"cannot read {path}: {exc}") from exc
    try:
        if path.suffix.lower() in (".yaml", ".yml"):
            raw = yaml.safe_load(text) or {}
        else:
            raw = json.loads(text)
        return Fixture.model_validate(raw)
    except (yaml.YAMLError, json.JSONDecodeError, ValueError) as exc:
        raise FixtureError(f"invalid fixture {path}: {exc}") from exc


def apply_fixture(repository: Repository, fixture: Fixture, skip_events: bool = True) -> dict[str, int]:
    """Seed *repository*; returns counts per section."""
    try:
        for descriptor in fixture.types:
            repository.register_type(descriptor, allow_redefine=True)
        for item in fixture.content:
            repository.add_content(item.type, item.id, item.content, skip_events=skip_events)
        for item in fixture.working_copies:
            repository.add_working_copy(item.type, item.id, item.content)
        for slug in fixture.slugs:
            repository.add_path(slug)
    except StoreError as exc:
        raise FixtureError(str(exc)) from exc

    counts = {
        "types": len(fixture.types),
        "content": len(fixture.content),
        "working_copies": len(fixture.working_copies),
        "slugs": len(fixture.slugs),
    }
    logger.info("Applied fixture: %s", counts)
    return counts


def repository_from_fixture(path: Path, **repository_kwargs: Any) -> Repository:
    """Build a fresh repository seeded from *path*."""
    repository = Repository(**repository_kwargs)
    apply_fixture(repository, load_fixture(path))
    return repository
