"""Repository configuration loaded from .mockcms.toml and env vars.

Loading order: defaults → TOML file → env vars.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".mockcms.toml"
CONFIG_SEARCH_PATHS = [
    Path("."),
]
GLOBAL_CONFIG_PATH = Path.home() / ".config" / "mockcms" / "config.toml"


class StoreSectionConfig(BaseModel):
    """[store] section."""

    default_search_size: int = 100
    default_list_size: int | None = None
    auto_clear_working_copy: bool = False
    published_by: str = "fake-user"


class SlugsSectionConfig(BaseModel):
    """[slugs] section."""

    notify_on_request: bool = True


class NotificationsSectionConfig(BaseModel):
    """[notifications] section."""

    enabled: bool = True


class MockCmsConfig(BaseModel):
    """Top-level configuration for a repository instance."""

    store: StoreSectionConfig = Field(default_factory=StoreSectionConfig)
    slugs: SlugsSectionConfig = Field(default_factory=SlugsSectionConfig)
    notifications: NotificationsSectionConfig = Field(default_factory=NotificationsSectionConfig)


def load_config(path: str | Path | None = None) -> MockCmsConfig:
    """Load configuration from a TOML file.

    Search order:
    1. Explicit path (if provided)
    2. .mockcms.toml in CWD
    3. ~/.config/mockcms/config.toml

    Then overlay environment variables.
    """
    data: dict[str, object] = {}

    if path is not None:
        toml_path = Path(path)
        if toml_path.exists():
            data = _load_toml(toml_path)
        else:
            logger.warning("Config file not found: %s", toml_path)
    else:
        for search_dir in CONFIG_SEARCH_PATHS:
            candidate = search_dir / CONFIG_FILENAME
            if candidate.exists():
                data = _load_toml(candidate)
                logger.info("Loaded config from %s", candidate)
                break
        if not data and GLOBAL_CONFIG_PATH.exists():
            data = _load_toml(GLOBAL_CONFIG_PATH)
            logger.info("Loaded config from %s", GLOBAL_CONFIG_PATH)

    try:
        config = MockCmsConfig.model_validate(data) if data else MockCmsConfig()
    except ValidationError as exc:
        logger.warning("Invalid config, using defaults: %s", exc)
        config = MockCmsConfig()

    return _apply_env_vars(config)


def _load_toml(path: Path) -> dict[str, object]:
    """Load a TOML file and return the data dict."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as exc:
        logger.warning("Failed to parse %s: %s", path, exc)
        return {}


def _apply_env_vars(config: MockCmsConfig) -> MockCmsConfig:
    """Apply environment variable overrides to config."""
    data = config.model_dump()

    env_mapping: dict[str, tuple[str, str]] = {
        "MOCKCMS_SEARCH_SIZE": ("store", "default_search_size"),
        "MOCKCMS_LIST_SIZE": ("store", "default_list_size"),
        "MOCKCMS_AUTO_CLEAR_WORKING_COPY": ("store", "auto_clear_working_copy"),
        "MOCKCMS_PUBLISHED_BY": ("store", "published_by"),
        "MOCKCMS_SLUG_NOTIFICATIONS": ("slugs", "notify_on_request"),
        "MOCKCMS_NOTIFICATIONS": ("notifications", "enabled"),
    }

    for env_var, (section, field) in env_mapping.items():
        value = os.environ.get(env_var)
        if value is not None:
            data[section][field] = value

    try:
        return MockCmsConfig.model_validate(data)
    except ValidationError as exc:
        logger.warning("Ignoring invalid MOCKCMS_* environment overrides: %s", exc)
        return config
