"""Slug registry: channel-scoped paths for content."""

from mockcms.slugs.models import Slug, SlugRequest
from mockcms.slugs.registry import SlugRegistry

__all__ = ["Slug", "SlugRegistry", "SlugRequest"]
