"""mockcms: in-memory content repository for testing content-backend clients."""

from mockcms.api import ToolApi
from mockcms.config import MockCmsConfig, load_config
from mockcms.content import ContentRecord, Reference, VersionEntry
from mockcms.errors import (
    ConflictError,
    InvalidIdError,
    InvalidRequestError,
    NotFoundError,
    StoreError,
    UnknownTypeError,
)
from mockcms.notify import NotificationMessage, NotificationSink
from mockcms.repository import Repository
from mockcms.schema import TypeDescriptor
from mockcms.slugs import Slug

__version__ = "0.1.0"

__all__ = [
    "ConflictError",
    "ContentRecord",
    "InvalidIdError",
    "InvalidRequestError",
    "MockCmsConfig",
    "NotFoundError",
    "NotificationMessage",
    "NotificationSink",
    "Reference",
    "Repository",
    "Slug",
    "StoreError",
    "ToolApi",
    "TypeDescriptor",
    "UnknownTypeError",
    "VersionEntry",
    "load_config",
]
