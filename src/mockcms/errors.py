"""Error taxonomy for the content repository.

Every error carries the HTTP-ish ``status`` the facade answers with.  The
engine raises these as contractual outcomes; ``mockcms.api`` turns them
into responses and never lets them escape.
"""

from __future__ import annotations


class StoreError(Exception):
    """Base error for repository operations."""

    status: int = 500

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class InvalidIdError(StoreError):
    """Entity id does not have a UUID shape."""

    status = 400


class InvalidRequestError(StoreError):
    """Malformed request input."""

    status = 400


class UnknownTypeError(StoreError):
    """Content type has not been registered."""

    status = 404


class NotFoundError(StoreError):
    """No record, slug, version or setting at the given key."""

    status = 404


class ConflictError(StoreError):
    """Sequence number mismatch, slug collision or type redefinition."""

    status = 409
