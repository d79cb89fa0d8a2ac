"""Notification sink: published/unpublished change messages.

The sink is any callable taking a ``NotificationMessage``.  It runs inside
the mutating operation, so a caller that sees the operation return also
sees the notification delivered.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable

from pydantic import BaseModel, Field

from mockcms.content.models import NotificationEvent

logger = logging.getLogger(__name__)


class NotificationMessage(BaseModel):
    """Pub/sub style message; ``data`` is the UTF-8 JSON of the event."""

    id: str
    type: str
    event: NotificationEvent
    data: bytes
    attributes: dict[str, str] = Field(default_factory=dict)

    def payload(self) -> dict[str, str]:
        return json.loads(self.data)


NotificationSink = Callable[[NotificationMessage], object]


class Notifier:
    """Sends messages to an optional sink, logging sink failures."""

    def __init__(self, sink: NotificationSink | None = None, enabled: bool = True) -> None:
        self.sink = sink
        self.enabled = enabled

    def send(self, type_name: str, entity_id: str, event: NotificationEvent) -> NotificationMessage | None:
        """Deliver one message; returns it, or None when nothing was sent."""
        if self.sink is None or not self.enabled:
            return None
        message = NotificationMessage(
            id=entity_id,
            type=type_name,
            event=event,
            data=json.dumps({"event": event.value, "type": type_name, "id": entity_id}).encode(),
        )
        try:
            self.sink(message)
        except Exception:
            logger.warning(
                "Notification sink failed for %s %s/%s", event.value, type_name, entity_id,
                exc_info=True,
            )
        return message
