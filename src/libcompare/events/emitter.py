"""In-process event emitter used by runner adapters and replays."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from libcompare.domain.models import Event, EventKind
    from libcompare.domain.protocols import Handler

logger = logging.getLogger("libcompare.events")


class Emitter:
    """Dispatches each event to the handlers registered for its kind.

    Handlers run synchronously, in registration order. An exception raised by
    a handler propagates to the caller of ``emit``.
    """

    def __init__(self) -> None:
        self._handlers: dict[EventKind, list[Handler]] = {}

    def on(self, kind: EventKind, handler: Handler) -> None:
        self._handlers.setdefault(kind, []).append(handler)

    def emit(self, event: Event) -> None:
        handlers = self._handlers.get(event.kind, [])
        if not handlers:
            logger.debug("No handler for %s", event.kind.value)
        for handler in handlers:
            handler(event)

    def emit_all(self, events: Iterable[Event]) -> None:
        """Emit a whole stream in order."""
        for event in events:
            self.emit(event)
