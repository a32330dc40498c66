"""Event recordings: a run's lifecycle events as JSON lines.

Each line is one object with a ``kind`` key (the EventKind value) plus the
event's fields, e.g. ``{"kind": "fail", "description": "...", "message": "..."}``.
A recording replays into exactly the model the live run produced.
"""

from __future__ import annotations

import dataclasses
import json
from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING, Any

from libcompare.domain.errors import RecordingError
from libcompare.domain.models import (
    Event,
    EventKind,
    RunEnd,
    SuiteEnd,
    SuiteStart,
    TestFail,
    TestPass,
)

if TYPE_CHECKING:
    from libcompare.domain.protocols import EventEmitter

_EVENT_TYPES: dict[EventKind, type[Event]] = {
    EventKind.SUITE_START: SuiteStart,
    EventKind.SUITE_END: SuiteEnd,
    EventKind.TEST_PASS: TestPass,
    EventKind.TEST_FAIL: TestFail,
    EventKind.RUN_END: RunEnd,
}


def event_to_dict(event: Event) -> dict[str, str]:
    data: dict[str, str] = {"kind": event.kind.value}
    data.update(dataclasses.asdict(event))
    return data


def event_from_dict(data: dict[str, Any]) -> Event:
    """Rebuild an event from its recorded form.

    Raises KeyError or ValueError on unknown kinds and TypeError on missing
    or unexpected fields.
    """
    fields = dict(data)
    kind = EventKind(fields.pop("kind"))
    return _EVENT_TYPES[kind](**fields)


def dumps_events(events: Iterable[Event]) -> str:
    return "".join(json.dumps(event_to_dict(e), ensure_ascii=False) + "\n" for e in events)


def loads_events(text: str) -> Iterator[Event]:
    """Parse a recording, yielding events in order.

    Blank lines are skipped.

    Raises:
        RecordingError: If a line is not a valid recorded event.
    """
    for lineno, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            data = json.loads(line)
            if not isinstance(data, dict):
                msg = "not an object"
                raise TypeError(msg)
            yield event_from_dict(data)
        except (json.JSONDecodeError, KeyError, ValueError, TypeError) as exc:
            msg = f"Invalid event on line {lineno}: {exc}"
            raise RecordingError(msg) from exc


class EventRecorder:
    """Listener that keeps every event it sees, in arrival order."""

    def __init__(self) -> None:
        self._events: list[Event] = []

    def register(self, emitter: EventEmitter) -> None:
        for kind in EventKind:
            emitter.on(kind, self._events.append)

    def dumps(self) -> str:
        return dumps_events(self._events)
