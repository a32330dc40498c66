"""Port interfaces for libcompare.

All ports are defined as typing.Protocol; any class with matching method
signatures satisfies them without inheritance.

This module has ZERO external imports, only stdlib and typing.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from libcompare.domain.models import ComparisonRun, EventKind

Handler = Callable[..., None]
CompletionCallback = Callable[["ComparisonRun"], None]
Cloner = Callable[[Any], Any]


class EventEmitter(Protocol):
    """Anything a listener can subscribe to, one handler per event kind."""

    def on(self, kind: EventKind, handler: Handler) -> None:
        """Register *handler* for events of *kind*."""
        ...


class FileSystemPort(Protocol):
    """Abstraction over the file operations needed to persist a report."""

    def read_file(self, path: str) -> str:
        """Read and return the contents of a file."""
        ...

    def write_file(self, path: str, content: str) -> None:
        """Write content to a file, creating parent directories as needed."""
        ...

    def make_directory(self, path: str) -> None:
        """Create a directory (and parents) if it doesn't exist."""
        ...
