"""libcompare.console -- terminal output for the harness.

Usage (any module)::

    from libcompare.console import console

    console.info("Running conformance suite")
    console.table(["Library", "Passing"], [["copy.deepcopy", "40/42"]])

Configuration (call once in ``cli.py:main()``)::

    from libcompare.console import configure

    configure(backend="auto")  # "rich" | "plain" | "auto"
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from libcompare.console._plain import PlainBackend

if TYPE_CHECKING:
    from libcompare.console._protocol import ConsoleProtocol

# ---------------------------------------------------------------------------
# Global singleton -- defaults to PlainBackend
# ---------------------------------------------------------------------------

_backend: ConsoleProtocol = PlainBackend()


def configure(*, backend: str = "auto") -> None:
    """Select the console backend.

    Should be called **once** at startup (in ``cli.py:main()``).

    Args:
        backend: ``"rich"`` -- always use Rich.
                 ``"plain"`` -- always use plain text.
                 ``"auto"`` (default) -- Rich when stdout is a TTY, plain
                 otherwise.
    """
    global _backend  # noqa: PLW0603

    if backend == "auto":
        backend = "rich" if sys.stdout.isatty() else "plain"

    if backend == "plain":
        _backend = PlainBackend()
    elif backend == "rich":
        from libcompare.console._rich import RichBackend

        _backend = RichBackend()
    else:
        msg = f"Unknown console backend: {backend!r}"
        raise ValueError(msg)


def get_console() -> ConsoleProtocol:
    """Return the current backend instance."""
    return _backend


# ---------------------------------------------------------------------------
# Proxy object -- ``from libcompare.console import console``
# ---------------------------------------------------------------------------


class _ConsoleProxy:
    """Transparent proxy that delegates to the current ``_backend``.

    This lets callers import ``console`` once at module level and
    automatically pick up any later ``configure()`` call.
    """

    def __getattr__(self, name: str) -> object:
        return getattr(_backend, name)


console: ConsoleProtocol = _ConsoleProxy()  # type: ignore[assignment]
