"""libcompare.console._rich -- Rich-based backend.

Coloured, structured terminal output using the Rich library.
"""

from __future__ import annotations

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.rule import Rule
from rich.table import Table
from rich.theme import Theme

_THEME = Theme(
    {
        "info": "blue",
        "warning": "bold yellow",
        "error": "bold red",
        "pass": "green",
        "fail": "red",
        "dim": "dim",
    }
)


class RichBackend:
    """ConsoleProtocol implementation backed by Rich."""

    def __init__(self, console: Console | None = None) -> None:
        self._con = console or Console(theme=_THEME, highlight=False)

    # -- General messages ---------------------------------------------------

    def info(self, message: str) -> None:
        self._con.print(f"  {escape(message)}", style="info")

    def warning(self, message: str) -> None:
        self._con.print(f"  ⚠ {escape(message)}", style="warning")

    def error(self, message: str) -> None:
        self._con.print(f"  ✗ {escape(message)}", style="error")

    # -- Tables ---------------------------------------------------------------

    def table(self, headers: list[str], rows: list[list[str]], *, title: str = "") -> None:
        t = Table(title=title or None, box=box.SIMPLE, show_edge=False, pad_edge=True)
        for h in headers:
            t.add_column(escape(h))
        for r in rows:
            t.add_row(*(escape(str(c)) for c in r))
        self._con.print(t)

    # -- Run lifecycle ------------------------------------------------------

    def library_result(self, lib_name: str, passing: int, attempted: int) -> None:
        style = "pass" if passing == attempted else "fail"
        self._con.print(f"  {escape(lib_name)} results: [{style}]{passing}/{attempted}[/]")

    def run_result(self, failures: int, attempted: int, report_path: str | None) -> None:
        icon = "✓" if failures == 0 else "✗"
        style = "green" if failures == 0 else "red"
        self._con.print()
        self._con.print(
            Rule(f" {icon} {attempted - failures}/{attempted} passing · {failures} failing ", style=style),
        )
        if report_path:
            self._con.print(f"  [dim]Report: {escape(report_path)}[/]")
