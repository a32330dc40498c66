"""libcompare.console._protocol -- ConsoleProtocol definition.

Pure standard-library typing.Protocol. No external dependencies allowed in
this file.
"""

from __future__ import annotations

from typing import Protocol


class ConsoleProtocol(Protocol):
    """Terminal output protocol.

    **General messages** -- usable from any module::

        console.info("Found 6 libraries")
        console.warning("Orphan test dropped")
        console.error("Nothing to report on")

    **Tables**::

        console.table(["Library", "Passing"], [["pickle", "38/42"]], title="Results")

    **Run lifecycle** -- used by the CLI::

        console.library_result("pickle", 38, 42)
        console.run_result(4, 200, "docs/report.html")
    """

    # -- General messages ---------------------------------------------------

    def info(self, message: str) -> None:
        """Informational message."""
        ...

    def warning(self, message: str) -> None:
        """Warning message."""
        ...

    def error(self, message: str) -> None:
        """Error message."""
        ...

    # -- Tables ---------------------------------------------------------------

    def table(self, headers: list[str], rows: list[list[str]], *, title: str = "") -> None:
        """Display a table with *headers* and *rows*."""
        ...

    # -- Run lifecycle ------------------------------------------------------

    def library_result(self, lib_name: str, passing: int, attempted: int) -> None:
        """Display one library's ``passing/attempted`` tally."""
        ...

    def run_result(self, failures: int, attempted: int, report_path: str | None) -> None:
        """Display the end-of-run summary line."""
        ...
