"""libcompare.console._plain -- Plain-text backend.

print()-based output with no external dependencies. Used when stdout is
not a TTY or when plain output is requested.
"""

from __future__ import annotations


class PlainBackend:
    """ConsoleProtocol implementation using only built-in print()."""

    # -- General messages ---------------------------------------------------

    def info(self, message: str) -> None:
        print(f"  {message}")

    def warning(self, message: str) -> None:
        print(f"  [warn] {message}")

    def error(self, message: str) -> None:
        print(f"  [error] {message}")

    # -- Tables ---------------------------------------------------------------

    def table(self, headers: list[str], rows: list[list[str]], *, title: str = "") -> None:
        if title:
            print(f"\n  {title}:")

        if not headers and not rows:
            return

        # Calculate column widths
        all_rows = [headers, *rows]
        col_widths = [
            max(len(str(row[i])) if i < len(row) else 0 for row in all_rows)
            for i in range(len(headers))
        ]

        header_line = "  " + "  ".join(
            h.ljust(w) for h, w in zip(headers, col_widths, strict=True)
        )
        print(header_line)
        print("  " + "  ".join("-" * w for w in col_widths))

        for row in rows:
            cells = [
                str(row[i]).ljust(col_widths[i]) if i < len(row) else " " * col_widths[i]
                for i in range(len(headers))
            ]
            print("  " + "  ".join(cells))

    # -- Run lifecycle ------------------------------------------------------

    def library_result(self, lib_name: str, passing: int, attempted: int) -> None:
        print(f"  {lib_name} results: {passing}/{attempted}")

    def run_result(self, failures: int, attempted: int, report_path: str | None) -> None:
        icon = "✓" if failures == 0 else "✗"
        print()
        print(f"━━ {icon} {attempted - failures}/{attempted} passing, {failures} failing ━━")
        if report_path:
            print(f"  Report: {report_path}")
