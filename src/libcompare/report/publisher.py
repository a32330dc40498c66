"""Publisher: renders a finished run and persists the document."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from libcompare.report.renderer import DEFAULT_TITLE, render_report

if TYPE_CHECKING:
    from libcompare.domain.models import ComparisonRun, TestEnvironment
    from libcompare.domain.protocols import FileSystemPort

logger = logging.getLogger("libcompare.report")


class ReportPublisher:
    """Writes the rendered report to ``<output_dir>/<report_file>``.

    Constructor-injected FileSystemPort handles all file I/O.
    This class contains only rendering and path logic.
    """

    def __init__(
        self,
        fs: FileSystemPort,
        *,
        output_dir: str = "docs",
        report_file: str = "report.html",
        title: str = DEFAULT_TITLE,
        expand_first: bool = False,
    ) -> None:
        self._fs = fs
        self._output_dir = output_dir
        self._report_file = report_file
        self._title = title
        self._expand_first = expand_first

    @property
    def report_path(self) -> str:
        return f"{self._output_dir}/{self._report_file}"

    def publish(self, run: ComparisonRun, environment: TestEnvironment | None = None) -> str:
        """Render *run* and write it. Returns the path written.

        Raises NothingToReportError, before touching the filesystem, if the run
        compared no libraries.
        """
        document = render_report(
            run.entries,
            environment,
            title=self._title,
            expand_first=self._expand_first,
        )
        self._fs.make_directory(self._output_dir)
        self._fs.write_file(self.report_path, document)
        logger.info("Wrote comparison report: %s", self.report_path)
        return self.report_path
