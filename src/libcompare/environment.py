"""Capture a descriptor of the machine and interpreter a run happened on."""

from __future__ import annotations

import platform
from datetime import UTC, datetime

from libcompare.domain.models import TestEnvironment


def capture_environment(now: datetime | None = None) -> TestEnvironment:
    """Describe the current interpreter and OS.

    Args:
        now: Timestamp to record; defaults to the current UTC time. Passing a
            fixed value makes the rendered report reproducible.
    """
    moment = now if now is not None else datetime.now(UTC)
    return TestEnvironment(
        timestamp=moment.isoformat(),
        python_version=platform.python_version(),
        implementation=platform.python_implementation(),
        os_arch=platform.machine(),
        os_platform=platform.platform(),
        os_release=platform.release(),
        os_type=platform.system(),
    )
