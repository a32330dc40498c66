"""Tests for environment capture."""

import platform
from datetime import UTC, datetime

from libcompare.environment import capture_environment


def test_fixed_timestamp() -> None:
    env = capture_environment(datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC))
    assert env.timestamp == "2024-01-02T03:04:05+00:00"


def test_describes_interpreter() -> None:
    env = capture_environment()
    assert env.python_version == platform.python_version()
    assert env.implementation == platform.python_implementation()
    assert env.os_type == platform.system()


def test_same_moment_same_value() -> None:
    moment = datetime(2024, 1, 2, tzinfo=UTC)
    assert capture_environment(moment) == capture_environment(moment)
