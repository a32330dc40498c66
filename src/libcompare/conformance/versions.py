"""Version labels for the libraries under comparison."""

from __future__ import annotations

import platform
from importlib import metadata


def library_version(distribution: str | None = None) -> str:
    """Installed version of *distribution*; the interpreter version for stdlib.

    Returns an empty string when the distribution is not installed.
    """
    if distribution is None:
        return platform.python_version()
    try:
        return metadata.version(distribution)
    except metadata.PackageNotFoundError:
        return ""


def library_label(name: str, distribution: str | None = None) -> str:
    """Display name annotated with the version, e.g. ``"yaml v6.0.2"``."""
    version = library_version(distribution)
    return f"{name} v{version}" if version else name
