"""\
Filesystem utility objects
==========================

Author: Akshay Mestry <xa@mes3.dev>
Created on: Wednesday, July 30 2025
Last updated on: Sunday, October 18 2026

This module provides the filesystem helpers used by the configuration
to prepare the directory of the log files.
"""

from __future__ import annotations

from pathlib import Path

__all__: tuple[str, ...] = ("mkdir",)


def mkdir(path: str | Path) -> str:
    """Create a directory and its parents if they do not exist.

    :param path: Directory to create.
    :return: The path, as a string, so it can be used as a truthy
        configuration check.
    """
    Path(path).mkdir(parents=True, exist_ok=True)
    return str(path)
