"""\
Exceptions
==========

Author: Akshay Mestry <xa@mes3.dev>
Created on: Saturday, August 02 2025
Last updated on: Sunday, October 18 2026

This module provides the error classes raised by the framework itself.
None of them are raised by the classification API, which is total over
its inputs; they surface from configuration, metadata, hook and store
misuse only.
"""

from __future__ import annotations


__all__: tuple[str, ...] = (
    "ConfigValidationError",
    "FaultlineError",
    "HookError",
    "MetadataError",
    "StoreError",
    "ValidationError",
)

Error = Exception


class FaultlineError(Error):
    """Base error class for all exceptions."""


class ValidationError(FaultlineError):
    """Errors related to validation check failure."""


class ConfigValidationError(ValidationError):
    """Errors related to configuration validation failure."""


class MetadataError(FaultlineError):
    """Errors related to writes on the error metadata side-channel."""


class HookError(FaultlineError):
    """Errors related to installing or removing process-wide hooks."""


class StoreError(FaultlineError):
    """Errors related to persisting or reading captured errors."""
