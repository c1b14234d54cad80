"""
Error types shared by the store, the request handlers and the CLI.

The CLI maps each family to its own exit code, so callers should raise the
most specific class that applies:

- ValidationError: the request itself is wrong (missing field, bad enum, bad id)
- NotFoundError: the request is fine but the class/schedule does not exist
- StoreError: the data file could not be read or written (retryable)
"""

from __future__ import annotations


class ClassCalError(Exception):
    """Base class for all errors raised by classcal."""


class ValidationError(ClassCalError):
    pass


class TimeFormatError(ValidationError):
    """
    A time value is malformed, or start/end mix bare times with full timestamps.
    """


class NotFoundError(ClassCalError):
    pass


class StoreError(ClassCalError):
    pass
