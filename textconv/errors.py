"""Exceptions raised by textconv before any I/O is attempted.

Failures from the host filesystem are not wrapped: callers see the original
``OSError``.
"""

from __future__ import annotations

import os
from typing import Any


class TextConventionError(Exception):
    """Base class for argument and usage errors."""


class MissingArgumentError(TextConventionError, TypeError):
    def __init__(self, name: str) -> None:
        super().__init__(f"{name} is required")
        self.name = name


class InvalidValueError(TextConventionError, ValueError):
    pass


class UsageError(TextConventionError):
    """The target is in a state the operation has no outcome for."""


class TruncateTargetMissingError(UsageError):
    def __init__(self, path: str) -> None:
        super().__init__(f"cannot truncate missing file: {path}")
        self.path = path


def require(value: Any, name: str) -> Any:
    if value is None:
        raise MissingArgumentError(name)
    return value


def require_path(path: Any, name: str = "path") -> str:
    """Return ``path`` as a string, rejecting ``None`` and blank paths."""
    require(path, name)
    text = os.fspath(path)
    if isinstance(text, bytes):
        text = os.fsdecode(text)
    if not text.strip():
        raise InvalidValueError(f"{name} is empty or whitespace-only")
    return text
