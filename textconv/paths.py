from __future__ import annotations

import os
import re
from typing import List

from .errors import InvalidValueError, require

# Both separators are honoured on every host.
_SEPARATORS = re.compile(r"[\\/]+")


def split_path(path: str) -> List[str]:
    """Split ``path`` at ``/`` or ``\\``, dropping empty components."""
    require(path, "path")
    return [part for part in _SEPARATORS.split(os.fspath(path)) if part]


def is_descendant_of(path: str, possible_ancestor: str) -> bool:
    """
    Whether ``path`` lies strictly below ``possible_ancestor``.

    Only components are compared (case-sensitively); whether either path is
    absolute is ignored.
    """
    require(path, "path")
    require(possible_ancestor, "possible_ancestor")
    parts = split_path(path)
    ancestor = split_path(possible_ancestor)
    if len(parts) <= len(ancestor):
        return False
    return parts[: len(ancestor)] == ancestor


def path_from_ancestor(path: str, ancestor: str) -> str:
    """Relative path from ``ancestor`` down to ``path``, joined with ``os.sep``."""
    require(path, "path")
    require(ancestor, "ancestor")
    if not is_descendant_of(path, ancestor):
        raise InvalidValueError(f"{path!r} is not a descendant of {ancestor!r}")
    return os.path.join(*split_path(path)[len(split_path(ancestor)):])
