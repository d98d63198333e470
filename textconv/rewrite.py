"""
Convention-preserving rewrites of whole text files.

Rules:
- An existing file's conventions win over the caller's: its first line ending
  and its BOM are kept. The caller's values only fill in what cannot be
  detected (no line endings, or an empty file).
- A file that does not exist yet is written with the caller's convention.
- The convention is resolved once, before the file is truncated.
- Writes truncate then stream. An I/O failure part way through can leave a
  partially written file; it is not retried or rolled back.
"""

from __future__ import annotations

import logging
import os
from typing import Iterable, List, Optional

from .detect import detect_line_ending_in_file, detect_utf8_bom_in_file
from .errors import InvalidValueError, require, require_path
from .lines import read_all_lines
from .models import Convention, LineEnding
from .normalize import write_lines
from .rules import TEXT_ENCODING_WITH_BOM
from .settings import get_settings

logger = logging.getLogger(__name__)


def resolve_convention(path: "str | os.PathLike[str]", fallback: Convention) -> Convention:
    """The convention a write to ``path`` must use."""
    target = require_path(path)
    require(fallback, "fallback")
    if not os.path.exists(target):
        logger.debug("%s does not exist, using %s", target, fallback)
        return fallback
    resolved = Convention.from_detection(
        detect_line_ending_in_file(target),
        detect_utf8_bom_in_file(target),
        fallback,
    )
    logger.debug("resolved convention for %s: %s", target, resolved)
    return resolved


def rewrite_all_lines(
    path: "str | os.PathLike[str]",
    lines: Iterable[str],
    line_ending: Optional[LineEnding] = None,
    with_bom: Optional[bool] = None,
) -> Convention:
    """
    Create or replace ``path`` with ``lines``.

    ``line_ending`` and ``with_bom`` only apply when the file is new or its
    convention cannot be detected; they default to the configured values.
    Returns the convention that was written.
    """
    target = require_path(path)
    require(lines, "lines")
    if isinstance(lines, str):
        raise InvalidValueError("lines must be an iterable of strings, not a single string")
    fallback = get_settings().default_convention()
    if line_ending is not None or with_bom is not None:
        fallback = Convention(
            line_ending=line_ending if line_ending is not None else fallback.line_ending,
            has_bom=with_bom if with_bom is not None else fallback.has_bom,
        )

    convention = resolve_convention(target, fallback)
    with open(target, "wb") as stream:
        count = write_lines(stream, lines, convention)
    logger.info(
        "rewrote %s: %d lines, %s%s",
        target,
        count,
        convention.line_ending.name,
        " with BOM" if convention.has_bom else "",
    )
    return convention


def read_lines(path: "str | os.PathLike[str]") -> List[str]:
    """Every line of an existing file, BOM and terminators removed."""
    target = require_path(path)
    with open(target, "r", encoding=TEXT_ENCODING_WITH_BOM, newline="") as reader:
        return list(read_all_lines(reader))


def append_lines(path: "str | os.PathLike[str]", *lines: str) -> Convention:
    """
    Add ``lines`` to the end of an existing file.

    Not an incremental append: every existing line is read, the new lines are
    added, and the whole file is rewritten under its own convention.
    """
    target = require_path(path)
    for line in lines:
        require(line, "lines")
    existing = read_lines(target)
    return rewrite_all_lines(target, existing + list(lines))