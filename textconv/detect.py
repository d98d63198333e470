"""
Line-ending and UTF-8 BOM detection.

Both detectors read strictly forward from the current stream position and
never seek, so they work on pipes and other non-seekable sources.

Line endings are recognised by a two-state machine: a CR cannot be classified
until the following character is known, so it is held as "pending" until the
next character (or end of stream) decides between CR and CRLF.
"""

from __future__ import annotations

import logging
import os
from enum import Enum
from typing import BinaryIO, FrozenSet, Optional, TextIO

from .errors import require, require_path
from .models import BomState, LineEnding
from .rules import CR, LF, TEXT_ENCODING, UTF8_BOM
from .settings import get_settings

logger = logging.getLogger(__name__)


class _ScanState(Enum):
    IDLE = "idle"
    PENDING_CR = "pending_cr"


class LineEndingScanner:
    """Feed characters one at a time; each call reports at most one ending."""

    def __init__(self) -> None:
        self._state = _ScanState.IDLE

    @property
    def pending_cr(self) -> bool:
        return self._state is _ScanState.PENDING_CR

    def feed(self, char: str) -> Optional[LineEnding]:
        if self._state is _ScanState.PENDING_CR:
            if char == LF:
                self._state = _ScanState.IDLE
                return LineEnding.CRLF
            # The held CR is now known to be alone; `char` may open a new one.
            self._state = _ScanState.PENDING_CR if char == CR else _ScanState.IDLE
            return LineEnding.CR
        if char == CR:
            self._state = _ScanState.PENDING_CR
            return None
        if char == LF:
            return LineEnding.LF
        return None

    def finish(self) -> Optional[LineEnding]:
        """Signal end of stream; a CR still pending is a lone CR."""
        pending = self._state is _ScanState.PENDING_CR
        self._state = _ScanState.IDLE
        return LineEnding.CR if pending else None


def detect_line_ending(reader: TextIO) -> Optional[LineEnding]:
    """
    Return the first line ending in ``reader``, or None if there is none.

    Reads one character at a time and stops at the character that decides,
    so at most one character past the ending is consumed.
    """
    require(reader, "reader")
    scanner = LineEndingScanner()
    while True:
        char = reader.read(1)
        if not char:
            return scanner.finish()
        found = scanner.feed(char)
        if found is not None:
            return found


def detect_all_line_endings(reader: TextIO, chunk_size: Optional[int] = None) -> FrozenSet[LineEnding]:
    """Return every distinct line ending in ``reader``, reading it to the end once."""
    require(reader, "reader")
    size = chunk_size or get_settings().chunk_size
    scanner = LineEndingScanner()
    seen = set()
    while True:
        chunk = reader.read(size)
        if not chunk:
            break
        for char in chunk:
            found = scanner.feed(char)
            if found is not None:
                seen.add(found)
    last = scanner.finish()
    if last is not None:
        seen.add(last)
    return frozenset(seen)


def _open_text(path: str) -> TextIO:
    # newline="" keeps CR and CRLF visible; undecodable bytes cannot be endings.
    return open(path, "r", encoding=TEXT_ENCODING, errors="replace", newline="")


def detect_line_ending_in_file(path: "str | os.PathLike[str]") -> Optional[LineEnding]:
    """Like :func:`detect_line_ending`; a missing file has no line ending."""
    target = require_path(path)
    if not os.path.exists(target):
        logger.debug("no line ending in %s: file does not exist", target)
        return None
    with _open_text(target) as reader:
        found = detect_line_ending(reader)
    logger.debug("first line ending in %s: %s", target, found.name if found else None)
    return found


def detect_all_line_endings_in_file(path: "str | os.PathLike[str]") -> FrozenSet[LineEnding]:
    target = require_path(path)
    if not os.path.exists(target):
        return frozenset()
    with _open_text(target) as reader:
        return detect_all_line_endings(reader)


def detect_utf8_bom(stream: BinaryIO) -> BomState:
    """
    Classify the next three bytes of ``stream``.

    Rules:
    - no bytes at all -> INDETERMINATE (nothing to infer a convention from)
    - exactly EF BB BF -> PRESENT
    - anything else, including a one- or two-byte prefix of the BOM -> ABSENT
    """
    require(stream, "stream")
    head = _read_up_to(stream, len(UTF8_BOM))
    if not head:
        return BomState.INDETERMINATE
    if head == UTF8_BOM:
        return BomState.PRESENT
    return BomState.ABSENT


def starts_with_utf8_bom(stream: BinaryIO) -> bool:
    """Present/absent only; an empty stream counts as absent."""
    return detect_utf8_bom(stream) is BomState.PRESENT


def detect_utf8_bom_in_file(path: "str | os.PathLike[str]") -> BomState:
    target = require_path(path)
    if not os.path.exists(target):
        return BomState.INDETERMINATE
    with open(target, "rb") as stream:
        state = detect_utf8_bom(stream)
    logger.debug("utf-8 bom in %s: %s", target, state.value)
    return state


def starts_with_utf8_bom_in_file(path: "str | os.PathLike[str]") -> bool:
    return detect_utf8_bom_in_file(path) is BomState.PRESENT


def _read_up_to(stream: BinaryIO, size: int) -> bytes:
    # Raw and non-blocking streams may return short reads before EOF.
    data = b""
    while len(data) < size:
        part = stream.read(size - len(data))
        if not part:
            break
        data += part
    return data
