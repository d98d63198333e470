"""Lazy line reading over any text stream."""

from __future__ import annotations

import re
from typing import Iterator, Optional, TextIO

from .errors import require
from .rules import CR
from .settings import get_settings

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def read_all_lines(reader: TextIO, chunk_size: Optional[int] = None) -> Iterator[str]:
    """
    Yield each line of ``reader`` without its terminator.

    CR, LF and CRLF all end a line, whatever newline mode the stream was
    opened with. A terminator at the very end does not produce a trailing
    empty line. The generator can only be restarted by reopening the source.
    """
    require(reader, "reader")
    return _read_all_lines(reader, chunk_size or get_settings().chunk_size)


def _read_all_lines(reader: TextIO, chunk_size: int) -> Iterator[str]:
    pending = ""
    while True:
        chunk = reader.read(chunk_size)
        if not chunk:
            break
        pending += chunk
        # A CR at the end of the buffer may be half of a CRLF split across reads.
        end = len(pending) - 1 if pending.endswith(CR) else len(pending)
        start = 0
        for match in _LINE_BREAK.finditer(pending, 0, end):
            yield pending[start:match.start()]
            start = match.end()
        pending = pending[start:]

    start = 0
    for match in _LINE_BREAK.finditer(pending):
        yield pending[start:match.start()]
        start = match.end()
    if start < len(pending):
        yield pending[start:]
