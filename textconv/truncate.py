"""
Remove bytes from the front of a file in place.

Most filesystems cannot drop bytes from the start of a file, so the tail is
held in memory and written back over the start. Memory use is proportional to
the size of what remains; this is meant for stripping a known-size header,
not for rotating large logs.
"""

from __future__ import annotations

import io
import logging
import os
import shutil

from .errors import InvalidValueError, TruncateTargetMissingError, require, require_path

logger = logging.getLogger(__name__)


def truncate_front(path: "str | os.PathLike[str]", count: int) -> None:
    target = require_path(path)
    require(count, "count")
    if count < 0:
        raise InvalidValueError(f"count must not be negative: {count}")
    if not os.path.exists(target):
        raise TruncateTargetMissingError(target)
    if count == 0:
        return

    with open(target, "r+b") as stream, io.BytesIO() as tail:
        stream.seek(count)
        shutil.copyfileobj(stream, tail)
        size = tail.tell()
        tail.seek(0)
        stream.seek(0)
        stream.truncate(size)
        shutil.copyfileobj(tail, stream)
    logger.info("removed %d leading bytes from %s, %d remain", count, target, size)
