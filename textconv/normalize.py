"""
Line normalisation and the encoding loop shared by every writer.

Responsibilities:
- rewrite embedded CR / LF / CRLF runs inside a line to one target ending
- count newline styles in a text (for reports)
- emit lines to a binary stream under a resolved Convention
- inspect and convert UTF-8 payloads held in memory
"""

from __future__ import annotations

import base64
import hashlib
import io
import logging
import re
from typing import Any, BinaryIO, Dict, Iterable, Optional, Tuple

from charset_normalizer import from_bytes

from .detect import detect_all_line_endings, detect_line_ending, detect_utf8_bom
from .errors import InvalidValueError, require
from .lines import read_all_lines
from .models import Convention, LineEnding
from .rules import TEXT_ENCODING, TEXT_ENCODING_WITH_BOM, UTF8_BOM

logger = logging.getLogger(__name__)

_LINE_BREAK = re.compile(r"\r\n|\r|\n")

# Report order, longest sequence first.
_ENDING_ORDER = (LineEnding.CRLF, LineEnding.CR, LineEnding.LF)


def _sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def normalise_line_endings(text: str, line_ending: LineEnding) -> str:
    require(text, "text")
    require(line_ending, "line_ending")
    return _LINE_BREAK.sub(line_ending.value, text)


def count_newlines(text: str) -> Dict[str, int]:
    crlf = text.count("\r\n")
    return {
        "crlf": crlf,
        "cr": text.count("\r") - crlf,
        "lf": text.count("\n") - crlf,
    }


def write_lines(stream: BinaryIO, lines: Iterable[str], convention: Convention) -> int:
    """
    Write ``lines`` to ``stream`` under ``convention`` and return the line count.

    The BOM is written first if and only if the convention has one. Each line
    is normalised and then terminated by exactly one line ending.
    """
    require(stream, "stream")
    require(lines, "lines")
    require(convention, "convention")
    if isinstance(lines, str):
        raise InvalidValueError("lines must be an iterable of strings, not a single string")

    ending = convention.line_ending
    terminator = ending.value.encode(TEXT_ENCODING)
    if convention.has_bom:
        stream.write(UTF8_BOM)

    written = 0
    for line in lines:
        stream.write(normalise_line_endings(line, ending).encode(TEXT_ENCODING))
        stream.write(terminator)
        written += 1
    return written


def _text_reader(raw: bytes) -> io.TextIOWrapper:
    return io.TextIOWrapper(io.BytesIO(raw), encoding=TEXT_ENCODING, errors="replace", newline="")


def convention_of_bytes(raw: bytes, fallback: Convention) -> Convention:
    """The convention a payload held in memory already follows."""
    require(raw, "raw")
    require(fallback, "fallback")
    return Convention.from_detection(
        detect_line_ending(_text_reader(raw)),
        detect_utf8_bom(io.BytesIO(raw)),
        fallback,
    )


def convert_bytes(raw: bytes, fallback: Convention) -> Tuple[bytes, Convention]:
    """
    Rewrite a UTF-8 payload so every line uses its first-detected ending.

    Raises UnicodeDecodeError if ``raw`` is not UTF-8.
    """
    require(raw, "raw")
    text = raw.decode(TEXT_ENCODING_WITH_BOM)
    convention = convention_of_bytes(raw, fallback)
    out = io.BytesIO()
    write_lines(out, read_all_lines(io.StringIO(text, newline="")), convention)
    return out.getvalue(), convention


def guess_encoding(raw: bytes) -> Optional[str]:
    # Only used to explain a rejection; nothing is ever decoded with the guess.
    match = from_bytes(raw).best()
    return match.encoding if match is not None else None


def inspect_bytes(raw: bytes) -> Dict[str, Any]:
    """
    Describe the conventions of a payload.

    Returns a dict matching the API's inspect response.
    """
    first = detect_line_ending(_text_reader(raw))
    found = detect_all_line_endings(_text_reader(raw))
    bom = detect_utf8_bom(io.BytesIO(raw))

    utf8 = True
    encoding_guess = None
    try:
        text = raw.decode(TEXT_ENCODING_WITH_BOM)
    except UnicodeDecodeError:
        utf8 = False
        encoding_guess = guess_encoding(raw)
        text = raw.decode(TEXT_ENCODING, errors="replace")

    return {
        "line_ending": first.name if first is not None else None,
        "line_endings": [e.name for e in _ENDING_ORDER if e in found],
        "bom": bom.value,
        "newlines": count_newlines(text),
        "utf8": utf8,
        "encoding_guess": encoding_guess,
    }


def normalize_text_bytes(raw: bytes, fallback: Convention) -> Dict[str, Any]:
    """
    Convert a payload to its own convention.

    Returns a dict matching the API's normalize response envelope.
    """
    before = count_newlines(raw.decode(TEXT_ENCODING_WITH_BOM))
    normalized, convention = convert_bytes(raw, fallback)
    logger.debug("normalized %d bytes to %s", len(raw), convention)

    b64 = base64.b64encode(normalized).decode("ascii")
    return {
        "normalized": {
            "sha256": _sha256_hex(normalized),
            "encoding": convention.encoding,
            "content_b64": b64,
        },
        "convention": {
            "line_ending": convention.line_ending.name,
            "bom": convention.has_bom,
        },
        "newlines_before": before,
        "changed": normalized != raw,
    }
