"""
Byte- and character-level constants for text conventions.

This file exists to make the recognised conventions explicit: these are the
only sequences that are detected, and the only ones ever emitted.
"""

UTF8_BOM = b"\xef\xbb\xbf"  # EF BB BF

CR = "\r"
LF = "\n"
CRLF = "\r\n"

TEXT_ENCODING = "utf-8"
TEXT_ENCODING_WITH_BOM = "utf-8-sig"

DEFAULT_CHUNK_SIZE = 65536
