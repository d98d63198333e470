from __future__ import annotations

import os
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from . import rules
from .errors import InvalidValueError


class LineEnding(str, Enum):
    CR = rules.CR
    LF = rules.LF
    CRLF = rules.CRLF

    @classmethod
    def native(cls) -> "LineEnding":
        """The host's line ending, looked up on every call."""
        return cls(os.linesep)

    @classmethod
    def parse(cls, name: str) -> "LineEnding":
        key = name.strip().upper()
        if key == "NATIVE":
            return cls.native()
        try:
            return cls[key]
        except KeyError:
            raise InvalidValueError(f"unknown line ending: {name!r}") from None


class BomState(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    # Nothing to inspect: the stream or file was empty.
    INDETERMINATE = "indeterminate"


class Convention(BaseModel):
    model_config = ConfigDict(frozen=True)

    line_ending: LineEnding
    has_bom: bool = False

    @classmethod
    def default(cls) -> "Convention":
        return cls(line_ending=LineEnding.native(), has_bom=False)

    @classmethod
    def from_detection(
        cls, found: Optional[LineEnding], bom: BomState, fallback: "Convention"
    ) -> "Convention":
        """Detected values win; the fallback fills in whatever could not be detected."""
        return cls(
            line_ending=found if found is not None else fallback.line_ending,
            has_bom=fallback.has_bom if bom is BomState.INDETERMINATE else bom is BomState.PRESENT,
        )

    @property
    def encoding(self) -> str:
        return rules.TEXT_ENCODING_WITH_BOM if self.has_bom else rules.TEXT_ENCODING


class NewlineCounts(BaseModel):
    crlf: int = 0
    cr: int = 0
    lf: int = 0


class InspectResponse(BaseModel):
    line_ending: Optional[str] = Field(default=None, examples=["CRLF"])
    line_endings: List[str] = Field(default_factory=list)
    bom: BomState
    newlines: NewlineCounts
    utf8: bool = True
    encoding_guess: Optional[str] = None


class NormalizedText(BaseModel):
    sha256: str
    encoding: str = Field(default="utf-8")
    content_b64: str


class NormalizeResponse(BaseModel):
    normalized: NormalizedText
    convention: Dict[str, object]
    newlines_before: NewlineCounts
    changed: bool


class HealthResponse(BaseModel):
    ok: bool = True
