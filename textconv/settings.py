"""Environment-driven defaults (``TEXTCONV_*`` variables)."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import Convention, LineEnding
from .rules import DEFAULT_CHUNK_SIZE


class TextconvSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TEXTCONV_",
        case_sensitive=False,
        extra="ignore",
    )

    default_line_ending: str = Field("native", description="native, cr, lf or crlf")
    default_bom: bool = Field(False, description="Write a UTF-8 BOM to new files")
    chunk_size: int = Field(DEFAULT_CHUNK_SIZE, ge=1, description="Read size for full-stream scans")
    max_upload_bytes: int = Field(10 * 1024 * 1024, ge=1, description="Largest accepted upload")
    log_level: str = Field("INFO", description="Root logging level for the service")

    @field_validator("default_line_ending")
    @classmethod
    def _known_line_ending(cls, value: str) -> str:
        LineEnding.parse(value)
        return value.strip().lower()

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.strip().upper()

    def default_convention(self) -> Convention:
        # "native" is resolved here, at call time, not at load time.
        return Convention(
            line_ending=LineEnding.parse(self.default_line_ending),
            has_bom=self.default_bom,
        )


@lru_cache(maxsize=1)
def get_settings() -> TextconvSettings:
    return TextconvSettings()
