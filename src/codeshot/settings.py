"""Runtime settings loaded from `.env` and environment variables."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from codeshot.exceptions import SettingsError

DEFAULT_SIZE_LIMIT_TO_WARN = 3_000_000


class Settings(BaseSettings):
    """Package settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Logging level, e.g. 'INFO', 'DEBUG'.",
    )
    log_json: bool = Field(
        default=False,
        validation_alias="LOG_JSON",
        description="Enable JSON formatted logs.",
    )
    log_file: str | None = Field(
        default=None,
        validation_alias="LOG_FILE",
        description="File path for log output.",
    )

    options_path: str = Field(
        default=".codeshot/options.json",
        validation_alias="OPTIONS_PATH",
        description="JSON file holding per-project screenshot options.",
    )
    size_limit_to_warn: int = Field(
        default=DEFAULT_SIZE_LIMIT_TO_WARN,
        ge=0,
        validation_alias="SIZE_LIMIT_TO_WARN",
        description="Pixel count above which the user is asked before rendering.",
    )
    font_dirs: str | None = Field(
        default=None,
        validation_alias="FONT_DIRS",
        description="Extra font directories, separated by the platform path separator.",
    )
    default_font_family: str = Field(
        default="DejaVu Sans Mono",
        validation_alias="DEFAULT_FONT_FAMILY",
        description="Font family used when a descriptor cannot be resolved.",
    )
    default_font_size: float = Field(
        default=13.0,
        gt=0,
        validation_alias="DEFAULT_FONT_SIZE",
        description="Font size in pixels used by models that do not set one.",
    )
    jpeg_quality: int = Field(
        default=95,
        ge=1,
        le=100,
        validation_alias="JPEG_QUALITY",
        description="JPEG encoder quality.",
    )
    jpeg_background: str = Field(
        default="#FFFFFF",
        validation_alias="JPEG_BACKGROUND",
        description="Opaque color transparent pixels are flattened against for JPEG output.",
    )
    temp_dir: str | None = Field(
        default=None,
        validation_alias="TEMP_DIR",
        description="Directory for files offered through the clipboard file-list flavor.",
    )

    @field_validator("jpeg_background")
    @classmethod
    def _validate_jpeg_background(cls, value: str) -> str:
        """Ensure the JPEG background is an opaque `#RRGGBB` color.

        Args:
            value (str): Raw color value.

        Raises:
            ValueError: If the value is not a 6-digit hex color.

        Returns:
            str: Normalized upper-case color.
        """
        text = value.strip()
        if len(text) != 7 or not text.startswith("#"):  # noqa: PLR2004
            raise ValueError("JPEG_BACKGROUND must be a #RRGGBB color")  # noqa: TRY003
        try:
            int(text[1:], 16)
        except ValueError as exc:
            raise ValueError("JPEG_BACKGROUND must be a #RRGGBB color") from exc  # noqa: TRY003
        return text.upper()

    @property
    def font_dir_paths(self) -> tuple[Path, ...]:
        """Return configured font directories as paths."""
        if not self.font_dirs:
            return ()
        parts = [part.strip() for part in self.font_dirs.split(os.pathsep)]
        return tuple(Path(os.path.expandvars(part)).expanduser() for part in parts if part)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance.

    Raises:
        SettingsError: If settings cannot be loaded or validated.

    Returns:
        Settings: The loaded settings instance.
    """
    try:
        return Settings()
    except ValidationError as exc:
        raise SettingsError(exc=exc) from exc
