"""User-configurable render and project options."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from codeshot.typing.enums import ImageFormat

DEFAULT_DATE_TIME_PATTERN = "%Y%m%d_%H%M%S"


class RenderOptions(BaseModel):
    """Options steering layout, rasterization and encoding."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    scale: float = Field(
        default=1.0,
        gt=0,
        allow_inf_nan=False,
        description="Uniform multiplier applied to measured geometry.",
    )
    padding: int = Field(default=0, ge=0, description="Unscaled border, in pixels, around the content.")
    chop_indentation: bool = Field(default=True, description="Subtract the common leading indentation.")
    remove_caret: bool = Field(default=False, description="Exclude caret markers from the image.")
    image_format: ImageFormat = Field(default=ImageFormat.ordered()[0], description="Codec backend.")


class ProjectOptions(BaseModel):
    """Options persisted per project."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    render: RenderOptions = Field(default_factory=RenderOptions)
    save_directory: Path | None = None
    date_time_pattern: str = DEFAULT_DATE_TIME_PATTERN
