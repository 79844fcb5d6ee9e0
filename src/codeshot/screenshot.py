"""Screenshot pipeline: selection model to transfer package, clipboard and file."""

from __future__ import annotations

import json
import time
from typing import TYPE_CHECKING

from pydantic import ValidationError

from codeshot import logger
from codeshot.clipboard import copy_to_clipboard
from codeshot.encoders import encode, encode_layout
from codeshot.exceptions import ModelError
from codeshot.fonts import PillowFontMetrics, build_font_resolver
from codeshot.layout import layout
from codeshot.logging import bound_action
from codeshot.rasterizer import rasterize
from codeshot.settings import get_settings
from codeshot.storage import default_save_directory, save_image
from codeshot.transfer import TransferPackage
from codeshot.typing.models import FontDescriptor, StyledTextModel

if TYPE_CHECKING:
    from datetime import datetime
    from pathlib import Path

    from codeshot.fonts import FontResolver
    from codeshot.settings import Settings
    from codeshot.typing.models import ProjectOptions, RenderOptions
    from codeshot.typing.protocol import ClipboardBackend, FontMetrics


def _elapsed_ms(started: float) -> int:
    return round((time.perf_counter() - started) * 1000)


def load_model(path: Path, *, settings: Settings | None = None) -> StyledTextModel:
    """Load a styled-text selection from a JSON file.

    Models that do not set `default_font` get the configured default family and size.

    Args:
        path (Path): JSON file produced by the host editor.
        settings (Settings | None): Runtime settings; cached settings when omitted.

    Raises:
        ModelError: If the file cannot be read or does not describe a valid model.

    Returns:
        StyledTextModel: Parsed selection.
    """
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ModelError(message=f"Cannot read selection model {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ModelError(message=f"Selection model {path} must be a JSON object")

    if "default_font" not in payload:
        config = settings or get_settings()
        payload["default_font"] = FontDescriptor(
            family=config.default_font_family,
            size=config.default_font_size,
        ).model_dump()
    try:
        return StyledTextModel.model_validate(payload)
    except ValidationError as exc:
        raise ModelError(message=f"Invalid selection model {path}: {exc}") from exc


def estimate_pixel_count(
    model: StyledTextModel,
    options: RenderOptions,
    *,
    metrics: FontMetrics | None = None,
) -> int:
    """Return the canvas area the selection would render to."""
    return layout(model, options, metrics=metrics).pixel_count


def exceeds_size_limit(pixel_count: int, limit: int | None = None) -> bool:
    """Return whether an image is large enough to ask the user first.

    Args:
        pixel_count (int): Canvas area.
        limit (int | None): Threshold; `SIZE_LIMIT_TO_WARN` setting when omitted.

    Returns:
        bool: True when the area is above the threshold.
    """
    threshold = get_settings().size_limit_to_warn if limit is None else limit
    return pixel_count > threshold


def take_screenshot(
    model: StyledTextModel,
    options: RenderOptions,
    *,
    fonts: FontResolver | None = None,
    metrics: FontMetrics | None = None,
) -> TransferPackage:
    """Render a selection and package it for transfer.

    Raster formats go through the rasterizer; vector formats are serialized
    straight from the layout.

    Args:
        model (StyledTextModel): Non-empty selection.
        options (RenderOptions): Render options, including the output format.
        fonts (FontResolver | None): Resolver shared by measurement and painting.
        metrics (FontMetrics | None): Measurement override; Pillow metrics over `fonts` when omitted.

    Raises:
        ModelError: If the selection is empty or malformed.
        EncodingError: If the codec rejects the output.

    Returns:
        TransferPackage: Package offering the format's representations.
    """
    if model.is_empty:
        raise ModelError(message="Select some text first")

    started = time.perf_counter()
    resolver = fonts or build_font_resolver()
    measured = layout(model, options, metrics=metrics or PillowFontMetrics(resolver))
    image_format = options.image_format
    if image_format.is_vector:
        package = TransferPackage(image=encode_layout(measured, image_format))
    else:
        buffer = rasterize(measured, fonts=resolver)
        package = TransferPackage(image=encode(buffer, image_format), buffer=buffer)

    logger.info(
        "Rendered image",
        extra={
            "format": image_format.name,
            "width": measured.width,
            "height": measured.height,
            "bytes": len(package.image.content),
            "duration_ms": _elapsed_ms(started),
        },
    )
    return package


def copy_screenshot(
    model: StyledTextModel,
    options: RenderOptions,
    backend: ClipboardBackend,
    *,
    temp_dir: Path | None = None,
) -> TransferPackage:
    """Render a selection and place it on the clipboard.

    Args:
        model (StyledTextModel): Non-empty selection.
        options (RenderOptions): Render options.
        backend (ClipboardBackend): Platform clipboard binding.
        temp_dir (Path | None): Directory for the file-list flavor.

    Returns:
        TransferPackage: Copied package, reusable for a later save.
    """
    started = time.perf_counter()
    with bound_action("copy"):
        package = take_screenshot(model, options)
        copy_to_clipboard(package, backend, temp_dir)
        logger.info("Copied image", extra={"duration_ms": _elapsed_ms(started)})
    return package


def save_screenshot(
    package: TransferPackage,
    project_options: ProjectOptions,
    *,
    now: datetime | None = None,
) -> Path:
    """Save a package as `Shot_<timestamp>.<ext>`.

    Args:
        package (TransferPackage): Package to save.
        project_options (ProjectOptions): Save directory and timestamp pattern.
        now (datetime | None): Timestamp for the file name.

    Raises:
        TargetNotADirectoryError: If the save location is an existing non-directory.
        SaveError: If writing fails.

    Returns:
        Path: Saved file.
    """
    directory = project_options.save_directory or default_save_directory()
    with bound_action("save"):
        return save_image(
            package.image,
            directory,
            now=now,
            pattern=project_options.date_time_pattern,
        )
