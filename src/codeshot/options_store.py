"""Per-project screenshot options persisted in one JSON file."""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import TYPE_CHECKING, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from codeshot import logger
from codeshot.typing.enums import ImageFormat
from codeshot.typing.models import DEFAULT_DATE_TIME_PATTERN, ProjectOptions, RenderOptions

if TYPE_CHECKING:
    from collections.abc import Callable

_OPTIONS_FILE_VERSION = 1

T = TypeVar("T")

BUILTIN_PROJECT_OPTIONS = ProjectOptions()
# Projects never stored start from these; corrupt stored fields fall back to BUILTIN_PROJECT_OPTIONS.
DEFAULT_PROJECT_OPTIONS = ProjectOptions(render=RenderOptions(scale=4.0, remove_caret=True))


def _field_or_default(raw: dict[str, object], key: str, parse: Callable[[object], T], default: T) -> T:
    """Parse one stored field, falling back to its default.

    Args:
        raw (dict[str, object]): Stored project entry.
        key (str): Field key.
        parse (Callable[[object], T]): Converter raising on invalid values.
        default (T): Value used when the field is missing or invalid.

    Returns:
        T: Parsed value or default.
    """
    if key not in raw:
        return default
    try:
        return parse(raw[key])
    except (TypeError, ValueError, ValidationError) as exc:
        logger.warning(
            "Ignoring invalid stored option",
            extra={"option": key, "value": repr(raw[key]), "error": str(exc)},
        )
        return default


def _parse_scale(value: object) -> float:
    if isinstance(value, bool):
        raise TypeError(f"scale must be a number, got {value!r}")  # noqa: TRY003
    scale = float(value)  # type: ignore[arg-type]
    if not math.isfinite(scale) or scale <= 0:
        raise ValueError(f"scale must be a positive finite number, got {scale}")  # noqa: TRY003
    return scale


def _parse_padding(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"padding must be a non-negative integer, got {value!r}")  # noqa: TRY003
    return value


def _parse_bool(value: object) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"expected a boolean, got {value!r}")  # noqa: TRY003
    return value


def _parse_format(value: object) -> ImageFormat:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"format ordinal must be an integer, got {value!r}")  # noqa: TRY003
    return ImageFormat.from_ordinal(value)


def _parse_directory(value: object) -> Path | None:
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise TypeError(f"save directory must be a path string, got {value!r}")  # noqa: TRY003
    return Path(value).expanduser()


def _parse_pattern(value: object) -> str:
    if not isinstance(value, str) or not value:
        raise TypeError(f"date pattern must be a non-empty string, got {value!r}")  # noqa: TRY003
    return value


def options_from_dict(raw: dict[str, object], defaults: ProjectOptions = BUILTIN_PROJECT_OPTIONS) -> ProjectOptions:
    """Build project options from a stored entry, field by field.

    Args:
        raw (dict[str, object]): Stored project entry.
        defaults (ProjectOptions): Values for missing or invalid fields.

    Returns:
        ProjectOptions: Parsed options.
    """
    render = defaults.render
    return ProjectOptions(
        render=RenderOptions(
            scale=_field_or_default(raw, "scale", _parse_scale, render.scale),
            padding=_field_or_default(raw, "padding", _parse_padding, render.padding),
            chop_indentation=_field_or_default(raw, "chop_indentation", _parse_bool, render.chop_indentation),
            remove_caret=_field_or_default(raw, "remove_caret", _parse_bool, render.remove_caret),
            image_format=_field_or_default(raw, "format", _parse_format, render.image_format),
        ),
        save_directory=_field_or_default(raw, "save_directory", _parse_directory, defaults.save_directory),
        date_time_pattern=_field_or_default(raw, "date_time_pattern", _parse_pattern, defaults.date_time_pattern),
    )


def options_to_dict(options: ProjectOptions) -> dict[str, object]:
    """Return the stored form of project options; the format is kept as its ordinal."""
    render = options.render
    return {
        "scale": render.scale,
        "padding": render.padding,
        "chop_indentation": render.chop_indentation,
        "remove_caret": render.remove_caret,
        "format": render.image_format.ordinal,
        "save_directory": str(options.save_directory) if options.save_directory else None,
        "date_time_pattern": options.date_time_pattern or DEFAULT_DATE_TIME_PATTERN,
    }


def apply_numeric_input(
    previous: RenderOptions,
    *,
    scale: str | None = None,
    padding: str | None = None,
) -> RenderOptions:
    """Apply user-typed scale and padding to render options.

    Text that does not parse, or parses to an out-of-range value, leaves the
    previous value in place.

    Args:
        previous (RenderOptions): Current options.
        scale (str | None): Typed scale, e.g. `"2.5"`.
        padding (str | None): Typed padding, e.g. `"16"`.

    Returns:
        RenderOptions: Updated options.
    """
    update: dict[str, object] = {}
    if scale is not None:
        try:
            update["scale"] = _parse_scale(scale.strip())
        except ValueError:
            logger.debug("Keeping previous scale", extra={"input": scale, "scale": previous.scale})
    if padding is not None:
        try:
            update["padding"] = _parse_padding(int(padding.strip()))
        except ValueError:
            logger.debug("Keeping previous padding", extra={"input": padding, "padding": previous.padding})
    return previous.model_copy(update=update) if update else previous


class OptionsStore(BaseModel):
    """JSON file mapping project keys to their screenshot options."""

    model_config = ConfigDict(extra="forbid")

    path: Path = Field(description="Options file location.")

    def _read_projects(self) -> dict[str, object] | None:
        if not self.path.is_file():
            return {}
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable options file", extra={"path": str(self.path), "error": str(exc)})
            return None
        if not isinstance(payload, dict) or not isinstance(payload.get("projects"), dict):
            logger.warning("Ignoring malformed options file", extra={"path": str(self.path)})
            return None
        return payload["projects"]

    def load(self, project: str) -> ProjectOptions:
        """Return the options of a project.

        Projects that were never stored get `DEFAULT_PROJECT_OPTIONS`. Corrupt
        stored data falls back to the built-in `RenderOptions()` values, field
        by field when the entry itself is readable.

        Args:
            project (str): Project key.

        Returns:
            ProjectOptions: Stored options with invalid fields reset to built-in defaults.
        """
        projects = self._read_projects()
        if projects is None:
            return BUILTIN_PROJECT_OPTIONS
        if project not in projects:
            return DEFAULT_PROJECT_OPTIONS
        raw = projects[project]
        if not isinstance(raw, dict):
            logger.warning("Ignoring malformed project options", extra={"project": project})
            return BUILTIN_PROJECT_OPTIONS
        return options_from_dict(raw)

    def save(self, project: str, options: ProjectOptions) -> Path:
        """Persist the options of a project, keeping other projects intact.

        Args:
            project (str): Project key.
            options (ProjectOptions): Options to store.

        Returns:
            Path: Written options file.
        """
        projects = self._read_projects() or {}
        projects[project] = options_to_dict(options)
        envelope = {"options_file_version": _OPTIONS_FILE_VERSION, "projects": projects}
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(envelope, indent=2, sort_keys=True), encoding="utf-8")
        logger.info("Options saved", extra={"project": project, "options_path": str(self.path)})
        return self.path
