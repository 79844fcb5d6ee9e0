"""CLI entry point for Codeshot."""

from __future__ import annotations

import argparse
import json
import math
import platform
from pathlib import Path
from typing import TYPE_CHECKING

from codeshot import __version__, logger
from codeshot.clipboard import CommandClipboardBackend, copy_to_clipboard
from codeshot.dependencies import ensure_cli_dependencies_for_render, ensure_clipboard_tools
from codeshot.exceptions import PackageError
from codeshot.fonts import PillowFontMetrics, build_font_resolver
from codeshot.logging import configure_logging
from codeshot.options_store import OptionsStore, apply_numeric_input, options_to_dict
from codeshot.screenshot import (
    estimate_pixel_count,
    exceeds_size_limit,
    load_model,
    save_screenshot,
    take_screenshot,
)
from codeshot.settings import get_settings
from codeshot.typing.enums import ImageFormat

if TYPE_CHECKING:
    from collections.abc import Sequence

    from codeshot.settings import Settings
    from codeshot.typing.models import ProjectOptions

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_DECLINED = 2
EXIT_INTERRUPTED = 130

DEFAULT_PROJECT = "default"


def _image_format_from_cli(value: str) -> ImageFormat:
    """Convert `--format` CLI value into an image format.

    Args:
        value (str): CLI value (`png`, `svg`, `jpeg` or `jpg`).

    Raises:
        argparse.ArgumentTypeError: If value is not supported.

    Returns:
        ImageFormat: Selected format.
    """
    try:
        return ImageFormat.from_str(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _positive_float(value: str) -> float:
    """Parse a strictly positive `--scale` value."""
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid scale: {value}") from exc
    if not math.isfinite(parsed) or parsed <= 0:
        raise argparse.ArgumentTypeError("--scale must be a finite number greater than 0")  # noqa: TRY003
    return parsed


def _non_negative_int(value: str) -> int:
    """Parse a non-negative `--padding` value."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid padding: {value}") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("--padding must be 0 or greater")  # noqa: TRY003
    return parsed


def build_parser() -> argparse.ArgumentParser:
    """Create the command-line parser.

    Returns:
        argparse.ArgumentParser: The configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="codeshot")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command")

    render_parser = subparsers.add_parser("render", help="Render a styled-text selection to an image")
    render_parser.add_argument("--input", required=True, type=Path, dest="input_path")
    render_parser.add_argument("--project", default=DEFAULT_PROJECT)
    render_parser.add_argument("--format", type=_image_format_from_cli, default=None, dest="image_format")
    render_parser.add_argument("--scale", type=_positive_float, default=None)
    render_parser.add_argument("--padding", type=_non_negative_int, default=None)
    render_parser.add_argument(
        "--chop-indentation",
        action=argparse.BooleanOptionalAction,
        default=None,
        dest="chop_indentation",
    )
    render_parser.add_argument("--remove-caret", action="store_const", const=True, default=None, dest="remove_caret")
    render_parser.add_argument("--keep-caret", action="store_const", const=False, dest="remove_caret")
    render_parser.add_argument("--output-dir", type=Path, default=None, dest="output_dir")
    render_parser.add_argument("--copy", action="store_true", help="Place the image on the clipboard")
    render_parser.add_argument("--yes", action="store_true", help="Render large images without asking")

    subparsers.add_parser("formats", help="List output formats in their stored order")

    config_parser = subparsers.add_parser("config", help="Show or update the options of a project")
    config_parser.add_argument("--project", default=DEFAULT_PROJECT)
    config_parser.add_argument("--scale", default=None, help="Typed scale; invalid text keeps the current value")
    config_parser.add_argument("--padding", default=None, help="Typed padding; invalid text keeps the current value")
    config_parser.add_argument("--format", type=_image_format_from_cli, default=None, dest="image_format")
    config_parser.add_argument(
        "--chop-indentation",
        action=argparse.BooleanOptionalAction,
        default=None,
        dest="chop_indentation",
    )
    config_parser.add_argument("--remove-caret", action="store_const", const=True, default=None, dest="remove_caret")
    config_parser.add_argument("--keep-caret", action="store_const", const=False, dest="remove_caret")
    config_parser.add_argument("--save-directory", type=Path, default=None, dest="save_directory")

    return parser


def _render_overrides(args: argparse.Namespace) -> dict[str, object]:
    """Collect render option overrides given on the command line.

    Args:
        args (argparse.Namespace): Parsed CLI args.

    Returns:
        dict[str, object]: Option values keyed by `RenderOptions` field.
    """
    values = {
        "image_format": args.image_format,
        "scale": getattr(args, "scale", None) if args.command == "render" else None,
        "padding": getattr(args, "padding", None) if args.command == "render" else None,
        "chop_indentation": args.chop_indentation,
        "remove_caret": args.remove_caret,
    }
    return {key: value for key, value in values.items() if value is not None}


def _run_render(args: argparse.Namespace, settings: Settings) -> int:
    """Render, then save and/or copy the image.

    Args:
        args (argparse.Namespace): Parsed CLI args.
        settings (Settings): Runtime settings.

    Returns:
        int: Exit code.
    """
    ensure_cli_dependencies_for_render()
    if args.copy:
        ensure_clipboard_tools(platform.system())

    store = OptionsStore(path=Path(settings.options_path))
    project_options = store.load(args.project)
    render_options = project_options.render.model_copy(update=_render_overrides(args))
    model = load_model(args.input_path, settings=settings)

    resolver = build_font_resolver(settings)
    metrics = PillowFontMetrics(resolver)
    pixel_count = estimate_pixel_count(model, render_options, metrics=metrics)
    if exceeds_size_limit(pixel_count, settings.size_limit_to_warn) and not args.yes:
        logger.warning(
            "Image is large, rerun with --yes to render it",
            extra={"pixel_count": pixel_count, "limit": settings.size_limit_to_warn},
        )
        return EXIT_DECLINED

    package = take_screenshot(model, render_options, fonts=resolver, metrics=metrics)
    if args.copy:
        copy_to_clipboard(package, CommandClipboardBackend())
    if args.output_dir is not None or not args.copy:
        save_options: ProjectOptions = project_options
        if args.output_dir is not None:
            save_options = project_options.model_copy(update={"save_directory": args.output_dir})
        path = save_screenshot(package, save_options)
        print(path)  # noqa: T201
    return EXIT_OK


def _run_config(args: argparse.Namespace, settings: Settings) -> int:
    """Show or update stored project options.

    Args:
        args (argparse.Namespace): Parsed CLI args.
        settings (Settings): Runtime settings.

    Returns:
        int: Exit code.
    """
    store = OptionsStore(path=Path(settings.options_path))
    options = store.load(args.project)
    render = apply_numeric_input(options.render, scale=args.scale, padding=args.padding)
    overrides = _render_overrides(args)
    changed = bool(overrides) or render != options.render or args.save_directory is not None
    if changed:
        options = options.model_copy(
            update={
                "render": render.model_copy(update=overrides),
                "save_directory": args.save_directory or options.save_directory,
            },
        )
        store.save(args.project, options)
    print(json.dumps(options_to_dict(options), indent=2, sort_keys=True))  # noqa: T201
    return EXIT_OK


def _run_formats() -> int:
    """Print the output formats in their stored order."""
    for image_format in ImageFormat.ordered():
        print(f"{image_format.ordinal}\t{image_format.to_str()}\t{image_format.mime_type}\t.{image_format.extension}")  # noqa: T201
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI.

    Args:
        argv (Sequence[str] | None): Arguments; `sys.argv[1:]` when omitted.

    Returns:
        int: Exit code (0 success, 1 error, 2 declined large image, 130 interrupted).
    """
    settings = get_settings()
    configure_logging(settings=settings)

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_OK

    try:
        if args.command == "formats":
            return _run_formats()
        if args.command == "config":
            return _run_config(args, settings)
        return _run_render(args, settings)
    except PackageError:
        logger.exception("Command failed", extra={"command": args.command})
        return EXIT_ERROR
    except KeyboardInterrupt:
        logger.info("Command aborted by user", extra={"command": args.command})
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    raise SystemExit(main())
