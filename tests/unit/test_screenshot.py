from __future__ import annotations

import json
from datetime import datetime
from typing import TYPE_CHECKING

import pytest

from codeshot.exceptions import ModelError
from codeshot.fonts import FontResolver
from codeshot.screenshot import (
    copy_screenshot,
    estimate_pixel_count,
    exceeds_size_limit,
    load_model,
    save_screenshot,
    take_screenshot,
)
from codeshot.settings import Settings
from codeshot.typing.enums import ImageFormat, Representation
from codeshot.typing.models import ProjectOptions, RenderOptions, StyledTextModel, TextSegment

if TYPE_CHECKING:
    from pathlib import Path

MOMENT = datetime(2024, 1, 2, 3, 4, 5)  # noqa: DTZ001


def _model() -> StyledTextModel:
    return StyledTextModel(segments=(TextSegment(text="def f():", line=0), TextSegment(text="    pass", line=1)))


def test_load_model_reads_json_and_applies_default_font(tmp_path: Path) -> None:
    path = tmp_path / "model.json"
    path.write_text(json.dumps({"segments": [{"text": "x", "line": 0}]}), encoding="utf-8")

    model = load_model(path, settings=Settings(DEFAULT_FONT_FAMILY="Fira Code", DEFAULT_FONT_SIZE=15))

    assert model.segments[0].text == "x"
    assert (model.default_font.family, model.default_font.size) == ("Fira Code", 15)


@pytest.mark.parametrize("content", ["{broken", "[]", json.dumps({"segments": [{"text": "a\nb", "line": 0}]})])
def test_load_model_rejects_invalid_input(tmp_path: Path, content: str) -> None:
    path = tmp_path / "model.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ModelError, match="model"):
        load_model(path)


def test_load_model_rejects_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ModelError, match="Cannot read"):
        load_model(tmp_path / "absent.json")


def test_size_limit_check(fixed_metrics) -> None:
    pixel_count = estimate_pixel_count(_model(), RenderOptions(chop_indentation=False), metrics=fixed_metrics)

    assert pixel_count == 80 * 40
    assert exceeds_size_limit(pixel_count, limit=1000)
    assert not exceeds_size_limit(pixel_count, limit=80 * 40)
    assert not exceeds_size_limit(pixel_count)


def test_take_screenshot_rejects_empty_selection() -> None:
    with pytest.raises(ModelError, match="Select some text"):
        take_screenshot(StyledTextModel(), RenderOptions())


def test_take_screenshot_png_keeps_pixel_buffer(fixed_metrics) -> None:
    package = take_screenshot(
        _model(),
        RenderOptions(padding=2),
        fonts=FontResolver(include_system_dirs=False),
        metrics=fixed_metrics,
    )

    assert package.image_format == ImageFormat.PNG
    assert package.buffer is not None
    assert (package.buffer.width, package.buffer.height) == (84, 44)
    assert package.image.content.startswith(b"\x89PNG")


def test_take_screenshot_svg_is_vector(fixed_metrics) -> None:
    package = take_screenshot(_model(), RenderOptions(image_format=ImageFormat.SVG), metrics=fixed_metrics)

    assert package.buffer is None
    assert "def f():" in package.as_text()


def test_copy_screenshot_hands_package_to_backend(tmp_path: Path, mocker, fixed_metrics) -> None:
    mocker.patch("codeshot.screenshot.build_font_resolver", return_value=FontResolver(include_system_dirs=False))
    mocker.patch("codeshot.screenshot.PillowFontMetrics", return_value=fixed_metrics)
    backend = mocker.Mock()

    package = copy_screenshot(_model(), RenderOptions(), backend, temp_dir=tmp_path)

    payload = backend.set_contents.call_args.args[0]
    assert payload[Representation.ENCODED_BYTES] == (package.image.content, "image/png")


def test_save_screenshot_uses_project_directory_and_pattern(tmp_path: Path, fixed_metrics) -> None:
    package = take_screenshot(_model(), RenderOptions(image_format=ImageFormat.SVG), metrics=fixed_metrics)
    options = ProjectOptions(save_directory=tmp_path / "shots", date_time_pattern="%Y%m%d")

    saved = save_screenshot(package, options, now=MOMENT)

    assert saved == tmp_path / "shots" / "Shot_20240102.svg"
    assert saved.read_bytes() == package.image.content


def test_save_screenshot_defaults_to_platform_directory(tmp_path: Path, mocker, fixed_metrics) -> None:
    mocker.patch("codeshot.screenshot.default_save_directory", return_value=tmp_path / "Pictures" / "Codeshot")
    package = take_screenshot(_model(), RenderOptions(image_format=ImageFormat.SVG), metrics=fixed_metrics)

    saved = save_screenshot(package, ProjectOptions(), now=MOMENT)

    assert saved.parent == tmp_path / "Pictures" / "Codeshot"
