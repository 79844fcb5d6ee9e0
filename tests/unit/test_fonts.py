from __future__ import annotations

from typing import TYPE_CHECKING

from PIL import ImageFont

from codeshot.fonts import FontResolver, PillowFontMetrics, build_font_resolver
from codeshot.settings import Settings
from codeshot.typing.models import FontDescriptor

if TYPE_CHECKING:
    from pathlib import Path


def _font_dir(tmp_path: Path) -> Path:
    fonts = tmp_path / "fonts" / "fira"
    fonts.mkdir(parents=True)
    for name in ("FiraCode-Regular.ttf", "FiraCode-Bold.ttf", "Other-Italic.otf", "readme.txt"):
        (fonts / name).write_bytes(b"")
    return tmp_path / "fonts"


def test_resolve_path_matches_family_and_style(tmp_path: Path) -> None:
    resolver = FontResolver([_font_dir(tmp_path)], include_system_dirs=False)

    assert resolver.resolve_path("Fira Code").name == "FiraCode-Regular.ttf"
    assert resolver.resolve_path("fira-code", bold=True).name == "FiraCode-Bold.ttf"
    assert resolver.resolve_path("Fira Code", italic=True) is None
    assert resolver.resolve_path("Missing") is None


def test_resolve_path_accepts_direct_font_file(tmp_path: Path) -> None:
    font_file = _font_dir(tmp_path) / "fira" / "FiraCode-Bold.ttf"
    resolver = FontResolver(include_system_dirs=False)

    assert resolver.resolve_path(str(font_file)) == font_file


def test_load_falls_back_to_builtin_font_and_caches() -> None:
    resolver = FontResolver(include_system_dirs=False)
    descriptor = FontDescriptor(family="no-such-family", size=18)

    font = resolver.load(descriptor)

    assert isinstance(font, ImageFont.FreeTypeFont | ImageFont.ImageFont)
    assert resolver.load(descriptor) is font


def test_build_font_resolver_uses_settings(tmp_path: Path) -> None:
    settings = Settings(FONT_DIRS=str(tmp_path))

    resolver = build_font_resolver(settings)

    assert resolver.font_dirs[0] == tmp_path


def test_pillow_metrics_measure_text() -> None:
    metrics = PillowFontMetrics(FontResolver(include_system_dirs=False))
    font = FontDescriptor(family="no-such-family", size=20)

    assert metrics.advance("", font) == 0.0
    assert metrics.advance("WW", font) > metrics.advance("W", font) > 0
    assert metrics.line_height(font) >= metrics.ascent(font) > 0
