"""Font descriptor resolution and Pillow-backed text metrics."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from PIL import ImageFont

from codeshot import logger
from codeshot.settings import get_settings

if TYPE_CHECKING:
    from collections.abc import Iterable

    from codeshot.settings import Settings
    from codeshot.typing.models import FontDescriptor

PillowFont = ImageFont.FreeTypeFont | ImageFont.ImageFont

_FONT_EXTENSIONS = (".ttf", ".otf", ".ttc")

_STYLE_SUFFIXES: dict[tuple[bool, bool], tuple[str, ...]] = {
    (False, False): ("", "regular", "book", "roman"),
    (True, False): ("bold", "bd"),
    (False, True): ("italic", "oblique", "it"),
    (True, True): ("bolditalic", "boldoblique", "bi"),
}


def _normalize_name(text: str) -> str:
    """Lower-case a font name and drop separators.

    Args:
        text (str): Family or file stem.

    Returns:
        str: Comparable key.
    """
    return "".join(char for char in text.lower() if char.isalnum())


def system_font_dirs() -> tuple[Path, ...]:
    """Return platform font directories in lookup order."""
    home = Path.home()
    if sys.platform == "darwin":
        return (home / "Library" / "Fonts", Path("/Library/Fonts"), Path("/System/Library/Fonts"))
    if sys.platform.startswith("win"):
        windir = Path(os.environ.get("WINDIR", "C:/Windows"))
        return (windir / "Fonts",)
    return (
        home / ".local" / "share" / "fonts",
        home / ".fonts",
        Path("/usr/local/share/fonts"),
        Path("/usr/share/fonts"),
    )


class FontResolver:
    """Resolve font descriptors to Pillow fonts.

    A resolver keeps its own cache of loaded fonts and scanned font files. Create
    one per render call; nothing is shared between resolvers.
    """

    def __init__(
        self,
        font_dirs: Iterable[Path] = (),
        *,
        fallback_family: str | None = None,
        include_system_dirs: bool = True,
    ) -> None:
        dirs = list(font_dirs)
        if include_system_dirs:
            dirs.extend(system_font_dirs())
        self._font_dirs = tuple(dirs)
        self._fallback_family = fallback_family
        self._font_files: tuple[Path, ...] | None = None
        self._fonts: dict[FontDescriptor, PillowFont] = {}

    @property
    def font_dirs(self) -> tuple[Path, ...]:
        """Return the directories searched for font files."""
        return self._font_dirs

    def _list_font_files(self) -> tuple[Path, ...]:
        if self._font_files is not None:
            return self._font_files

        found: set[Path] = set()
        for root in self._font_dirs:
            if not root.is_dir():
                continue
            for path in root.rglob("*"):
                if path.suffix.lower() in _FONT_EXTENSIONS and path.is_file():
                    found.add(path)
        self._font_files = tuple(sorted(found))
        return self._font_files

    def resolve_path(self, family: str, *, bold: bool = False, italic: bool = False) -> Path | None:
        """Find the font file of a family and style.

        Args:
            family (str): Family name or direct font file path.
            bold (bool): Bold face requested.
            italic (bool): Italic face requested.

        Returns:
            Path | None: Matching font file, or None when nothing matches.
        """
        direct = Path(family).expanduser()
        if direct.suffix.lower() in _FONT_EXTENSIONS and direct.is_file():
            return direct

        family_key = _normalize_name(family)
        if not family_key:
            return None
        wanted = {family_key + suffix for suffix in _STYLE_SUFFIXES[bold, italic]}
        for path in self._list_font_files():
            if _normalize_name(path.stem) in wanted:
                return path
        return None

    def load(self, descriptor: FontDescriptor) -> PillowFont:
        """Return the Pillow font for a descriptor.

        Lookup order is the requested family and style, the requested family in
        its regular face, the fallback family, then Pillow's built-in font.

        Args:
            descriptor (FontDescriptor): Font to load.

        Returns:
            PillowFont: Loaded font at the descriptor size.
        """
        cached = self._fonts.get(descriptor)
        if cached is not None:
            return cached

        path = self.resolve_path(descriptor.family, bold=descriptor.bold, italic=descriptor.italic)
        if path is None and (descriptor.bold or descriptor.italic):
            path = self.resolve_path(descriptor.family)
        if path is None and self._fallback_family:
            path = self.resolve_path(self._fallback_family, bold=descriptor.bold, italic=descriptor.italic)

        font: PillowFont
        if path is not None:
            font = ImageFont.truetype(str(path), size=descriptor.size)
        else:
            logger.debug(
                "Font family not found, using built-in font",
                extra={"family": descriptor.family, "size": descriptor.size},
            )
            font = ImageFont.load_default(size=descriptor.size)

        self._fonts[descriptor] = font
        return font


def build_font_resolver(settings: Settings | None = None) -> FontResolver:
    """Create a resolver searching the configured and platform font directories.

    Args:
        settings (Settings | None): Runtime settings; cached settings when omitted.

    Returns:
        FontResolver: Fresh resolver with an empty cache.
    """
    config = settings or get_settings()
    return FontResolver(config.font_dir_paths, fallback_family=config.default_font_family)


class PillowFontMetrics:
    """`FontMetrics` implementation measuring with Pillow fonts."""

    def __init__(self, resolver: FontResolver) -> None:
        self._resolver = resolver

    @property
    def resolver(self) -> FontResolver:
        """Return the resolver used to load fonts."""
        return self._resolver

    def advance(self, text: str, font: FontDescriptor) -> float:
        """Return the horizontal advance of `text`."""
        if not text:
            return 0.0
        return float(self._resolver.load(font).getlength(text))

    def line_height(self, font: FontDescriptor) -> float:
        """Return ascent plus descent of the font."""
        ascent, descent = self._vertical_metrics(font)
        return ascent + descent

    def ascent(self, font: FontDescriptor) -> float:
        """Return the ascent of the font."""
        ascent, _ = self._vertical_metrics(font)
        return ascent

    def _vertical_metrics(self, font: FontDescriptor) -> tuple[float, float]:
        loaded = self._resolver.load(font)
        if isinstance(loaded, ImageFont.FreeTypeFont):
            ascent, descent = loaded.getmetrics()
            return float(ascent), float(descent)
        # Bitmap fonts expose no metrics; their glyph box is the whole line.
        _, top, _, bottom = loaded.getbbox("Ag")
        return float(bottom - top), 0.0
