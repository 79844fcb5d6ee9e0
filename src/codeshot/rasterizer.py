"""Paint a layout into an RGBA pixel buffer."""

from __future__ import annotations

from typing import TYPE_CHECKING

from PIL import Image, ImageDraw, ImageFont

from codeshot.fonts import build_font_resolver
from codeshot.typing.enums import DrawKind
from codeshot.typing.models import PixelBuffer

if TYPE_CHECKING:
    from codeshot.fonts import FontResolver
    from codeshot.typing.models import DrawOp, Layout

_TRANSPARENT = (0, 0, 0, 0)


def _fill_rect(draw: ImageDraw.ImageDraw, operation: DrawOp) -> None:
    left = round(operation.x)
    top = round(operation.y)
    right = round(operation.right)
    bottom = round(operation.bottom)
    if right <= left or bottom <= top:
        return
    # Pillow rectangles include their end coordinates.
    draw.rectangle((left, top, right - 1, bottom - 1), fill=operation.color.as_tuple())


def _draw_glyphs(draw: ImageDraw.ImageDraw, operation: DrawOp, resolver: FontResolver) -> None:
    if not operation.text or operation.font is None:
        return
    font = resolver.load(operation.font)
    fill = operation.color.as_tuple()
    if isinstance(font, ImageFont.FreeTypeFont) and operation.baseline is not None:
        draw.text((operation.x, operation.baseline), operation.text, fill=fill, font=font, anchor="ls")
    else:
        draw.text((operation.x, operation.y), operation.text, fill=fill, font=font)


def rasterize(layout: Layout, *, fonts: FontResolver | None = None) -> PixelBuffer:
    """Paint layout operations onto a transparent canvas.

    Operations are composited in order, later ones over earlier ones. The
    output is deterministic for a given layout and set of installed fonts.

    Args:
        layout (Layout): Measured canvas and operations.
        fonts (FontResolver | None): Resolver for glyph-run fonts; a fresh one when omitted.

    Returns:
        PixelBuffer: Buffer of exactly `layout.width` x `layout.height` pixels.
    """
    image = Image.new("RGBA", (layout.width, layout.height), _TRANSPARENT)
    if layout.pixel_count == 0 or not layout.operations:
        return PixelBuffer.from_image(image)

    resolver = fonts or build_font_resolver()
    draw = ImageDraw.Draw(image, "RGBA")
    for operation in layout.operations:
        if operation.kind == DrawKind.GLYPH_RUN:
            _draw_glyphs(draw, operation, resolver)
        else:
            _fill_rect(draw, operation)
    return PixelBuffer.from_image(image)
