"""Core domain model exports."""

from codeshot.typing.models.image import EncodedImage, PixelBuffer
from codeshot.typing.models.layout import DrawOp, Layout
from codeshot.typing.models.options import DEFAULT_DATE_TIME_PATTERN, ProjectOptions, RenderOptions
from codeshot.typing.models.styled_text import (
    BLACK,
    WHITE,
    CaretMarker,
    Color,
    FontDescriptor,
    StyledTextModel,
    TextSegment,
)

__all__ = [
    "BLACK",
    "DEFAULT_DATE_TIME_PATTERN",
    "WHITE",
    "CaretMarker",
    "Color",
    "DrawOp",
    "EncodedImage",
    "FontDescriptor",
    "Layout",
    "PixelBuffer",
    "ProjectOptions",
    "RenderOptions",
    "StyledTextModel",
    "TextSegment",
]
