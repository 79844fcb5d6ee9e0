"""Typing-centric domain modules."""

from codeshot.typing.enums import DrawKind, ImageFormat, Representation
from codeshot.typing.models import (
    CaretMarker,
    Color,
    DrawOp,
    EncodedImage,
    FontDescriptor,
    Layout,
    PixelBuffer,
    ProjectOptions,
    RenderOptions,
    StyledTextModel,
    TextSegment,
)
from codeshot.typing.protocol import ClipboardBackend, FontMetrics, ImageEncoder

__all__ = [
    "CaretMarker",
    "ClipboardBackend",
    "Color",
    "DrawKind",
    "DrawOp",
    "EncodedImage",
    "FontDescriptor",
    "FontMetrics",
    "ImageEncoder",
    "ImageFormat",
    "Layout",
    "PixelBuffer",
    "ProjectOptions",
    "RenderOptions",
    "Representation",
    "StyledTextModel",
    "TextSegment",
]
