"""Image encoders keyed by output format."""

from __future__ import annotations

from typing import TYPE_CHECKING

from codeshot.encoders.raster import JpegEncoder, PngEncoder
from codeshot.encoders.vector import SvgEncoder
from codeshot.exceptions import EncodingError
from codeshot.typing.enums import ImageFormat
from codeshot.typing.protocol import ImageEncoder

if TYPE_CHECKING:
    from collections.abc import Callable

    from codeshot.typing.models import EncodedImage, Layout, PixelBuffer

_ENCODER_FACTORIES: dict[ImageFormat, Callable[[], ImageEncoder]] = {
    ImageFormat.PNG: PngEncoder,
    ImageFormat.SVG: SvgEncoder,
    ImageFormat.JPEG: JpegEncoder,
}


def encoder_for(image_format: ImageFormat) -> ImageEncoder:
    """Return a new encoder for a format.

    Args:
        image_format (ImageFormat): Output format.

    Raises:
        EncodingError: If no encoder is registered for the format.

    Returns:
        ImageEncoder: Encoder instance.
    """
    factory = _ENCODER_FACTORIES.get(image_format)
    if factory is None:
        raise EncodingError(image_format=str(image_format), message="no encoder registered")
    return factory()


def encode(buffer: PixelBuffer, image_format: ImageFormat) -> EncodedImage:
    """Encode a raster buffer in a raster format."""
    return encoder_for(image_format).encode(buffer)


def encode_layout(layout: Layout, image_format: ImageFormat) -> EncodedImage:
    """Encode a layout in a vector format."""
    return encoder_for(image_format).encode(layout)


__all__ = [
    "ImageEncoder",
    "JpegEncoder",
    "PngEncoder",
    "SvgEncoder",
    "encode",
    "encode_layout",
    "encoder_for",
]
