"""Pillow-backed raster encoders."""

from __future__ import annotations

import io

from PIL import Image

from codeshot.exceptions import EncodingError
from codeshot.settings import get_settings
from codeshot.typing.enums import ImageFormat
from codeshot.typing.models import Color, EncodedImage, Layout, PixelBuffer


def _require_buffer(source: PixelBuffer | Layout, image_format: ImageFormat) -> PixelBuffer:
    if not isinstance(source, PixelBuffer):
        raise EncodingError(image_format=image_format.name, message="raster formats encode pixel buffers")
    if source.is_empty:
        raise EncodingError(
            image_format=image_format.name,
            message=f"image has zero area ({source.width}x{source.height})",
        )
    return source


class PngEncoder:
    """Lossless RGBA encoder."""

    image_format = ImageFormat.PNG

    def encode(self, source: PixelBuffer | Layout) -> EncodedImage:
        """Encode the pixel buffer as PNG.

        Args:
            source (PixelBuffer | Layout): Pixel buffer to encode.

        Raises:
            EncodingError: If the buffer has zero area or Pillow fails.

        Returns:
            EncodedImage: PNG payload.
        """
        buffer = _require_buffer(source, self.image_format)
        stream = io.BytesIO()
        try:
            buffer.to_image().save(stream, format="PNG")
        except (OSError, ValueError) as exc:
            raise EncodingError(image_format=self.image_format.name, message=str(exc)) from exc
        return EncodedImage(
            image_format=self.image_format,
            content=stream.getvalue(),
            width=buffer.width,
            height=buffer.height,
        )


class JpegEncoder:
    """Lossy encoder flattening transparency onto an opaque background."""

    image_format = ImageFormat.JPEG

    def __init__(self, *, background: Color | None = None, quality: int | None = None) -> None:
        if background is None or quality is None:
            settings = get_settings()
            background = background or Color.from_hex(settings.jpeg_background)
            quality = quality or settings.jpeg_quality
        self.background = background.model_copy(update={"a": 255})
        self.quality = quality

    def flatten(self, buffer: PixelBuffer) -> Image.Image:
        """Composite the buffer over the background color.

        Args:
            buffer (PixelBuffer): RGBA pixels.

        Returns:
            Image.Image: Opaque RGB image.
        """
        canvas = Image.new("RGBA", (buffer.width, buffer.height), self.background.as_tuple())
        return Image.alpha_composite(canvas, buffer.to_image()).convert("RGB")

    def encode(self, source: PixelBuffer | Layout) -> EncodedImage:
        """Encode the pixel buffer as JPEG.

        Args:
            source (PixelBuffer | Layout): Pixel buffer to encode.

        Raises:
            EncodingError: If the buffer has zero area or Pillow fails.

        Returns:
            EncodedImage: JPEG payload.
        """
        buffer = _require_buffer(source, self.image_format)
        stream = io.BytesIO()
        try:
            self.flatten(buffer).save(stream, format="JPEG", quality=self.quality)
        except (OSError, ValueError) as exc:
            raise EncodingError(image_format=self.image_format.name, message=str(exc)) from exc
        return EncodedImage(
            image_format=self.image_format,
            content=stream.getvalue(),
            width=buffer.width,
            height=buffer.height,
        )
