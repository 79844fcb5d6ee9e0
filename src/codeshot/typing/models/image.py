"""Pixel buffers and encoded images."""

from __future__ import annotations

from typing import Self

from PIL import Image
from pydantic import BaseModel, ConfigDict, Field, model_validator

from codeshot.typing.enums import ImageFormat

_RGBA_CHANNELS = 4


class PixelBuffer(BaseModel):
    """Row-major RGBA pixel grid.

    The pixel data is held as `bytes`, so a buffer cannot be mutated once the
    rasterizer hands it over.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    width: int = Field(ge=0)
    height: int = Field(ge=0)
    data: bytes

    @model_validator(mode="after")
    def _check_data_size(self) -> Self:
        expected = self.width * self.height * _RGBA_CHANNELS
        if len(self.data) != expected:
            raise ValueError(f"Pixel data holds {len(self.data)} bytes, expected {expected}")  # noqa: TRY003
        return self

    @classmethod
    def from_image(cls, image: Image.Image) -> PixelBuffer:
        """Build a buffer from a Pillow image.

        Args:
            image (Image.Image): Source image; converted to RGBA when needed.

        Returns:
            PixelBuffer: Buffer holding a copy of the pixels.
        """
        rgba = image if image.mode == "RGBA" else image.convert("RGBA")
        return cls(width=rgba.width, height=rgba.height, data=rgba.tobytes())

    def to_image(self) -> Image.Image:
        """Return a new Pillow image holding the buffer pixels."""
        return Image.frombytes("RGBA", (self.width, self.height), self.data)

    def pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        """Return the RGBA value at `(x, y)`.

        Args:
            x (int): Column.
            y (int): Row.

        Raises:
            IndexError: If the coordinates are outside the buffer.

        Returns:
            tuple[int, int, int, int]: Pixel channels.
        """
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} buffer")
        offset = (y * self.width + x) * _RGBA_CHANNELS
        r, g, b, a = self.data[offset : offset + _RGBA_CHANNELS]
        return (r, g, b, a)

    @property
    def is_empty(self) -> bool:
        """Return whether the buffer has zero area."""
        return self.width == 0 or self.height == 0


class EncodedImage(BaseModel):
    """Byte stream of an image in one output format."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    image_format: ImageFormat
    content: bytes
    width: int = Field(ge=0)
    height: int = Field(ge=0)

    @property
    def extension(self) -> str:
        """Return the file extension for the format."""
        return self.image_format.extension

    @property
    def mime_type(self) -> str:
        """Return the MIME type for the format."""
        return self.image_format.mime_type
