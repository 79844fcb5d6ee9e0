"""Multi-representation payload built once per screenshot action."""

from __future__ import annotations

from typing import TYPE_CHECKING, Self

from pydantic import BaseModel, ConfigDict, model_validator

from codeshot.exceptions import UnsupportedRepresentationError
from codeshot.typing.enums import ImageFormat, Representation
from codeshot.typing.models import EncodedImage, PixelBuffer

if TYPE_CHECKING:
    from PIL import Image

_RASTER_REPRESENTATIONS = (Representation.NATIVE_IMAGE, Representation.ENCODED_BYTES, Representation.FILE_LIST)
_VECTOR_REPRESENTATIONS = (Representation.ENCODED_BYTES, Representation.TEXT, Representation.FILE_LIST)


class TransferPackage(BaseModel):
    """Encoded image plus the representations it can be transferred as.

    Raster packages offer a native image, the encoded bytes and a file list.
    Vector packages offer the encoded bytes, the document text and a file list.
    The offered set is fixed at construction.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    image: EncodedImage
    buffer: PixelBuffer | None = None

    @model_validator(mode="after")
    def _check_buffer_matches(self) -> Self:
        if self.buffer is not None and (self.buffer.width, self.buffer.height) != (
            self.image.width,
            self.image.height,
        ):
            raise ValueError("Pixel buffer size does not match the encoded image")  # noqa: TRY003
        return self

    @property
    def image_format(self) -> ImageFormat:
        """Return the format of the encoded image."""
        return self.image.image_format

    @property
    def representations(self) -> tuple[Representation, ...]:
        """Return the offered representations in preference order."""
        if self.image_format.is_vector:
            return _VECTOR_REPRESENTATIONS
        if self.buffer is None:
            return tuple(rep for rep in _RASTER_REPRESENTATIONS if rep is not Representation.NATIVE_IMAGE)
        return _RASTER_REPRESENTATIONS

    def supports(self, representation: Representation) -> bool:
        """Return whether a representation is offered."""
        return representation in self.representations

    def _require(self, representation: Representation) -> None:
        if not self.supports(representation):
            raise UnsupportedRepresentationError(
                representation=representation.value,
                image_format=self.image_format.name,
            )

    def as_native_image(self) -> Image.Image:
        """Return a new Pillow image of the pixels.

        Raises:
            UnsupportedRepresentationError: If the package holds no pixel buffer.

        Returns:
            Image.Image: Fresh image; callers may mutate it freely.
        """
        self._require(Representation.NATIVE_IMAGE)
        buffer = self.buffer
        if buffer is None:
            raise UnsupportedRepresentationError(
                representation=Representation.NATIVE_IMAGE.value,
                image_format=self.image_format.name,
            )
        return buffer.to_image()

    def as_bytes(self) -> tuple[bytes, str]:
        """Return the encoded bytes and the file extension."""
        return self.image.content, self.image.extension

    def as_text(self) -> str:
        """Return the vector document as text.

        Raises:
            UnsupportedRepresentationError: If the format is not a vector format.

        Returns:
            str: Decoded document.
        """
        self._require(Representation.TEXT)
        return self.image.content.decode("utf-8")

    def get(self, representation: Representation) -> object:
        """Return the data of a representation.

        `FILE_LIST` yields the encoded bytes and extension; writing the file is
        the clipboard layer's job.

        Args:
            representation (Representation): Requested representation.

        Raises:
            UnsupportedRepresentationError: If the representation is not offered.

        Returns:
            object: Representation data.
        """
        self._require(representation)
        if representation is Representation.NATIVE_IMAGE:
            return self.as_native_image()
        if representation is Representation.TEXT:
            return self.as_text()
        return self.as_bytes()
