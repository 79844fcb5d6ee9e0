"""Project enums."""

from __future__ import annotations

from enum import StrEnum


class _EnumMixin(StrEnum):
    """Shared conversion helpers for user-facing enums."""

    @classmethod
    def from_str(cls, value: str) -> _EnumMixin:
        """Parse enum from string.

        Args:
            value: Raw string value.

        Raises:
            ValueError: If the value is not supported.

        Returns:
            _EnumMixin: Parsed enum value.
        """
        try:
            return cls(value.strip().lower())
        except ValueError as exc:
            supported = ", ".join(member.value for member in cls)
            message = f"Unsupported {cls.__name__} value '{value}'. Expected one of: {supported}"
            raise ValueError(message) from exc

    def to_str(self) -> str:
        """Return string representation.

        Returns:
            str: Enum string value.
        """
        return self.value


class ImageFormat(_EnumMixin):
    """Output image formats.

    Declaration order is persisted as an ordinal in project options: append new
    members at the end, never reorder.
    """

    PNG = "png"
    SVG = "svg"
    JPEG = "jpeg"

    @classmethod
    def _missing_(cls, value: object) -> ImageFormat | None:
        if isinstance(value, str) and value.lower() == "jpg":
            return cls.JPEG
        return None

    @classmethod
    def ordered(cls) -> list[ImageFormat]:
        """Return formats in their stable, user-facing order."""
        return list(cls)

    @classmethod
    def from_ordinal(cls, ordinal: int) -> ImageFormat:
        """Return the format stored at a persisted ordinal.

        Args:
            ordinal: Zero-based position in `ordered()`.

        Raises:
            ValueError: If the ordinal is out of range.

        Returns:
            ImageFormat: Matching format.
        """
        members = cls.ordered()
        if not 0 <= ordinal < len(members):
            raise ValueError(f"Unknown {cls.__name__} ordinal {ordinal}")  # noqa: TRY003
        return members[ordinal]

    @property
    def ordinal(self) -> int:
        """Return the persisted ordinal of the format."""
        return type(self).ordered().index(self)

    @property
    def mime_type(self) -> str:
        """Return the MIME type used for clipboard transfer."""
        return _MIME_BY_FORMAT[self]

    @property
    def extension(self) -> str:
        """Return the file extension (without dot) used when saving."""
        return _EXTENSION_BY_FORMAT[self]

    @property
    def is_vector(self) -> bool:
        """Return whether the format is encoded from the layout rather than pixels."""
        return self is ImageFormat.SVG


_MIME_BY_FORMAT = {
    ImageFormat.PNG: "image/png",
    ImageFormat.SVG: "image/svg+xml",
    ImageFormat.JPEG: "image/jpeg",
}

_EXTENSION_BY_FORMAT = {
    ImageFormat.PNG: "png",
    ImageFormat.SVG: "svg",
    ImageFormat.JPEG: "jpg",
}


class DrawKind(_EnumMixin):
    """Kinds of positioned draw operations."""

    BACKGROUND_RECT = "background_rect"
    GLYPH_RUN = "glyph_run"
    CARET_MARK = "caret_mark"


class Representation(_EnumMixin):
    """Data representations a transfer package can offer."""

    NATIVE_IMAGE = "native_image"
    ENCODED_BYTES = "encoded_bytes"
    TEXT = "text"
    FILE_LIST = "file_list"
