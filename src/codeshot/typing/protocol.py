"""Capability interfaces consumed by the rendering pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Mapping

    from codeshot.typing.enums import ImageFormat, Representation
    from codeshot.typing.models import EncodedImage, FontDescriptor, Layout, PixelBuffer


class FontMetrics(Protocol):
    """Text measurement capability for a font descriptor."""

    def advance(self, text: str, font: FontDescriptor) -> float:
        """Return the horizontal advance of `text`.

        Args:
            text: Text to measure.
            font: Font descriptor.

        Returns:
            float: Advance width in unscaled pixels.
        """

    def line_height(self, font: FontDescriptor) -> float:
        """Return the line height of the font.

        Args:
            font: Font descriptor.

        Returns:
            float: Line height in unscaled pixels.
        """

    def ascent(self, font: FontDescriptor) -> float:
        """Return the distance from the line top to the baseline.

        Args:
            font: Font descriptor.

        Returns:
            float: Ascent in unscaled pixels.
        """


class ImageEncoder(Protocol):
    """Format-specific encoder."""

    image_format: ImageFormat

    def encode(self, source: PixelBuffer | Layout) -> EncodedImage:
        """Encode a rendered selection.

        Raster encoders accept a `PixelBuffer`; vector encoders accept the `Layout`.

        Args:
            source: Pixels or layout, depending on the format.

        Returns:
            EncodedImage: Encoded payload.
        """


class ClipboardBackend(Protocol):
    """Platform clipboard binding installed by the host application."""

    def set_contents(self, payload: Mapping[Representation, object]) -> None:
        """Replace the clipboard contents with a multi-representation payload.

        Args:
            payload: Data keyed by representation.
        """
