"""SVG encoder serializing layout operations as vector primitives."""

from __future__ import annotations

from xml.etree import ElementTree as ET

from codeshot.exceptions import EncodingError
from codeshot.typing.enums import DrawKind, ImageFormat
from codeshot.typing.models import DrawOp, EncodedImage, Layout, PixelBuffer

SVG_NS = "http://www.w3.org/2000/svg"
_XML_SPACE = "{http://www.w3.org/XML/1998/namespace}space"
_FLOAT_DECIMALS = 3


def _fmt(value: float) -> str:
    """Format a coordinate deterministically, without trailing zeros."""
    text = f"{float(value):.{_FLOAT_DECIMALS}f}".rstrip("0").rstrip(".")
    return "0" if text in {"", "-0"} else text


def _paint_attributes(operation: DrawOp) -> dict[str, str]:
    attributes = {"fill": operation.color.to_hex()}
    if operation.color.a < 255:
        attributes["fill-opacity"] = _fmt(operation.color.opacity)
    return attributes


def _rect_element(operation: DrawOp) -> ET.Element:
    return ET.Element(
        "rect",
        {
            "x": _fmt(operation.x),
            "y": _fmt(operation.y),
            "width": _fmt(operation.width),
            "height": _fmt(operation.height),
            **_paint_attributes(operation),
        },
    )


def _text_element(operation: DrawOp) -> ET.Element | None:
    if not operation.text or operation.font is None:
        return None
    baseline = operation.baseline if operation.baseline is not None else operation.bottom
    attributes = {
        "x": _fmt(operation.x),
        "y": _fmt(baseline),
        "font-family": operation.font.family,
        "font-size": _fmt(operation.font.size),
        _XML_SPACE: "preserve",
        **_paint_attributes(operation),
    }
    if operation.font.bold:
        attributes["font-weight"] = "bold"
    if operation.font.italic:
        attributes["font-style"] = "italic"
    element = ET.Element("text", attributes)
    element.text = operation.text
    return element


class SvgEncoder:
    """Resolution-independent encoder for measured layouts."""

    image_format = ImageFormat.SVG

    def to_element(self, layout: Layout) -> ET.Element:
        """Build the SVG document tree of a layout.

        Args:
            layout (Layout): Measured canvas and operations.

        Returns:
            ET.Element: Root `<svg>` element.
        """
        root = ET.Element(
            "svg",
            {
                "xmlns": SVG_NS,
                "width": str(layout.width),
                "height": str(layout.height),
                "viewBox": f"0 0 {layout.width} {layout.height}",
            },
        )
        for operation in layout.operations:
            element = _text_element(operation) if operation.kind == DrawKind.GLYPH_RUN else _rect_element(operation)
            if element is not None:
                root.append(element)
        return root

    def encode(self, source: PixelBuffer | Layout) -> EncodedImage:
        """Serialize the layout as an SVG document.

        Args:
            source (PixelBuffer | Layout): Layout to serialize.

        Raises:
            EncodingError: If the source is not a layout or has zero area.

        Returns:
            EncodedImage: UTF-8 SVG payload.
        """
        if not isinstance(source, Layout):
            raise EncodingError(image_format=self.image_format.name, message="vector formats encode layouts")
        if source.pixel_count == 0:
            raise EncodingError(
                image_format=self.image_format.name,
                message=f"image has zero area ({source.width}x{source.height})",
            )
        content = ET.tostring(self.to_element(source), encoding="utf-8", xml_declaration=True)
        return EncodedImage(
            image_format=self.image_format,
            content=content,
            width=source.width,
            height=source.height,
        )
