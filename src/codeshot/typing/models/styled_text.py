"""Styled-text selection models supplied by the host editor."""

from __future__ import annotations

from collections import defaultdict

from pydantic import BaseModel, ConfigDict, Field, field_validator

_HEX_DIGITS_RGB = 6
_HEX_DIGITS_RGBA = 8


class Color(BaseModel):
    """RGBA color with 8-bit channels."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    r: int = Field(ge=0, le=255)
    g: int = Field(ge=0, le=255)
    b: int = Field(ge=0, le=255)
    a: int = Field(default=255, ge=0, le=255)

    @classmethod
    def from_hex(cls, value: str) -> Color:
        """Parse a `#RRGGBB` or `#RRGGBBAA` color.

        Args:
            value (str): Hex color text.

        Raises:
            ValueError: If the text is not a supported hex color.

        Returns:
            Color: Parsed color.
        """
        digits = value.strip().removeprefix("#")
        if len(digits) not in {_HEX_DIGITS_RGB, _HEX_DIGITS_RGBA}:
            raise ValueError(f"Unsupported color value '{value}'")  # noqa: TRY003
        try:
            channels = [int(digits[idx : idx + 2], 16) for idx in range(0, len(digits), 2)]
        except ValueError as exc:
            raise ValueError(f"Unsupported color value '{value}'") from exc  # noqa: TRY003
        alpha = channels[3] if len(digits) == _HEX_DIGITS_RGBA else 255
        return cls(r=channels[0], g=channels[1], b=channels[2], a=alpha)

    def as_tuple(self) -> tuple[int, int, int, int]:
        """Return the color as an `(r, g, b, a)` tuple."""
        return (self.r, self.g, self.b, self.a)

    def to_hex(self) -> str:
        """Return the opaque part of the color as `#RRGGBB`."""
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}"

    @property
    def opacity(self) -> float:
        """Return alpha as a 0..1 float."""
        return self.a / 255


BLACK = Color(r=0, g=0, b=0)
WHITE = Color(r=255, g=255, b=255)


class FontDescriptor(BaseModel):
    """Font family, pixel size and style bits of a text segment."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    family: str = "DejaVu Sans Mono"
    size: float = Field(default=13.0, gt=0)
    bold: bool = False
    italic: bool = False

    def scaled(self, factor: float) -> FontDescriptor:
        """Return a copy whose size is multiplied by `factor`."""
        return self.model_copy(update={"size": self.size * factor})


class TextSegment(BaseModel):
    """Run of characters sharing one set of visual attributes."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    text: str
    font: FontDescriptor = Field(default_factory=FontDescriptor)
    foreground: Color = BLACK
    background: Color | None = None
    line: int = Field(ge=0)
    column: int = Field(default=0, ge=0)

    @field_validator("text")
    @classmethod
    def _validate_single_line(cls, value: str) -> str:
        """Reject segments spanning several lines.

        Args:
            value (str): Segment text.

        Raises:
            ValueError: If the text contains a line break.

        Returns:
            str: Validated text.
        """
        if "\n" in value or "\r" in value:
            raise ValueError("Segment text must not contain line breaks")  # noqa: TRY003
        return value

    @property
    def end_column(self) -> int:
        """Return the column right after the last character."""
        return self.column + len(self.text)


class CaretMarker(BaseModel):
    """Caret position captured together with the selection."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    line: int = Field(ge=0)
    column: int = Field(ge=0)
    visible: bool = True


class StyledTextModel(BaseModel):
    """Attributed representation of an editor selection."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    segments: tuple[TextSegment, ...] = ()
    carets: tuple[CaretMarker, ...] = ()
    default_font: FontDescriptor = Field(default_factory=FontDescriptor)
    background: Color | None = None
    caret_color: Color = BLACK

    @property
    def is_empty(self) -> bool:
        """Return whether the model holds no segments."""
        return not self.segments

    @property
    def first_line(self) -> int | None:
        """Return the first line index covered by segments."""
        return min((segment.line for segment in self.segments), default=None)

    @property
    def last_line(self) -> int | None:
        """Return the last line index covered by segments."""
        return max((segment.line for segment in self.segments), default=None)

    def segments_by_line(self) -> dict[int, list[TextSegment]]:
        """Group segments per line, each line sorted by column.

        Returns:
            dict[int, list[TextSegment]]: Segments keyed by line index.
        """
        grouped: dict[int, list[TextSegment]] = defaultdict(list)
        for segment in self.segments:
            grouped[segment.line].append(segment)
        return {line: sorted(items, key=lambda item: item.column) for line, items in grouped.items()}

    def line_text(self, line: int) -> str:
        """Return the visible text of a line, column gaps filled with spaces.

        Args:
            line (int): Line index.

        Returns:
            str: Reconstructed line text starting at column 0.
        """
        text = ""
        for segment in self.segments_by_line().get(line, []):
            text = text.ljust(segment.column) + segment.text
        return text
