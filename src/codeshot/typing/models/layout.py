"""Positioned draw operations handed from layout to rasterization."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from codeshot.typing.enums import DrawKind
from codeshot.typing.models.styled_text import Color, FontDescriptor


class DrawOp(BaseModel):
    """One positioned draw operation in canvas pixel space."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: DrawKind
    x: float
    y: float
    width: float = Field(ge=0)
    height: float = Field(ge=0)
    color: Color
    text: str | None = None
    font: FontDescriptor | None = None
    baseline: float | None = None

    @property
    def right(self) -> float:
        """Return the right edge."""
        return self.x + self.width

    @property
    def bottom(self) -> float:
        """Return the bottom edge."""
        return self.y + self.height


class Layout(BaseModel):
    """Fully measured canvas and its ordered draw operations."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    width: int = Field(ge=0)
    height: int = Field(ge=0)
    operations: tuple[DrawOp, ...] = ()
    scale: float = Field(default=1.0, gt=0)
    padding: int = Field(default=0, ge=0)

    @property
    def pixel_count(self) -> int:
        """Return the canvas area in pixels."""
        return self.width * self.height

    def operations_of(self, kind: DrawKind) -> list[DrawOp]:
        """Return operations of a single kind, in paint order.

        Args:
            kind (DrawKind): Operation kind.

        Returns:
            list[DrawOp]: Matching operations.
        """
        return [operation for operation in self.operations if operation.kind == kind]
