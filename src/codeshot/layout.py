"""Measure a styled-text selection into positioned draw operations."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from codeshot.exceptions import ModelError
from codeshot.fonts import PillowFontMetrics, build_font_resolver
from codeshot.typing.enums import DrawKind
from codeshot.typing.models import DrawOp, Layout

if TYPE_CHECKING:
    from codeshot.typing.models import (
        CaretMarker,
        FontDescriptor,
        RenderOptions,
        StyledTextModel,
        TextSegment,
    )
    from codeshot.typing.protocol import FontMetrics

CARET_WIDTH = 2.0
_ROUNDING_DIGITS = 6


@dataclass(frozen=True)
class _Run:
    """Segment text left after chopping, placed on its line."""

    segment: TextSegment
    text: str
    column: int
    x: float
    width: float

    @property
    def end_column(self) -> int:
        return self.column + len(self.text)


@dataclass
class _Line:
    top: float
    height: float
    ascent: float
    runs: list[_Run] = field(default_factory=list)
    width: float = 0.0


def min_indent(model: StyledTextModel) -> int:
    """Return the smallest leading indentation over non-blank lines.

    Args:
        model (StyledTextModel): Selection to inspect.

    Returns:
        int: Column of the leftmost first non-whitespace character, 0 when
        every line is blank.
    """
    indents = []
    for line in model.segments_by_line():
        text = model.line_text(line)
        stripped = text.lstrip()
        if stripped:
            indents.append(len(text) - len(stripped))
    return min(indents, default=0)


def _check_overlaps(lines: dict[int, list[TextSegment]]) -> None:
    for line, segments in lines.items():
        for previous, current in zip(segments, segments[1:], strict=False):
            if current.column < previous.end_column:
                raise ModelError(
                    message=(
                        f"Overlapping segments on line {line}: column {current.column} "
                        f"starts before column {previous.end_column}"
                    ),
                )


def _measure_line(
    segments: list[TextSegment],
    *,
    origin: int,
    top: float,
    default_font: FontDescriptor,
    metrics: FontMetrics,
) -> _Line:
    fonts = [segment.font for segment in segments] or [default_font]
    line = _Line(
        top=top,
        height=max(metrics.line_height(font) for font in fonts),
        ascent=max(metrics.ascent(font) for font in fonts),
    )

    cursor = 0.0
    previous_end = origin
    for segment in segments:
        if segment.end_column <= origin:
            continue
        text = segment.text
        column = segment.column
        if column < origin:
            text = text[origin - column :]
            column = origin
        if column > previous_end:
            gap_font = segment.font if line.runs else default_font
            cursor += metrics.advance(" " * (column - previous_end), gap_font)
        width = metrics.advance(text, segment.font)
        line.runs.append(_Run(segment=segment, text=text, column=column, x=cursor, width=width))
        cursor += width
        previous_end = column + len(text)

    line.width = cursor
    return line


def _caret_x(
    line: _Line,
    caret: CaretMarker,
    *,
    origin: int,
    default_font: FontDescriptor,
    metrics: FontMetrics,
) -> float:
    column = max(caret.column, origin)
    cursor = 0.0
    previous_end = origin
    gap_font = default_font
    for index, run in enumerate(line.runs):
        if run.column <= column <= run.end_column:
            return run.x + metrics.advance(run.text[: column - run.column], run.segment.font)
        if run.column > column:
            # Gaps between runs are measured in the font of the run that follows.
            if index > 0:
                gap_font = run.segment.font
            break
        cursor = run.x + run.width
        previous_end = run.end_column
    return cursor + metrics.advance(" " * (column - previous_end), gap_font)


def _pixels(value: float, scale: float) -> int:
    return math.ceil(round(value * scale, _ROUNDING_DIGITS))


def _background_ops(line: _Line, *, scale: float, padding: int) -> list[DrawOp]:
    operations: list[DrawOp] = []
    start: _Run | None = None
    end: _Run | None = None

    def flush() -> None:
        if start is None or end is None or start.segment.background is None:
            return
        operations.append(
            DrawOp(
                kind=DrawKind.BACKGROUND_RECT,
                x=padding + start.x * scale,
                y=padding + line.top * scale,
                width=(end.x + end.width - start.x) * scale,
                height=line.height * scale,
                color=start.segment.background,
            ),
        )

    for run in line.runs:
        contiguous = end is not None and run.column == end.end_column
        if start is not None and contiguous and run.segment.background == start.segment.background:
            end = run
            continue
        flush()
        start = end = run
    flush()
    return operations


def layout(model: StyledTextModel, options: RenderOptions, *, metrics: FontMetrics | None = None) -> Layout:
    """Compute the canvas size and ordered draw operations of a selection.

    The function has no side effects. Geometry is measured in unscaled pixels,
    multiplied by `options.scale` as the last step, then inset by the unscaled
    `options.padding` on every side.

    Args:
        model (StyledTextModel): Selection to lay out.
        options (RenderOptions): Scale, padding, chopping and caret options.
        metrics (FontMetrics | None): Measurement capability; Pillow fonts when omitted.

    Raises:
        ModelError: If two segments of one line overlap.

    Returns:
        Layout: Canvas size and operations ordered background rects, glyph
        runs, then caret marks.
    """
    scale = options.scale
    padding = options.padding
    if model.is_empty or model.first_line is None or model.last_line is None:
        return Layout(width=2 * padding, height=2 * padding, scale=scale, padding=padding)

    lines_by_index = model.segments_by_line()
    _check_overlaps(lines_by_index)
    if metrics is None:
        metrics = PillowFontMetrics(build_font_resolver())

    origin = min_indent(model) if options.chop_indentation else 0
    lines: dict[int, _Line] = {}
    top = 0.0
    for index in range(model.first_line, model.last_line + 1):
        line = _measure_line(
            lines_by_index.get(index, []),
            origin=origin,
            top=top,
            default_font=model.default_font,
            metrics=metrics,
        )
        lines[index] = line
        top += line.height

    width = _pixels(max(line.width for line in lines.values()), scale) + 2 * padding
    height = _pixels(top, scale) + 2 * padding

    operations: list[DrawOp] = []
    if model.background is not None:
        operations.append(
            DrawOp(kind=DrawKind.BACKGROUND_RECT, x=0, y=0, width=width, height=height, color=model.background),
        )
    for line in lines.values():
        operations.extend(_background_ops(line, scale=scale, padding=padding))

    for line in lines.values():
        for run in line.runs:
            if not run.text:
                continue
            operations.append(
                DrawOp(
                    kind=DrawKind.GLYPH_RUN,
                    x=padding + run.x * scale,
                    y=padding + line.top * scale,
                    width=run.width * scale,
                    height=line.height * scale,
                    color=run.segment.foreground,
                    text=run.text,
                    font=run.segment.font.scaled(scale),
                    baseline=padding + (line.top + line.ascent) * scale,
                ),
            )

    if not options.remove_caret:
        for caret in model.carets:
            line = lines.get(caret.line)
            if not caret.visible or line is None:
                continue
            x = _caret_x(line, caret, origin=origin, default_font=model.default_font, metrics=metrics)
            operations.append(
                DrawOp(
                    kind=DrawKind.CARET_MARK,
                    x=padding + x * scale,
                    y=padding + line.top * scale,
                    width=CARET_WIDTH * scale,
                    height=line.height * scale,
                    color=model.caret_color,
                ),
            )

    return Layout(width=width, height=height, operations=tuple(operations), scale=scale, padding=padding)
