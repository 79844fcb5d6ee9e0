from __future__ import annotations

import pytest

from codeshot.exceptions import ModelError
from codeshot.layout import CARET_WIDTH, layout, min_indent
from codeshot.typing.enums import DrawKind
from codeshot.typing.models import CaretMarker, Color, FontDescriptor, RenderOptions, StyledTextModel, TextSegment

RED = Color(r=255, g=0, b=0)
BLUE = Color(r=0, g=0, b=255)


def _model(*lines: str, carets: tuple[CaretMarker, ...] = ()) -> StyledTextModel:
    segments = tuple(TextSegment(text=text, line=index) for index, text in enumerate(lines))
    return StyledTextModel(segments=segments, carets=carets)


def test_empty_model_yields_padding_only_canvas(fixed_metrics) -> None:
    result = layout(StyledTextModel(), RenderOptions(padding=3), metrics=fixed_metrics)

    assert (result.width, result.height) == (6, 6)
    assert result.operations == ()


def test_single_character_canvas_and_glyph(fixed_metrics) -> None:
    options = RenderOptions(padding=5, scale=1.0, chop_indentation=False)

    result = layout(_model("x"), options, metrics=fixed_metrics)

    assert (result.width, result.height) == (20, 30)
    [glyph] = result.operations_of(DrawKind.GLYPH_RUN)
    assert glyph.text == "x"
    assert (glyph.x, glyph.y) == (5, 5)
    assert glyph.baseline == 20


def test_chop_indentation_uses_minimum_indent(fixed_metrics) -> None:
    model = _model("    a", "  b")

    chopped = layout(model, RenderOptions(chop_indentation=True), metrics=fixed_metrics)
    unchopped = layout(model, RenderOptions(chop_indentation=False), metrics=fixed_metrics)

    assert [op.text for op in chopped.operations_of(DrawKind.GLYPH_RUN)] == ["  a", "b"]
    assert chopped.width == 30
    assert unchopped.width == 50
    assert chopped.height == unchopped.height


def test_chop_indentation_drops_whitespace_only_segments(fixed_metrics) -> None:
    segments = (
        TextSegment(text="    ", line=0, column=0),
        TextSegment(text="a", line=0, column=4),
        TextSegment(text="  ", line=1, column=0),
        TextSegment(text="b", line=1, column=2),
    )
    model = StyledTextModel(segments=segments)

    result = layout(model, RenderOptions(), metrics=fixed_metrics)

    glyphs = result.operations_of(DrawKind.GLYPH_RUN)
    assert [(op.text, op.x) for op in glyphs] == [("  ", 0), ("a", 20), ("b", 0)]


@pytest.mark.parametrize("lines", [("x",), ("  a", "    b"), ("\tx", "", "  y  ")])
def test_chop_indentation_never_widens(fixed_metrics, lines: tuple[str, ...]) -> None:
    model = _model(*lines)

    chopped = layout(model, RenderOptions(chop_indentation=True), metrics=fixed_metrics)
    unchopped = layout(model, RenderOptions(chop_indentation=False), metrics=fixed_metrics)

    assert chopped.width <= unchopped.width
    assert chopped.height == unchopped.height


def test_min_indent_ignores_blank_lines() -> None:
    assert min_indent(_model("    a", "  ", "      b")) == 4
    assert min_indent(_model("   ", "  ")) == 0


def test_scale_multiplies_geometry(fixed_metrics) -> None:
    model = _model("ab", "c")

    single = layout(model, RenderOptions(scale=1.0), metrics=fixed_metrics)
    double = layout(model, RenderOptions(scale=2.0), metrics=fixed_metrics)

    assert (double.width, double.height) == (2 * single.width, 2 * single.height)
    for small, large in zip(single.operations, double.operations, strict=True):
        assert large.x == pytest.approx(2 * small.x)
        assert large.y == pytest.approx(2 * small.y)
        assert large.width == pytest.approx(2 * small.width)
    [first, _] = double.operations_of(DrawKind.GLYPH_RUN)
    assert first.font is not None
    assert first.font.size == pytest.approx(2 * model.default_font.size)


def test_padding_is_not_scaled(fixed_metrics) -> None:
    result = layout(_model("x"), RenderOptions(scale=3.0, padding=4), metrics=fixed_metrics)

    assert (result.width, result.height) == (30 + 8, 60 + 8)
    [glyph] = result.operations_of(DrawKind.GLYPH_RUN)
    assert glyph.x == 4


def test_canvas_rounds_fractional_scale_up(fixed_metrics) -> None:
    result = layout(_model("x"), RenderOptions(scale=1.25), metrics=fixed_metrics)

    assert (result.width, result.height) == (13, 25)


def test_lines_without_segments_use_default_line_height(fixed_metrics) -> None:
    model = StyledTextModel(segments=(TextSegment(text="a", line=0), TextSegment(text="b", line=2)))

    result = layout(model, RenderOptions(), metrics=fixed_metrics)

    assert result.height == 60
    assert [op.y for op in result.operations_of(DrawKind.GLYPH_RUN)] == [0, 40]


def test_caret_mark_at_column(fixed_metrics) -> None:
    model = _model("abc", carets=(CaretMarker(line=0, column=1),))

    result = layout(model, RenderOptions(padding=2), metrics=fixed_metrics)

    [caret] = result.operations_of(DrawKind.CARET_MARK)
    assert (caret.x, caret.y) == (12, 2)
    assert (caret.width, caret.height) == (CARET_WIDTH, 20)
    assert result.operations[-1] == caret


def test_caret_past_line_end_measures_spaces(fixed_metrics) -> None:
    model = _model("ab", carets=(CaretMarker(line=0, column=4),))

    result = layout(model, RenderOptions(), metrics=fixed_metrics)

    [caret] = result.operations_of(DrawKind.CARET_MARK)
    assert caret.x == 40


class _SizeProportionalMetrics:
    """Every character is as wide as the font size."""

    def advance(self, text: str, font: FontDescriptor) -> float:
        return font.size * len(text)

    def line_height(self, font: FontDescriptor) -> float:
        return font.size * 2

    def ascent(self, font: FontDescriptor) -> float:
        return font.size


def test_caret_in_gap_uses_following_segment_font() -> None:
    small = FontDescriptor(size=10)
    large = FontDescriptor(size=20)
    model = StyledTextModel(
        segments=(
            TextSegment(text="ab", font=small, line=0, column=0),
            TextSegment(text="cd", font=large, line=0, column=4),
        ),
        carets=(CaretMarker(line=0, column=3),),
        default_font=FontDescriptor(size=13),
    )

    result = layout(model, RenderOptions(chop_indentation=False), metrics=_SizeProportionalMetrics())

    [first, second] = result.operations_of(DrawKind.GLYPH_RUN)
    [caret] = result.operations_of(DrawKind.CARET_MARK)
    assert (first.x, second.x) == (0, 60)
    assert caret.x == 40


def test_remove_caret_drops_all_caret_marks(fixed_metrics) -> None:
    carets = (CaretMarker(line=0, column=0), CaretMarker(line=1, column=1))
    model = _model("ab", "cd", carets=carets)

    kept = layout(model, RenderOptions(remove_caret=False), metrics=fixed_metrics)
    removed = layout(model, RenderOptions(remove_caret=True), metrics=fixed_metrics)

    assert len(kept.operations_of(DrawKind.CARET_MARK)) == 2
    assert removed.operations_of(DrawKind.CARET_MARK) == []
    assert (kept.width, kept.height) == (removed.width, removed.height)


def test_invisible_and_out_of_range_carets_are_skipped(fixed_metrics) -> None:
    carets = (CaretMarker(line=0, column=0, visible=False), CaretMarker(line=7, column=0))

    result = layout(_model("ab", carets=carets), RenderOptions(), metrics=fixed_metrics)

    assert result.operations_of(DrawKind.CARET_MARK) == []


def test_adjacent_segments_with_same_background_share_one_rect(fixed_metrics) -> None:
    segments = (
        TextSegment(text="ab", line=0, column=0, background=RED),
        TextSegment(text="cd", line=0, column=2, background=RED),
        TextSegment(text="ef", line=0, column=4, background=BLUE),
        TextSegment(text="gh", line=0, column=7, background=BLUE),
    )

    result = layout(StyledTextModel(segments=segments), RenderOptions(), metrics=fixed_metrics)

    rects = result.operations_of(DrawKind.BACKGROUND_RECT)
    assert [(op.x, op.width, op.color) for op in rects] == [(0, 40, RED), (40, 20, BLUE), (70, 20, BLUE)]


def test_model_background_is_painted_first_across_canvas(fixed_metrics) -> None:
    model = StyledTextModel(segments=(TextSegment(text="x", line=0),), background=BLUE)

    result = layout(model, RenderOptions(padding=6), metrics=fixed_metrics)

    first = result.operations[0]
    assert first.kind == DrawKind.BACKGROUND_RECT
    assert (first.x, first.y, first.width, first.height) == (0, 0, result.width, result.height)


def test_operations_are_ordered_by_kind(fixed_metrics) -> None:
    segments = (TextSegment(text="ab", line=0, background=RED), TextSegment(text="cd", line=1, background=RED))
    model = StyledTextModel(segments=segments, carets=(CaretMarker(line=0, column=0),))

    result = layout(model, RenderOptions(), metrics=fixed_metrics)

    assert [op.kind for op in result.operations] == [
        DrawKind.BACKGROUND_RECT,
        DrawKind.BACKGROUND_RECT,
        DrawKind.GLYPH_RUN,
        DrawKind.GLYPH_RUN,
        DrawKind.CARET_MARK,
    ]


def test_overlapping_segments_raise_model_error(fixed_metrics) -> None:
    segments = (TextSegment(text="abc", line=0, column=0), TextSegment(text="x", line=0, column=2))

    with pytest.raises(ModelError, match="Overlapping segments on line 0"):
        layout(StyledTextModel(segments=segments), RenderOptions(), metrics=fixed_metrics)
