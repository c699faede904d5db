"""Tests for turning finished strokes into board primitives."""

import pytest

from shapesnap.board.correction import (
    correct_stroke, element_from_verdict, finalize_stroke, make_path_element,
)
from shapesnap.models import (
    CircleElement, ElementKind, LineElement, PathElement, Point,
    RectangleElement, ShapeKind, ShapeVerdict, TriangleElement,
)


def P(x, y):
    return Point(x=x, y=y)


class TestCorrectStroke:
    """Tests for single-stroke correction."""

    def test_square_becomes_rectangle(self, square_stroke):
        """Test that the rectangle inherits identity and pen from the stroke."""
        stroke = make_path_element(square_stroke, color="#fca5a5", stroke_width=8)

        corrected, verdict = correct_stroke(stroke)

        assert verdict.kind == ShapeKind.SQUARE
        assert isinstance(corrected, RectangleElement)
        assert corrected.element_id == stroke.element_id
        assert corrected.color == "#fca5a5"
        assert corrected.stroke_width == 8
        assert corrected.width == pytest.approx(100, abs=1)
        assert corrected.height == pytest.approx(100, abs=1)

    def test_line_uses_stroke_endpoints(self, line_stroke):
        stroke = make_path_element(line_stroke)

        corrected, _ = correct_stroke(stroke)

        assert isinstance(corrected, LineElement)
        assert corrected.start == line_stroke[0]
        assert corrected.end == line_stroke[-1]

    def test_circle(self, circle_stroke):
        corrected, _ = correct_stroke(make_path_element(circle_stroke))

        assert isinstance(corrected, CircleElement)
        assert corrected.x == pytest.approx(50, abs=0.5)
        assert corrected.width == pytest.approx(100, abs=0.5)

    def test_triangle_keeps_vertices(self, triangle_stroke):
        """Test that the recognized vertices are stored on the element."""
        corrected, verdict = correct_stroke(make_path_element(triangle_stroke))

        assert isinstance(corrected, TriangleElement)
        assert corrected.vertices == verdict.vertices

    def test_unrecognized_stays_freehand(self):
        scribble = [P(0, 0), P(5, 5), P(10, 0)]
        stroke = make_path_element(scribble)

        corrected, verdict = correct_stroke(stroke)

        assert verdict.kind == ShapeKind.NONE
        assert corrected is stroke

    def test_eraser_is_never_corrected(self, square_stroke):
        eraser = make_path_element(square_stroke, eraser=True)

        corrected, verdict = correct_stroke(eraser)

        assert corrected is eraser
        assert verdict is None
        assert eraser.kind == ElementKind.ERASER


class TestElementFromVerdict:
    """Tests for building primitives from verdicts."""

    def test_default_triangle_without_vertices(self, square_stroke):
        stroke = make_path_element(square_stroke)

        element = element_from_verdict(stroke, ShapeVerdict(kind=ShapeKind.TRIANGLE))

        assert isinstance(element, TriangleElement)
        assert element.vertices is None


class TestFinalizeStroke:
    """Tests for appending to a board."""

    def test_board_is_not_mutated(self, square_stroke):
        """Test that finalizing returns a new list and leaves the old one alone."""
        existing = [make_path_element([P(0, 0), P(1, 1)])]
        before = list(existing)

        board = finalize_stroke(existing, make_path_element(square_stroke))

        assert existing == before
        assert len(board) == 2
        assert isinstance(board[-1], RectangleElement)

    def test_ids_are_content_based(self, square_stroke):
        a = make_path_element(square_stroke)
        b = make_path_element(list(square_stroke))

        assert a.element_id == b.element_id
        assert a.element_id.startswith("freehand_")

    def test_index_distinguishes_identical_strokes(self, square_stroke):
        """Test that the board position is part of the id when given."""
        first = make_path_element(square_stroke, index=0)
        second = make_path_element(square_stroke, index=1)

        assert first.element_id != second.element_id
        assert second.element_id.startswith("freehand_001_")

    def test_elements_are_frozen(self, square_stroke):
        element = make_path_element(square_stroke)
        with pytest.raises(Exception):
            element.color = "#000000"
        assert isinstance(element, PathElement)
