"""
Stroke correction: turning a finished freehand stroke into a primitive.

The corrected element inherits the id, color and stroke width of the stroke
it replaces. Boards are plain lists and are never mutated; finalizing a
stroke returns a new list.
"""

from shapesnap.config import RecognitionConfig
from shapesnap.geometry.metrics import bounding_box
from shapesnap.models import (
    CircleElement, ElementKind, LineElement, PathElement, RectangleElement,
    ShapeKind, TriangleElement, generate_element_id,
)
from shapesnap.recognition.classifier import classify
from shapesnap.tracer import get_tracer


def make_path_element(points, color="#ffffff", stroke_width=4.0, eraser=False, index=None):
    """
    Build a freehand (or eraser) element with a content-based id.

    When index (the stroke's position on the board) is given it is part of
    the id, so identical strokes drawn twice get distinct ids.
    """
    kind = ElementKind.ERASER if eraser else ElementKind.FREEHAND
    prefix = kind.value if index is None else f"{kind.value}_{index:03d}"
    return PathElement(
        element_id=generate_element_id(points, prefix=prefix),
        kind=kind.value,
        color=color,
        stroke_width=stroke_width,
        points=list(points),
    )


def element_from_verdict(element, verdict):
    """
    Build the primitive that replaces a freehand element.

    Returns the element itself when the verdict is NONE.
    """
    points = element.points
    inherited = dict(
        element_id=element.element_id,
        color=element.color,
        stroke_width=element.stroke_width,
    )

    if verdict.kind == ShapeKind.LINE:
        return LineElement(start=points[0], end=points[-1], **inherited)

    if verdict.kind == ShapeKind.NONE:
        return element

    box = bounding_box(points)
    geometry = dict(x=box.x, y=box.y, width=box.width, height=box.height)

    if verdict.kind == ShapeKind.SQUARE:
        return RectangleElement(**geometry, **inherited)

    if verdict.kind == ShapeKind.CIRCLE:
        return CircleElement(**geometry, **inherited)

    return TriangleElement(vertices=verdict.vertices, **geometry, **inherited)


def correct_stroke(element, config=None):
    """
    Auto-correct one finished stroke.

    Only freehand pen strokes are classified; erasers and other elements
    come back unchanged.

    Returns:
        tuple of (element, verdict); verdict is None when no classification ran
    """
    if not isinstance(element, PathElement) or element.kind != ElementKind.FREEHAND:
        return element, None

    verdict = classify(element.points, config or RecognitionConfig())
    corrected = element_from_verdict(element, verdict)

    if corrected is not element:
        get_tracer().event(
            f"Corrected {element.element_id} -> {corrected.kind}",
            points=element.points,
        )
    return corrected, verdict


def finalize_stroke(elements, element, config=None):
    """
    Append a finished stroke, corrected when recognized, to a board.

    Returns:
        new list of elements; the input list is left untouched
    """
    corrected, _ = correct_stroke(element, config)
    return list(elements) + [corrected]
