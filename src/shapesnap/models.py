"""
Pydantic data models for ShapeSnap.

Points, bounding boxes, recognition verdicts and the board elements that a
corrected stroke becomes. All models are frozen: elements are replaced, never
edited in place. Content-based ID generation provides deterministic outputs.
"""

import hashlib
import math
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Point(BaseModel):
    """A 2-D position in drawing-surface coordinates."""
    x: float
    y: float

    model_config = ConfigDict(frozen=True)


class BoundingBox(BaseModel):
    """Axis-aligned box tightly enclosing a point sequence."""
    x: float = 0.0
    y: float = 0.0
    width: float = Field(default=0.0, ge=0.0)
    height: float = Field(default=0.0, ge=0.0)

    model_config = ConfigDict(frozen=True)

    @property
    def center(self):
        return Point(x=self.x + self.width / 2, y=self.y + self.height / 2)

    @property
    def diagonal(self):
        return math.hypot(self.width, self.height)

    @property
    def area(self):
        return self.width * self.height


class ShapeKind(str, Enum):
    """Primitive a stroke can be recognized as."""
    NONE = "none"
    LINE = "line"
    TRIANGLE = "triangle"
    SQUARE = "square"
    CIRCLE = "circle"


class ShapeVerdict(BaseModel):
    """
    Outcome of classifying one stroke.

    Only TRIANGLE may carry explicit vertices (exactly three), which preserve
    the drawn orientation. The other kinds are fully described by the
    stroke's bounding box, or its endpoints for LINE.
    """
    kind: ShapeKind
    vertices: Optional[List[Point]] = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_vertices(self):
        if self.vertices is None:
            return self
        if self.kind != ShapeKind.TRIANGLE:
            raise ValueError(f"{self.kind.value} verdict cannot carry vertices")
        if len(self.vertices) != 3:
            raise ValueError(f"triangle needs 3 vertices, got {len(self.vertices)}")
        return self

    @classmethod
    def none(cls):
        return cls(kind=ShapeKind.NONE)

    @property
    def recognized(self):
        return self.kind != ShapeKind.NONE


class ElementKind(str, Enum):
    """Kinds of element that live on the board."""
    FREEHAND = "freehand"
    ERASER = "eraser"
    LINE = "line"
    RECTANGLE = "rectangle"
    CIRCLE = "circle"
    TRIANGLE = "triangle"
    TEXT = "text"
    IMAGE = "image"


class BaseElement(BaseModel):
    """Fields shared by every board element."""
    element_id: str
    color: str = "#ffffff"
    stroke_width: float = Field(default=4.0, ge=0.0)

    model_config = ConfigDict(frozen=True, extra="forbid")


class PathElement(BaseElement):
    """A freehand pen stroke or an eraser stroke."""
    kind: Literal["freehand", "eraser"] = "freehand"
    points: List[Point] = Field(default_factory=list)


class LineElement(BaseElement):
    kind: Literal["line"] = "line"
    start: Point
    end: Point


class BoxElement(BaseElement):
    """Element whose geometry is an axis-aligned box."""
    x: float = 0.0
    y: float = 0.0
    width: float = Field(default=0.0, ge=0.0)
    height: float = Field(default=0.0, ge=0.0)

    @property
    def bbox(self):
        return BoundingBox(x=self.x, y=self.y, width=self.width, height=self.height)


class RectangleElement(BoxElement):
    kind: Literal["rectangle"] = "rectangle"


class CircleElement(BoxElement):
    """Ellipse inscribed in its box."""
    kind: Literal["circle"] = "circle"


class TriangleElement(BoxElement):
    """
    Triangle inside its box.

    When vertices is None the triangle is the default one inscribed in the
    box: apex at top-center, base along the bottom edge.
    """
    kind: Literal["triangle"] = "triangle"
    vertices: Optional[List[Point]] = Field(default=None, min_length=3, max_length=3)


class TextElement(BaseElement):
    """Text anchored at its baseline start (x, y)."""
    kind: Literal["text"] = "text"
    x: float = 0.0
    y: float = 0.0
    text: str = ""
    font_size: float = Field(default=24.0, gt=0.0)


class ImageElement(BoxElement):
    kind: Literal["image"] = "image"
    data_url: str = ""


BoardElement = Annotated[
    Union[
        PathElement,
        LineElement,
        RectangleElement,
        CircleElement,
        TriangleElement,
        TextElement,
        ImageElement,
    ],
    Field(discriminator="kind"),
]


class Board(BaseModel):
    """Ordered list of board elements, bottom-most first."""
    elements: List[BoardElement] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


# ID generation for deterministic outputs

def generate_element_id(points, prefix="el", round_digits=2):
    """
    Generate a deterministic element ID from stroke coordinates.

    Rounds coordinates to avoid floating point instability.
    """
    if not points:
        return f"{prefix}_empty"

    rounded = [[round(p.x, round_digits), round(p.y, round_digits)] for p in points]
    h = hashlib.sha256(f"{prefix}:{rounded}".encode()).hexdigest()[:12]
    return f"{prefix}_{h}"


def to_points(pairs):
    """
    Convert [x, y] pairs, {"x", "y"} mappings or Points into Points.

    Raises ValueError on anything else.
    """
    points = []
    for item in pairs:
        if isinstance(item, Point):
            points.append(item)
        elif isinstance(item, dict) and "x" in item and "y" in item:
            points.append(Point(x=item["x"], y=item["y"]))
        elif isinstance(item, (list, tuple)) and len(item) == 2:
            points.append(Point(x=item[0], y=item[1]))
        else:
            raise ValueError(f"Not a point: {item!r}")
    return points
