"""
Pydantic data models for Sketchify.

Path tokens and segments flow through these validated models so that a
segment can never carry the wrong number of parameters.
"""

from typing import List, Literal, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


Point = Tuple[float, float]
Line = Tuple[Point, Point]


# Parameter count for every path command letter
PARAMS_COUNT = {
    "A": 7, "a": 7, "C": 6, "c": 6, "H": 1, "h": 1,
    "L": 2, "l": 2, "M": 2, "m": 2, "Q": 4, "q": 4,
    "S": 4, "s": 4, "T": 2, "t": 2, "V": 1, "v": 1,
    "Z": 0, "z": 0,
}


class CommandToken(BaseModel):
    """A path command letter."""
    kind: Literal["command"] = "command"
    value: str = Field(..., min_length=1, max_length=1)

    model_config = ConfigDict(extra="forbid", frozen=True)


class NumberToken(BaseModel):
    """A numeric path parameter."""
    kind: Literal["number"] = "number"
    value: float

    model_config = ConfigDict(extra="forbid", frozen=True)


Token = Union[CommandToken, NumberToken]


class Segment(BaseModel):
    """A single path command with its parameters."""
    key: str
    data: List[float] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def _check_arity(self):
        if self.key not in PARAMS_COUNT:
            raise ValueError(f"Unknown path command: {self.key!r}")
        expected = PARAMS_COUNT[self.key]
        if len(self.data) != expected:
            raise ValueError(
                f"Command {self.key!r} takes {expected} params, got {len(self.data)}"
            )
        return self


class Rectangle(BaseModel):
    """Axis-aligned rectangle."""
    x: float
    y: float
    width: float
    height: float

    model_config = ConfigDict(extra="forbid")

    def points(self):
        """Corner points in drawing order."""
        return [
            (self.x, self.y),
            (self.x + self.width, self.y),
            (self.x + self.width, self.y + self.height),
            (self.x, self.y + self.height),
        ]


class EllipseParams(BaseModel):
    """Ellipse geometry shared by the stroke and fill passes."""
    increment: float
    rx: float
    ry: float

    model_config = ConfigDict(extra="forbid", frozen=True)


class SketchedShape(BaseModel):
    """Path data produced for one shape."""
    shape_type: str
    fill_path: str = ""
    stroke_path: str = ""
    bbox: List[float] = Field(default_factory=lambda: [0.0, 0.0, 0.0, 0.0])

    model_config = ConfigDict(extra="forbid")


def compute_bbox(points):
    """
    Compute bounding box from a list of (x, y) points.

    Returns [min_x, min_y, max_x, max_y].
    """
    if not points:
        return [0.0, 0.0, 0.0, 0.0]

    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    return [min(xs), min(ys), max(xs), max(ys)]


def compute_bbox_from_bboxes(bboxes):
    """
    Compute combined bounding box from multiple bboxes.

    Each bbox is [min_x, min_y, max_x, max_y].
    """
    if not bboxes:
        return [0.0, 0.0, 0.0, 0.0]

    min_x = min(b[0] for b in bboxes)
    min_y = min(b[1] for b in bboxes)
    max_x = max(b[2] for b in bboxes)
    max_y = max(b[3] for b in bboxes)
    return [min_x, min_y, max_x, max_y]
