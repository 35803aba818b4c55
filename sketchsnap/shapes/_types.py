"""Canonical shape dataclasses (avoids circular imports)."""

import math
from dataclasses import dataclass
from typing import ClassVar, List, Tuple, Union

Point = Tuple[float, float]


def _flatten(points):
    return [float(v) for p in points for v in p]


@dataclass(frozen=True)
class Line:
    """Straight segment between the stroke's smoothed endpoints."""
    start: Point
    end: Point
    kind: ClassVar[str] = "line"

    def vertices(self) -> List[Point]:
        return [self.start, self.end]

    def to_element(self) -> dict:
        return {"type": self.kind, "x": self.start[0], "y": self.start[1],
                "x2": self.end[0], "y2": self.end[1]}


@dataclass(frozen=True)
class Circle:
    center: Point
    radius: float
    kind: ClassVar[str] = "circle"

    def vertices(self, num_samples: int = 64) -> List[Point]:
        cx, cy = self.center
        return [(cx + self.radius * math.cos(2 * math.pi * k / num_samples),
                 cy + self.radius * math.sin(2 * math.pi * k / num_samples))
                for k in range(num_samples)]

    def to_element(self) -> dict:
        # x, y is the top-left of the bounding square
        return {"type": self.kind, "x": self.center[0] - self.radius,
                "y": self.center[1] - self.radius, "radius": self.radius}


@dataclass(frozen=True)
class Rectangle:
    """Axis-aligned; (x, y) is the top-left corner."""
    x: float
    y: float
    width: float
    height: float
    kind: ClassVar[str] = "rectangle"

    def vertices(self) -> List[Point]:
        x2, y2 = self.x + self.width, self.y + self.height
        return [(self.x, self.y), (x2, self.y), (x2, y2), (self.x, y2)]

    def to_element(self) -> dict:
        return {"type": self.kind, "x": self.x, "y": self.y,
                "width": self.width, "height": self.height}


@dataclass(frozen=True)
class Square:
    x: float
    y: float
    side: float
    kind: ClassVar[str] = "square"

    def vertices(self) -> List[Point]:
        x2, y2 = self.x + self.side, self.y + self.side
        return [(self.x, self.y), (x2, self.y), (x2, y2), (self.x, y2)]

    def to_element(self) -> dict:
        return {"type": self.kind, "x": self.x, "y": self.y,
                "width": self.side, "height": self.side}


@dataclass(frozen=True)
class _Polygon:
    points: Tuple[Point, ...]
    kind: ClassVar[str] = "polygon"

    def vertices(self) -> List[Point]:
        return list(self.points)

    def to_element(self) -> dict:
        return {"type": self.kind, "points": _flatten(self.points), "closed": True}


@dataclass(frozen=True)
class Triangle(_Polygon):
    kind: ClassVar[str] = "triangle"


@dataclass(frozen=True)
class Pentagon(_Polygon):
    kind: ClassVar[str] = "pentagon"


@dataclass(frozen=True)
class Hexagon(_Polygon):
    kind: ClassVar[str] = "hexagon"


CanonicalShape = Union[Line, Circle, Rectangle, Square, Triangle, Pentagon, Hexagon]
