"""Planar predicates: point orientation, line segments and polygon containment."""

from __future__ import annotations

from enum import Enum
from fractions import Fraction
from itertools import pairwise
from typing import Iterable, Sequence

Point2 = tuple[float, float]


def _as_point(point: Sequence[float]) -> Point2:
    if len(point) != 2:
        raise ValueError(f"expected a 2D point, got {len(point)} coordinates")
    return float(point[0]), float(point[1])


class Orientation(Enum):
    """Turn direction of three points in the plane."""

    COUNTER_CLOCKWISE = "counter_clockwise"
    CLOCKWISE = "clockwise"
    COLLINEAR = "collinear"


def orientation(p: Sequence[float], q: Sequence[float], r: Sequence[float]) -> Orientation:
    """Exact orientation test for the triangle ``p, q, r``.

    The determinant is evaluated with exact rational arithmetic, so the sign
    is never corrupted by rounding.
    """
    px, py = (Fraction(v) for v in _as_point(p))
    qx, qy = (Fraction(v) for v in _as_point(q))
    rx, ry = (Fraction(v) for v in _as_point(r))
    det = (qx - px) * (ry - py) - (qy - py) * (rx - px)
    if det < 0:
        return Orientation.CLOCKWISE
    if det > 0:
        return Orientation.COUNTER_CLOCKWISE
    return Orientation.COLLINEAR


_SAME_SIDE = {
    (Orientation.CLOCKWISE, Orientation.CLOCKWISE),
    (Orientation.COUNTER_CLOCKWISE, Orientation.COUNTER_CLOCKWISE),
}


class Line:
    """A line segment in the plane."""

    def __init__(self, start: Sequence[float], end: Sequence[float]) -> None:
        self.start = _as_point(start)
        self.end = _as_point(end)

    def __repr__(self) -> str:
        return f"Line({self.start!r}, {self.end!r})"

    def tangent(self) -> Point2:
        """Vector from the start to the end of the segment."""
        return self.end[0] - self.start[0], self.end[1] - self.start[1]

    def bounding_rect(self) -> tuple[Point2, Point2]:
        """Axis-aligned bounds as ``(minimum corner, maximum corner)``."""
        (x0, y0), (x1, y1) = self.start, self.end
        return (min(x0, x1), min(y0, y1)), (max(x0, x1), max(y0, y1))

    def intersects(self, other: "Line") -> bool:
        """Robust test whether two segments cross or touch.

        Segments that all lie on one common line are reported as not
        intersecting.
        """
        (a_min, a_max) = self.bounding_rect()
        (b_min, b_max) = other.bounding_rect()
        if any(a_min[i] > b_max[i] or b_min[i] > a_max[i] for i in range(2)):
            return False

        p_q1 = orientation(self.start, self.end, other.start)
        p_q2 = orientation(self.start, self.end, other.end)
        if (p_q1, p_q2) in _SAME_SIDE:
            return False

        q_p1 = orientation(other.start, other.end, self.start)
        q_p2 = orientation(other.start, other.end, self.end)
        if (q_p1, q_p2) in _SAME_SIDE:
            return False

        return not all(o is Orientation.COLLINEAR for o in (p_q1, p_q2, q_p1, q_p2))


class PolygonBoundary:
    """A closed polygon given by its vertices in order."""

    def __init__(self, vertices: Iterable[Sequence[float]]) -> None:
        self.vertices = [_as_point(v) for v in vertices]

    def __repr__(self) -> str:
        return f"PolygonBoundary({self.vertices!r})"

    def contains(self, point: Sequence[float]) -> bool:
        """Winding-number test for whether ``point`` lies inside the polygon."""
        c = _as_point(point)
        if not self.vertices:
            return False
        edges = pairwise(self.vertices + [self.vertices[0]])
        winding = 0
        for p0, p1 in edges:
            if p0[1] <= c[1]:
                if p1[1] >= c[1]:
                    if orientation(p0, p1, c) is Orientation.COUNTER_CLOCKWISE and p1[1] != c[1]:
                        winding += 1
            elif p1[1] <= c[1]:
                if orientation(p0, p1, c) is Orientation.CLOCKWISE:
                    winding -= 1
        return winding != 0