"""Rays, segment helpers, control point transposition and Frenet frames."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence, TypeVar

import numpy as np

from nurbskit.knot import EPSILON

P = TypeVar("P")


def _vector(values: Sequence[float]) -> np.ndarray:
    return np.asarray(values, dtype=float)


@dataclass(eq=False)
class RayIntersection:
    """Closest points of two rays, each as ``(point, parameter)``."""

    intersection0: tuple[np.ndarray, float]
    intersection1: tuple[np.ndarray, float]


class Ray:
    """A ray ``origin + t * direction``."""

    def __init__(self, origin: Sequence[float], direction: Sequence[float]) -> None:
        self.origin = _vector(origin)
        self.direction = _vector(direction)
        if self.origin.shape != self.direction.shape:
            raise ValueError("origin and direction must have the same dimension")

    def __repr__(self) -> str:
        return f"Ray({self.origin.tolist()!r}, {self.direction.tolist()!r})"

    def point_at(self, t: float) -> np.ndarray:
        return self.origin + self.direction * t

    def find_intersection(self, other: "Ray") -> RayIntersection | None:
        """Closest-approach parameters of two rays, or None when they are parallel."""
        dab = float(self.direction @ other.direction)
        daa = float(self.direction @ self.direction)
        dbb = float(other.direction @ other.direction)
        div = daa * dbb - dab * dab
        if abs(div) < EPSILON:
            return None

        dab0 = float(self.direction @ other.origin)
        daa0 = float(self.direction @ self.origin)
        dbb0 = float(other.direction @ other.origin)
        dba0 = float(other.direction @ self.origin)

        num = dab * (dab0 - daa0) - daa * (dbb0 - dba0)
        w = num / div
        t = (dab0 - daa0 + w * dab) / daa
        return RayIntersection((self.point_at(t), t), (other.point_at(w), w))


def three_points_are_flat(
    p1: Sequence[float], p2: Sequence[float], p3: Sequence[float], tolerance: float
) -> bool:
    """True when the three points are collinear within ``tolerance``."""
    a, b, c = _vector(p1), _vector(p2), _vector(p3)
    p21 = b - a
    p31 = c - a
    if a.shape == (2,):
        return abs(p21[0] * p31[1] - p21[1] * p31[0]) < tolerance
    if a.shape != (3,):
        raise ValueError("flatness is defined for 2D and 3D points only")
    normal = np.cross(p21, p31)
    return float(normal @ normal) < tolerance


def segment_closest_point(
    pt: Sequence[float],
    start: Sequence[float],
    end: Sequence[float],
    u0: float,
    u1: float,
) -> tuple[float, np.ndarray]:
    """Project ``pt`` onto a segment whose ends carry parameters ``u0`` and ``u1``.

    Returns the parameter and the point of the projection.
    """
    point, s, e = _vector(pt), _vector(start), _vector(end)
    dif = e - s
    length = float(np.linalg.norm(dif))
    if length < EPSILON:
        return u0, s.copy()

    direction = dif / length
    along = float((point - s) @ direction)
    if along < 0.0:
        return u0, s.copy()
    if along > length:
        return u1, e.copy()
    return u0 + (u1 - u0) * along / length, direction * along + s


def transpose_control_points(points: Sequence[Sequence[P]]) -> list[list[P]]:
    """Swap the rows and columns of a grid of control points."""
    if not points:
        raise ValueError("cannot transpose an empty grid")
    width = len(points[0])
    if any(len(row) != width for row in points):
        raise ValueError("all rows must have the same length")
    return [list(column) for column in zip(*points)]


@dataclass(eq=False)
class FrenetFrame:
    """Position and moving frame at a point on a curve."""

    position: np.ndarray = field()
    tangent: np.ndarray = field()
    normal: np.ndarray = field()
    binormal: np.ndarray = field()

    def __post_init__(self) -> None:
        for name in ("position", "tangent", "normal", "binormal"):
            value = _vector(getattr(self, name))
            if value.shape != (3,):
                raise ValueError(f"{name} must be a 3D vector")
            setattr(self, name, value)

    def rotation(self) -> np.ndarray:
        """Rotation whose z axis points along the tangent, oriented by the normal."""
        z_axis = self.tangent / np.linalg.norm(self.tangent)
        x_axis = np.cross(self.normal, z_axis)
        x_axis = x_axis / np.linalg.norm(x_axis)
        y_axis = np.cross(z_axis, x_axis)
        return np.column_stack([x_axis, y_axis, z_axis])

    def matrix(self) -> np.ndarray:
        """Homogeneous 4x4 transform: the rotation followed by a move to the position."""
        result = np.eye(4)
        result[:3, :3] = self.rotation()
        result[:3, 3] = self.position
        return result