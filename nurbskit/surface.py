"""NURBS surfaces: evaluation, derivatives, flipping and transformation."""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Sequence

import numpy as np

from nurbskit.geometry import transpose_control_points
from nurbskit.knot import KnotVector
from nurbskit.rational import rational_derivatives as _rational_derivatives


class UVDirection(Enum):
    """A direction in the parameter space of a surface."""

    U = "u"
    V = "v"

    def opposite(self) -> "UVDirection":
        return UVDirection.V if self is UVDirection.U else UVDirection.U


class FlipDirection(Enum):
    """Which parameter directions to reverse when flipping a surface."""

    U = "u"
    V = "v"
    UV = "uv"


def _knot_vector(knots: Iterable[float] | KnotVector) -> KnotVector:
    if isinstance(knots, KnotVector):
        return KnotVector(knots.to_list())
    return KnotVector(knots)


class NurbsSurface:
    """A NURBS surface over a grid of homogeneous control points.

    ``control_points[i][j]`` is the point at row ``i`` (u direction) and
    column ``j`` (v direction); its last component is the weight and the
    others are the Cartesian coordinates multiplied by the weight.
    """

    def __init__(
        self,
        u_degree: int,
        v_degree: int,
        u_knots: Iterable[float] | KnotVector,
        v_knots: Iterable[float] | KnotVector,
        control_points: Sequence[Sequence[Sequence[float]]],
    ) -> None:
        rows = [[np.asarray(p, dtype=float) for p in row] for row in control_points]
        if not rows or not rows[0]:
            raise ValueError("a surface needs at least one control point")
        width = len(rows[0])
        dim = rows[0][0].shape
        if any(len(row) != width for row in rows):
            raise ValueError("all rows of control points must have the same length")
        if len(dim) != 1 or dim[0] < 2:
            raise ValueError("control points need at least one coordinate and a weight")
        if any(p.shape != dim for row in rows for p in row):
            raise ValueError("all control points must have the same dimension")
        self.u_degree = int(u_degree)
        self.v_degree = int(v_degree)
        self.u_knots = _knot_vector(u_knots)
        self.v_knots = _knot_vector(v_knots)
        self.control_points = np.array(rows, dtype=float)

    def __repr__(self) -> str:
        nu, nv, dim = self.control_points.shape
        return (
            f"NurbsSurface(u_degree={self.u_degree}, v_degree={self.v_degree}, "
            f"{nu}x{nv} control points of dimension {dim})"
        )

    @property
    def dimension(self) -> int:
        """Number of homogeneous components per control point."""
        return int(self.control_points.shape[2])

    def _copy(self) -> "NurbsSurface":
        return NurbsSurface(
            self.u_degree, self.v_degree, self.u_knots, self.v_knots, self.control_points
        )

    def u_knots_domain(self) -> tuple[float, float]:
        return self.u_knots.domain(self.u_degree)

    def v_knots_domain(self) -> tuple[float, float]:
        return self.v_knots.domain(self.v_degree)

    def knots_domain_at(self, direction: UVDirection) -> tuple[float, float]:
        if direction is UVDirection.U:
            return self.u_knots_domain()
        return self.v_knots_domain()

    def knots_domain(self) -> tuple[tuple[float, float], tuple[float, float]]:
        return self.u_knots_domain(), self.v_knots_domain()

    def knots_domain_interval(self) -> tuple[float, float]:
        """Length of the u domain and of the v domain."""
        (u0, u1), (v0, v1) = self.knots_domain()
        return u1 - u0, v1 - v0

    def transposed_control_points(self) -> list[list[np.ndarray]]:
        """Control points with rows and columns swapped."""
        return transpose_control_points([list(row) for row in self.control_points.copy()])

    def dehomogenized_control_points(self) -> list[list[np.ndarray]]:
        """Control points in Cartesian coordinates."""
        return [[_dehomogenize(p) for p in row] for row in self.control_points]

    def point_at(self, u: float, v: float) -> np.ndarray:
        """Evaluate the surface at ``(u, v)`` in Cartesian coordinates."""
        return _dehomogenize(self.point(u, v))

    def point(self, u: float, v: float) -> np.ndarray:
        """Evaluate the surface at ``(u, v)`` in homogeneous coordinates."""
        p, q = self.u_degree, self.v_degree
        n = len(self.u_knots) - p - 2
        m = len(self.v_knots) - q - 2
        span_u = self.u_knots.find_knot_span_index(n, p, u)
        span_v = self.v_knots.find_knot_span_index(m, q, v)
        bu = np.asarray(self.u_knots.basis_functions(span_u, u, p))
        bv = np.asarray(self.v_knots.basis_functions(span_v, v, q))
        block = self.control_points[span_u - p : span_u + 1, span_v - q : span_v + 1]
        return np.einsum("k,l,kld->d", bu, bv, block)

    def normal_at(self, u: float, v: float) -> np.ndarray:
        """Unnormalized normal at ``(u, v)``: the cross product of the partials."""
        if self.dimension != 4:
            raise ValueError("normals are defined for surfaces in 3D space only")
        ders = self.rational_derivatives(u, v, 1)
        return np.cross(ders[1][0], ders[0][1])

    def rational_derivatives(self, u: float, v: float, derivs: int) -> list[list[np.ndarray]]:
        """Cartesian derivatives ``skl[k][l]`` for every ``k + l <= derivs``."""
        return _rational_derivatives(self.derivatives(u, v, derivs), derivs)

    def derivatives(self, u: float, v: float, derivs: int) -> list[list[np.ndarray]]:
        """Derivatives of the homogeneous surface as a ``(derivs+1)``-square grid.

        Entries beyond what the degrees allow are zero.
        """
        if derivs < 0:
            raise ValueError("the number of derivatives must not be negative")
        p, q = self.u_degree, self.v_degree
        n = len(self.u_knots) - p - 2
        m = len(self.v_knots) - q - 2
        du = min(derivs, p)
        dv = min(derivs, q)
        span_u = self.u_knots.find_knot_span_index(n, p, u)
        span_v = self.v_knots.find_knot_span_index(m, q, v)
        uders = np.asarray(self.u_knots.derivative_basis_functions(span_u, u, p, n))
        vders = np.asarray(self.v_knots.derivative_basis_functions(span_v, v, q, m))
        block = self.control_points[span_u - p : span_u + 1, span_v - q : span_v + 1]

        dim = self.dimension
        skl = [[np.zeros(dim) for _ in range(derivs + 1)] for _ in range(derivs + 1)]
        for k in range(du + 1):
            temp = np.einsum("r,rsd->sd", uders[k], block)
            for l in range(min(derivs - k, dv) + 1):
                skl[k][l] = vders[l] @ temp
        return skl

    def flip(self, direction: FlipDirection) -> "NurbsSurface":
        """Return a copy with the u direction, v direction or both reversed."""
        flipped = self._copy()
        if direction in (FlipDirection.U, FlipDirection.UV):
            flipped.control_points = flipped.control_points[::-1].copy()
            flipped.u_knots = flipped.u_knots.inverse()
        if direction in (FlipDirection.V, FlipDirection.UV):
            flipped.control_points = flipped.control_points[:, ::-1].copy()
            flipped.v_knots = flipped.v_knots.inverse()
        return flipped

    def transform(self, matrix: Sequence[Sequence[float]]) -> None:
        """Apply a homogeneous matrix to every control point in place, keeping weights."""
        mat = np.asarray(matrix, dtype=float)
        dim = self.dimension
        if mat.shape != (dim, dim):
            raise ValueError(f"expected a {dim}x{dim} matrix")
        for row in self.control_points:
            for p in row:
                weight = p[-1]
                cartesian = np.append(p[:-1] / weight, 1.0)
                moved = mat @ cartesian
                p[:-1] = moved[:-1] / moved[-1] * weight

    def transformed(self, matrix: Sequence[Sequence[float]]) -> "NurbsSurface":
        """Return a transformed copy."""
        copy = self._copy()
        copy.transform(matrix)
        return copy

    def invert(self) -> None:
        """Reverse both parameter directions in place."""
        self.control_points = self.control_points[::-1, ::-1].copy()
        self.u_knots.invert()
        self.v_knots.invert()

    def inverse(self) -> "NurbsSurface":
        """Return a copy with both parameter directions reversed."""
        copy = self._copy()
        copy.invert()
        return copy


def _dehomogenize(point: np.ndarray) -> np.ndarray:
    weight = point[-1]
    if weight == 0.0:
        raise ValueError("cannot dehomogenize a point with zero weight")
    return point[:-1] / weight