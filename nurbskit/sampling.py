"""Evaluation of a surface on a regular parameter grid.

The basis functions for every row and column of the grid are computed once
and reused, which is cheaper than evaluating each grid point on its own.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from nurbskit.rational import rational_derivatives
from nurbskit.surface import NurbsSurface


def _dehomogenize(point: np.ndarray) -> np.ndarray:
    weight = point[-1]
    if weight == 0.0:
        raise ValueError("cannot dehomogenize a point with zero weight")
    return point[:-1] / weight


def _control_block(surface: NurbsSurface, knot_span_u: int, knot_span_v: int) -> np.ndarray:
    """Control points that influence the given pair of knot spans."""
    p, q = surface.u_degree, surface.v_degree
    rows, columns, _ = surface.control_points.shape
    if not p <= knot_span_u < rows:
        raise ValueError(f"u knot span {knot_span_u} is out of range")
    if not q <= knot_span_v < columns:
        raise ValueError(f"v knot span {knot_span_v} is out of range")
    return surface.control_points[knot_span_u - p : knot_span_u + 1, knot_span_v - q : knot_span_v + 1]


def _basis_vector(values: Sequence[float], degree: int, name: str) -> np.ndarray:
    vector = np.asarray(values, dtype=float)
    if vector.ndim != 1 or vector.size < degree + 1:
        raise ValueError(f"{name} needs {degree + 1} basis function values")
    return vector[: degree + 1]


def _basis_matrix(values: Sequence[Sequence[float]], rows: int, degree: int, name: str) -> np.ndarray:
    matrix = np.asarray(values, dtype=float)
    if matrix.ndim != 2 or matrix.shape[0] < rows or matrix.shape[1] < degree + 1:
        raise ValueError(
            f"{name} needs {rows} rows of {degree + 1} basis function derivative values"
        )
    return matrix[:, : degree + 1]


def point_given_bases_knot_spans(
    surface: NurbsSurface,
    knot_span_u: int,
    knot_span_v: int,
    bases_u: Sequence[float],
    bases_v: Sequence[float],
) -> np.ndarray:
    """Homogeneous surface point from precomputed knot spans and basis functions."""
    block = _control_block(surface, knot_span_u, knot_span_v)
    bu = _basis_vector(bases_u, surface.u_degree, "bases_u")
    bv = _basis_vector(bases_v, surface.v_degree, "bases_v")
    return np.einsum("k,l,kld->d", bu, bv, block)


def regular_sample_points(
    surface: NurbsSurface, divs_u: int, divs_v: int
) -> list[list[np.ndarray]]:
    """Cartesian points on a ``(divs_u + 1) x (divs_v + 1)`` grid over the domain."""
    spans_u, bases_u = surface.u_knots.regularly_spaced_basis_functions(surface.u_degree, divs_u)
    spans_v, bases_v = surface.v_knots.regularly_spaced_basis_functions(surface.v_degree, divs_v)
    return [
        [
            _dehomogenize(point_given_bases_knot_spans(surface, su, sv, bu, bv))
            for sv, bv in zip(spans_v, bases_v)
        ]
        for su, bu in zip(spans_u, bases_u)
    ]


def derivatives_given_bases_knot_spans(
    surface: NurbsSurface,
    knot_span_u: int,
    knot_span_v: int,
    bases_u: Sequence[Sequence[float]],
    bases_v: Sequence[Sequence[float]],
    derivs: int,
) -> list[list[np.ndarray]]:
    """Homogeneous derivatives from precomputed knot spans and basis derivatives.

    The result is a ``(derivs + 1)``-square grid indexed ``[k][l]`` for the
    ``k``-th u and ``l``-th v derivative; entries the degrees do not reach
    are zero.
    """
    if derivs < 0:
        raise ValueError("the number of derivatives must not be negative")
    p, q = surface.u_degree, surface.v_degree
    du = min(derivs, p)
    dv = min(derivs, q)
    block = _control_block(surface, knot_span_u, knot_span_v)
    bu = _basis_matrix(bases_u, du + 1, p, "bases_u")
    bv = _basis_matrix(bases_v, dv + 1, q, "bases_v")

    dim = surface.dimension
    skl = [[np.zeros(dim) for _ in range(derivs + 1)] for _ in range(derivs + 1)]
    for k in range(du + 1):
        temp = np.einsum("r,rsd->sd", bu[k], block)
        for l in range(min(derivs - k, dv) + 1):
            skl[k][l] = bv[l] @ temp
    return skl


def regular_sample_derivatives(
    surface: NurbsSurface, divs_u: int, divs_v: int, derivs: int
) -> list[list[list[list[np.ndarray]]]]:
    """Homogeneous derivatives at every point of a regular grid."""
    spans_u, bases_u = surface.u_knots.regularly_spaced_derivative_basis_functions(
        surface.u_degree, divs_u
    )
    spans_v, bases_v = surface.v_knots.regularly_spaced_derivative_basis_functions(
        surface.v_degree, divs_v
    )
    return [
        [
            derivatives_given_bases_knot_spans(surface, su, sv, bu, bv, derivs)
            for sv, bv in zip(spans_v, bases_v)
        ]
        for su, bu in zip(spans_u, bases_u)
    ]


def regular_sample_rational_derivatives(
    surface: NurbsSurface, divs_u: int, divs_v: int, derivs: int
) -> list[list[list[list[np.ndarray]]]]:
    """Cartesian derivatives at every point of a regular grid."""
    grid = regular_sample_derivatives(surface, divs_u, divs_v, derivs)
    return [[rational_derivatives(ders, derivs) for ders in row] for row in grid]


def regular_sample_normals(
    surface: NurbsSurface, divs_u: int, divs_v: int
) -> list[list[np.ndarray]]:
    """Unit normals at every point of a regular grid; the surface must lie in 3D."""
    if surface.dimension != 4:
        raise ValueError("normals are defined for surfaces in 3D space only")
    grid = regular_sample_rational_derivatives(surface, divs_u, divs_v, 1)
    normals: list[list[np.ndarray]] = []
    for row in grid:
        normal_row = []
        for ders in row:
            normal = np.cross(ders[1][0], ders[0][1])
            normal_row.append(normal / np.linalg.norm(normal))
        normals.append(normal_row)
    return normals