import numpy as np
import pytest

from nurbskit.sampling import (
    derivatives_given_bases_knot_spans,
    point_given_bases_knot_spans,
    regular_sample_derivatives,
    regular_sample_normals,
    regular_sample_points,
    regular_sample_rational_derivatives,
)
from nurbskit.surface import NurbsSurface


def _plane() -> NurbsSurface:
    points = [[(float(i), float(j), 0.0, 1.0) for j in range(2)] for i in range(2)]
    return NurbsSurface(1, 1, [0, 0, 1, 1], [0, 0, 1, 1], points)


def _rational() -> NurbsSurface:
    rng = np.random.default_rng(0)
    points = []
    for i in range(4):
        row = []
        for j in range(3):
            xyz = np.array([i, j, 0.0]) + rng.uniform(-0.3, 0.3, 3)
            w = rng.uniform(0.5, 2.0)
            row.append(np.append(xyz * w, w))
        points.append(row)
    return NurbsSurface(2, 2, [0, 0, 0, 0.5, 1, 1, 1], [0, 0, 0, 1, 1, 1], points)


def _grid_params(surface, divs_u, divs_v):
    (u0, u1), (v0, v1) = surface.knots_domain()
    us = [u0 + (u1 - u0) * i / divs_u for i in range(divs_u + 1)]
    vs = [v0 + (v1 - v0) * j / divs_v for j in range(divs_v + 1)]
    return us, vs


def test_sample_points_shape_and_match_point_at():
    surface = _rational()
    points = regular_sample_points(surface, 5, 4)
    assert len(points) == 6
    assert all(len(row) == 5 for row in points)
    us, vs = _grid_params(surface, 5, 4)
    for i, u in enumerate(us):
        for j, v in enumerate(vs):
            np.testing.assert_allclose(points[i][j], surface.point_at(u, v), atol=1e-9)


def test_sample_points_corners_interpolate_control_points():
    surface = _rational()
    points = regular_sample_points(surface, 3, 3)
    cps = surface.dehomogenized_control_points()
    np.testing.assert_allclose(points[0][0], cps[0][0], atol=1e-12)
    np.testing.assert_allclose(points[-1][-1], cps[-1][-1], atol=1e-12)
    np.testing.assert_allclose(points[0][-1], cps[0][-1], atol=1e-12)
    np.testing.assert_allclose(points[-1][0], cps[-1][0], atol=1e-12)


def test_point_given_bases_matches_surface_point():
    surface = _rational()
    u, v = 0.3, 0.7
    n = len(surface.u_knots) - surface.u_degree - 2
    m = len(surface.v_knots) - surface.v_degree - 2
    su = surface.u_knots.find_knot_span_index(n, surface.u_degree, u)
    sv = surface.v_knots.find_knot_span_index(m, surface.v_degree, v)
    bu = surface.u_knots.basis_functions(su, u, surface.u_degree)
    bv = surface.v_knots.basis_functions(sv, v, surface.v_degree)
    result = point_given_bases_knot_spans(surface, su, sv, bu, bv)
    np.testing.assert_allclose(result, surface.point(u, v), atol=1e-12)


def test_point_given_bases_rejects_span_below_degree():
    surface = _rational()
    with pytest.raises(ValueError):
        point_given_bases_knot_spans(surface, 0, 2, [1, 0, 0], [1, 0, 0])


def test_derivatives_given_bases_matches_surface_derivatives():
    surface = _rational()
    u, v = 0.6, 0.4
    n = len(surface.u_knots) - surface.u_degree - 2
    m = len(surface.v_knots) - surface.v_degree - 2
    su = surface.u_knots.find_knot_span_index(n, surface.u_degree, u)
    sv = surface.v_knots.find_knot_span_index(m, surface.v_degree, v)
    bu = surface.u_knots.derivative_basis_functions(su, u, surface.u_degree, n)
    bv = surface.v_knots.derivative_basis_functions(sv, v, surface.v_degree, m)
    result = derivatives_given_bases_knot_spans(surface, su, sv, bu, bv, 2)
    expected = surface.derivatives(u, v, 2)
    for k in range(3):
        for l in range(3):
            np.testing.assert_allclose(result[k][l], expected[k][l], atol=1e-9)


def test_derivatives_given_bases_negative_derivs():
    surface = _rational()
    with pytest.raises(ValueError):
        derivatives_given_bases_knot_spans(surface, 2, 2, [[1, 0, 0]], [[1, 0, 0]], -1)


def test_regular_sample_derivatives_zeroth_is_point():
    surface = _rational()
    grid = regular_sample_derivatives(surface, 3, 2, 1)
    us, vs = _grid_params(surface, 3, 2)
    for i, u in enumerate(us):
        for j, v in enumerate(vs):
            np.testing.assert_allclose(grid[i][j][0][0], surface.point(u, v), atol=1e-9)


def test_regular_rational_derivatives_match_surface():
    surface = _rational()
    grid = regular_sample_rational_derivatives(surface, 4, 3, 1)
    us, vs = _grid_params(surface, 4, 3)
    for i, u in enumerate(us):
        for j, v in enumerate(vs):
            expected = surface.rational_derivatives(u, v, 1)
            for k in range(2):
                for l in range(2 - k):
                    np.testing.assert_allclose(grid[i][j][k][l], expected[k][l], atol=1e-8)


def test_plane_normals_point_along_z():
    normals = regular_sample_normals(_plane(), 2, 2)
    assert len(normals) == 3
    for row in normals:
        for normal in row:
            np.testing.assert_allclose(normal, [0.0, 0.0, 1.0], atol=1e-12)


def test_normals_are_unit_and_parallel_to_normal_at():
    surface = _rational()
    normals = regular_sample_normals(surface, 3, 3)
    us, vs = _grid_params(surface, 3, 3)
    for i, u in enumerate(us):
        for j, v in enumerate(vs):
            assert np.linalg.norm(normals[i][j]) == pytest.approx(1.0)
            reference = surface.normal_at(u, v)
            reference = reference / np.linalg.norm(reference)
            np.testing.assert_allclose(normals[i][j], reference, atol=1e-8)


def test_normals_require_3d_surface():
    points = [[(float(i), float(j), 1.0) for j in range(2)] for i in range(2)]
    flat = NurbsSurface(1, 1, [0, 0, 1, 1], [0, 0, 1, 1], points)
    with pytest.raises(ValueError):
        regular_sample_normals(flat, 2, 2)


def test_zero_divisions_rejected():
    with pytest.raises(ValueError):
        regular_sample_points(_plane(), 0, 2)