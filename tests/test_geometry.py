import numpy as np
import pytest

from nurbskit.geometry import (
    FrenetFrame,
    Ray,
    segment_closest_point,
    three_points_are_flat,
    transpose_control_points,
)


def test_point_at_moves_along_direction():
    ray = Ray([1.0, 2.0, 3.0], [0.5, -1.0, 2.0])
    assert np.allclose(ray.point_at(0.0), ray.origin)
    assert np.allclose(ray.point_at(2.0) - ray.point_at(1.0), ray.direction)


def test_crossing_rays_meet_at_common_point():
    a = Ray([0.0, 0.0, 0.0], [1.0, 1.0, 0.0])
    b = Ray([4.0, 0.0, 0.0], [-1.0, 1.0, 0.0])
    hit = a.find_intersection(b)
    assert hit is not None
    p0, t0 = hit.intersection0
    p1, t1 = hit.intersection1
    assert np.allclose(p0, p1)
    assert np.allclose(a.point_at(t0), p0)
    assert np.allclose(b.point_at(t1), p1)


def test_parallel_rays_have_no_intersection():
    a = Ray([0.0, 0.0], [1.0, 0.0])
    b = Ray([0.0, 1.0], [2.0, 0.0])
    assert a.find_intersection(b) is None


def test_ray_dimension_mismatch():
    with pytest.raises(ValueError):
        Ray([0.0, 0.0], [1.0, 0.0, 0.0])


def test_three_points_flat_2d_and_3d():
    assert three_points_are_flat([0.0, 0.0], [1.0, 1.0], [2.0, 2.0], 1e-9)
    assert not three_points_are_flat([0.0, 0.0], [1.0, 0.0], [0.0, 1.0], 1e-9)
    assert three_points_are_flat([0.0, 0.0, 0.0], [1.0, 2.0, 3.0], [2.0, 4.0, 6.0], 1e-9)
    assert not three_points_are_flat([0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 0.0, 1.0], 1e-9)


def test_three_points_flat_rejects_4d():
    with pytest.raises(ValueError):
        three_points_are_flat([0.0] * 4, [1.0] * 4, [2.0] * 4, 1e-9)


def test_segment_closest_point_clamps_to_ends():
    start, end = [0.0, 0.0], [2.0, 0.0]
    u, point = segment_closest_point([-1.0, 1.0], start, end, 3.0, 7.0)
    assert u == 3.0
    assert np.allclose(point, start)
    u, point = segment_closest_point([5.0, -1.0], start, end, 3.0, 7.0)
    assert u == 7.0
    assert np.allclose(point, end)


def test_segment_closest_point_interior_projection_is_perpendicular():
    start, end = np.array([0.0, 0.0, 0.0]), np.array([4.0, 2.0, 0.0])
    pt = np.array([1.0, 3.0, 1.0])
    u, point = segment_closest_point(pt, start, end, 0.0, 1.0)
    assert 0.0 < u < 1.0
    assert np.allclose(point, start + (end - start) * u)
    assert abs((pt - point) @ (end - start)) < 1e-12


def test_degenerate_segment_returns_start():
    u, point = segment_closest_point([1.0, 1.0], [0.5, 0.5], [0.5, 0.5], 2.0, 9.0)
    assert u == 2.0
    assert np.allclose(point, [0.5, 0.5])


def test_transpose_round_trip():
    grid = [[1, 2, 3], [4, 5, 6]]
    transposed = transpose_control_points(grid)
    assert transposed[2] == [3, 6]
    assert transpose_control_points(transposed) == grid


def test_transpose_rejects_ragged_and_empty():
    with pytest.raises(ValueError):
        transpose_control_points([[1, 2], [3]])
    with pytest.raises(ValueError):
        transpose_control_points([])


def _frame():
    return FrenetFrame(
        position=[1.0, -2.0, 0.5],
        tangent=[0.0, 3.0, 4.0],
        normal=[1.0, 0.0, 0.0],
        binormal=[0.0, -4.0, 3.0],
    )


def test_rotation_is_proper_orthonormal():
    rot = _frame().rotation()
    assert np.allclose(rot.T @ rot, np.eye(3))
    assert np.isclose(np.linalg.det(rot), 1.0)


def test_rotation_maps_z_to_tangent():
    frame = _frame()
    rot = frame.rotation()
    expected = frame.tangent / np.linalg.norm(frame.tangent)
    assert np.allclose(rot @ np.array([0.0, 0.0, 1.0]), expected)


def test_matrix_combines_rotation_and_translation():
    frame = _frame()
    m = frame.matrix()
    assert np.allclose(m[:3, :3], frame.rotation())
    assert np.allclose(m[:3, 3], frame.position)
    assert np.allclose(m @ np.array([0.0, 0.0, 0.0, 1.0]), [*frame.position, 1.0])


def test_frame_rejects_non_3d():
    with pytest.raises(ValueError):
        FrenetFrame([0.0, 0.0], [1.0, 0.0], [0.0, 1.0], [0.0, 0.0])