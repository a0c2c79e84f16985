import numpy as np
import pytest

from nurbskit.mesh import PolygonMesh


def _square(offset=0.0):
    return PolygonMesh(
        [[offset, 0.0], [offset + 1.0, 0.0], [offset + 1.0, 1.0], [offset, 1.0]],
        [(0, 1, 2), (0, 2, 3)],
    )


def test_triangles_follow_faces():
    mesh = _square()
    triangles = mesh.triangles()
    assert len(triangles) == len(mesh.faces)
    for (a, b, c), (i, j, k) in zip(triangles, mesh.faces):
        assert np.allclose(a, mesh.vertices[i])
        assert np.allclose(b, mesh.vertices[j])
        assert np.allclose(c, mesh.vertices[k])


def test_unit_square_area():
    assert _square().area() == pytest.approx(1.0)


def test_area_ignores_face_winding():
    mesh = _square()
    flipped = PolygonMesh(mesh.vertices, [(c, b, a) for a, b, c in mesh.faces])
    assert flipped.area() == pytest.approx(mesh.area())


def test_3d_area_matches_planar_area():
    flat = _square()
    lifted = PolygonMesh([[x, y, 0.0] for x, y in flat.vertices], flat.faces)
    assert lifted.area() == pytest.approx(flat.area())


def test_add_offsets_faces():
    a, b = _square(), _square(offset=5.0)
    merged = a + b
    assert len(merged.vertices) == len(a.vertices) + len(b.vertices)
    assert merged.faces[: len(a.faces)] == a.faces
    offset = len(a.vertices)
    assert merged.faces[len(a.faces):] == [(x + offset, y + offset, z + offset) for x, y, z in b.faces]
    assert merged.area() == pytest.approx(a.area() + b.area())


def test_merge_of_many_and_of_none():
    meshes = [_square(offset=float(i) * 3.0) for i in range(3)]
    merged = PolygonMesh.merge(meshes)
    assert len(merged.faces) == sum(len(m.faces) for m in meshes)
    assert merged.area() == pytest.approx(sum(m.area() for m in meshes))
    empty = PolygonMesh.merge([])
    assert empty.vertices == [] and empty.faces == []
    assert empty.area() == 0.0


def test_bad_face_rejected():
    with pytest.raises(ValueError):
        PolygonMesh([[0.0, 0.0]], [(0, 0)])


def test_area_rejects_4d():
    mesh = PolygonMesh([[0.0] * 4, [1.0] + [0.0] * 3, [0.0, 1.0, 0.0, 0.0]], [(0, 1, 2)])
    with pytest.raises(ValueError):
        mesh.area()