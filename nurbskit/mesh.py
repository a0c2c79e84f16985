"""Triangle meshes."""

from __future__ import annotations

from typing import Iterable, Sequence

import numpy as np


class PolygonMesh:
    """Vertices and triangular faces given as vertex index triples."""

    def __init__(
        self,
        vertices: Iterable[Sequence[float]],
        faces: Iterable[Sequence[int]],
    ) -> None:
        self.vertices = [np.asarray(v, dtype=float) for v in vertices]
        self.faces: list[tuple[int, int, int]] = []
        for face in faces:
            if len(face) != 3:
                raise ValueError("every face must have exactly three vertices")
            a, b, c = (int(i) for i in face)
            self.faces.append((a, b, c))

    def __repr__(self) -> str:
        return f"PolygonMesh({len(self.vertices)} vertices, {len(self.faces)} faces)"

    def triangles(self) -> list[tuple[np.ndarray, np.ndarray, np.ndarray]]:
        """Return the corner points of every face."""
        v = self.vertices
        return [(v[a].copy(), v[b].copy(), v[c].copy()) for a, b, c in self.faces]

    def area(self) -> float:
        """Total area of the faces; vertices must be 2D or 3D."""
        total = 0.0
        for a, b, c in self.triangles():
            ab = b - a
            ac = c - a
            if ab.shape == (2,):
                total += abs(ab[0] * ac[1] - ab[1] * ac[0])
            elif ab.shape == (3,):
                total += float(np.linalg.norm(np.cross(ab, ac)))
            else:
                raise ValueError("area is defined for 2D and 3D meshes only")
        return total / 2.0

    def __add__(self, other: "PolygonMesh") -> "PolygonMesh":
        if not isinstance(other, PolygonMesh):
            return NotImplemented
        offset = len(self.vertices)
        faces = self.faces + [(a + offset, b + offset, c + offset) for a, b, c in other.faces]
        return PolygonMesh(self.vertices + other.vertices, faces)

    @classmethod
    def merge(cls, meshes: Iterable["PolygonMesh"]) -> "PolygonMesh":
        """Combine several meshes into one, starting from an empty mesh."""
        result = cls([], [])
        for mesh in meshes:
            result = result + mesh
        return result