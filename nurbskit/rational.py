"""Rational derivatives of homogeneous surface derivatives and sorted knot set helpers."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from nurbskit.binomial import Binomial
from nurbskit.knot import EPSILON


def rational_derivatives(
    ders: Sequence[Sequence[Sequence[float]]], derivs: int
) -> list[list[np.ndarray]]:
    """Turn derivatives of homogeneous coordinates into derivatives of the surface.

    ``ders[k][l]`` is the ``k``-th derivative in u and ``l``-th in v of the
    homogeneous point, whose last component is the weight. The result holds
    ``skl[k][l]`` for every ``k + l <= derivs``, each a Cartesian vector one
    component shorter than the input.
    """
    if derivs < 0:
        raise ValueError("the number of derivatives must not be negative")

    grid = [[np.asarray(d, dtype=float) for d in row] for row in ders]
    for k in range(derivs + 1):
        if k >= len(grid) or len(grid[k]) < derivs - k + 1:
            raise ValueError(
                f"derivative grid is too small for {derivs} derivatives"
            )
    if grid[0][0].ndim != 1 or grid[0][0].size < 2:
        raise ValueError("homogeneous points need at least one coordinate and a weight")

    a_ders = [[d[:-1] for d in row] for row in grid]
    w_ders = [[float(d[-1]) for d in row] for row in grid]
    binom = Binomial()
    zeros = np.zeros_like(a_ders[0][0])

    skl: list[list[np.ndarray]] = []
    for k in range(derivs + 1):
        row: list[np.ndarray] = []
        for l in range(derivs - k + 1):
            v = a_ders[k][l].copy()
            for j in range(1, l + 1):
                v -= row[l - j] * (binom.get(l, j) * w_ders[0][j])

            for i in range(1, k + 1):
                v -= skl[k - i][l] * (binom.get(k, i) * w_ders[i][0])
                v2 = zeros.copy()
                for j in range(1, l + 1):
                    v2 += skl[k - i][l - j] * binom.get(l, j) * w_ders[i][j]
                v -= v2 * binom.get(k, i)

            row.append(v / w_ders[0][0])
        skl.append(row)

    return skl


def sorted_set_union(a: Sequence[float], b: Sequence[float]) -> list[float]:
    """Merge two sorted knot sequences, keeping equal knots once per matching pair."""
    merged: list[float] = []
    ai = bi = 0
    while ai < len(a) or bi < len(b):
        if ai >= len(a):
            merged.append(b[bi])
            bi += 1
            continue
        if bi >= len(b):
            merged.append(a[ai])
            ai += 1
            continue

        diff = a[ai] - b[bi]
        if abs(diff) < EPSILON:
            merged.append(a[ai])
            ai += 1
            bi += 1
        elif diff > 0.0:
            merged.append(b[bi])
            bi += 1
        else:
            merged.append(a[ai])
            ai += 1
    return merged


def sorted_set_sub(a: Sequence[float], b: Sequence[float]) -> list[float]:
    """Knots of sorted ``a`` left over after matching them in order against sorted ``b``."""
    result: list[float] = []
    bi = 0
    for value in a:
        if bi < len(b) and abs(value - b[bi]) < EPSILON:
            bi += 1
            continue
        result.append(value)
    return result