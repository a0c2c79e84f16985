"""Knot vectors and B-spline basis function evaluation."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Iterable, Iterator, overload

EPSILON = sys.float_info.epsilon


@dataclass
class KnotMultiplicity:
    """A distinct knot value together with the number of times it repeats."""

    knot: float
    multiplicity: int = 0

    def increment_multiplicity(self) -> None:
        self.multiplicity += 1


class KnotVector:
    """A non-decreasing sequence of knot values."""

    def __init__(self, knots: Iterable[float]) -> None:
        self._knots = [float(k) for k in knots]

    @classmethod
    def uniform(cls, n: int, degree: int) -> "KnotVector":
        """Build a knot vector with ``degree`` extra copies of the end knots.

        The interior runs 0, 1, ..., n - 1.
        """
        if n < 1:
            raise ValueError("a uniform knot vector needs at least one knot")
        knots = [0.0] * degree
        knots.extend(float(i) for i in range(n))
        knots.extend([float(n - 1)] * degree)
        return cls(knots)

    def __len__(self) -> int:
        return len(self._knots)

    @overload
    def __getitem__(self, index: int) -> float: ...

    @overload
    def __getitem__(self, index: slice) -> list[float]: ...

    def __getitem__(self, index):
        return self._knots[index]

    def __iter__(self) -> Iterator[float]:
        return iter(self._knots)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, KnotVector):
            return NotImplemented
        return self._knots == other._knots

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"KnotVector({self._knots!r})"

    def to_list(self) -> list[float]:
        return list(self._knots)

    def first(self) -> float:
        return self._knots[0]

    def last(self) -> float:
        return self._knots[-1]

    def domain(self, degree: int) -> tuple[float, float]:
        """Return the parameter domain for a curve of the given degree."""
        return self._knots[degree], self._knots[len(self._knots) - 1 - degree]

    def clamp(self, degree: int, u: float) -> float:
        low, high = self.domain(degree)
        if low > high:
            raise ValueError("invalid domain: start is greater than end")
        return min(max(u, low), high)

    def floor(self, knot: float) -> int | None:
        """Return the index of the last knot that is less than or equal to ``knot``."""
        for index in range(len(self._knots) - 1, -1, -1):
            if self._knots[index] <= knot:
                return index
        return None

    def add(self, knot: float) -> int:
        """Insert a knot in order and return the index it was placed at."""
        index = self.floor(knot)
        position = 0 if index is None else index + 1
        self._knots.insert(position, float(knot))
        return position

    def multiplicity(self) -> list[KnotMultiplicity]:
        """Group equal knots and count how often each one occurs."""
        if not self._knots:
            raise ValueError("empty knot vector has no multiplicity")
        result: list[KnotMultiplicity] = []
        current = KnotMultiplicity(self._knots[0])
        for knot in self._knots:
            if abs(knot - current.knot) > EPSILON:
                result.append(current)
                current = KnotMultiplicity(knot)
            current.increment_multiplicity()
        result.append(current)
        return result

    def is_clamped(self, degree: int) -> bool:
        """True when both end knots repeat more than ``degree`` times."""
        mult = self.multiplicity()
        return mult[0].multiplicity > degree and mult[-1].multiplicity > degree

    def find_knot_span_linear(self, n: int, degree: int, u: float) -> int:
        """Find the knot span index by linear search."""
        span = degree + 1
        while span < n and u >= self._knots[span]:
            span += 1
        return span - 1

    def find_knot_span_index(self, n: int, degree: int, u: float) -> int:
        """Find the knot span index by binary search."""
        knots = self._knots
        if u > knots[n + 1] - EPSILON:
            return n
        if u < knots[degree] + EPSILON:
            return degree

        low = degree
        high = n + 1
        mid = (low + high) // 2
        while u < knots[mid] or knots[mid + 1] <= u:
            if u < knots[mid]:
                high = mid
            else:
                low = mid
            following = (low + high) // 2
            if following == mid:
                break
            mid = following
        return mid

    def basis_functions(self, knot_span_index: int, u: float, degree: int) -> list[float]:
        """Compute the non-vanishing basis functions at ``u``."""
        knots = self._knots
        basis = [0.0] * (degree + 1)
        left = [0.0] * (degree + 1)
        right = [0.0] * (degree + 1)
        basis[0] = 1.0

        for j in range(1, degree + 1):
            left[j] = u - knots[knot_span_index + 1 - j]
            right[j] = knots[knot_span_index + j] - u
            saved = 0.0
            for r in range(j):
                temp = basis[r] / (right[r + 1] + left[j - r])
                basis[r] = saved + right[r + 1] * temp
                saved = left[j - r] * temp
            basis[j] = saved

        return basis

    def derivative_basis_functions(
        self, knot_index: int, u: float, degree: int, n: int
    ) -> list[list[float]]:
        """Compute the non-vanishing basis functions and their derivatives.

        Row ``k`` of the result holds the ``k``-th derivative; there are
        ``n + 1`` rows of ``degree + 1`` values.
        """
        knots = self._knots
        p = degree
        ndu = [[0.0] * (p + 1) for _ in range(p + 1)]
        left = [0.0] * (p + 1)
        right = [0.0] * (p + 1)
        ndu[0][0] = 1.0

        for j in range(1, p + 1):
            left[j] = u - knots[knot_index + 1 - j]
            right[j] = knots[knot_index + j] - u
            saved = 0.0
            for r in range(j):
                ndu[j][r] = right[r + 1] + left[j - r]
                temp = ndu[r][j - 1] / ndu[j][r]
                ndu[r][j] = saved + right[r + 1] * temp
                saved = left[j - r] * temp
            ndu[j][j] = saved

        ders = [[0.0] * (p + 1) for _ in range(n + 1)]
        a = [[0.0] * (p + 1) for _ in range(2)]
        ders[0] = [ndu[j][p] for j in range(p + 1)]

        for r in range(p + 1):
            s1, s2 = 0, 1
            a[0][0] = 1.0
            for k in range(1, n + 1):
                d = 0.0
                rk = r - k
                pk = p - k

                if r >= k:
                    a[s2][0] = a[s1][0] / ndu[pk + 1][rk]
                    d = a[s2][0] * ndu[rk][pk]

                j1 = 1 if rk >= -1 else -rk
                j2 = k - 1 if r - 1 <= pk else p - r

                for j in range(j1, j2 + 1):
                    a[s2][j] = (a[s1][j] - a[s1][j - 1]) / ndu[pk + 1][rk + j]
                    d += a[s2][j] * ndu[rk + j][pk]

                if r <= pk:
                    a[s2][k] = -a[s1][k - 1] / ndu[pk + 1][r]
                    d += a[s2][k] * ndu[r][pk]

                ders[k][r] = d
                s1, s2 = s2, s1

        acc = p
        for k in range(1, n + 1):
            ders[k] = [value * acc for value in ders[k]]
            acc *= p - k

        return ders

    def regularly_spaced_basis_functions(
        self, degree: int, divs: int
    ) -> tuple[list[int], list[list[float]]]:
        """Evaluate the basis functions at ``divs + 1`` evenly spaced parameters."""
        start, _end, span, n = self.regularly_spaced_span(degree, divs)
        knot_spans: list[int] = []
        bases: list[list[float]] = []
        u = start
        knot_index = self.find_knot_span_index(n, degree, u)
        for _ in range(divs + 1):
            while u >= self._knots[knot_index + 1] and knot_index < n:
                knot_index += 1
            knot_spans.append(knot_index)
            bases.append(self.basis_functions(knot_index, u, degree))
            u += span
        return knot_spans, bases

    def regularly_spaced_derivative_basis_functions(
        self, degree: int, divs: int
    ) -> tuple[list[int], list[list[list[float]]]]:
        """Evaluate basis functions and derivatives at evenly spaced parameters."""
        start, _end, span, n = self.regularly_spaced_span(degree, divs)
        knot_spans: list[int] = []
        bases: list[list[list[float]]] = []
        u = start
        knot_index = self.find_knot_span_index(n, degree, u)
        for _ in range(divs + 1):
            while u >= self._knots[knot_index + 1] and knot_index < n:
                knot_index += 1
            knot_spans.append(knot_index)
            bases.append(self.derivative_basis_functions(knot_index, u, degree, n))
            u += span
        return knot_spans, bases

    def regularly_spaced_span(self, degree: int, divs: int) -> tuple[float, float, float, int]:
        """Return ``(start, end, step, n)`` for an even division of the domain."""
        if divs == 0:
            raise ValueError("the number of divisions must be positive")
        n = len(self._knots) - degree - 2
        start, end = self.domain(degree)
        return start, end, (end - start) / divs, n

    def invert(self) -> None:
        """Reverse the knot vector in place, keeping its first value."""
        knots = self._knots
        if not knots:
            raise ValueError("cannot invert an empty knot vector")
        length = len(knots)
        reversed_knots = [knots[0]]
        for i in range(1, length):
            reversed_knots.append(reversed_knots[i - 1] + (knots[length - i] - knots[length - i - 1]))
        self._knots = reversed_knots

    def inverse(self) -> "KnotVector":
        """Return a reversed copy."""
        copy = KnotVector(self._knots)
        copy.invert()
        return copy