"""Binomial coefficients, direct and memoized."""

from __future__ import annotations


def binomial(n: int, k: int) -> float:
    """Return the binomial coefficient of ``n`` and ``k`` as a float."""
    if k == 0 or k == n:
        return 1.0
    if n == 0 or k > n:
        return 0.0
    k = min(k, n - k)
    result = 1.0
    for i in range(k):
        result = result * (n - i) / (i + 1)
    return result


class Binomial:
    """Binomial coefficient calculator that remembers what it has computed."""

    def __init__(self) -> None:
        self._memo: dict[tuple[int, int], float] = {}

    def get(self, n: int, k: int) -> float:
        """Return the binomial coefficient of ``n`` and ``k``."""
        if k == 0 or k == n:
            return 1.0
        if n == 0 or k > n:
            return 0.0
        k = min(k, n - k)
        cached = self._memo.get((n, k))
        if cached is not None:
            return cached
        value = self.get(n - 1, k) + self.get(n - 1, k - 1)
        self._memo[(n, k)] = value
        return value