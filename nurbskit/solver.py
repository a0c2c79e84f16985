"""Options and a line-search quasi-Newton minimizer for intersection problems."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Sequence

import numpy as np

CostFunction = Callable[[np.ndarray], float]
GradientFunction = Callable[[np.ndarray], Sequence[float]]

# Errors from the cost function that the line search treats as "outside the domain".
_DOMAIN_ERRORS = (ValueError, ArithmeticError)


@dataclass(frozen=True)
class CurveIntersectionSolverOptions:
    """Hyperparameters for the intersection solver.

    ``minimum_distance``: largest gap between two points still taken as an
    intersection. ``knot_domain_division``: how finely the knot domain is
    divided when building bounding box trees. ``step_size_tolerance`` and
    ``cost_tolerance`` stop the minimizer; ``max_iters`` bounds its work.
    """

    minimum_distance: float = 1e-5
    knot_domain_division: int = 64
    step_size_tolerance: float = 1e-8
    cost_tolerance: float = 1e-10
    max_iters: int = 200

    def with_minimum_distance(self, minimum_distance: float) -> "CurveIntersectionSolverOptions":
        return replace(self, minimum_distance=minimum_distance)

    def with_knot_domain_division(
        self, knot_domain_division: int
    ) -> "CurveIntersectionSolverOptions":
        return replace(self, knot_domain_division=knot_domain_division)

    def with_step_size_tolerance(
        self, step_size_tolerance: float
    ) -> "CurveIntersectionSolverOptions":
        return replace(self, step_size_tolerance=step_size_tolerance)

    def with_cost_tolerance(self, cost_tolerance: float) -> "CurveIntersectionSolverOptions":
        return replace(self, cost_tolerance=cost_tolerance)

    def with_max_iters(self, max_iters: int) -> "CurveIntersectionSolverOptions":
        return replace(self, max_iters=max_iters)


class TerminationReason(Enum):
    """Why the minimizer stopped."""

    MAX_ITERS_REACHED = "max_iters_reached"
    SOLVER_CONVERGED = "solver_converged"
    SOLVER_EXIT = "solver_exit"


@dataclass(eq=False)
class SolverResult:
    """Outcome of a minimization run.

    ``best_param`` is the parameter with the lowest cost seen, or None when no
    finite cost was ever seen.
    """

    best_param: np.ndarray | None
    best_cost: float
    param: np.ndarray
    cost: float
    iterations: int
    reason: TerminationReason
    message: str = ""


@dataclass
class _State:
    param: np.ndarray
    cost: float
    max_iters: int
    prev_cost: float = math.inf
    gradient: np.ndarray | None = None
    hessian: np.ndarray | None = None
    best_param: np.ndarray | None = None
    best_cost: float = math.inf
    iteration: int = 0

    def update_best(self) -> None:
        same_infinity = (
            math.isinf(self.cost)
            and math.isinf(self.best_cost)
            and (self.cost > 0) == (self.best_cost > 0)
        )
        if self.cost < self.best_cost or same_infinity:
            self.best_param = self.param.copy()
            self.best_cost = self.cost


class LineSearchBFGS:
    """Quasi-Newton minimizer with a backtracking line search.

    The inverse Hessian starts as the identity and is updated with the BFGS
    formula. Each run's iteration budget also shrinks by the number of line
    search trials spent.
    """

    def __init__(self, step_size_tolerance: float = 1e-8, cost_tolerance: float = 1e-8) -> None:
        self.step_size_tolerance = step_size_tolerance
        self.cost_tolerance = cost_tolerance

    def __repr__(self) -> str:
        return (
            f"LineSearchBFGS(step_size_tolerance={self.step_size_tolerance!r}, "
            f"cost_tolerance={self.cost_tolerance!r})"
        )

    def minimize(
        self,
        cost: CostFunction,
        gradient: GradientFunction,
        initial: Sequence[float],
        max_iters: int = 200,
    ) -> SolverResult:
        """Minimize ``cost`` starting from ``initial``.

        An error raised by ``cost`` at the initial parameter, or by
        ``gradient`` anywhere, propagates. During the line search a
        ``ValueError`` or ``ArithmeticError`` from ``cost`` shortens the step.
        """
        x0 = np.array(initial, dtype=float)
        if x0.ndim != 1 or x0.size == 0:
            raise ValueError("the initial parameter must be a non-empty vector")
        if max_iters < 0:
            raise ValueError("max_iters must not be negative")

        state = _State(param=x0, cost=float(cost(x0)), max_iters=max_iters)
        state.update_best()

        while True:
            stop = self._termination(state)
            if stop is not None:
                reason, message = stop
                break
            self._next_iter(cost, gradient, state)
            state.update_best()
            state.iteration += 1

        return SolverResult(
            best_param=None if state.best_param is None else state.best_param.copy(),
            best_cost=state.best_cost,
            param=state.param.copy(),
            cost=state.cost,
            iterations=state.iteration,
            reason=reason,
            message=message,
        )

    def _next_iter(self, cost: CostFunction, gradient: GradientFunction, state: _State) -> None:
        x0 = state.param
        f0 = state.cost
        g0 = state.gradient if state.gradient is not None else _as_vector(gradient(x0), x0)
        h0 = state.hessian if state.hessian is not None else np.eye(x0.size)

        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            step = -(h0 @ g0)
            norm = float(np.linalg.norm(step))
            df0 = float(g0 @ step)

            t = 1.0
            x1 = x0.copy()
            f1: float | None = f0
            spent = 0
            for _ in range(state.max_iters):
                spent += 1
                if t * norm < self.step_size_tolerance:
                    break
                x1 = x0 + step * t
                try:
                    f1 = float(cost(x1))
                except _DOMAIN_ERRORS:
                    f1 = None
                if f1 is None or f1 - f0 >= 0.1 * t * df0:
                    t *= 0.5
                else:
                    break

            new_cost = f0 if f1 is None else f1

            g1 = _as_vector(gradient(x1), x1)
            y = g1 - g0
            s = step * t
            ys = float(y @ s)
            hy = h0 @ y
            h1 = (h0 + np.outer(s, s) * ((ys + float(y @ hy)) / (ys * ys))) - (
                (np.outer(hy, s) + np.outer(s, hy)) / ys
            )

        state.param = x1
        state.prev_cost = state.cost
        state.cost = new_cost
        state.gradient = g1
        state.hessian = h1
        state.max_iters = state.max_iters - spent

    def _termination(self, state: _State) -> tuple[TerminationReason, str] | None:
        if state.iteration >= state.max_iters:
            return TerminationReason.MAX_ITERS_REACHED, ""

        g = state.gradient
        h = state.hessian
        if g is not None and not np.all(np.isfinite(g)):
            return TerminationReason.SOLVER_EXIT, "gradient is NaN or infinite"
        if h is not None and not np.all(np.isfinite(h)):
            return TerminationReason.SOLVER_EXIT, "hessian is NaN or infinite"
        if g is not None and h is not None:
            if float(np.linalg.norm(h @ g)) < self.step_size_tolerance:
                return TerminationReason.SOLVER_EXIT, "step size tolerance reached"

        if state.cost != state.prev_cost and abs(state.cost - state.prev_cost) < self.cost_tolerance:
            return TerminationReason.SOLVER_CONVERGED, ""
        return None


def _as_vector(values: Sequence[float], like: np.ndarray) -> np.ndarray:
    vector = np.asarray(values, dtype=float)
    if vector.shape != like.shape:
        raise ValueError("the gradient must have the same shape as the parameter")
    return vector