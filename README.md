# nurbskit

Tools for working with NURBS (non-uniform rational B-spline) geometry in Python.
The package is built on NumPy.

## Modules

- **`nurbskit.knot`**: `KnotVector` and `KnotMultiplicity`.
  - Build a uniform knot vector with `KnotVector.uniform`.
  - Query domains with `domain` and clamp a parameter with `clamp`.
  - Find knot spans by binary search (`find_knot_span_index`) or by linear search.
  - Evaluate basis functions and their derivatives, including at regularly spaced parameters.
  - Insert a knot with `add`, and count knots with `multiplicity` and `is_clamped`.
  - Reverse a knot vector with `invert` or `inverse`.
- **`nurbskit.binomial`**: `binomial(n, k)` and a memoized `Binomial` calculator.
- **`nurbskit.planar`**: two-dimensional predicates.
  - An exact `orientation` test, which returns an `Orientation`.
  - Segment-crossing tests with `Line.intersects`.
  - Winding-number point-in-polygon tests with `PolygonBoundary.contains`.
- **`nurbskit.geometry`**:
  - Closest approach of two rays with `Ray.find_intersection`, which returns a `RayIntersection`, or `None` when the rays are parallel.
  - `three_points_are_flat` and `segment_closest_point`.
  - `transpose_control_points`.
  - `FrenetFrame`, which gives a rotation matrix and a homogeneous 4x4 matrix.
- **`nurbskit.mesh`**: `PolygonMesh`, a triangle mesh.
  - Get the corner points of each face with `triangles` and the total area of 2D or 3D meshes with `area`.
  - Merge meshes with `+` or with `PolygonMesh.merge`.
- **`nurbskit.solver`**:
  - `CurveIntersectionSolverOptions`, an immutable set of hyperparameters with `with_*` copy methods.
  - `LineSearchBFGS`, a quasi-Newton minimizer with a backtracking line search. It returns a `SolverResult` that holds a `TerminationReason`.
- **`nurbskit.rational`**:
  - `rational_derivatives`, which turns derivatives of homogeneous points into Cartesian derivatives.
  - `sorted_set_union` and `sorted_set_sub`, for sorted knot sequences.
- **`nurbskit.surface`**: `NurbsSurface`, with `UVDirection` and `FlipDirection`.
  - Evaluate points with `point` and `point_at`, and normals with `normal_at`.
  - Compute homogeneous and rational derivatives, and knot domains.
  - Flip, invert and transform a surface by a matrix, in place or as a copy.
- **`nurbskit.sampling`**: evaluation on a regular parameter grid.
  - Points, homogeneous and rational derivatives, and unit normals.
  - The basis functions are computed once for each row and each column of the grid.

## Installation

```
pip install nurbskit
```

## Examples

```python
from nurbskit.knot import KnotVector
from nurbskit.binomial import binomial

knots = KnotVector.uniform(3, 2)
print(knots.to_list())                  # [0.0, 0.0, 0.0, 1.0, 2.0, 2.0, 2.0]

knots = KnotVector([0., 0., 0., 1., 2., 3., 3., 3.])
span = knots.find_knot_span_index(6, 2, 2.5)   # 4
print(knots.basis_functions(span, 2.5, 2))

print(binomial(5, 2))                   # 10.0
```

```python
from nurbskit.planar import PolygonBoundary

square = PolygonBoundary([(0., 0.), (1., 0.), (1., 1.), (0., 1.)])
print(square.contains((0.5, 0.5)))      # True
print(square.contains((0.5, 1.5)))      # False
```

Surfaces store homogeneous control points. The last coordinate of each point is its weight, and the other coordinates are multiplied by that weight.

```python
from nurbskit.surface import NurbsSurface
from nurbskit.sampling import regular_sample_points

plane = NurbsSurface(
    1, 1,
    [0., 0., 1., 1.], [0., 0., 1., 1.],
    [[[0., 0., 0., 1.], [0., 1., 0., 1.]],
     [[1., 0., 0., 1.], [1., 1., 0., 1.]]],
)
print(plane.point_at(0.5, 0.5))         # [0.5 0.5 0. ]
grid = regular_sample_points(plane, 4, 4)   # 5 x 5 points
```

```python
from nurbskit.solver import LineSearchBFGS

solver = LineSearchBFGS(step_size_tolerance=1e-10, cost_tolerance=1e-12)
result = solver.minimize(
    lambda x: (x[0] - 1.0) ** 2 + (x[1] - 2.0) ** 2,
    lambda x: [2.0 * (x[0] - 1.0), 2.0 * (x[1] - 2.0)],
    [0.0, 0.0],
)
print(result.best_param, result.reason)  # close to [1. 2.]
```

## What the package does not do

- It has no NURBS curve type.
- It does not find intersections between curves, or between surfaces and curves. `LineSearchBFGS` and `CurveIntersectionSolverOptions` are the building blocks for such a search, but nothing here builds the problems or bounding-box trees for it.
- It does not construct surfaces from curves: there is no extrude, loft, sweep or revolve.
- It has no knot refinement, isocurves, closest-point search, tessellation or serialization for surfaces.
- It has no command-line interface.

## Running the tests

```
pip install -e ".[test]"
pytest
```