"""NURBS geometry toolkit: knot vectors, surfaces, grid sampling, planar predicates, meshes and a line-search minimizer."""

__version__ = "0.1.0"