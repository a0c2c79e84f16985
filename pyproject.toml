[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nurbskit"
version = "0.1.0"
description = "NURBS geometry toolkit: knot vectors, basis functions, surfaces, planar predicates and a line-search minimizer"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["nurbs", "b-spline", "geometry", "cad", "surface", "knot vector"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["nurbskit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
