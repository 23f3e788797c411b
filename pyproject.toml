[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "wavecollapse"
version = "0.1.0"
description = "Wave function collapse constraint solver for tile grids, with AC-3/AC-4 propagation and backtracking"
requires-python = ">=3.10"
dependencies = []
keywords = ["wave function collapse", "wfc", "procedural generation", "constraint solver", "tiles"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Games/Entertainment :: Puzzle Games",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["wavecollapse"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
