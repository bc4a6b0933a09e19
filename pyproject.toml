[build-system]
requires = ["setuptools>=64"]
build-backend = "setuptools.build_meta"

[project]
name = "sketchkit"
version = "0.1.0"
description = "Geometry, simulation and loading helpers for small interactive graphics sketches"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "graphics",
    "simulation",
    "frustum culling",
    "perspective warp",
    "picking",
    "texture loading",
]
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
    "Topic :: Multimedia :: Graphics",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.setuptools.packages.find]
include = ["sketchkit*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
