[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "meshforge"
version = "0.1.0"
description = "Procedural mesh building, vertex layouts, in-memory buffer models, an OBJ loader and a camera, on NumPy"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["mesh", "3d", "geometry", "icosphere", "obj", "camera", "vertex-buffer", "graphics"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: 3D Modeling",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["meshforge"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
