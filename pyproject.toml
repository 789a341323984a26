[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "vionav"
version = "0.1.0"
description = "Building blocks for a monocular visual-inertial navigation pipeline: feature tracking bookkeeping, depth recovery, dataset replay and geometry helpers."
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "visual-inertial odometry",
    "feature tracking",
    "optical flow",
    "depth recovery",
    "UTM",
    "quaternion",
    "trajectory",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Image Processing",
    "Topic :: Scientific/Engineering :: GIS",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["vionav"]

[tool.hatch.build.targets.sdist]
include = [
    "vionav",
    "tests",
    "pyproject.toml",
]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
