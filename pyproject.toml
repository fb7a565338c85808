[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tvcflight"
version = "0.1.0"
description = "Attitude control, thrust-vector allocation and state estimation for multi-motor thrust-vectored vehicles"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "thrust vector control",
    "attitude control",
    "L1 adaptive control",
    "unscented kalman filter",
    "adam",
    "quaternion",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["tvcflight"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
