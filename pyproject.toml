[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mavtraj"
version = "0.1.0"
description = "Polynomial trajectory building blocks for multirotor aerial vehicles: polynomials, waypoint vertices, segment time estimates and input feasibility checks."
requires-python = ">=3.10"
keywords = ["trajectory", "polynomial", "mav", "quadrotor", "feasibility", "robotics"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Mathematics",
]
dependencies = [
    "numpy",
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["mavtraj"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
