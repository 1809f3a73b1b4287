"""Polynomials, waypoint vertices, segment time estimates and feasibility checks for multirotor trajectories."""

__version__ = "0.1.0"

__all__ = [
    "motion_defines",
    "polynomial",
    "timing",
    "vertex",
    "input_constraints",
    "feasibility",
]