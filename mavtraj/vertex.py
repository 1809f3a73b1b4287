"""Waypoints with per-derivative constraints and segment time estimates."""

from __future__ import annotations

import copy
import math
from typing import Iterable, Sequence

import numpy as np

from mavtraj.motion_defines import DerivativeOrder

_MIN_RANDOM_VERTEX_DISTANCE = 0.2
_MIN_SEGMENT_TIME = 0.1


def _derivative_name(order: int) -> str:
    try:
        return DerivativeOrder(order).name.lower()
    except ValueError:
        return str(order)


def _format_value(value: np.ndarray) -> str:
    return "[" + ", ".join(f"{x:.4g}" for x in value) + "]"


class Vertex:
    """A waypoint holding fixed values for some derivatives of a D-dimensional state."""

    __hash__ = None  # mutable

    def __init__(self, dimension: int):
        if dimension < 0:
            raise ValueError("dimension must not be negative")
        self.dimension = int(dimension)
        self._constraints: dict[int, np.ndarray] = {}

    @property
    def constraints(self) -> dict[int, np.ndarray]:
        """Constraints ordered by derivative order."""
        return {k: self._constraints[k].copy() for k in sorted(self._constraints)}

    def add_constraint(self, derivative_order: int, value) -> None:
        """Fix the given derivative to value (a scalar is accepted for 1-D)."""
        array = np.atleast_1d(np.array(value, dtype=float))
        if array.ndim != 1 or array.shape[0] != self.dimension:
            raise ValueError(
                f"constraint has {array.size} values but vertex has dimension {self.dimension}"
            )
        self._constraints[int(derivative_order)] = array

    def remove_constraint(self, derivative_order: int) -> bool:
        """Remove a constraint; return whether it was present."""
        return self._constraints.pop(int(derivative_order), None) is not None

    def make_start_or_end(self, value, up_to_derivative: int) -> None:
        """Fix the position and set derivatives 1..up_to_derivative to zero."""
        self.add_constraint(DerivativeOrder.POSITION, value)
        for order in range(1, up_to_derivative + 1):
            self._constraints[order] = np.zeros(self.dimension)

    def get_constraint(self, derivative_order: int) -> np.ndarray | None:
        """The constraint value, or None if the derivative is unconstrained."""
        value = self._constraints.get(int(derivative_order))
        return None if value is None else value.copy()

    def has_constraint(self, derivative_order: int) -> bool:
        return int(derivative_order) in self._constraints

    def number_of_constraints(self) -> int:
        return len(self._constraints)

    def is_equal_tol(self, other: Vertex, tol: float) -> bool:
        """Same constrained derivatives, with values equal within tol."""
        if len(self._constraints) != len(other._constraints):
            return False
        for order, value in self._constraints.items():
            other_value = other._constraints.get(order)
            if other_value is None or other_value.shape != value.shape:
                return False
            if not np.all(np.abs(value - other_value) <= tol):
                return False
        return True

    def subdimension(self, subdimensions: Sequence[int], max_derivative_order: int) -> Vertex:
        """A vertex restricted to the given dimensions and derivatives."""
        indices = [int(i) for i in subdimensions]
        for index in indices:
            if index < 0 or index >= self.dimension:
                raise IndexError(
                    f"subdimension {index} out of range for dimension {self.dimension}"
                )
        sub = Vertex(len(indices))
        for order, value in self._constraints.items():
            if order > max_derivative_order:
                continue
            sub.add_constraint(order, value[indices])
        return sub

    def copy(self) -> Vertex:
        return copy.deepcopy(self)

    def __str__(self) -> str:
        lines = ["constraints: "]
        for order in sorted(self._constraints):
            lines.append(
                f"  type: {_derivative_name(order)}"
                f"  value: {_format_value(self._constraints[order])}"
            )
        return "\n".join(lines) + "\n"

    def __repr__(self) -> str:
        return f"Vertex(dimension={self.dimension}, constraints={self.constraints!r})"


def format_vertices(vertices: Iterable[Vertex]) -> str:
    """Text of all vertices, each followed by a blank line."""
    return "".join(f"{v}\n" for v in vertices)


def create_random_vertices(
    maximum_derivative: int,
    n_segments: int,
    pos_min: Sequence[float],
    pos_max: Sequence[float],
    seed: int,
) -> list[Vertex]:
    """Random waypoints in a box; consecutive positions lie more than 0.2 apart."""
    low = np.atleast_1d(np.array(pos_min, dtype=float))
    high = np.atleast_1d(np.array(pos_max, dtype=float))
    if n_segments < 1:
        raise ValueError("at least one segment is required")
    if low.shape != high.shape:
        raise ValueError("pos_min and pos_max differ in size")
    if np.linalg.norm(high - low) < _MIN_RANDOM_VERTEX_DISTANCE:
        raise ValueError("position bounds are too close together")
    if maximum_derivative <= 0:
        raise ValueError("maximum_derivative must be positive")

    rng = np.random.default_rng(seed)
    dimension = low.size

    last_pos = rng.uniform(low, high)
    start = Vertex(dimension)
    start.make_start_or_end(last_pos, maximum_derivative)
    vertices = [start]

    for _ in range(n_segments):
        while True:
            pos = rng.uniform(low, high)
            if np.linalg.norm(pos - last_pos) > _MIN_RANDOM_VERTEX_DISTANCE:
                break
        vertex = Vertex(dimension)
        vertex.add_constraint(DerivativeOrder.POSITION, pos)
        vertices.append(vertex)
        last_pos = pos

    vertices[-1].make_start_or_end(last_pos, maximum_derivative)
    return vertices


def create_random_vertices_1d(
    maximum_derivative: int,
    n_segments: int,
    pos_min: float,
    pos_max: float,
    seed: int,
) -> list[Vertex]:
    return create_random_vertices(
        maximum_derivative, n_segments, [pos_min], [pos_max], seed
    )


def create_square_vertices(
    maximum_derivative: int,
    center: Sequence[float],
    side_length: float,
    rounds: int,
) -> list[Vertex]:
    """Waypoints around a square in the xy plane, starting and ending at one corner."""
    cx, cy, cz = (float(c) for c in center)
    half = side_length / 2.0
    corners = [
        (cx - half, cy - half, cz),
        (cx - half, cy + half, cz),
        (cx + half, cy + half, cz),
        (cx + half, cy - half, cz),
    ]

    def corner_vertex(pos) -> Vertex:
        vertex = Vertex(3)
        vertex.add_constraint(DerivativeOrder.POSITION, pos)
        return vertex

    first = corner_vertex(corners[0])
    first.make_start_or_end(corners[0], maximum_derivative)
    vertices = [first]
    for _ in range(rounds):
        for pos in corners[1:] + corners[:1]:
            vertices.append(corner_vertex(pos))
    vertices[-1].make_start_or_end(corners[0], maximum_derivative)
    return vertices


def _positions(vertices: Sequence[Vertex]) -> list[np.ndarray]:
    if len(vertices) < 2:
        raise ValueError("at least two vertices are required")
    positions = []
    for vertex in vertices:
        position = vertex.get_constraint(DerivativeOrder.POSITION)
        if position is None:
            raise ValueError("every vertex needs a position constraint")
        positions.append(position)
    return positions


def estimate_segment_times(
    vertices: Sequence[Vertex], v_max: float, a_max: float
) -> list[float]:
    return estimate_segment_times_nfabian(vertices, v_max, a_max)


def estimate_segment_times_velocity_ramp(
    vertices: Sequence[Vertex],
    v_max: float,
    a_max: float,
    time_factor: float = 1.0,
) -> list[float]:
    """Segment times from a trapezoidal velocity profile, at least 0.1 s each."""
    positions = _positions(vertices)
    return [
        max(_MIN_SEGMENT_TIME, compute_time_velocity_ramp(start, end, v_max, a_max))
        for start, end in zip(positions, positions[1:])
    ]


def estimate_segment_times_nfabian(
    vertices: Sequence[Vertex],
    v_max: float,
    a_max: float,
    magic_fabian_constant: float = 6.5,
) -> list[float]:
    """Heuristic segment times growing with distance and the v_max/a_max ratio."""
    positions = _positions(vertices)
    times = []
    for start, end in zip(positions, positions[1:]):
        distance = float(np.linalg.norm(end - start))
        times.append(
            distance / v_max * 2
            * (1.0 + magic_fabian_constant * v_max / a_max * math.exp(-distance / v_max * 2))
        )
    return times


def compute_time_velocity_ramp(start, goal, v_max: float, a_max: float) -> float:
    """Time to travel from start to goal accelerating and braking at a_max."""
    distance = float(
        np.linalg.norm(np.atleast_1d(np.array(start, dtype=float)) - np.atleast_1d(np.array(goal, dtype=float)))
    )
    acc_time = v_max / a_max
    acc_distance = 0.5 * v_max * acc_time
    if distance < 2.0 * acc_distance:
        return 2.0 * math.sqrt(distance / a_max)
    return 2.0 * acc_time + (distance - 2.0 * acc_distance) / v_max