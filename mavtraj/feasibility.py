"""Checks whether polynomial segments respect input and half-plane limits."""

from __future__ import annotations

import logging
import sys
from enum import IntEnum
from typing import Iterable, Sequence

import numpy as np

from mavtraj.input_constraints import GRAVITY, InputConstraints, InputConstraintType
from mavtraj.motion_defines import DerivativeOrder
from mavtraj.polynomial import Polynomial

_log = logging.getLogger(__name__)

_POSITION_DIMENSIONS = 3
_DIVISION_GUARD = 1.0e-6


class InputFeasibilityResult(IntEnum):
    FEASIBLE = 0
    INDETERMINABLE = 1
    INFEASIBLE_THRUST_HIGH = 2
    INFEASIBLE_THRUST_LOW = 3
    INFEASIBLE_VELOCITY = 4
    INFEASIBLE_ROLL_PITCH_RATES = 5
    INFEASIBLE_YAW_RATES = 6
    INFEASIBLE_YAW_ACC = 7


_RESULT_NAMES = {
    InputFeasibilityResult.FEASIBLE: "Feasible",
    InputFeasibilityResult.INDETERMINABLE: "Indeterminable",
    InputFeasibilityResult.INFEASIBLE_THRUST_HIGH: "InfeasibleThrustHigh",
    InputFeasibilityResult.INFEASIBLE_THRUST_LOW: "InfeasibleThrustLow",
    InputFeasibilityResult.INFEASIBLE_VELOCITY: "InfeasibleVelocity",
    InputFeasibilityResult.INFEASIBLE_ROLL_PITCH_RATES: "InfeasibleRollPitchRates",
    InputFeasibilityResult.INFEASIBLE_YAW_RATES: "InfeasibleYawRates",
    InputFeasibilityResult.INFEASIBLE_YAW_ACC: "InfeasibleYawAcc",
}


def input_feasibility_result_name(result: int) -> str:
    try:
        return _RESULT_NAMES[InputFeasibilityResult(result)]
    except ValueError:
        return "Unknown!"


class Segment:
    """One polynomial per dimension, all valid over [0, time]."""

    def __init__(self, polynomials: Iterable[Polynomial], time: float):
        self.polynomials = list(polynomials)
        sizes = {len(p) for p in self.polynomials}
        if len(sizes) > 1:
            raise ValueError("all polynomials of a segment need the same size")
        if time < 0.0:
            raise ValueError("segment time must not be negative")
        self.time = float(time)

    def dimension(self) -> int:
        return len(self.polynomials)

    def n(self) -> int:
        """Number of coefficients of each polynomial."""
        return len(self.polynomials[0]) if self.polynomials else 0

    def __getitem__(self, index: int) -> Polynomial:
        return self.polynomials[index]

    def evaluate(self, t: float, derivative: int = 0) -> np.ndarray:
        """The given derivative of every dimension at time t."""
        return np.array([p.evaluate(t, derivative) for p in self.polynomials])

    def __repr__(self) -> str:
        return f"Segment({self.polynomials!r}, time={self.time!r})"


class HalfPlane:
    """The open half space on the side of a plane that its normal points to."""

    def __init__(self, point: Sequence[float], normal: Sequence[float]):
        self.point = np.array(point, dtype=float).reshape(3)
        normal_array = np.array(normal, dtype=float).reshape(3)
        norm = float(np.linalg.norm(normal_array))
        if not norm > 0.0:
            raise ValueError("invalid normal")
        self.normal = normal_array / norm

    @staticmethod
    def from_points(a: Sequence[float], b: Sequence[float], c: Sequence[float]) -> HalfPlane:
        """Plane through three points, normal (b - a) x (c - a)."""
        a_arr = np.array(a, dtype=float).reshape(3)
        b_arr = np.array(b, dtype=float).reshape(3)
        c_arr = np.array(c, dtype=float).reshape(3)
        if np.array_equal(a_arr, b_arr) or np.array_equal(a_arr, c_arr):
            raise ValueError("points defining a half plane must differ")
        return HalfPlane(a_arr, np.cross(b_arr - a_arr, c_arr - a_arr))

    @staticmethod
    def create_bounding_box(
        point: Sequence[float], bounding_box_size: Sequence[float]
    ) -> list[HalfPlane]:
        """Six half planes whose intersection is the box centred on point."""
        center = np.array(point, dtype=float).reshape(3)
        size = np.array(bounding_box_size, dtype=float).reshape(3)
        bbx_min = center - size / 2.0
        bbx_max = center + size / 2.0
        planes = []
        for axis in range(3):
            normal = np.zeros(3)
            normal[axis] = 1.0
            planes.append(HalfPlane(bbx_min, normal))
            planes.append(HalfPlane(bbx_max, -normal))
        return planes

    def __repr__(self) -> str:
        return f"HalfPlane(point={self.point.tolist()!r}, normal={self.normal.tolist()!r})"


class FeasibilityBase:
    """Holds input limits, half-plane limits and gravity for feasibility checks."""

    def __init__(self, input_constraints: InputConstraints | None = None):
        self.input_constraints = (
            input_constraints if input_constraints is not None else InputConstraints()
        )
        self.half_plane_constraints: list[HalfPlane] = []
        self.gravity = np.array([0.0, 0.0, GRAVITY])

    def check_input_feasibility(self, segment: Segment) -> InputFeasibilityResult:
        """The base checker cannot decide input feasibility."""
        return InputFeasibilityResult.INDETERMINABLE

    def check_input_feasibility_trajectory(
        self, segments: Iterable[Segment]
    ) -> InputFeasibilityResult:
        """First non-feasible segment result; indeterminable if there are no segments."""
        result = InputFeasibilityResult.INDETERMINABLE
        for segment in segments:
            result = self.check_input_feasibility(segment)
            if result != InputFeasibilityResult.FEASIBLE:
                return result
        return result

    def check_half_plane_feasibility_trajectory(self, segments: Iterable[Segment]) -> bool:
        return all(self.check_half_plane_feasibility(s) for s in segments)

    def check_half_plane_feasibility(self, segment: Segment) -> bool:
        """Whether the segment's position stays strictly inside every half plane."""
        if segment.dimension() not in (3, 4):
            _log.warning(
                "Feasibility check only implemented for segment dimensions 3 and 4. "
                "Got dimension %d.",
                segment.dimension(),
            )
            return False

        for half_plane in self.half_plane_constraints:
            # Distance of the segment from the origin along the normal.
            projection = Polynomial(np.zeros(segment.n()))
            for dim in range(_POSITION_DIMENSIONS):
                projection += segment[dim] * float(half_plane.normal[dim])
            try:
                candidates = projection.compute_min_max_candidates(
                    0.0, segment.time, DerivativeOrder.POSITION
                )
            except ValueError:
                candidates = [0.0, segment.time]
            for t in candidates:
                offset = segment.evaluate(t)[:_POSITION_DIMENSIONS] - half_plane.point
                if float(np.dot(offset, half_plane.normal)) <= 0.0:
                    return False
        return True


class FeasibilityRecursive(FeasibilityBase):
    """Bisects a segment until cheap bounds prove feasibility or infeasibility."""

    def __init__(
        self,
        input_constraints: InputConstraints | None = None,
        min_section_time_s: float = 0.05,
    ):
        super().__init__(input_constraints)
        self.min_section_time_s = float(min_section_time_s)

    def _has(self, constraint_type: InputConstraintType) -> bool:
        return self.input_constraints.has_constraint(constraint_type)

    def _roots(self, segment: Segment, derivative: int) -> list[np.ndarray]:
        return [segment[i].roots(derivative) for i in range(_POSITION_DIMENSIONS)]

    def check_input_feasibility(self, segment: Segment) -> InputFeasibilityResult:
        if segment.dimension() not in (3, 4):
            return InputFeasibilityResult.INDETERMINABLE

        ict = InputConstraintType
        needs_thrust = self._has(ict.F_MIN) or self._has(ict.F_MAX) or self._has(ict.OMEGA_XY_MAX)
        try:
            roots_acc = (
                self._roots(segment, DerivativeOrder.ACCELERATION) if self._has(ict.V_MAX) else []
            )
            roots_jerk = self._roots(segment, DerivativeOrder.JERK) if needs_thrust else []
            roots_snap = (
                self._roots(segment, DerivativeOrder.SNAP)
                if self._has(ict.OMEGA_XY_MAX)
                else []
            )
        except ValueError:
            return InputFeasibilityResult.INDETERMINABLE

        t_1 = 0.0
        t_2 = segment.time
        result = self._recursive_feasibility(segment, roots_acc, roots_jerk, roots_snap, t_1, t_2)
        if result != InputFeasibilityResult.FEASIBLE:
            return result

        if segment.dimension() == 4:
            # Yaw is assumed independent of translation in the rigid body model.
            checks = (
                (ict.OMEGA_Z_MAX, DerivativeOrder.ANGULAR_VELOCITY,
                 InputFeasibilityResult.INFEASIBLE_YAW_RATES),
                (ict.OMEGA_Z_DOT_MAX, DerivativeOrder.ANGULAR_ACCELERATION,
                 InputFeasibilityResult.INFEASIBLE_YAW_ACC),
            )
            for constraint_type, derivative, failure in checks:
                limit = self.input_constraints.get_constraint(constraint_type)
                if limit is None:
                    continue
                try:
                    (_, low), (_, high) = segment[3].compute_min_max(t_1, t_2, derivative)
                except ValueError:
                    return InputFeasibilityResult.INDETERMINABLE
                if max(abs(low), abs(high)) > limit:
                    return failure

        return InputFeasibilityResult.FEASIBLE

    def _recursive_feasibility(
        self,
        segment: Segment,
        roots_acc: list[np.ndarray],
        roots_jerk: list[np.ndarray],
        roots_snap: list[np.ndarray],
        t_1: float,
        t_2: float,
    ) -> InputFeasibilityResult:
        if t_2 - t_1 < self.min_section_time_s:
            return InputFeasibilityResult.INDETERMINABLE

        ict = InputConstraintType
        f_min_limit = self.input_constraints.get_constraint(ict.F_MIN)
        f_max_limit = self.input_constraints.get_constraint(ict.F_MAX)
        v_max_limit = self.input_constraints.get_constraint(ict.V_MAX)
        omega_xy_limit = self.input_constraints.get_constraint(ict.OMEGA_XY_MAX)

        # Thrust at the section boundaries.
        if f_min_limit is not None or f_max_limit is not None:
            f_t_1 = self.evaluate_thrust(segment, t_1)
            f_t_2 = self.evaluate_thrust(segment, t_2)
            if f_min_limit is not None and min(f_t_1, f_t_2) < f_min_limit:
                return InputFeasibilityResult.INFEASIBLE_THRUST_LOW
            if f_max_limit is not None and max(f_t_1, f_t_2) > f_max_limit:
                return InputFeasibilityResult.INFEASIBLE_THRUST_HIGH

        # Velocity at the section boundaries.
        if v_max_limit is not None:
            v_t_1 = float(np.linalg.norm(
                segment.evaluate(t_1, DerivativeOrder.VELOCITY)[:_POSITION_DIMENSIONS]))
            v_t_2 = float(np.linalg.norm(
                segment.evaluate(t_2, DerivativeOrder.VELOCITY)[:_POSITION_DIMENSIONS]))
            if max(v_t_1, v_t_2) > v_max_limit:
                return InputFeasibilityResult.INFEASIBLE_VELOCITY

        f_min_sqr = 0.0
        f_max_sqr = 0.0
        v_max_sqr = 0.0
        j_max_sqr = 0.0

        if v_max_limit is not None:
            for i in range(_POSITION_DIMENSIONS):
                (_, v_low), (_, v_high) = segment[i].select_min_max_from_roots(
                    t_1, t_2, DerivativeOrder.VELOCITY, roots_acc[i]
                )
                peak = max(abs(v_low), abs(v_high))
                # A single axis already exceeds the total allowed velocity.
                if peak ** 2 > v_max_limit ** 2:
                    return InputFeasibilityResult.INFEASIBLE_VELOCITY
                v_max_sqr += peak ** 2

        if f_min_limit is not None or f_max_limit is not None or omega_xy_limit is not None:
            for i in range(_POSITION_DIMENSIONS):
                (_, a_low), (_, a_high) = segment[i].select_min_max_from_roots(
                    t_1, t_2, DerivativeOrder.ACCELERATION, roots_jerk[i]
                )
                f_i_min = a_low + self.gravity[i]
                f_i_max = a_high + self.gravity[i]
                largest = max(abs(f_i_min), abs(f_i_max))
                # A single axis already exceeds the total allowed thrust.
                if f_max_limit is not None and largest > f_max_limit:
                    return InputFeasibilityResult.INFEASIBLE_THRUST_HIGH
                # If the sign changes the smallest squared value is zero.
                if f_i_min * f_i_max >= 0.0:
                    f_min_sqr += min(abs(f_i_min), abs(f_i_max)) ** 2
                f_max_sqr += largest ** 2

        if omega_xy_limit is not None:
            for i in range(_POSITION_DIMENSIONS):
                (_, j_low), (_, j_high) = segment[i].select_min_max_from_roots(
                    t_1, t_2, DerivativeOrder.JERK, roots_snap[i]
                )
                j_max_sqr += max(abs(j_low), abs(j_high)) ** 2

        f_lower_bound = f_min_sqr ** 0.5
        f_upper_bound = f_max_sqr ** 0.5
        v_upper_bound = v_max_sqr ** 0.5
        if f_min_sqr > _DIVISION_GUARD:
            omega_xy_upper_bound = (j_max_sqr / f_min_sqr) ** 0.5
        else:
            omega_xy_upper_bound = sys.float_info.max

        if f_min_limit is not None and f_upper_bound < f_min_limit:
            return InputFeasibilityResult.INFEASIBLE_THRUST_LOW
        if f_max_limit is not None and f_lower_bound > f_max_limit:
            return InputFeasibilityResult.INFEASIBLE_THRUST_HIGH

        possibly_infeasible = (
            (f_min_limit is not None and f_lower_bound < f_min_limit)
            or (f_max_limit is not None and f_upper_bound > f_max_limit)
            or (v_max_limit is not None and v_upper_bound > v_max_limit)
            or (omega_xy_limit is not None and omega_xy_upper_bound > omega_xy_limit)
        )
        if possibly_infeasible:
            t_half = (t_1 + t_2) / 2
            first = self._recursive_feasibility(
                segment, roots_acc, roots_jerk, roots_snap, t_1, t_half
            )
            if first != InputFeasibilityResult.FEASIBLE:
                return first
            return self._recursive_feasibility(
                segment, roots_acc, roots_jerk, roots_snap, t_half, t_2
            )
        return InputFeasibilityResult.FEASIBLE

    def evaluate_thrust(self, segment: Segment, time: float) -> float:
        """Mass-normalised thrust magnitude at the given time."""
        acceleration = segment.evaluate(time, DerivativeOrder.ACCELERATION)[:_POSITION_DIMENSIONS]
        return float(np.linalg.norm(acceleration + self.gravity))