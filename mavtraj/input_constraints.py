"""Limits on the inputs of a multirotor: thrust, velocity and body rates."""

from __future__ import annotations

import math
from enum import IntEnum
from typing import Mapping

import yaml

GRAVITY = 9.80665


class InputConstraintType(IntEnum):
    F_MIN = 0
    F_MAX = 1
    V_MAX = 2
    OMEGA_XY_MAX = 3
    OMEGA_Z_MAX = 4
    OMEGA_Z_DOT_MAX = 5


_NAMES = {
    InputConstraintType.F_MIN: "f_min",
    InputConstraintType.F_MAX: "f_max",
    InputConstraintType.V_MAX: "v_max",
    InputConstraintType.OMEGA_XY_MAX: "omega_xy_max",
    InputConstraintType.OMEGA_Z_MAX: "omega_z_max",
    InputConstraintType.OMEGA_Z_DOT_MAX: "omega_z_dot_max",
}


def input_constraint_name(constraint_type: int) -> str:
    try:
        return _NAMES[InputConstraintType(constraint_type)]
    except ValueError:
        return "Unknown!"


class InputConstraints:
    """A set of non-negative input limits keyed by InputConstraintType."""

    def __init__(self):
        self._constraints: dict[int, float] = {}

    def add_constraint(self, constraint_type: int, value: float) -> None:
        """Set a limit; keeps f_max >= f_min when either is changed."""
        value = abs(float(value))
        constraint_type = int(constraint_type)
        if constraint_type == InputConstraintType.F_MIN and self.has_constraint(
            InputConstraintType.F_MAX
        ):
            f_max = self._constraints[InputConstraintType.F_MAX]
            self._constraints[InputConstraintType.F_MAX] = max(value, f_max)
        elif constraint_type == InputConstraintType.F_MAX and self.has_constraint(
            InputConstraintType.F_MIN
        ):
            f_min = self._constraints[InputConstraintType.F_MIN]
            self._constraints[InputConstraintType.F_MIN] = min(value, f_min)
        self._constraints[constraint_type] = value

    def set_default_values(self) -> None:
        self._constraints[InputConstraintType.F_MIN] = 0.5 * GRAVITY
        self._constraints[InputConstraintType.F_MAX] = 1.5 * GRAVITY
        self._constraints[InputConstraintType.V_MAX] = 3.0
        self._constraints[InputConstraintType.OMEGA_XY_MAX] = math.pi / 2.0
        self._constraints[InputConstraintType.OMEGA_Z_MAX] = math.pi / 2.0
        self._constraints[InputConstraintType.OMEGA_Z_DOT_MAX] = 2.0 * math.pi

    def get_constraint(self, constraint_type: int) -> float | None:
        """The limit, or None if it is not set."""
        return self._constraints.get(int(constraint_type))

    def has_constraint(self, constraint_type: int) -> bool:
        return int(constraint_type) in self._constraints

    def remove_constraint(self, constraint_type: int) -> bool:
        """Remove a limit; return whether it was set."""
        return self._constraints.pop(int(constraint_type), None) is not None

    def to_dict(self) -> dict[str, float]:
        return {
            input_constraint_name(key): self._constraints[key]
            for key in sorted(self._constraints)
        }

    def from_dict(self, data: Mapping[str, float]) -> None:
        """Add every known limit found in data."""
        for constraint_type in InputConstraintType:
            name = input_constraint_name(constraint_type)
            if data.get(name) is not None:
                self.add_constraint(constraint_type, float(data[name]))

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_dict(), sort_keys=False)

    def from_yaml(self, text: str) -> None:
        data = yaml.safe_load(text)
        if data is None:
            return
        if not isinstance(data, Mapping):
            raise ValueError("input constraints YAML must be a mapping")
        self.from_dict(data)