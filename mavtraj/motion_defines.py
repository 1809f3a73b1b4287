"""Orders of derivatives of position and orientation."""

from enum import IntEnum


class DerivativeOrder(IntEnum):
    """Derivative orders; orientation names alias the position ones."""

    INVALID = -1
    POSITION = 0
    VELOCITY = 1
    ACCELERATION = 2
    JERK = 3
    SNAP = 4

    ORIENTATION = 0
    ANGULAR_VELOCITY = 1
    ANGULAR_ACCELERATION = 2