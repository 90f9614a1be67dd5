import numpy as np
from enum import Enum


class Direction(Enum):
    RIGHT = 0
    LEFT = 1
    UP = 2
    DOWN = 3
    BACK = 4
    FORWARD = 5


# map each Direction to its unit-vector in the *world* frame
# (right-handed: X right, Y up, Z backward; looking down -Z)
_DIR_TO_VEC = {
    Direction.RIGHT:    np.array([1,  0,  0], dtype=np.float64),
    Direction.LEFT:     np.array([-1,  0,  0], dtype=np.float64),
    Direction.UP:       np.array([0,  1,  0], dtype=np.float64),
    Direction.DOWN:     np.array([0, -1,  0], dtype=np.float64),
    Direction.BACK:     np.array([0,  0,  1], dtype=np.float64),
    Direction.FORWARD:  np.array([0,  0, -1], dtype=np.float64),
}


def direction_to_vector(direction: Direction) -> np.ndarray:
    """Return a fresh copy of the world unit-vector for `direction`."""
    return _DIR_TO_VEC[direction].copy()
