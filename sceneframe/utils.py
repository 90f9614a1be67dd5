# utils.py

import numpy as np
from numba import njit
from numbers import Real
from typing import Any

# default tolerance for orthonormality checks
RIGID_TOLERANCE = 1e-6

_EYE4 = np.eye(4, dtype=np.float64)


def to_matrix(translation: np.ndarray, linear: np.ndarray) -> np.ndarray:
    """
    Assemble a 4x4 homogeneous matrix from a translation and a 3x3 linear part.
    The bottom row is always [0, 0, 0, 1].
    """
    m = _EYE4.copy()
    m[:3, :3] = linear
    m[:3, 3] = translation
    return m


@njit(cache=True)
def rigid_inverse_matrix(mat4: np.ndarray) -> np.ndarray:
    """Closed-form inverse [Rᵀ, -Rᵀt] of a rigid 4x4 matrix."""
    m = np.eye(4)
    for i in range(3):
        for j in range(3):
            m[i, j] = mat4[j, i]
    for i in range(3):
        m[i, 3] = -(mat4[0, i] * mat4[0, 3] + mat4[1, i] * mat4[1, 3] + mat4[2, i] * mat4[2, 3])
    return m


def linear_inverse(linear: np.ndarray) -> np.ndarray:
    """
    Inverse of a 3x3 matrix via its adjugate.

    A singular matrix does not raise; its inverse comes back with inf/NaN
    entries instead.
    """
    r0, r1, r2 = linear[0], linear[1], linear[2]
    adj = np.column_stack((np.cross(r1, r2), np.cross(r2, r0), np.cross(r0, r1)))
    det = r0 @ adj[:, 0]
    with np.errstate(divide="ignore", invalid="ignore"):
        return adj / det


def is_real(value: Any) -> bool:
    """True for real scalars (python or numpy), but not for bools."""
    return isinstance(value, Real) and not isinstance(value, (bool, np.bool_))


def is_vector3(value: Any) -> bool:
    """
    True if `value` has the shape of a 3D vector: a length-3 ndarray of
    numbers, or a list/tuple of three real scalars.
    """
    if isinstance(value, np.ndarray):
        return value.shape == (3,) and np.issubdtype(value.dtype, np.number)
    if isinstance(value, (list, tuple)):
        return len(value) == 3 and all(is_real(v) for v in value)
    return False


def as_vector3(value: Any) -> np.ndarray:
    """
    Coerce a 3D vector to a fresh float64 array of shape (3,).

    Raises:
        ValueError: if `value` is not shaped like a 3D vector.
    """
    vec = np.array(value, dtype=np.float64)
    if vec.shape != (3,):
        raise ValueError(f"Invalid vector shape: {vec.shape}")
    return vec


def is_rigid(mat4: np.ndarray, tol: float = RIGID_TOLERANCE) -> bool:
    R = mat4[:3, :3]
    # 1) R must be orthonormal, det≈+1
    if not (np.allclose(R @ R.T, np.eye(3), atol=tol)
            and abs(np.linalg.det(R) - 1.0) <= tol):
        return False

    # 2) bottom row must be [0,0,0,1]
    if not np.array_equal(mat4[3, :], [0.0, 0.0, 0.0, 1.0]):
        return False

    # (the translation column can be anything)
    return True
