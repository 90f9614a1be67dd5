# geometry.py
import math
from numpy import float64 as np_float64
from numpy import ndarray
import numpy as np
from typing import Tuple
from numba import njit

from numba.core.errors import NumbaPerformanceWarning
import warnings
warnings.filterwarnings("ignore", category=NumbaPerformanceWarning)

# below this norm a quaternion's vector part carries no usable axis
AXIS_EPSILON = 1e-8

# above this |dot| slerp degrades to a normalized lerp
SLERP_DOT_THRESHOLD = 0.9995


@njit(cache=True, error_model="numpy")
def quaternion_to_rotation(quaternion: ndarray) -> ndarray:
    """
    Convert a quaternion to a 3x3 rotation matrix.

    The quaternion is expected in [x, y, z, w] order and is normalized before
    conversion, so any non-zero quaternion yields a proper rotation. A zero
    quaternion propagates NaN.

    Parameters:
        quaternion (ndarray): A 4-element array [x, y, z, w].

    Returns:
        ndarray: A 3x3 rotation matrix corresponding to the input quaternion.
    """
    x, y, z, w = quaternion[0], quaternion[1], quaternion[2], quaternion[3]
    n = math.sqrt(x*x + y*y + z*z + w*w)
    x /= n
    y /= n
    z /= n
    w /= n

    # precompute products
    xx = x*x
    yy = y*y
    zz = z*z
    xy = x*y
    xz = x*z
    yz = y*z
    wx = w*x
    wy = w*y
    wz = w*z

    R = np.empty((3, 3), dtype=np_float64)
    R[0, 0] = 1 - 2*(yy + zz)
    R[0, 1] = 2*(xy - wz)
    R[0, 2] = 2*(xz + wy)

    R[1, 0] = 2*(xy + wz)
    R[1, 1] = 1 - 2*(xx + zz)
    R[1, 2] = 2*(yz - wx)

    R[2, 0] = 2*(xz - wy)
    R[2, 1] = 2*(yz + wx)
    R[2, 2] = 1 - 2*(xx + yy)
    return R


@njit(cache=True, error_model="numpy")
def rotation_to_quaternion(rotation: ndarray) -> ndarray:
    """
    Converts a 3x3 rotation matrix to a normalized quaternion [x, y, z, w].

    Depending on the value of the trace of the rotation matrix, the algorithm selects an appropriate
    computation method to extract the quaternion components, ensuring numerical stability by normalizing
    the result.

    Notes:
        - The rotation matrix should be orthonormal. Other inputs give a
          quaternion, but not one with a meaningful relation to the matrix.
    """
    # unpack to locals (avoids repeated indexing)
    a00, a01, a02 = rotation[0, 0], rotation[0, 1], rotation[0, 2]
    a10, a11, a12 = rotation[1, 0], rotation[1, 1], rotation[1, 2]
    a20, a21, a22 = rotation[2, 0], rotation[2, 1], rotation[2, 2]

    tr = a00 + a11 + a22

    if tr > 0.0:
        S = math.sqrt(tr + 1.0) * 2.0
        qw = 0.25 * S
        qx = (a21 - a12) / S
        qy = (a02 - a20) / S
        qz = (a10 - a01) / S
    else:
        # pick largest diagonal element
        if a00 > a11 and a00 > a22:
            S = math.sqrt(1.0 + a00 - a11 - a22) * 2.0
            qw = (a21 - a12) / S
            qx = 0.25 * S
            qy = (a01 + a10) / S
            qz = (a02 + a20) / S
        elif a11 > a22:
            S = math.sqrt(1.0 + a11 - a00 - a22) * 2.0
            qw = (a02 - a20) / S
            qx = (a01 + a10) / S
            qy = 0.25 * S
            qz = (a12 + a21) / S
        else:
            S = math.sqrt(1.0 + a22 - a00 - a11) * 2.0
            qw = (a10 - a01) / S
            qx = (a02 + a20) / S
            qy = (a12 + a21) / S
            qz = 0.25 * S

    # normalize (guards against numerical drift)
    norm = math.sqrt(qx*qx + qy*qy + qz*qz + qw*qw)

    out = np.empty(4, dtype=np_float64)
    out[0] = qx / norm
    out[1] = qy / norm
    out[2] = qz / norm
    out[3] = qw / norm
    return out


@njit(cache=True)
def euler_xyz_to_rotation(rx: float, ry: float, rz: float) -> ndarray:
    """
    Rotation matrix R = Rx(rx) @ Ry(ry) @ Rz(rz), angles in radians.

    Read as intrinsic rotations this turns about X first, then about the new
    Y, then about the new Z.
    """
    sa, ca = math.sin(rx), math.cos(rx)
    sb, cb = math.sin(ry), math.cos(ry)
    sc, cc = math.sin(rz), math.cos(rz)

    R = np.empty((3, 3), dtype=np_float64)
    R[0, 0] = cb*cc
    R[0, 1] = -cb*sc
    R[0, 2] = sb

    R[1, 0] = ca*sc + sa*sb*cc
    R[1, 1] = ca*cc - sa*sb*sc
    R[1, 2] = -sa*cb

    R[2, 0] = sa*sc - ca*sb*cc
    R[2, 1] = sa*cc + ca*sb*sc
    R[2, 2] = ca*cb
    return R


@njit(cache=True)
def rotation_to_euler_xyz(rotation: ndarray) -> Tuple[float, float, float]:
    """
    Inverse of `euler_xyz_to_rotation`.

    Returns:
        (rx, ry, rz) in radians, ry in [-pi/2, pi/2].
    """
    sb = rotation[0, 2]
    if sb > 1.0:
        sb = 1.0
    elif sb < -1.0:
        sb = -1.0
    ry = math.asin(sb)
    rx = math.atan2(-rotation[1, 2], rotation[2, 2])
    rz = math.atan2(-rotation[0, 1], rotation[0, 0])
    return rx, ry, rz


@njit(cache=True)
def euler_yxz_to_rotation(rx: float, ry: float, rz: float) -> ndarray:
    """
    Rotation matrix R = Ry(ry) @ Rx(rx) @ Rz(rz), angles in radians.

    The parameters keep the (rx, ry, rz) order; only the order in which the
    elementary rotations are composed differs from `euler_xyz_to_rotation`.
    """
    sa, ca = math.sin(rx), math.cos(rx)
    sb, cb = math.sin(ry), math.cos(ry)
    sc, cc = math.sin(rz), math.cos(rz)

    R = np.empty((3, 3), dtype=np_float64)
    R[0, 0] = cb*cc + sb*sa*sc
    R[0, 1] = sb*sa*cc - cb*sc
    R[0, 2] = sb*ca

    R[1, 0] = ca*sc
    R[1, 1] = ca*cc
    R[1, 2] = -sa

    R[2, 0] = cb*sa*sc - sb*cc
    R[2, 1] = sb*sc + cb*sa*cc
    R[2, 2] = cb*ca
    return R


@njit(cache=True)
def rotation_to_euler_yxz(rotation: ndarray) -> Tuple[float, float, float]:
    """
    Inverse of `euler_yxz_to_rotation`.

    Returns:
        (rx, ry, rz) in radians, rx in [-pi/2, pi/2]. The tuple is ordered by
        axis label, not by application order.
    """
    sa = -rotation[1, 2]
    if sa > 1.0:
        sa = 1.0
    elif sa < -1.0:
        sa = -1.0
    rx = math.asin(sa)
    ry = math.atan2(rotation[0, 2], rotation[2, 2])
    rz = math.atan2(rotation[1, 0], rotation[1, 1])
    return rx, ry, rz


@njit(cache=True, error_model="numpy")
def axis_angle_to_rotation(axis: ndarray, angle: float) -> ndarray:
    """
    Rodrigues' formula. The axis is normalized first; a zero axis gives NaN.
    """
    n = math.sqrt(axis[0]*axis[0] + axis[1]*axis[1] + axis[2]*axis[2])
    ux, uy, uz = axis[0]/n, axis[1]/n, axis[2]/n
    s = math.sin(angle)
    c = math.cos(angle)
    one_c = 1.0 - c

    R = np.empty((3, 3), dtype=np_float64)
    R[0, 0] = c + ux*ux*one_c
    R[0, 1] = ux*uy*one_c - uz*s
    R[0, 2] = ux*uz*one_c + uy*s

    R[1, 0] = uy*ux*one_c + uz*s
    R[1, 1] = c + uy*uy*one_c
    R[1, 2] = uy*uz*one_c - ux*s

    R[2, 0] = uz*ux*one_c - uy*s
    R[2, 1] = uz*uy*one_c + ux*s
    R[2, 2] = c + uz*uz*one_c
    return R


@njit(cache=True)
def quaternion_to_axis_angle(quaternion: ndarray) -> Tuple[ndarray, float]:
    """
    Split a unit quaternion [x, y, z, w] into a unit axis and an angle.

    A quaternion without rotation has no defined axis, for which
    ((1, 0, 0), 0.0) is returned.
    """
    x, y, z, w = quaternion[0], quaternion[1], quaternion[2], quaternion[3]
    length = math.sqrt(x*x + y*y + z*z)
    axis = np.zeros(3, dtype=np_float64)
    if length >= AXIS_EPSILON:
        axis[0] = x / length
        axis[1] = y / length
        axis[2] = z / length
        return axis, 2.0 * math.atan2(length, w)
    axis[0] = 1.0
    return axis, 0.0


@njit(cache=True, error_model="numpy")
def quaternion_slerp(start: ndarray, end: ndarray, alpha: float) -> ndarray:
    """
    Spherical linear interpolation between two unit quaternions [x, y, z, w].

    Takes the shorter arc. Nearly parallel inputs fall back to a normalized
    lerp. `alpha` is not clamped, so values outside [0, 1] extrapolate.
    """
    dot = start[0]*end[0] + start[1]*end[1] + start[2]*end[2] + start[3]*end[3]
    if dot < 0.0:
        end = -end
        dot = -dot

    out = np.empty(4, dtype=np_float64)
    if dot > SLERP_DOT_THRESHOLD:
        for i in range(4):
            out[i] = start[i] + (end[i] - start[i]) * alpha
        n = math.sqrt(out[0]*out[0] + out[1]*out[1] +
                      out[2]*out[2] + out[3]*out[3])
        for i in range(4):
            out[i] /= n
        return out

    theta = math.acos(dot)
    theta_sin = math.sin(theta)
    scale1 = math.sin(theta * (1.0 - alpha)) / theta_sin
    scale2 = math.sin(theta * alpha) / theta_sin
    for i in range(4):
        out[i] = start[i] * scale1 + end[i] * scale2
    return out


@njit(cache=True)
def polar_rotation_svd(M: ndarray) -> ndarray:
    """
    Return the orthonormal rotation R from the polar decomposition M = R · P
    using a single SVD call (U Σ Vᵀ).  Handles all edge cases:

    * arbitrary scale, shear, or reflection in M
    * singular / nearly singular M   → best-fit R is still defined
    * det(R) enforced to +1 (proper rotation)
    """
    # 1) SVD – works for any real 3×3, even rank‑deficient
    U, _, Vt = np.linalg.svd(M)          # M = U Σ Vᵀ

    # 2) Draft rotation
    R = U @ Vt                           # U Vᵀ is orthogonal; det may be −1

    # 3) Force det(R)=+1  (avoid improper reflection)
    if np.linalg.det(R) < 0.0:
        # Flip sign of last column of U (equivalent to Σ33 → −Σ33)
        U[:, 2] *= -1.0
        R = U @ Vt                       # recompute with proper handedness

    return R


@njit(cache=True, error_model="numpy")
def look_at_rotation(origin: ndarray, target: ndarray, up: ndarray) -> ndarray:
    """
    Build the rotation of a frame at `origin` whose look direction (-Z)
    points at `target`.

    Columns of the result are the right (X), up (Y) and back (Z) axes:
        back  = normalize(origin - target)
        right = normalize(up × back)
        up'   = normalize(back × right)

    Coincident points, or `up` parallel to the look direction, yield NaN.
    """
    bx = origin[0] - target[0]
    by = origin[1] - target[1]
    bz = origin[2] - target[2]
    n = math.sqrt(bx*bx + by*by + bz*bz)
    bx, by, bz = bx/n, by/n, bz/n

    # right = up × back
    rx = up[1]*bz - up[2]*by
    ry = up[2]*bx - up[0]*bz
    rz = up[0]*by - up[1]*bx
    n = math.sqrt(rx*rx + ry*ry + rz*rz)
    rx, ry, rz = rx/n, ry/n, rz/n

    # up' = back × right
    ux = by*rz - bz*ry
    uy = bz*rx - bx*rz
    uz = bx*ry - by*rx
    n = math.sqrt(ux*ux + uy*uy + uz*uz)
    ux, uy, uz = ux/n, uy/n, uz/n

    R = np.empty((3, 3), dtype=np_float64)
    R[0, 0], R[1, 0], R[2, 0] = rx, ry, rz
    R[0, 1], R[1, 1], R[2, 1] = ux, uy, uz
    R[0, 2], R[1, 2], R[2, 2] = bx, by, bz
    return R
