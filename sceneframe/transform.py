# transform.py

# Written by: the sceneframe authors
# Licensed under the Apache License, Version 2.0 (the "License")

import logging
from numpy import array as np_array
from numpy import array_equal as np_array_equal
from numpy import allclose as np_allclose
from numpy import array2string as np_array2string
from numpy import float64 as np_float64
from numpy import ndarray
import numpy as np

from typing import Any, List, Optional, Tuple, Union
from sceneframe.args import (
    IdentityArgs,
    LookAtArgs,
    PositionMatrixArgs,
    PositionQuaternionArgs,
    PositionXYZArgs,
    TranslationArgs,
    resolve_constructor_args,
)
from sceneframe.direction import Direction, _DIR_TO_VEC, direction_to_vector
from sceneframe.geometry import (
    axis_angle_to_rotation,
    euler_xyz_to_rotation,
    euler_yxz_to_rotation,
    look_at_rotation,
    polar_rotation_svd,
    quaternion_slerp,
    quaternion_to_axis_angle,
    quaternion_to_rotation,
    rotation_to_euler_xyz,
    rotation_to_euler_yxz,
    rotation_to_quaternion,
)
from sceneframe.utils import (
    RIGID_TOLERANCE,
    as_vector3,
    is_rigid,
    is_vector3,
    linear_inverse,
    rigid_inverse_matrix,
    to_matrix,
)

logger = logging.getLogger(__name__)

# preallocate the identity matrix for performance
_EYE4 = np.eye(4, dtype=np_float64)
_EYE4.flags.writeable = False


def _format_number(value: float) -> str:
    """Shortest round-trip form, integral values without a trailing '.0'."""
    value = float(value)
    if value.is_integer():
        return f"{value:.0f}"
    return repr(value)


def _format_vector(vec: ndarray) -> str:
    return ", ".join(_format_number(v) for v in vec)


class Transform:
    """
    Position and orientation in 3D space, stored as a 4x4 homogeneous matrix.

    Columns 0-2 of `matrix` are the local X (right), Y (up) and Z (back) axes,
    column 3 is the position. The bottom row is always [0, 0, 0, 1].

    A Transform is an immutable value: every operation returns a new one and
    `matrix` is a read-only array.

    Most constructors produce a rigid transform (orthonormal linear part).
    `from_matrix` with an explicit back axis and the twelve-number form of
    `new` store whatever basis they are given, unchecked. Rotation-extracting
    operations (`lerp`, `to_euler_angles_*`, `to_axis_angle`) assume a rigid
    linear part; for anything else their results are unspecified. Use
    `orthonormalize` to repair such a transform explicitly.
    """
    __slots__ = ("matrix",)

    def __init__(self, matrix: Optional[ndarray] = None):
        if matrix is None:
            matrix = _EYE4
        mat = np_array(matrix, dtype=np_float64)
        if mat.shape != (4, 4):
            raise ValueError(f"Invalid matrix shape: {mat.shape}")
        if not np_array_equal(mat[3, :], _EYE4[3, :]):
            raise ValueError(
                f"Invalid bottom row: {mat[3, :]}, expected [0, 0, 0, 1]")
        mat.flags.writeable = False
        object.__setattr__(self, "matrix", mat)

    @staticmethod
    def _wrap(mat: ndarray) -> "Transform":
        # trusted fast path: `mat` is a fresh 4x4 with a valid bottom row
        mat.flags.writeable = False
        instance = object.__new__(Transform)
        object.__setattr__(instance, "matrix", mat)
        return instance

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    #########
    # Constructors
    #

    @classmethod
    def new(cls, *args: Any) -> "Transform":
        """
        Construct a Transform from any of the recognized argument shapes:

            new()                                    identity
            new(pos)                                 translation
            new(origin, target[, up])                look_at
            new(x, y, z)                             translation
            new(x, y, z, qx, qy, qz, qw)             translation + quaternion
            new(x, y, z, r00, r01, ..., r22)         translation + basis axes

        Raises:
            InvalidArgumentsError: if the arguments match none of them.
        """
        shape = resolve_constructor_args(args)

        if isinstance(shape, IdentityArgs):
            return cls._wrap(_EYE4.copy())
        if isinstance(shape, TranslationArgs):
            return cls._wrap(to_matrix(shape.position, _EYE4[:3, :3]))
        if isinstance(shape, LookAtArgs):
            return cls.look_at(shape.origin, shape.target, shape.up)
        if isinstance(shape, PositionXYZArgs):
            return cls._wrap(to_matrix([shape.x, shape.y, shape.z], _EYE4[:3, :3]))
        if isinstance(shape, PositionQuaternionArgs):
            R = quaternion_to_rotation(
                np_array([shape.qx, shape.qy, shape.qz, shape.qw], dtype=np_float64))
            return cls._wrap(to_matrix([shape.x, shape.y, shape.z], R))
        if isinstance(shape, PositionMatrixArgs):
            axes = np_array([
                [shape.r00, shape.r01, shape.r02],
                [shape.r10, shape.r11, shape.r12],
                [shape.r20, shape.r21, shape.r22],
            ], dtype=np_float64)
            # each triple is one basis axis, i.e. one column
            return cls._wrap(to_matrix([shape.x, shape.y, shape.z], axes.T))
        raise AssertionError(f"unhandled constructor shape {shape!r}")

    @classmethod
    def from_translation(cls, position: Union[ndarray, List, Tuple]) -> "Transform":
        """
        Create a pure translation.

        Args:
            position: length-3 vector to place in the last column.
        """
        return cls._wrap(to_matrix(as_vector3(position), _EYE4[:3, :3]))

    @classmethod
    def look_at(
        cls,
        origin: Union[ndarray, List, Tuple],
        target: Union[ndarray, List, Tuple],
        up: Optional[Union[ndarray, List, Tuple]] = None,
    ) -> "Transform":
        """
        Create a Transform positioned at `origin` whose look vector points at
        `target`.

        Args:
            origin: position of the new Transform.
            target: point to look at.
            up: approximate up direction, defaults to world +Y.

        The caller must ensure `target != origin` and that `up` is not
        parallel to `target - origin`; otherwise the result contains NaN.
        """
        origin = as_vector3(origin)
        up = direction_to_vector(Direction.UP) if up is None else as_vector3(up)
        R = look_at_rotation(origin, as_vector3(target), up)
        return cls._wrap(to_matrix(origin, R))

    @classmethod
    def from_euler_angles_xyz(cls, rx: float, ry: float, rz: float) -> "Transform":
        """
        Create a rotation from Euler angles in radians, composed as
        Rx(rx) · Ry(ry) · Rz(rz).
        """
        R = euler_xyz_to_rotation(float(rx), float(ry), float(rz))
        return cls._wrap(to_matrix((0.0, 0.0, 0.0), R))

    @classmethod
    def from_euler_angles_yxz(cls, rx: float, ry: float, rz: float) -> "Transform":
        """
        Create a rotation from Euler angles in radians, composed as
        Ry(ry) · Rx(rx) · Rz(rz). The parameter order is still (rx, ry, rz).
        """
        R = euler_yxz_to_rotation(float(rx), float(ry), float(rz))
        return cls._wrap(to_matrix((0.0, 0.0, 0.0), R))

    @classmethod
    def from_axis_angle(cls, axis: Union[ndarray, List, Tuple], angle: float) -> "Transform":
        """
        Create a rotation of `angle` radians about `axis` (normalized here).
        """
        R = axis_angle_to_rotation(as_vector3(axis), float(angle))
        return cls._wrap(to_matrix((0.0, 0.0, 0.0), R))

    @classmethod
    def from_matrix(
        cls,
        position: Union[ndarray, List, Tuple],
        right: Union[ndarray, List, Tuple],
        up: Union[ndarray, List, Tuple],
        back: Optional[Union[ndarray, List, Tuple]] = None,
    ) -> "Transform":
        """
        Create a Transform directly from its basis axes.

        Args:
            position: translation.
            right: X axis, stored verbatim.
            up: Y axis, stored verbatim.
            back: Z axis. If omitted it is normalize(right × up), which
                assumes `right` and `up` are orthogonal. If given it is stored
                verbatim, no orthogonality is enforced.
        """
        right = as_vector3(right)
        up = as_vector3(up)
        if back is None:
            back = np.cross(right, up)
            back = back / np.linalg.norm(back)
        else:
            back = as_vector3(back)
        linear = np.column_stack((right, up, back))
        return cls._wrap(to_matrix(as_vector3(position), linear))

    @classmethod
    def from_list(cls, list_array: List[float]) -> "Transform":
        """
        Create a Transform from the 16 row-major values of its matrix.
        """
        if len(list_array) != 16:
            raise ValueError(f"Invalid list array length: {len(list_array)}")
        return cls(np_array(list_array, dtype=np_float64).reshape((4, 4)))

    #########
    # Getters for fundamental properties
    #

    @property
    def position(self) -> ndarray:
        """The translation column as a length-3 array."""
        return self.matrix[:3, 3].copy()

    @property
    def rotation(self) -> "Transform":
        """The same linear part with the translation zeroed."""
        mat = self.matrix.copy()
        mat[:3, 3] = 0.0
        return self._wrap(mat)

    @property
    def x(self) -> float:
        return float(self.matrix[0, 3])

    @property
    def y(self) -> float:
        return float(self.matrix[1, 3])

    @property
    def z(self) -> float:
        return float(self.matrix[2, 3])

    @property
    def x_vector(self) -> ndarray:
        """The local X (right) axis."""
        return self.matrix[:3, 0].copy()

    @property
    def y_vector(self) -> ndarray:
        """The local Y (up) axis."""
        return self.matrix[:3, 1].copy()

    @property
    def z_vector(self) -> ndarray:
        """The local Z (back) axis."""
        return self.matrix[:3, 2].copy()

    right_vector = x_vector
    up_vector = y_vector

    @property
    def look_vector(self) -> ndarray:
        """The look direction, i.e. the negated Z axis."""
        return -self.matrix[:3, 2]

    def direction_vector(self, direction: Direction) -> ndarray:
        """
        Rotate one of the convention directions into world space.

        `Direction.FORWARD` gives the look vector, `Direction.UP` the up
        vector, and so on.
        """
        return self.matrix[:3, :3] @ _DIR_TO_VEC[direction]

    ########
    # Composition and space conversion
    #

    def inverse(self) -> "Transform":
        """
        Invert this Transform.

        Rigid transforms use the closed form [Rᵀ, -Rᵀt]. Anything else goes
        through the general inverse of the linear part, so scaled bases
        invert correctly and a singular basis yields non-finite entries.
        """
        if is_rigid(self.matrix):
            return self._wrap(rigid_inverse_matrix(self.matrix))
        linear_inv = linear_inverse(self.matrix[:3, :3])
        with np.errstate(invalid="ignore", over="ignore"):
            translation = -linear_inv @ self.matrix[:3, 3]
        return self._wrap(to_matrix(translation, linear_inv))

    def to_world_space(self, other: "Transform") -> "Transform":
        """
        Express `other`, given relative to this Transform, in world space.
        Equivalent to `self * other`.
        """
        return self._wrap(self.matrix @ other.matrix)

    def to_object_space(self, other: "Transform") -> "Transform":
        """
        Express the world-space `other` relative to this Transform.
        Equivalent to `self.inverse() * other`.
        """
        return self._wrap(self.inverse().matrix @ other.matrix)

    def point_to_world_space(self, point: Union[ndarray, List, Tuple]) -> ndarray:
        """Apply rotation, then translation, to a point."""
        return self.matrix[:3, :3] @ as_vector3(point) + self.matrix[:3, 3]

    def point_to_object_space(self, point: Union[ndarray, List, Tuple]) -> ndarray:
        """Apply the inverse transform to a point."""
        return self.inverse().point_to_world_space(point)

    def vector_to_world_space(self, vector: Union[ndarray, List, Tuple]) -> ndarray:
        """Rotate a direction; translation is ignored."""
        return self.matrix[:3, :3] @ as_vector3(vector)

    def vector_to_object_space(self, vector: Union[ndarray, List, Tuple]) -> ndarray:
        """Apply the inverse rotation to a direction."""
        return self.inverse().vector_to_world_space(vector)

    def translate(self, offset: Union[ndarray, List, Tuple]) -> "Transform":
        """Move the position by `offset`; the rotation is unchanged."""
        mat = self.matrix.copy()
        mat[:3, 3] += as_vector3(offset)
        return self._wrap(mat)

    ########
    # Decomposition and interpolation
    #

    def _linear(self) -> ndarray:
        # contiguous, writable copy for the compiled kernels
        return self.matrix[:3, :3].copy()

    def lerp(self, goal: "Transform", alpha: float) -> "Transform":
        """
        Interpolate towards `goal`.

        The position is interpolated linearly, the rotation spherically.
        `alpha` is not clamped: values outside [0, 1] extrapolate. Both
        transforms must be rigid.
        """
        alpha = float(alpha)
        q = quaternion_slerp(
            rotation_to_quaternion(self._linear()),
            rotation_to_quaternion(goal._linear()),
            alpha,
        )
        start = self.matrix[:3, 3]
        position = start + (goal.matrix[:3, 3] - start) * alpha
        return self._wrap(to_matrix(position, quaternion_to_rotation(q)))

    def orthonormalize(self) -> "Transform":
        """
        Replace the linear part by the nearest proper rotation, keeping the
        position. Repairs numerical drift as well as skewed or scaled bases.
        """
        if not is_rigid(self.matrix):
            logger.debug("orthonormalizing non-rigid linear part:\n%s",
                         self.matrix[:3, :3])
        R = polar_rotation_svd(self._linear())
        return self._wrap(to_matrix(self.matrix[:3, 3], R))

    def to_euler_angles_xyz(self) -> Tuple[float, float, float]:
        """
        Euler angles (rx, ry, rz) in radians such that
        `Transform.from_euler_angles_xyz(rx, ry, rz)` has the same rotation.
        """
        return rotation_to_euler_xyz(self._linear())

    def to_euler_angles_yxz(self) -> Tuple[float, float, float]:
        """
        Euler angles in radians for the Y, X, Z composition order, returned
        as (rx, ry, rz).
        """
        return rotation_to_euler_yxz(self._linear())

    def to_axis_angle(self) -> Tuple[ndarray, float]:
        """
        The rotation as a unit axis and an angle in radians. A rotation-free
        transform reports ((1, 0, 0), 0.0).
        """
        axis, angle = quaternion_to_axis_angle(rotation_to_quaternion(self._linear()))
        return axis, float(angle)

    def get_components(self) -> Tuple[float, ...]:
        """
        Twelve numbers: the position with its Z component negated, followed
        by the X, Y and Z axes, each as (x, y, z).
        """
        m = self.matrix
        return (
            float(m[0, 3]), float(m[1, 3]), -float(m[2, 3]),
            float(m[0, 0]), float(m[1, 0]), float(m[2, 0]),
            float(m[0, 1]), float(m[1, 1]), float(m[2, 1]),
            float(m[0, 2]), float(m[1, 2]), float(m[2, 2]),
        )

    ########
    # Convenience/utility methods
    #

    def is_rigid(self, tol: float = RIGID_TOLERANCE) -> bool:
        """
        True if the linear part is a proper rotation within `tol`.
        """
        return is_rigid(self.matrix, tol=tol)

    def fuzzy_eq(self, other: "Transform", atol: float = 1e-6) -> bool:
        """
        Componentwise comparison with an absolute tolerance. `==` is exact.
        """
        return isinstance(other, Transform) and bool(
            np_allclose(self.matrix, other.matrix, rtol=0.0, atol=atol))

    def to_list(self) -> List[float]:
        """
        The 16 row-major values of the matrix.
        """
        return self.matrix.flatten().tolist()

    #########
    # Dunder methods
    #

    def __mul__(self, other: Any) -> Union["Transform", ndarray]:
        """
        `transform * transform` composes (`other` is applied first).
        `transform * vector` maps a point into world space.
        """
        if isinstance(other, Transform):
            return self.to_world_space(other)
        if is_vector3(other):
            return self.point_to_world_space(other)
        return NotImplemented

    __matmul__ = __mul__

    def __add__(self, other: Any) -> "Transform":
        if not is_vector3(other):
            return NotImplemented
        return self.translate(other)

    def __sub__(self, other: Any) -> "Transform":
        if not is_vector3(other):
            return NotImplemented
        return self.translate(-as_vector3(other))

    def __eq__(self, other: object) -> bool:
        """
        Exact componentwise equality of the 4x4 matrices.
        """
        if not isinstance(other, Transform):
            return NotImplemented
        return bool(np_array_equal(self.matrix, other.matrix))

    def __hash__(self) -> int:
        # adding 0.0 folds -0.0 into 0.0 so equal values hash alike
        return hash((self.matrix + 0.0).tobytes())

    def __str__(self) -> str:
        m = self.matrix
        return ", ".join(_format_vector(v) for v in (m[:3, 3], m[:3, 0], m[:3, 1], m[:3, 2]))

    def __repr__(self) -> str:
        mat = np_array2string(self.matrix, precision=6, separator=', ')
        return f"Transform(matrix=\n{mat}\n)"

    def __copy__(self) -> "Transform":
        return self._wrap(self.matrix.copy())

    def __deepcopy__(self, memo) -> "Transform":
        # matrices are numeric, so shallow vs deep is effectively the same here
        return self.__copy__()

    def __reduce__(self):
        return (Transform, (self.matrix.copy(),))

    #########
    # Scripting API names
    #

    Position = position
    Rotation = rotation
    X = x
    Y = y
    Z = z
    XVector = x_vector
    YVector = y_vector
    ZVector = z_vector
    RightVector = right_vector
    UpVector = up_vector
    LookVector = look_vector

    lookAt = look_at
    fromEulerAnglesXYZ = from_euler_angles_xyz
    fromEulerAnglesYXZ = from_euler_angles_yxz
    Angles = angles = from_euler_angles_xyz
    fromOrientation = from_orientation = from_euler_angles_yxz
    fromAxisAngle = from_axis_angle
    fromMatrix = from_matrix

    Inverse = inverse
    Lerp = lerp
    Orthonormalize = orthonormalize
    ToWorldSpace = to_world_space
    ToObjectSpace = to_object_space
    PointToWorldSpace = point_to_world_space
    PointToObjectSpace = point_to_object_space
    VectorToWorldSpace = vector_to_world_space
    VectorToObjectSpace = vector_to_object_space
    GetComponents = get_components
    ToEulerAnglesXYZ = to_euler_angles_xyz
    ToEulerAnglesYXZ = to_orientation = to_euler_angles_yxz
    ToOrientation = to_euler_angles_yxz
    ToAxisAngle = to_axis_angle


class _IdentityTransform(Transform):
    """
    The identity constant. Calling it, as in `Transform.identity()`, returns a
    plain identity Transform.
    """
    __slots__ = ()

    def __call__(self) -> Transform:
        return Transform._wrap(_EYE4.copy())


IDENTITY = _IdentityTransform()
Transform.identity = IDENTITY
