# args.py

"""
Argument shapes accepted by the dynamic `Transform.new(...)` constructor.

Every recognized call shape is a small frozen dataclass. Resolution looks at
the arity and at whether each argument is a vector or a number, nothing else,
and commits to the first shape that matches in this order:

    1. ()                           -> IdentityArgs
    2. (Vector3)                    -> TranslationArgs
    3. (Vector3, Vector3[, Vector3]) -> LookAtArgs
    4. (x, y, z)                    -> PositionXYZArgs
    5. (x, y, z, qx, qy, qz, qw)    -> PositionQuaternionArgs
    6. (x, y, z, r00, ..., r22)     -> PositionMatrixArgs
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

import numpy as np

from sceneframe.errors import InvalidArgumentsError
from sceneframe.utils import as_vector3, is_real, is_vector3

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IdentityArgs:
    pass


@dataclass(frozen=True)
class TranslationArgs:
    position: np.ndarray


@dataclass(frozen=True)
class LookAtArgs:
    origin: np.ndarray
    target: np.ndarray
    up: Optional[np.ndarray] = None


@dataclass(frozen=True)
class PositionXYZArgs:
    x: float
    y: float
    z: float


@dataclass(frozen=True)
class PositionQuaternionArgs:
    x: float
    y: float
    z: float
    qx: float
    qy: float
    qz: float
    qw: float


@dataclass(frozen=True)
class PositionMatrixArgs:
    """
    Translation followed by the nine linear components. Each consecutive
    triple (r00, r01, r02), (r10, r11, r12), (r20, r21, r22) is one basis
    axis (X, Y, Z), the same order `Transform.get_components` reports them in.
    """
    x: float
    y: float
    z: float
    r00: float
    r01: float
    r02: float
    r10: float
    r11: float
    r12: float
    r20: float
    r21: float
    r22: float


ConstructorArgs = Union[
    IdentityArgs,
    TranslationArgs,
    LookAtArgs,
    PositionXYZArgs,
    PositionQuaternionArgs,
    PositionMatrixArgs,
]


def _all_numbers(args: Sequence) -> bool:
    return all(is_real(a) for a in args)


def _floats(args: Sequence) -> Tuple[float, ...]:
    return tuple(float(a) for a in args)


def resolve_constructor_args(args: Sequence) -> ConstructorArgs:
    """
    Map the positional arguments of a `Transform.new(...)` call onto one of
    the recognized shapes.

    Raises:
        InvalidArgumentsError: if no shape matches.
    """
    args = tuple(args)
    n = len(args)

    if n == 0:
        resolved = IdentityArgs()
    elif n == 1 and is_vector3(args[0]):
        resolved = TranslationArgs(as_vector3(args[0]))
    elif (n in (2, 3) and is_vector3(args[0]) and is_vector3(args[1])
          and (n == 2 or args[2] is None or is_vector3(args[2]))):
        up = as_vector3(args[2]) if n == 3 and args[2] is not None else None
        resolved = LookAtArgs(as_vector3(args[0]), as_vector3(args[1]), up)
    elif n == 3 and _all_numbers(args):
        resolved = PositionXYZArgs(*_floats(args))
    elif n == 7 and _all_numbers(args):
        resolved = PositionQuaternionArgs(*_floats(args))
    elif n == 12 and _all_numbers(args):
        resolved = PositionMatrixArgs(*_floats(args))
    else:
        logger.debug("no constructor shape matches %d argument(s)", n)
        raise InvalidArgumentsError(args)

    logger.debug("constructor arguments resolved as %s",
                 type(resolved).__name__)
    return resolved
