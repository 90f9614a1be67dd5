"""
sceneframe: the position + orientation value type of a scene graph, stored as
a 4x4 homogeneous matrix, with composition, space conversion, interpolation
and Euler / axis-angle decomposition.
"""

__version__ = version = "0.1.0"

# exposing the public API of the package
from sceneframe.args import resolve_constructor_args
from sceneframe.direction import Direction
from sceneframe.errors import InvalidArgumentsError, TransformError
from sceneframe.persisted import Matrix3, PersistedCFrame, from_persisted, to_persisted
from sceneframe.transform import IDENTITY, Transform

__all__ = [
    "Direction",
    "IDENTITY",
    "InvalidArgumentsError",
    "Matrix3",
    "PersistedCFrame",
    "Transform",
    "TransformError",
    "from_persisted",
    "resolve_constructor_args",
    "to_persisted",
]
