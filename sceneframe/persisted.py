# persisted.py

"""
Conversion between Transform and the position + 3x3 orientation record a
scene file stores. Fields are copied as they are, nothing is renormalized.
"""

from dataclasses import dataclass
from typing import Any, Dict, Tuple

import numpy as np

from sceneframe.transform import Transform
from sceneframe.utils import as_vector3, to_matrix

Vector3Tuple = Tuple[float, float, float]


def _as_tuple(value: Any) -> Vector3Tuple:
    return tuple(float(v) for v in as_vector3(value))


@dataclass(frozen=True)
class Matrix3:
    """Three basis vectors, ideally orthogonal."""
    x: Vector3Tuple
    y: Vector3Tuple
    z: Vector3Tuple


@dataclass(frozen=True)
class PersistedCFrame:
    position: Vector3Tuple
    orientation: Matrix3

    def to_dict(self) -> Dict[str, Any]:
        return {
            "position": list(self.position),
            "orientation": [
                list(self.orientation.x),
                list(self.orientation.y),
                list(self.orientation.z),
            ],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PersistedCFrame":
        """
        Inverse of `to_dict`.

        Raises:
            ValueError: if a vector does not have three components or the
                orientation does not have three vectors.
            KeyError: if a field is missing.
        """
        rows = data["orientation"]
        if len(rows) != 3:
            raise ValueError(f"Invalid orientation length: {len(rows)}")
        return cls(
            position=_as_tuple(data["position"]),
            orientation=Matrix3(*(_as_tuple(r) for r in rows)),
        )


def to_persisted(transform: Transform) -> PersistedCFrame:
    """
    Record the position and the three linear columns of `transform`.
    """
    m = transform.matrix
    return PersistedCFrame(
        position=_as_tuple(m[:3, 3]),
        orientation=Matrix3(
            x=_as_tuple(m[:3, 0]),
            y=_as_tuple(m[:3, 1]),
            z=_as_tuple(m[:3, 2]),
        ),
    )


def from_persisted(record: PersistedCFrame) -> Transform:
    """
    Rebuild a Transform from a persisted record. The orientation vectors
    become the X, Y and Z axes as stored.
    """
    o = record.orientation
    linear = np.column_stack((as_vector3(o.x), as_vector3(o.y), as_vector3(o.z)))
    return Transform._wrap(to_matrix(as_vector3(record.position), linear))
