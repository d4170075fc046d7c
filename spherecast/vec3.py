"""
Vector3 class for 3D math operations.

This is the fundamental building block of the renderer, used for:
- Points in 3D space
- Direction vectors
- RGB color values

Vectors are values: the backing array is read-only and every operation
returns a new vector.
"""

from __future__ import annotations
import math
from typing import Union
import numpy as np


class Vec3:
    """An immutable 3D vector supporting common vector operations.

    Uses numpy internally for efficient computation while providing
    a clean, Pythonic API.
    """

    __slots__ = ('_data',)

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0):
        data = np.array([x, y, z], dtype=np.float64)
        data.setflags(write=False)
        self._data = data

    @classmethod
    def from_array(cls, arr: np.ndarray) -> Vec3:
        """Create Vec3 from a numpy array of three components."""
        data = np.array(arr, dtype=np.float64)
        if data.shape != (3,):
            raise ValueError(f"Vec3 needs exactly 3 components, got shape {data.shape}")
        data.setflags(write=False)
        v = cls.__new__(cls)
        v._data = data
        return v

    @classmethod
    def _wrap(cls, data: np.ndarray) -> Vec3:
        # Fresh result arrays from numpy ops; no copy needed.
        data.setflags(write=False)
        v = cls.__new__(cls)
        v._data = data
        return v

    @property
    def x(self) -> float:
        return float(self._data[0])

    @property
    def y(self) -> float:
        return float(self._data[1])

    @property
    def z(self) -> float:
        return float(self._data[2])

    # Aliases for color operations
    @property
    def r(self) -> float:
        return self.x

    @property
    def g(self) -> float:
        return self.y

    @property
    def b(self) -> float:
        return self.z

    def __repr__(self) -> str:
        return f"Vec3({self.x:.4f}, {self.y:.4f}, {self.z:.4f})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vec3):
            return NotImplemented
        return bool(np.allclose(self._data, other._data))

    # Equality is approximate, so no hash can agree with it
    __hash__ = None

    def __iter__(self):
        return iter((self.x, self.y, self.z))

    def __getitem__(self, index: int) -> float:
        return float(self._data[index])

    def __neg__(self) -> Vec3:
        return Vec3._wrap(-self._data)

    def __add__(self, other: Vec3) -> Vec3:
        if not isinstance(other, Vec3):
            return NotImplemented
        return Vec3._wrap(self._data + other._data)

    def __sub__(self, other: Vec3) -> Vec3:
        if not isinstance(other, Vec3):
            return NotImplemented
        return Vec3._wrap(self._data - other._data)

    def __mul__(self, scale: float) -> Vec3:
        if isinstance(scale, Vec3):
            return NotImplemented
        return Vec3._wrap(self._data * scale)

    def __rmul__(self, scale: float) -> Vec3:
        return self.__mul__(scale)

    def __truediv__(self, scale: Union[float, int]) -> Vec3:
        if isinstance(scale, Vec3):
            return NotImplemented
        return Vec3._wrap(self._data / scale)

    def dot(self, other: Vec3) -> float:
        """Compute dot product with another vector."""
        return float(np.dot(self._data, other._data))

    def cross(self, other: Vec3) -> Vec3:
        """Compute the right-handed cross product with another vector."""
        ax, ay, az = self._data
        bx, by, bz = other._data
        return Vec3(
            ay * bz - az * by,
            az * bx - ax * bz,
            ax * by - ay * bx
        )

    def magnitude(self) -> float:
        """Return the Euclidean length of the vector."""
        return math.sqrt(self.length_squared())

    def length_squared(self) -> float:
        """Return the squared magnitude (avoids sqrt for comparisons)."""
        return float(np.dot(self._data, self._data))

    def normalized(self) -> Vec3:
        """Return a unit vector in the same direction.

        Raises:
            ValueError: if the vector has zero length
        """
        mag = self.magnitude()
        if mag == 0:
            raise ValueError("Cannot normalize a zero-length vector")
        return Vec3._wrap(self._data / mag)

    def to_array(self) -> np.ndarray:
        """Return the underlying numpy array (writable copy)."""
        return self._data.copy()


# Convenience type aliases
Point3 = Vec3
Color = Vec3
