"""
Lightcone Vector Algebra
========================
3-vectors, 4-vectors and the Minkowski inner product.

Conventions:
- Natural units, c = 1
- Metric signature (+,+,+,-):  <a, b> = ax*bx + ay*by + az*bz - at*bt
- Timelike separations have a NEGATIVE square, spacelike a positive one

Proper velocity u (spatial part of the 4-velocity) is the stored velocity
everywhere in the package. gamma(u) = sqrt(1 + |u|^2) is total, so there is
no "faster than light" state to detect.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

import numpy as np

from .contracts import SuperluminalVelocityError


class IntervalType(Enum):
    """Causal character of a spacetime separation"""
    TIMELIKE = "timelike"
    LIGHTLIKE = "lightlike"
    SPACELIKE = "spacelike"


@dataclass(frozen=True)
class Vector3:
    """Immutable spatial vector"""
    x: float
    y: float
    z: float

    @staticmethod
    def zero() -> 'Vector3':
        return Vector3(0.0, 0.0, 0.0)

    @staticmethod
    def from_array(values: Sequence[float]) -> 'Vector3':
        return Vector3(float(values[0]), float(values[1]), float(values[2]))

    def add(self, other: 'Vector3') -> 'Vector3':
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def sub(self, other: 'Vector3') -> 'Vector3':
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def scale(self, scalar: float) -> 'Vector3':
        return Vector3(self.x * scalar, self.y * scalar, self.z * scalar)

    def dot(self, other: 'Vector3') -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: 'Vector3') -> 'Vector3':
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def length_squared(self) -> float:
        return self.dot(self)

    def length(self) -> float:
        return math.hypot(self.x, self.y, self.z)

    def normalize(self) -> 'Vector3':
        """Unit vector in the same direction (zero vector stays zero)"""
        length = self.length()
        if length == 0:
            return Vector3.zero()
        return self.scale(1.0 / length)

    def to_vector4(self, t: float) -> 'Vector4':
        """Attach a time component"""
        return Vector4(t, self.x, self.y, self.z)

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    def __add__(self, other: 'Vector3') -> 'Vector3':
        return self.add(other)

    def __sub__(self, other: 'Vector3') -> 'Vector3':
        return self.sub(other)

    def __mul__(self, scalar: float) -> 'Vector3':
        return self.scale(scalar)

    __rmul__ = __mul__

    def __neg__(self) -> 'Vector3':
        return self.scale(-1.0)


@dataclass(frozen=True)
class Vector4:
    """Immutable spacetime vector (t, x, y, z)"""
    t: float
    x: float
    y: float
    z: float

    @staticmethod
    def zero() -> 'Vector4':
        return Vector4(0.0, 0.0, 0.0, 0.0)

    @staticmethod
    def from_array(values: Sequence[float]) -> 'Vector4':
        return Vector4(float(values[0]), float(values[1]),
                       float(values[2]), float(values[3]))

    def add(self, other: 'Vector4') -> 'Vector4':
        return Vector4(self.t + other.t, self.x + other.x,
                       self.y + other.y, self.z + other.z)

    def sub(self, other: 'Vector4') -> 'Vector4':
        return Vector4(self.t - other.t, self.x - other.x,
                       self.y - other.y, self.z - other.z)

    def scale(self, scalar: float) -> 'Vector4':
        return Vector4(self.t * scalar, self.x * scalar,
                       self.y * scalar, self.z * scalar)

    def minkowski_dot(self, other: 'Vector4') -> float:
        """<a, b> with signature (+,+,+,-)"""
        return (self.x * other.x + self.y * other.y + self.z * other.z
                - self.t * other.t)

    def interval_squared(self) -> float:
        return self.minkowski_dot(self)

    def interval_type(self) -> IntervalType:
        return interval_type(self)

    def spatial(self) -> Vector3:
        return Vector3(self.x, self.y, self.z)

    def as_array(self) -> np.ndarray:
        return np.array([self.t, self.x, self.y, self.z], dtype=np.float64)

    def __add__(self, other: 'Vector4') -> 'Vector4':
        return self.add(other)

    def __sub__(self, other: 'Vector4') -> 'Vector4':
        return self.sub(other)

    def __mul__(self, scalar: float) -> 'Vector4':
        return self.scale(scalar)

    __rmul__ = __mul__

    def __neg__(self) -> 'Vector4':
        return self.scale(-1.0)


# =============================================================================
# MODULE-LEVEL HELPERS
# =============================================================================

def minkowski_dot(a: Vector4, b: Vector4) -> float:
    """Minkowski inner product, signature (+,+,+,-)"""
    return a.minkowski_dot(b)


def interval_type(v: Vector4) -> IntervalType:
    """
    Classify a separation by the sign of its Minkowski square.

    Compared exactly against zero: LIGHTLIKE only for an exact null vector.
    """
    s2 = v.interval_squared()
    if s2 < 0:
        return IntervalType.TIMELIKE
    if s2 == 0:
        return IntervalType.LIGHTLIKE
    return IntervalType.SPACELIKE


def gamma(u: Vector3) -> float:
    """Lorentz factor from proper velocity: sqrt(1 + |u|^2) >= 1"""
    # hypot keeps gamma finite where |u|^2 alone would overflow
    return math.hypot(1.0, u.x, u.y, u.z)


def four_velocity(u: Vector3) -> Vector4:
    """Full 4-velocity (gamma(u), ux, uy, uz); its Minkowski square is -1"""
    return Vector4(gamma(u), u.x, u.y, u.z)


def ordinary_velocity(u: Vector3) -> Vector3:
    """dx/dt = u / gamma(u). Its length is always below 1."""
    return u.scale(1.0 / gamma(u))


def proper_velocity(v: Vector3) -> Vector3:
    """
    Convert an ordinary velocity (fraction of c) to proper velocity.

    Raises:
        SuperluminalVelocityError: if |v| >= 1
    """
    beta2 = v.length_squared()
    if beta2 >= 1.0:
        raise SuperluminalVelocityError(
            f"Velocity |v|={math.sqrt(beta2):.6f} is not below the speed of light"
        )
    return v.scale(1.0 / math.sqrt(1.0 - beta2))


def lorentz_contraction(u: Vector3) -> float:
    """Length contraction factor 1/gamma(u) along the direction of motion"""
    return 1.0 / gamma(u)
