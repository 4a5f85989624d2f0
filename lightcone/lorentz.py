"""
Lightcone Lorentz Transforms
============================
Boost matrices built from proper velocity.

build_boost(u) maps world-frame 4-vectors (t, x, y, z) into the
instantaneous rest frame of an object with proper velocity u:

    row t: [ g,  -ux,                 -uy,                 -uz               ]
    row x: [-ux, (g ux^2+uy^2+uz^2)/r, (g-1) ux uy / r,     (g-1) ux uz / r   ]
    row y: [-uy, (g-1) ux uy / r,     (ux^2+g uy^2+uz^2)/r, (g-1) uy uz / r   ]
    row z: [-uz, (g-1) ux uz / r,     (g-1) uy uz / r,     (ux^2+uy^2+g uz^2)/r]

with r = |u|^2 and g = gamma(u). The inverse boost is the boost of -u.
Matrices are plain 4x4 float64 numpy arrays.
"""

import math

import numpy as np

from .vector import Vector3, Vector4, gamma

# Minkowski metric in (t, x, y, z) order, signature (+,+,+,-)
MINKOWSKI_METRIC = np.diag([-1.0, 1.0, 1.0, 1.0])


def identity() -> np.ndarray:
    """4x4 identity"""
    return np.eye(4, dtype=np.float64)


def build_boost(u: Vector3) -> np.ndarray:
    """
    World frame -> instantaneous rest frame of proper velocity u.

    Zero velocity takes the identity branch explicitly. The spatial block
    is built as delta_ij + (g - 1) n_i n_j with n = u / |u|, the same rows
    as above without ever forming |u|^2, so any finite u gives a finite
    matrix.
    """
    ux, uy, uz = u.x, u.y, u.z
    speed = math.hypot(ux, uy, uz)
    if speed == 0:
        return identity()

    g = gamma(u)
    n = np.array([ux, uy, uz], dtype=np.float64) / speed

    boost = identity()
    boost[0, 0] = g
    boost[0, 1:] = -u.as_array()
    boost[1:, 0] = -u.as_array()
    boost[1:, 1:] += (g - 1.0) * np.outer(n, n)
    return boost


def inverse_boost(u: Vector3) -> np.ndarray:
    """Rest frame of u -> world frame"""
    return build_boost(u.scale(-1.0))


def apply(matrix: np.ndarray, v: Vector4) -> Vector4:
    """Matrix-vector product"""
    return Vector4.from_array(matrix @ v.as_array())


def compose(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """a . b (apply b first, then a)"""
    return a @ b


def transpose(matrix: np.ndarray) -> np.ndarray:
    return np.ascontiguousarray(matrix.T)


def is_lorentz(matrix: np.ndarray, atol: float = 1e-9) -> bool:
    """True if the matrix preserves the Minkowski metric: M^T G M == G"""
    return bool(np.allclose(matrix.T @ MINKOWSKI_METRIC @ matrix,
                            MINKOWSKI_METRIC, atol=atol))


def to_rest_frame(event: Vector4, observer_pos: Vector4, observer_u: Vector3) -> Vector4:
    """
    Coordinates of a world-frame event as seen in an observer's
    instantaneous rest frame, with the observer at the origin.
    """
    return apply(build_boost(observer_u), event.sub(observer_pos))
