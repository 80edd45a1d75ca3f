"""Geometry helpers: quaternions, projected distances and coordinate deviations."""

from __future__ import annotations

import numpy as np

QUATERNION_TOLERANCE = 1e-5
IDENTITY_QUATERNION = np.array([1.0, 0.0, 0.0, 0.0], dtype=float)


def is_normalized(quat: np.ndarray, tol: float = QUATERNION_TOLERANCE) -> bool:
    """Return True when ``quat`` has unit norm within ``tol``."""

    return abs(float(np.linalg.norm(quat)) - 1.0) < tol


def check_normalized(quat: np.ndarray) -> np.ndarray:
    """Return ``quat`` as an array, raising when it is not unit norm."""

    quat = np.asarray(quat, dtype=float)
    if quat.shape != (4,) or not is_normalized(quat):
        raise ValueError(f"Orientation must be a unit quaternion, got {quat.tolist()}.")
    return quat


def normalize_quaternion(quat: np.ndarray) -> np.ndarray:
    """Scale a quaternion to unit norm."""

    quat = np.asarray(quat, dtype=float)
    norm = np.linalg.norm(quat)
    if norm == 0:
        raise ValueError("Cannot normalize a zero quaternion.")
    return quat / norm


def quaternion_from_rotation_vector(vec: np.ndarray) -> np.ndarray:
    """Exponential map from an axis-angle vector to a unit quaternion (w, x, y, z)."""

    vec = np.asarray(vec, dtype=float)
    angle = float(np.linalg.norm(vec))
    if angle < np.finfo(float).eps:
        return IDENTITY_QUATERNION.copy()
    half = 0.5 * angle
    axis = vec / angle
    return np.concatenate(([np.cos(half)], np.sin(half) * axis))


def quaternion_multiply(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Hamilton product ``a * b``."""

    aw, ax, ay, az = a
    bw, bx, by, bz = b
    return np.array(
        [
            aw * bw - ax * bx - ay * by - az * bz,
            aw * bx + ax * bw + ay * bz - az * by,
            aw * by - ax * bz + ay * bw + az * bx,
            aw * bz + ax * by - ay * bx + az * bw,
        ],
        dtype=float,
    )


def rotate_by_vector(quat: np.ndarray, vec: np.ndarray) -> np.ndarray:
    """Left-compose ``quat`` with the rotation ``vec`` and renormalize."""

    composed = quaternion_multiply(quaternion_from_rotation_vector(vec), quat)
    return normalize_quaternion(composed)


def quaternion_to_matrix(quat: np.ndarray) -> np.ndarray:
    """Convert a unit quaternion to a 3x3 rotation matrix."""

    w, x, y, z = quat
    return np.array(
        [
            [1 - 2 * (y**2 + z**2), 2 * (x * y - z * w), 2 * (x * z + y * w)],
            [2 * (x * y + z * w), 1 - 2 * (x**2 + z**2), 2 * (y * z - x * w)],
            [2 * (x * z - y * w), 2 * (y * z + x * w), 1 - 2 * (x**2 + y**2)],
        ],
        dtype=float,
    )


def random_quaternion(rng: np.random.Generator) -> np.ndarray:
    """Draw four components from U[-1, 1] and normalize."""

    quat = rng.uniform(-1.0, 1.0, size=4)
    while np.linalg.norm(quat) == 0:
        quat = rng.uniform(-1.0, 1.0, size=4)
    return normalize_quaternion(quat)


def project_distance_sqr(corner1: np.ndarray, corner2: np.ndarray, coords: np.ndarray) -> np.ndarray:
    """Squared distance from point(s) to the axis-aligned box [corner1, corner2]."""

    coords = np.asarray(coords, dtype=float)
    below = np.minimum(coords - corner1, 0.0)
    above = np.maximum(coords - corner2, 0.0)
    return np.sum(below**2 + above**2, axis=-1)


def mean_square_deviation(a: np.ndarray, b: np.ndarray) -> float:
    """Mean squared per-atom deviation between two coordinate sets."""

    diff = np.asarray(a, dtype=float) - np.asarray(b, dtype=float)
    return float(np.mean(np.sum(diff**2, axis=-1)))

