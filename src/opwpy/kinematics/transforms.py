"""Rotation and homogeneous transform helpers using only numpy."""

import numpy as np
from numpy.typing import ArrayLike, NDArray


def rot_y(theta: float) -> NDArray[np.float64]:
    """3x3 rotation matrix about Y-axis. theta in radians."""
    c, s = np.cos(theta), np.sin(theta)
    return np.array([
        [c, 0.0, s],
        [0.0, 1.0, 0.0],
        [-s, 0.0, c],
    ])


def rot_z(theta: float) -> NDArray[np.float64]:
    """3x3 rotation matrix about Z-axis. theta in radians."""
    c, s = np.cos(theta), np.sin(theta)
    return np.array([
        [c, -s, 0.0],
        [s, c, 0.0],
        [0.0, 0.0, 1.0],
    ])


def homogeneous(
    rotation: ArrayLike, position: ArrayLike = (0.0, 0.0, 0.0)
) -> NDArray[np.float64]:
    """Assemble a 4x4 transform from a 3x3 rotation and a translation."""
    T = np.eye(4)
    T[:3, :3] = np.asarray(rotation, dtype=np.float64)
    T[:3, 3] = np.asarray(position, dtype=np.float64)
    return T


def invert_transform(T: NDArray[np.float64]) -> NDArray[np.float64]:
    """Inverse of a rigid 4x4 transform (uses R^T instead of a general inverse)."""
    R = T[:3, :3]
    return homogeneous(R.T, -R.T @ T[:3, 3])


def harmonize_angles(angles: ArrayLike) -> NDArray[np.float64]:
    """Wrap angles into [-pi, pi)."""
    a = np.asarray(angles, dtype=np.float64)
    return (a + np.pi) % (2 * np.pi) - np.pi


def quaternion_to_matrix(quat_xyzw: ArrayLike) -> NDArray[np.float64]:
    """3x3 rotation from a quaternion given as (x, y, z, w).

    The quaternion is normalised first; a zero quaternion raises ValueError.
    """
    q = np.asarray(quat_xyzw, dtype=np.float64)
    norm = np.linalg.norm(q)
    if norm == 0.0:
        raise ValueError("Cannot build a rotation from a zero quaternion")
    x, y, z, w = q / norm
    return np.array([
        [1 - 2 * (y * y + z * z), 2 * (x * y - z * w), 2 * (x * z + y * w)],
        [2 * (x * y + z * w), 1 - 2 * (x * x + z * z), 2 * (y * z - x * w)],
        [2 * (x * z - y * w), 2 * (y * z + x * w), 1 - 2 * (x * x + y * y)],
    ])


def matrix_to_quaternion(R: NDArray[np.float64]) -> NDArray[np.float64]:
    """Quaternion (x, y, z, w) with w >= 0 from a 3x3 rotation matrix.

    Branches on the largest diagonal term to stay well conditioned.
    """
    trace = R[0, 0] + R[1, 1] + R[2, 2]
    if trace > 0.0:
        s = 2.0 * np.sqrt(trace + 1.0)
        w = 0.25 * s
        x = (R[2, 1] - R[1, 2]) / s
        y = (R[0, 2] - R[2, 0]) / s
        z = (R[1, 0] - R[0, 1]) / s
    elif R[0, 0] > R[1, 1] and R[0, 0] > R[2, 2]:
        s = 2.0 * np.sqrt(1.0 + R[0, 0] - R[1, 1] - R[2, 2])
        w = (R[2, 1] - R[1, 2]) / s
        x = 0.25 * s
        y = (R[0, 1] + R[1, 0]) / s
        z = (R[0, 2] + R[2, 0]) / s
    elif R[1, 1] > R[2, 2]:
        s = 2.0 * np.sqrt(1.0 + R[1, 1] - R[0, 0] - R[2, 2])
        w = (R[0, 2] - R[2, 0]) / s
        x = (R[0, 1] + R[1, 0]) / s
        y = 0.25 * s
        z = (R[1, 2] + R[2, 1]) / s
    else:
        s = 2.0 * np.sqrt(1.0 + R[2, 2] - R[0, 0] - R[1, 1])
        w = (R[1, 0] - R[0, 1]) / s
        x = (R[0, 2] + R[2, 0]) / s
        y = (R[1, 2] + R[2, 1]) / s
        z = 0.25 * s
    q = np.array([x, y, z, w])
    if w < 0.0:
        q = -q
    return q / np.linalg.norm(q)
