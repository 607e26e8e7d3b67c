"""End-effector pose representation for 6-DOF robots."""

from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike, NDArray

from opwpy.errors import UsageError

from .transforms import homogeneous, matrix_to_quaternion, quaternion_to_matrix

# Accepted deviation of R^T R from identity for a supplied rotation.
ORTHONORMAL_TOLERANCE = 1e-6


@dataclass(frozen=True, eq=False)
class Pose:
    """Rigid transform of the end-effector frame in the base frame.

    Attributes:
        position: (3,) translation in meters.
        rotation: (3, 3) rotation matrix; columns are the tool axes.
    """

    position: NDArray[np.float64]
    rotation: NDArray[np.float64]

    def __post_init__(self) -> None:
        position = np.array(self.position, dtype=np.float64)
        rotation = np.array(self.rotation, dtype=np.float64)
        if position.shape != (3,):
            raise UsageError(f"Expected position of shape (3,), got {position.shape}")
        if rotation.shape != (3, 3):
            raise UsageError(f"Expected rotation of shape (3, 3), got {rotation.shape}")
        if not (np.all(np.isfinite(position)) and np.all(np.isfinite(rotation))):
            raise UsageError("Pose contains non-finite values")
        if not np.allclose(rotation.T @ rotation, np.eye(3), atol=ORTHONORMAL_TOLERANCE):
            raise UsageError("Pose rotation is not orthonormal")
        if np.linalg.det(rotation) < 0.0:
            raise UsageError("Pose rotation is a reflection (det < 0)")
        position.flags.writeable = False
        rotation.flags.writeable = False
        object.__setattr__(self, "position", position)
        object.__setattr__(self, "rotation", rotation)

    @property
    def quaternion(self) -> NDArray[np.float64]:
        """Orientation as a unit quaternion (x, y, z, w) with w >= 0."""
        return matrix_to_quaternion(self.rotation)

    def to_matrix(self) -> NDArray[np.float64]:
        """Return the 4x4 homogeneous matrix."""
        return homogeneous(self.rotation, self.position)

    @classmethod
    def from_matrix(cls, T: ArrayLike) -> "Pose":
        """Construct from a 4x4 homogeneous matrix."""
        T = np.asarray(T, dtype=np.float64)
        if T.shape != (4, 4):
            raise UsageError(f"Expected a 4x4 matrix, got shape {T.shape}")
        return cls(position=T[:3, 3], rotation=T[:3, :3])

    @classmethod
    def from_quaternion(cls, position: ArrayLike, quat_xyzw: ArrayLike) -> "Pose":
        """Construct from a position and a quaternion (x, y, z, w)."""
        quat = np.asarray(quat_xyzw, dtype=np.float64)
        if quat.shape != (4,):
            raise UsageError(f"Expected quaternion of shape (4,), got {quat.shape}")
        try:
            rotation = quaternion_to_matrix(quat)
        except ValueError as e:
            raise UsageError(str(e)) from e
        return cls(position=np.asarray(position, dtype=np.float64), rotation=rotation)

    def is_close(self, other: "Pose", atol: float = 1e-6) -> bool:
        """Element-wise comparison of position and the full rotation matrix."""
        return bool(
            np.allclose(self.position, other.position, atol=atol)
            and np.allclose(self.rotation, other.rotation, atol=atol)
        )
