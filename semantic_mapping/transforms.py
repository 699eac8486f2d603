"""Rigid transforms between sensor, robot, and map frames.

Points are projected into the map frame with

    world_point = robot_to_world @ sensor_mount_offset @ sensor_point

where robot_to_world is the live robot pose (updated every frame) and
sensor_mount_offset is constant for the session.

All transforms are stored as 4x4 homogeneous matrices (T_parent_child):
applying one maps a point expressed in the child frame into the parent frame.
"""

from typing import Optional, Sequence
import numpy as np
from scipy.spatial.transform import Rotation


class RigidTransform:
    """Rotation + translation as a 4x4 homogeneous matrix."""

    def __init__(self, matrix: Optional[np.ndarray] = None):
        if matrix is None:
            matrix = np.eye(4)
        matrix = np.array(matrix, dtype=np.float64)
        if matrix.shape != (4, 4):
            raise ValueError(f"Expected a 4x4 matrix, got shape {matrix.shape}")
        self._matrix = matrix

    @classmethod
    def identity(cls) -> "RigidTransform":
        return cls(np.eye(4))

    @classmethod
    def from_matrix(cls, matrix: np.ndarray) -> "RigidTransform":
        return cls(matrix)

    @classmethod
    def from_translation(cls, translation: Sequence[float]) -> "RigidTransform":
        matrix = np.eye(4)
        matrix[:3, 3] = _as_vector3(translation, "translation")
        return cls(matrix)

    @classmethod
    def from_pose(
        cls,
        position: Sequence[float],
        quaternion: Sequence[float],
    ) -> "RigidTransform":
        """Build a transform from a position and an orientation quaternion.

        Args:
            position: Translation [x, y, z]
            quaternion: Orientation [x, y, z, w] (scalar last, as in ROS/tf)

        Returns:
            RigidTransform mapping child-frame points into the parent frame
        """
        quat = np.asarray(quaternion, dtype=np.float64)
        if quat.shape != (4,):
            raise ValueError(f"quaternion must be [x, y, z, w], got shape {quat.shape}")

        matrix = np.eye(4)
        matrix[:3, :3] = Rotation.from_quat(quat).as_matrix()
        matrix[:3, 3] = _as_vector3(position, "position")
        return cls(matrix)

    @property
    def matrix(self) -> np.ndarray:
        return self._matrix.copy()

    @property
    def rotation(self) -> np.ndarray:
        """3x3 rotation block."""
        return self._matrix[:3, :3].copy()

    @property
    def translation(self) -> np.ndarray:
        return self._matrix[:3, 3].copy()

    def as_quaternion(self) -> np.ndarray:
        """Orientation as [x, y, z, w]."""
        return Rotation.from_matrix(self._matrix[:3, :3]).as_quat()

    def inverse(self) -> "RigidTransform":
        rot_t = self._matrix[:3, :3].T
        matrix = np.eye(4)
        matrix[:3, :3] = rot_t
        matrix[:3, 3] = -rot_t @ self._matrix[:3, 3]
        return RigidTransform(matrix)

    def __matmul__(self, other: "RigidTransform") -> "RigidTransform":
        if not isinstance(other, RigidTransform):
            return NotImplemented
        return RigidTransform(self._matrix @ other._matrix)

    def apply(self, points: np.ndarray) -> np.ndarray:
        """Transform a single point (3,) or a batch of points (N, 3)."""
        points = np.asarray(points, dtype=np.float64)
        if points.shape == (3,):
            return self._matrix[:3, :3] @ points + self._matrix[:3, 3]
        if points.ndim != 2 or points.shape[1] != 3:
            raise ValueError(f"points must have shape (3,) or (N, 3), got {points.shape}")

        # Homogeneous coordinates
        points_homo = np.hstack([points, np.ones((len(points), 1))])
        return (self._matrix @ points_homo.T).T[:, :3]

    def __eq__(self, other) -> bool:
        if not isinstance(other, RigidTransform):
            return NotImplemented
        return np.array_equal(self._matrix, other._matrix)

    def __repr__(self) -> str:
        t = self._matrix[:3, 3]
        q = self.as_quaternion()
        return (
            f"RigidTransform(t=[{t[0]:.3f}, {t[1]:.3f}, {t[2]:.3f}], "
            f"q=[{q[0]:.3f}, {q[1]:.3f}, {q[2]:.3f}, {q[3]:.3f}])"
        )


def _as_vector3(values: Sequence[float], name: str) -> np.ndarray:
    vec = np.asarray(values, dtype=np.float64)
    if vec.shape != (3,):
        raise ValueError(f"{name} must have 3 components, got shape {vec.shape}")
    return vec
