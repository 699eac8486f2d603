"""Shared fixtures for semantic_mapping tests."""

from typing import List, Sequence, Tuple
import numpy as np
import pytest

from semantic_mapping import Detection, RigidTransform, SemanticMapper, MapperConfig


# World points are generated this far from the sensor origin so that box
# corners at (0, 0, 0) are not rejected as "no return" points.
SENSOR_SHIFT = np.array([5.0, 0.0, 0.0])


class FrameBuilder:
    """Builds a points image and matching detections for one frame.

    Pixels are allocated row-major, one per point, so every detection maps
    exactly onto the points it was given.
    """

    def __init__(self, height: int = 32, width: int = 32):
        self.points_image = np.zeros((height, width, 3))
        self.detections: List[Detection] = []
        self._next = 0

    def _allocate(self, n: int) -> np.ndarray:
        width = self.points_image.shape[1]
        flat = np.arange(self._next, self._next + n)
        self._next += n
        return np.stack([flat // width, flat % width], axis=1)

    def add(
        self,
        label: str,
        points: Sequence[Sequence[float]],
        color: Tuple[int, int, int] = (255, 0, 0),
    ) -> Detection:
        """Add a detection whose pixels hold the given sensor-frame points."""
        points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
        pixels = self._allocate(len(points))
        self.points_image[pixels[:, 0], pixels[:, 1]] = points
        detection = Detection(label=label, pixels=pixels, color=np.array(color))
        self.detections.append(detection)
        return detection

    def add_box(self, label: str, lo, hi, n_points: int = 12, **kwargs) -> Detection:
        """Add a detection whose points span exactly the box [lo, hi] in world frame."""
        return self.add(label, box_points(lo, hi, n_points) + SENSOR_SHIFT, **kwargs)


def box_points(lo, hi, n_points: int = 12) -> np.ndarray:
    """8 box corners plus (n_points - 8) points at the box center."""
    lo = np.asarray(lo, dtype=np.float64)
    hi = np.asarray(hi, dtype=np.float64)
    corners = np.array([
        [x, y, z]
        for x in (lo[0], hi[0])
        for y in (lo[1], hi[1])
        for z in (lo[2], hi[2])
    ])
    center = np.tile((lo + hi) / 2.0, (max(n_points - 8, 0), 1))
    return np.vstack([corners, center])[:n_points]


@pytest.fixture
def make_frame():
    """Factory for per-frame builders: make_frame() -> FrameBuilder."""
    return FrameBuilder


@pytest.fixture
def world_pose() -> RigidTransform:
    """Robot pose that undoes SENSOR_SHIFT."""
    return RigidTransform.from_translation(-SENSOR_SHIFT)


@pytest.fixture
def mapper(world_pose) -> SemanticMapper:
    """Mapper with an identity mount offset and the shifted robot pose."""
    m = SemanticMapper(config=MapperConfig(), sensor_mount_offset=RigidTransform.identity())
    m.set_robot_pose(world_pose)
    return m
