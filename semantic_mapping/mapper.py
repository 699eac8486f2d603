"""Incremental object-level semantic mapper.

Per frame:
    robot pose + detections + points image
           ↓
    extract_objects    (detections -> 3D objects in map frame)
           ↓
    find_associations  (local object -> nearest global object of same label)
           ↓
    merge_maps         (grow matched objects, append unmatched ones)

The very first frame seeds the global map directly. Every later frame is
extracted into the local map and then folded into the global map.

Usage:
    mapper = SemanticMapper()

    # Each frame
    result = mapper.update(robot_pose, detections, points_image)

    for obj in mapper.global_map:
        print(obj.label, obj.centroid)

Note: object point clouds grow without bound, since merged points are
concatenated and never downsampled. Consumers that keep the map around
for long sessions should thin clouds themselves (see
export.voxel_downsample).
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional
import numpy as np

from .association import AssociationTable
from .config import MapperConfig
from .detection import Detection
from .object import SemanticObject
from .semantic_map import SemanticMap
from .transforms import RigidTransform

logger = logging.getLogger(__name__)


# Detections covering fewer pixels than this are treated as noise
MIN_DETECTION_PIXELS = 10

# Points with a smaller norm are the sensor's "no return" sentinel
MIN_POINT_NORM = 1e-3


class MapperState(Enum):
    """Lifecycle of the mapper across frames."""
    UNSEEDED = "unseeded"  # No frame processed yet
    SEEDED = "seeded"      # Global map seeded, no local map yet
    STEADY = "steady"      # Local map extracted at least once


@dataclass
class MergeResult:
    """Outcome of one merge_maps() call."""
    n_merged: int = 0    # Local objects folded into a global object
    n_added: int = 0     # Local objects appended as new global objects
    n_skipped: int = 0   # Associated local objects dropped on label mismatch


@dataclass
class MappingResult:
    """Summary of one full update cycle."""
    frame: int = 0
    state: MapperState = MapperState.UNSEEDED

    n_detections: int = 0     # Detections received this frame
    n_extracted: int = 0      # Objects created from them
    n_associations: int = 0   # Entries in the association table
    n_merged: int = 0
    n_added: int = 0
    n_skipped: int = 0
    global_map_size: int = 0

    # Timing (seconds)
    extraction_time: float = 0.0
    update_time: float = 0.0


class SemanticMapper:
    """Builds a global object map from per-frame detections.

    Owns the global map, the local (current frame) map, the association table
    and the pose state. All methods are synchronous; callers must not read
    global_map while a cycle is in progress.
    """

    def __init__(
        self,
        config: Optional[MapperConfig] = None,
        sensor_mount_offset: Optional[RigidTransform] = None,
    ):
        """Initialize mapper.

        Args:
            config: Mapper configuration (defaults used if None)
            sensor_mount_offset: Overrides the mount offset from config
        """
        self.config = config or MapperConfig()

        self.global_map = SemanticMap()
        self.local_map = SemanticMap()
        self.associations = AssociationTable()

        self.state = MapperState.UNSEEDED
        self.frame_count = 0

        self.robot_to_world = RigidTransform.identity()
        if sensor_mount_offset is not None:
            self.sensor_mount_offset = sensor_mount_offset
        else:
            self.sensor_mount_offset = self.config.sensor_mount_offset()

    @classmethod
    def from_config(cls, path: str) -> "SemanticMapper":
        """Create mapper from a YAML config file."""
        return cls(config=MapperConfig.from_yaml(path))

    @property
    def global_initialized(self) -> bool:
        return self.state != MapperState.UNSEEDED

    @property
    def local_initialized(self) -> bool:
        return self.state == MapperState.STEADY

    def set_robot_pose(self, robot_to_world: RigidTransform):
        """Set the robot pose used by the next extraction."""
        self.robot_to_world = robot_to_world

    def sensor_to_world(self) -> RigidTransform:
        return self.robot_to_world @ self.sensor_mount_offset

    def extract_objects(
        self,
        detections: List[Detection],
        points_image: np.ndarray,
    ) -> List[SemanticObject]:
        """Turn detections into 3D objects in the map frame.

        The first call populates the global map; later calls clear and
        populate the local map.

        Args:
            detections: Labeled pixel sets for this frame
            points_image: (H, W, 3) sensor-frame point per pixel

        Returns:
            Objects created by this call (already added to the target map)
        """
        points_image = np.asarray(points_image)
        if points_image.ndim != 3 or points_image.shape[2] != 3:
            raise ValueError(
                f"points_image must have shape (H, W, 3), got {points_image.shape}"
            )

        # The first frame populates the global map, the others the local map
        if self.state == MapperState.UNSEEDED:
            target = self.global_map
            self.state = MapperState.SEEDED
        else:
            target = self.local_map
            self.local_map.clear()
            # Entries are keyed by local index and only valid for one frame
            self.associations.clear()
            self.state = MapperState.STEADY

        transform = self.sensor_to_world()
        created = []

        logger.debug("[Objects Extraction] %d detections", len(detections))

        for detection in detections:
            if detection.num_pixels < MIN_DETECTION_PIXELS:
                continue

            points = self._lookup_valid_points(detection.pixels, points_image)
            if len(points) == 0:
                logger.debug("%s: no valid points, discarded", detection.label)
                continue

            points = transform.apply(points)
            obj = SemanticObject.from_points(
                detection.label,
                points,
                color=detection.normalized_color,
            )

            logger.debug(
                "%s: IBB %s WBB [%s, %s]",
                detection.label,
                detection.image_bbox,
                np.round(obj.min, 3),
                np.round(obj.max, 3),
            )

            target.add_object(obj)
            created.append(obj)

        return created

    def _lookup_valid_points(
        self,
        pixels: np.ndarray,
        points_image: np.ndarray,
    ) -> np.ndarray:
        """Gather the points under the given pixels, dropping invalid ones.

        Invalid means: outside the image, non-finite, or norm below
        MIN_POINT_NORM.
        """
        height, width = points_image.shape[:2]
        rows, cols = pixels[:, 0], pixels[:, 1]

        inside = (rows >= 0) & (rows < height) & (cols >= 0) & (cols < width)
        points = points_image[rows[inside], cols[inside]].astype(np.float64)

        finite = np.all(np.isfinite(points), axis=1)
        points = points[finite]

        valid = np.linalg.norm(points, axis=1) >= MIN_POINT_NORM
        return points[valid]

    def find_associations(self) -> AssociationTable:
        """Match local objects to global objects by nearest centroid.

        For every global object, the closest local object with the same
        label (squared centroid distance, first one wins on ties) is
        recorded. If several global objects pick the same local object, the
        last one processed wins.

        Returns:
            The association table (untouched when the mapper is not steady)
        """
        if self.state != MapperState.STEADY:
            return self.associations

        local_size = len(self.local_map)
        global_size = len(self.global_map)

        logger.debug(
            "[Data Association] local map size: %d - global map size: %d",
            local_size,
            global_size,
        )
        log_match = logger.info if self.config.log_associations else logger.debug

        self.associations.clear()

        for global_index, global_obj in enumerate(self.global_map):
            best_local = None
            best_error = float('inf')

            for local_index, local_obj in enumerate(self.local_map):
                if local_obj.label != global_obj.label:
                    continue

                e_c = local_obj.centroid - global_obj.centroid
                error = float(e_c @ e_c)

                if error < best_error:
                    best_error = error
                    best_local = local_index

            if best_local is None:
                log_match("Global: %s (%s) - Local: none", global_obj.label, global_obj.centroid)
                continue

            log_match(
                "Global: %s (%s) - Local: %s (%s)",
                global_obj.label,
                global_obj.centroid,
                self.local_map[best_local].label,
                self.local_map[best_local].centroid,
            )
            self.associations.record(best_local, global_index)

        return self.associations

    def merge_maps(self) -> MergeResult:
        """Fold the local map into the global map.

        Associated local objects are merged into their global match,
        unassociated ones are appended as new global objects.
        """
        result = MergeResult()
        if self.state != MapperState.STEADY:
            return result

        for local_index, local_obj in enumerate(self.local_map):
            global_index = self.associations.get(local_index)

            if global_index is None:
                self.global_map.add_object(local_obj)
                result.n_added += 1
                continue

            global_obj = self.global_map[global_index]
            if local_obj.label != global_obj.label:
                result.n_skipped += 1
                continue

            global_obj.merge(local_obj)
            result.n_merged += 1

        logger.info(
            "[Merging] merged: %d, added: %d, global map size: %d",
            result.n_merged,
            result.n_added,
            len(self.global_map),
        )
        return result

    def update(
        self,
        robot_to_world: RigidTransform,
        detections: List[Detection],
        points_image: np.ndarray,
    ) -> MappingResult:
        """Run one full cycle: set pose, extract, associate, merge.

        Args:
            robot_to_world: Robot pose in the map frame for this frame
            detections: Labeled pixel sets for this frame
            points_image: (H, W, 3) sensor-frame point per pixel

        Returns:
            MappingResult with counts and timings
        """
        self.frame_count += 1
        result = MappingResult(frame=self.frame_count, n_detections=len(detections))

        time_0 = time.perf_counter()

        self.set_robot_pose(robot_to_world)
        created = self.extract_objects(detections, points_image)
        result.n_extracted = len(created)

        time_1 = time.perf_counter()
        result.extraction_time = time_1 - time_0

        self.find_associations()
        merge = self.merge_maps()

        result.update_time = time.perf_counter() - time_1
        result.state = self.state
        result.n_associations = len(self.associations)
        result.n_merged = merge.n_merged
        result.n_added = merge.n_added
        result.n_skipped = merge.n_skipped
        result.global_map_size = len(self.global_map)

        logger.debug(
            "Frame %d: extraction %.4fs, update %.4fs",
            result.frame,
            result.extraction_time,
            result.update_time,
        )
        return result

    def reset(self):
        """Drop both maps and start a new session."""
        self.global_map = SemanticMap()
        self.local_map = SemanticMap()
        self.associations = AssociationTable()
        self.state = MapperState.UNSEEDED
        self.frame_count = 0
        self.robot_to_world = RigidTransform.identity()
