"""Object-level semantic mapping from per-frame detections.

Components:
- detection: Detection input (label, pixel set, display color)
- transforms: RigidTransform for sensor / robot / map frames
- object: SemanticObject (box + point cloud) with in-place merge
- semantic_map: SemanticMap, ordered object collection
- association: AssociationTable, per-frame local -> global matches
- mapper: SemanticMapper (extract, associate, merge)
- export: read-only cloud / box views for consumers
"""

from .association import AssociationTable
from .config import MapperConfig
from .detection import Detection
from .mapper import (
    MIN_DETECTION_PIXELS,
    MIN_POINT_NORM,
    MapperState,
    MappingResult,
    MergeResult,
    SemanticMapper,
)
from .object import SemanticObject
from .semantic_map import SemanticMap
from .transforms import RigidTransform

__all__ = [
    "AssociationTable",
    "MapperConfig",
    "Detection",
    "MIN_DETECTION_PIXELS",
    "MIN_POINT_NORM",
    "MapperState",
    "MappingResult",
    "MergeResult",
    "SemanticMapper",
    "SemanticObject",
    "SemanticMap",
    "RigidTransform",
]
