"""Read-only views of a semantic map for external consumers.

Visualization and evaluation live outside this package; these helpers only
reshape map contents into plain arrays (colored cloud, box line segments).
Nothing here mutates the map.
"""

from typing import Tuple
import numpy as np

from .object import SemanticObject
from .semantic_map import SemanticMap


# Pairs of corner indices (see SemanticObject.corners) forming the 12 box edges
BOX_EDGES = np.array([
    # Bottom face
    [0, 1], [1, 2], [2, 3], [3, 0],
    # Top face
    [4, 5], [5, 6], [6, 7], [7, 4],
    # Verticals
    [0, 4], [1, 5], [2, 6], [3, 7],
])


def map_to_cloud(semantic_map: SemanticMap) -> Tuple[np.ndarray, np.ndarray]:
    """Concatenate every object's points into one colored cloud.

    Args:
        semantic_map: Map to export

    Returns:
        Tuple of (points, colors) where:
        - points: (N, 3) map-frame points
        - colors: (N, 3) RGB in [0, 1], each point colored by its object
    """
    if len(semantic_map) == 0:
        return np.zeros((0, 3)), np.zeros((0, 3))

    points = np.vstack([obj.points for obj in semantic_map])
    colors = np.vstack([
        np.tile(obj.color, (obj.num_points, 1)) for obj in semantic_map
    ])
    return points, colors


def bounding_box_edges(obj: SemanticObject) -> np.ndarray:
    """Line segments of an object's bounding box, (12, 2, 3)."""
    return obj.corners()[BOX_EDGES]


def map_box_edges(semantic_map: SemanticMap) -> np.ndarray:
    """Box line segments for every object, (12 * K, 2, 3), in map order."""
    if len(semantic_map) == 0:
        return np.zeros((0, 2, 3))
    return np.concatenate([bounding_box_edges(obj) for obj in semantic_map])


def voxel_downsample(points: np.ndarray, voxel_size: float) -> np.ndarray:
    """Keep one point (the centroid) per occupied voxel.

    The mapper never calls this: merged clouds are kept whole. It is an
    opt-in policy for consumers that need bounded memory.

    Args:
        points: (N, 3) points
        voxel_size: Edge length of the voxel grid (meters)

    Returns:
        (M, 3) voxel centroids, M <= N, ordered by first occurrence
    """
    if voxel_size <= 0:
        raise ValueError(f"voxel_size must be positive, got {voxel_size}")

    points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    if len(points) == 0:
        return points

    keys = np.floor(points / voxel_size).astype(np.int64)
    _, first, inverse = np.unique(keys, axis=0, return_index=True, return_inverse=True)
    inverse = inverse.reshape(-1)

    sums = np.zeros((len(first), 3))
    np.add.at(sums, inverse, points)
    counts = np.bincount(inverse, minlength=len(first)).astype(np.float64)
    centroids = sums / counts[:, None]

    # np.unique sorts voxels; restore first-seen order
    return centroids[np.argsort(first)]
