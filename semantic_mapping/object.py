"""3D object instances that compose the semantic map."""

from dataclasses import dataclass, field
from typing import Optional
import numpy as np


def _empty_points() -> np.ndarray:
    return np.zeros((0, 3))


@dataclass(eq=False)
class SemanticObject:
    """A labeled 3D object with an axis-aligned bounding box and point cloud.

    All geometry is expressed in the map frame. The box only ever grows:
    merge() takes the componentwise union with the other box, and the point
    cloud is extended by concatenation (no deduplication or downsampling).
    """

    # Semantic class / model name, e.g. "chair"
    label: str

    # Box center, always (min + max) / 2
    centroid: np.ndarray = field(default_factory=lambda: np.zeros(3))

    # Lower and upper vertex of the bounding box
    min: np.ndarray = field(default_factory=lambda: np.zeros(3))
    max: np.ndarray = field(default_factory=lambda: np.zeros(3))

    # RGB in [0, 1], for visualization only
    color: np.ndarray = field(default_factory=lambda: np.zeros(3))

    # Observed surface samples (N, 3)
    points: np.ndarray = field(default_factory=_empty_points)

    def __post_init__(self):
        self.centroid = np.array(self.centroid, dtype=np.float64)
        self.min = np.array(self.min, dtype=np.float64)
        self.max = np.array(self.max, dtype=np.float64)
        self.color = np.array(self.color, dtype=np.float64)
        points = np.array(self.points, dtype=np.float64)
        self.points = points.reshape(-1, 3)

    @classmethod
    def from_points(
        cls,
        label: str,
        points: np.ndarray,
        color: Optional[np.ndarray] = None,
    ) -> "SemanticObject":
        """Create an object whose box tightly encloses the given points.

        Args:
            label: Semantic class
            points: (N, 3) map-frame points, N > 0
            color: RGB in [0, 1]

        Returns:
            SemanticObject with centroid = (min + max) / 2
        """
        points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
        if len(points) == 0:
            raise ValueError("Cannot build an object from an empty point set")

        lo = points.min(axis=0)
        hi = points.max(axis=0)
        return cls(
            label=label,
            centroid=(lo + hi) / 2.0,
            min=lo,
            max=hi,
            color=np.zeros(3) if color is None else color,
            points=points,
        )

    @property
    def num_points(self) -> int:
        return len(self.points)

    @property
    def size(self) -> np.ndarray:
        """Box extent along each axis."""
        return self.max - self.min

    def corners(self) -> np.ndarray:
        """8 box corners, (8, 3).

        Order: bottom face (z = min) counter-clockwise from min, then the
        top face in the same order.
        """
        lo, hi = self.min, self.max
        return np.array([
            [lo[0], lo[1], lo[2]],
            [hi[0], lo[1], lo[2]],
            [hi[0], hi[1], lo[2]],
            [lo[0], hi[1], lo[2]],
            [lo[0], lo[1], hi[2]],
            [hi[0], lo[1], hi[2]],
            [hi[0], hi[1], hi[2]],
            [lo[0], hi[1], hi[2]],
        ])

    def contains_box(self, other: "SemanticObject") -> bool:
        """True if other's box lies inside this box."""
        return bool(np.all(self.min <= other.min) and np.all(self.max >= other.max))

    def merge(self, other: "SemanticObject") -> None:
        """Fold another observation of the same object into this one.

        Grows the box to the union of both boxes, recomputes the centroid
        and appends the other object's points.
        """
        self.min = np.minimum(self.min, other.min)
        self.max = np.maximum(self.max, other.max)

        self.centroid = (self.min + self.max) / 2.0

        self.points = np.vstack([self.points, other.points])

    def copy(self) -> "SemanticObject":
        return SemanticObject(
            label=self.label,
            centroid=self.centroid.copy(),
            min=self.min.copy(),
            max=self.max.copy(),
            color=self.color.copy(),
            points=self.points.copy(),
        )

    def __repr__(self) -> str:
        c = self.centroid
        return (
            f"SemanticObject(label={self.label!r}, "
            f"centroid=[{c[0]:.3f}, {c[1]:.3f}, {c[2]:.3f}], "
            f"points={self.num_points})"
        )
