"""Detection input for the semantic mapper.

Detections are produced upstream by a segmentation model or a logical
camera. The mapper only needs three things per detection:
- label: semantic class / model name, e.g. "chair"
- pixels: image cells covered by the object, as (row, col) pairs
- color: display color in 0..255 (visualization only, never used for matching)
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple
import numpy as np


@dataclass
class Detection:
    """Single labeled pixel set from the detector.

    This is the OUTPUT of the detector, INPUT to SemanticMapper.extract_objects.
    Pixel coordinates index the same grid as the points image.
    """
    label: str                # e.g., "chair", "table"
    pixels: np.ndarray        # (N, 2) int array of (row, col)
    color: np.ndarray = field(default_factory=lambda: np.zeros(3))  # RGB 0..255

    def __post_init__(self):
        pixels = np.asarray(self.pixels, dtype=np.int64)
        if pixels.size == 0:
            pixels = pixels.reshape(0, 2)
        if pixels.ndim != 2 or pixels.shape[1] != 2:
            raise ValueError(f"pixels must have shape (N, 2), got {pixels.shape}")
        self.pixels = pixels

        color = np.asarray(self.color, dtype=np.float64)
        if color.shape != (3,):
            raise ValueError(f"color must have 3 channels, got shape {color.shape}")
        self.color = color

    @property
    def num_pixels(self) -> int:
        return len(self.pixels)

    @property
    def normalized_color(self) -> np.ndarray:
        """Display color scaled to [0, 1]."""
        return self.color / 255.0

    @property
    def image_bbox(self) -> Optional[Tuple[Tuple[int, int], Tuple[int, int]]]:
        """Image-space bounding box of the pixel set.

        Returns:
            ((top, left), (bottom, right)) in (row, col) order, or None for
            an empty pixel set.
        """
        if self.num_pixels == 0:
            return None
        top_left = self.pixels.min(axis=0)
        bottom_right = self.pixels.max(axis=0)
        return (
            (int(top_left[0]), int(top_left[1])),
            (int(bottom_right[0]), int(bottom_right[1])),
        )


# Type alias for clarity
Detections = List[Detection]
