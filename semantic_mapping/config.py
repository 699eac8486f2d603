"""Configuration for the semantic mapper.

Only session-level geometry and logging live here. The extraction
thresholds (minimum pixel count, point validity norm) are fixed constants in
mapper.py and are intentionally not configurable.

Example YAML:

    sensor_mount_translation: [0.0, 0.0, 0.6]
    sensor_mount_quaternion: [-0.5, 0.5, -0.5, 0.5]   # x, y, z, w
    log_associations: true
"""

from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

from .transforms import RigidTransform


@dataclass
class MapperConfig:
    """Configuration for SemanticMapper."""

    # Sensor mount offset (sensor frame -> robot frame)
    # Camera sits 0.6m above the robot base
    sensor_mount_translation: List[float] = field(default_factory=lambda: [0.0, 0.0, 0.6])
    # Optical frame (z forward, x right, y down) -> body frame (x forward, y left, z up)
    sensor_mount_quaternion: List[float] = field(default_factory=lambda: [-0.5, 0.5, -0.5, 0.5])

    # Log every global -> local match at INFO instead of DEBUG
    log_associations: bool = False

    def sensor_mount_offset(self) -> RigidTransform:
        return RigidTransform.from_pose(
            self.sensor_mount_translation,
            self.sensor_mount_quaternion,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MapperConfig":
        """Build a config from a plain dict, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown mapper config keys: {sorted(unknown)}")

        config = cls(**data)
        # Validate geometry eagerly so a bad file fails at load time
        config.sensor_mount_offset()
        return config

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "MapperConfig":
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Expected a mapping at the top level of {path}")
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_yaml(self, path: Union[str, Path]):
        with open(path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False)
