"""
Configuration for the Ragnar state publisher.

Mechanical constants and publisher options, loadable from YAML files.
"""

import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

import yaml

logger = logging.getLogger(__name__)

NUM_ARMS = 4


@dataclass(frozen=True)
class RagnarGeometry:
    """
    Fixed mechanical constants of a Ragnar robot.

    Attributes:
        base_pan: Pan angle of each arm's base joint about world Z (radians),
            in arm order 0..3.
        base_tilt: Tilt angle of each arm's base joint (radians).
        mount_offset: Vertical distance between the kinematic reference point
            and the physical pivot; subtracted from every frame origin Z.
        base_link2_offset: Vertical offset of the auxiliary ``base_link2``
            frame above ``base_link``.
    """
    base_pan: Tuple[float, ...] = (math.pi / 4, -math.pi / 4, -3 * math.pi / 4, 3 * math.pi / 4)
    base_tilt: Tuple[float, ...] = (-math.pi / 12,) * NUM_ARMS
    mount_offset: float = 0.05
    base_link2_offset: float = 0.05

    def __post_init__(self):
        object.__setattr__(self, 'base_pan', tuple(float(a) for a in self.base_pan))
        object.__setattr__(self, 'base_tilt', tuple(float(a) for a in self.base_tilt))
        if len(self.base_pan) != NUM_ARMS or len(self.base_tilt) != NUM_ARMS:
            raise ValueError(
                f"Expected {NUM_ARMS} base pan and tilt angles, got "
                f"{len(self.base_pan)} and {len(self.base_tilt)}"
            )


@dataclass
class PublisherConfig:
    """Options for the transform publisher adapter."""
    prefix: str = ""  # Prepended to every parent and child frame name
    publish_world_frame: bool = False  # Also send an identity world -> base_link
    robot_description: Optional[str] = None  # URDF used to validate frame names


@dataclass
class Config:
    """
    Top-level configuration.

    Attributes:
        geometry: Mechanical constants used to build the axis table and frames
        publisher: Transform publisher options
    """
    geometry: RagnarGeometry = field(default_factory=RagnarGeometry)
    publisher: PublisherConfig = field(default_factory=PublisherConfig)

    @classmethod
    def from_yaml(cls, config_path: str) -> "Config":
        """
        Load configuration from a YAML file.

        Example YAML structure:
            geometry:
              angles_in_degrees: true
              base_pan: [45.0, -45.0, -135.0, 135.0]
              base_tilt: [-15.0, -15.0, -15.0, -15.0]
              mount_offset: 0.05
              base_link2_offset: 0.05
            publisher:
              prefix: "ragnar/"
              publish_world_frame: false
              robot_description: "ragnar.urdf"

        Every section and key is optional. ``robot_description`` is resolved
        relative to the configuration file and stored as an absolute path, so
        a saved configuration loads back unchanged from any directory.
        """
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}

        logger.info(f"Loading configuration from {config_path}")

        geo_data = data.get('geometry') or {}
        defaults = RagnarGeometry()
        to_radians = math.radians if geo_data.get('angles_in_degrees', False) else float

        base_pan = defaults.base_pan
        if 'base_pan' in geo_data:
            base_pan = tuple(to_radians(a) for a in geo_data['base_pan'])
        base_tilt = defaults.base_tilt
        if 'base_tilt' in geo_data:
            base_tilt = tuple(to_radians(a) for a in geo_data['base_tilt'])

        geometry = RagnarGeometry(
            base_pan=base_pan,
            base_tilt=base_tilt,
            mount_offset=geo_data.get('mount_offset', defaults.mount_offset),
            base_link2_offset=geo_data.get('base_link2_offset', defaults.base_link2_offset),
        )

        pub_data = data.get('publisher') or {}
        description = pub_data.get('robot_description')
        if description:
            description = str((path.parent / description).resolve())

        publisher = PublisherConfig(
            prefix=pub_data.get('prefix', ''),
            publish_world_frame=pub_data.get('publish_world_frame', False),
            robot_description=description,
        )

        return cls(geometry=geometry, publisher=publisher)

    def to_yaml(self, config_path: str) -> None:
        """Save configuration to a YAML file (angles in radians)."""
        data = {
            'geometry': {
                'angles_in_degrees': False,
                'base_pan': list(self.geometry.base_pan),
                'base_tilt': list(self.geometry.base_tilt),
                'mount_offset': self.geometry.mount_offset,
                'base_link2_offset': self.geometry.base_link2_offset,
            },
            'publisher': {
                'prefix': self.publisher.prefix,
                'publish_world_frame': self.publisher.publish_world_frame,
                'robot_description': self.publisher.robot_description,
            },
        }

        with open(config_path, 'w') as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

        logger.info(f"Configuration saved to {config_path}")
