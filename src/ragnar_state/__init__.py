"""
Ragnar state publisher: link frames for a four-arm parallel robot.

Converts the kinematic-chain points of every arm into a rigid transform per
link, ready to be broadcast for visualization.
"""

import jax
jax.config.update("jax_enable_x64", True)

from . import transforms
from . import core
from . import io
from .config import Config, PublisherConfig, RagnarGeometry
from .errors import DegenerateGeometryError, KinematicsError, RagnarStateError
from .frames import (
    build_arm_links,
    build_directed_frame,
    build_end_effector_frame,
    build_frame_set,
    relabel,
)
from .publisher import JointSample, StampedTransform, StatePublisher

__version__ = "0.1.0"
__all__ = [
    "transforms",
    "core",
    "io",
    "Config",
    "PublisherConfig",
    "RagnarGeometry",
    "DegenerateGeometryError",
    "KinematicsError",
    "RagnarStateError",
    "build_arm_links",
    "build_directed_frame",
    "build_end_effector_frame",
    "build_frame_set",
    "relabel",
    "JointSample",
    "StampedTransform",
    "StatePublisher",
]
