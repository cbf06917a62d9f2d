"""Boundary adapter between joint samples, the kinematics solver and a
transform broadcaster.

The frame computation itself lives in :mod:`ragnar_state.frames` and is
pure. This module owns everything with side effects: calling the solver,
logging skipped samples and sending the stamped transforms.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Protocol, Sequence, Tuple

import jax
import jax.numpy as jnp

from .config import Config, RagnarGeometry
from .core import AxisTable, KinematicsSolution, build_axis_table
from .errors import KinematicsError
from .frames import FrameSet, arm_link_names, build_frame_set
from .io import load_link_names
from .transforms import se3

Array = jax.Array

logger = logging.getLogger(__name__)

BASE_FRAME = "base_link"
WORLD_FRAME = "world"


class KinematicsSolver(Protocol):
    """Forward kinematics for a Ragnar robot."""

    def forward_kinematics(self, actuators: Array) -> KinematicsSolution:
        """Solve for the pose and chain points; raise KinematicsError on failure."""
        ...


@dataclass(frozen=True)
class StampedTransform:
    """A rigid transform between two named frames at a point in time."""
    transform: Array  # (4, 4) child pose in the parent frame
    stamp: Any
    parent_frame: str
    child_frame: str

    @property
    def translation(self) -> Array:
        return se3.get_position(self.transform)

    @property
    def quaternion(self) -> Array:
        """Rotation as (w, x, y, z)."""
        return se3.get_quaternion(self.transform)


class TransformBroadcaster(Protocol):
    """Anything that can publish stamped transforms."""

    def send_transform(self, transform: StampedTransform) -> None:
        ...


@dataclass(frozen=True)
class JointSample:
    """One joint-state measurement: actuator positions plus its timestamp."""
    positions: Sequence[float]
    stamp: Any

    def actuators(self) -> Array:
        if len(self.positions) < 4:
            raise ValueError(f"Expected 4 actuator positions, got {len(self.positions)}")
        return jnp.asarray(self.positions[:4], dtype=jnp.result_type(float))


class StatePublisher:
    """Publishes a frame for every Ragnar link on each joint sample.

    Args:
        solver: Forward-kinematics solver
        broadcaster: Receives the stamped transforms
        geometry: Mechanical constants; the axis table is built from them once
        prefix: Prepended to every parent and child frame name
        publish_world_frame: Also send an identity ``world -> base_link``
        link_names: Links of the robot description; when given, every frame
            this publisher sends must be one of them
    """

    def __init__(self, solver: KinematicsSolver, broadcaster: TransformBroadcaster,
                 geometry: RagnarGeometry = RagnarGeometry(), prefix: str = "",
                 publish_world_frame: bool = False,
                 link_names: Optional[Iterable[str]] = None):
        self.solver = solver
        self.broadcaster = broadcaster
        self.geometry = geometry
        self.prefix = prefix
        self.publish_world_frame = publish_world_frame
        self.axis_table: AxisTable = build_axis_table(geometry)

        if link_names is not None:
            self._check_link_names(set(link_names))

        logger.info(
            f"State publisher ready (prefix='{prefix}', world frame: {publish_world_frame})"
        )

    @classmethod
    def from_config(cls, config: Config, solver: KinematicsSolver,
                    broadcaster: TransformBroadcaster) -> "StatePublisher":
        link_names = None
        if config.publisher.robot_description:
            link_names = load_link_names(config.publisher.robot_description)
        return cls(
            solver,
            broadcaster,
            geometry=config.geometry,
            prefix=config.publisher.prefix,
            publish_world_frame=config.publisher.publish_world_frame,
            link_names=link_names,
        )

    def frame_names(self) -> Tuple[str, ...]:
        """Child frame names (without prefix) sent on every successful update."""
        names = tuple(name for arm in range(len(self.axis_table)) for name in arm_link_names(arm))
        return names + ("ee_link", "base_link2")

    def _check_link_names(self, link_names: set) -> None:
        missing = [name for name in (BASE_FRAME,) + self.frame_names() if name not in link_names]
        if missing:
            raise ValueError(f"Robot description is missing links: {missing}")

    def update(self, sample: JointSample) -> Optional[FrameSet]:
        """Handle one joint sample.

        Returns:
            The published FrameSet, or None if the solver failed and the
            sample was skipped.
        """
        try:
            solution = self.solver.forward_kinematics(sample.actuators())
        except KinematicsError as e:
            logger.warning(f"Could not calculate FK for given pose: {e}")
            return None

        # Frames are fully built before anything is sent, so a geometry error
        # never leaves a partial set behind.
        frames = build_frame_set(solution.points, self.axis_table, self.geometry)
        logger.debug(f"Publishing {len(frames)} frames at {sample.stamp}")

        parent = self.prefix + BASE_FRAME
        for name, transform in frames.items():
            self.broadcaster.send_transform(
                StampedTransform(transform, sample.stamp, parent, self.prefix + name)
            )

        if self.publish_world_frame:
            self.broadcaster.send_transform(
                StampedTransform(se3.identity(), sample.stamp,
                                 self.prefix + WORLD_FRAME, parent)
            )

        return frames
