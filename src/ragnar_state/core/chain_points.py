"""Kinematic-chain points produced by the forward-kinematics solver."""

from typing import Tuple

import jax.numpy as jnp
from jax import Array
from flax import struct


@struct.dataclass
class IntermediatePoints:
    """Joint positions along every arm of the robot for one configuration.

    All points are expressed in the solver's base frame. Row i of each array
    belongs to arm i.

    Attributes:
        a: (4, 3) proximal (actuated) joint of each arm.
        b: (4, 3) elbow joint of each arm.
        c: (4, 3) distal joint of each arm, on the end-effector platform.
    """
    a: Array
    b: Array
    c: Array

    @classmethod
    def from_points(cls, a, b, c) -> "IntermediatePoints":
        a, b, c = (jnp.asarray(p, dtype=jnp.result_type(float)) for p in (a, b, c))
        for name, p in (('a', a), ('b', b), ('c', c)):
            if p.shape != (4, 3):
                raise ValueError(f"'{name}' must have shape (4, 3), got {p.shape}")
        return cls(a=a, b=b, c=c)

    def arm(self, index: int) -> Tuple[Array, Array, Array]:
        """The (A, B, C) chain points of one arm."""
        return self.a[index], self.b[index], self.c[index]


@struct.dataclass
class KinematicsSolution:
    """Result of a successful forward-kinematics solve.

    Attributes:
        pose: (4,) end-effector pose (x, y, z, theta).
        points: Chain points of all four arms for that pose.
    """
    pose: Array
    points: IntermediatePoints
