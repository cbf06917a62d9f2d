"""AxisTable PyTree: the per-arm reference axes of a Ragnar robot.

Each arm's base joint is panned and tilted away from world Z. The rotated Z
axis of that joint is used to pick a stable secondary axis when building the
arm's link frames, so it is computed once from the mechanical constants and
kept for the lifetime of the process.
"""

import jax.numpy as jnp
from jax import Array
from flax import struct

from ragnar_state.config import RagnarGeometry
from ragnar_state.transforms import so3


@struct.dataclass
class AxisTable:
    """Immutable table of reference axes, one unit vector per arm.

    Attributes:
        axes: Array of shape (4, 3). Row i is the reference axis of arm i.
    """
    axes: Array

    def __getitem__(self, arm: int) -> Array:
        return self.axes[arm]

    def __len__(self) -> int:
        return self.axes.shape[0]


def base_joint_axis(pan: float, tilt: float) -> Array:
    """Z axis of a base joint after its pan and tilt.

    The joint rotation is Rz(-pan) @ Ry(0) @ Rx(-tilt); its third column is
    the joint's Z axis expressed in the base frame.
    """
    R = so3.from_euler_ypr(-pan, 0.0, -tilt)
    z = R[:, 2]
    return z / jnp.linalg.norm(z)


def build_axis_table(geometry: RagnarGeometry) -> AxisTable:
    """Compute the reference axis of every arm from the mechanical constants.

    Args:
        geometry: Mechanical constants holding each arm's base pan and tilt.

    Returns:
        AxisTable with axes ordered by arm index.
    """
    axes = [base_joint_axis(pan, tilt)
            for pan, tilt in zip(geometry.base_pan, geometry.base_tilt)]
    return AxisTable(axes=jnp.stack(axes))
