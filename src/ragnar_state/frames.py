"""Link frame construction: the heart of the Ragnar state publisher.

Turns the chain points of every arm into one rigid transform per link. A
link frame's second axis points along the physical member; the other two
axes are fixed by the arm's reference axis, so the result is deterministic
and always right-handed.
"""

from typing import Dict, Tuple

import jax.numpy as jnp
from jax import Array

from .config import RagnarGeometry
from .core import AxisTable, IntermediatePoints
from .errors import DegenerateGeometryError
from .transforms import se3

FrameSet = Dict[str, Array]

MOUNT_OFFSET = 0.05
# Norms below this are treated as zero when normalizing
DEGENERATE_EPS = 1e-9


def relabel(point: Array) -> Array:
    """Convert a solver point to frame coordinates by swapping X and Y.

    Raises:
        ValueError: if the last dimension is not 3.
    """
    point = jnp.asarray(point, dtype=jnp.result_type(float))
    # JAX clamps out-of-range gather indices, so a 2D point would not fail below
    if point.ndim == 0 or point.shape[-1] != 3:
        raise ValueError(f"Expected 3D point(s) with shape (..., 3), got {point.shape}")
    return point[..., jnp.array([1, 0, 2])]


def _normalize(v: Array, what: str) -> Array:
    norm = jnp.linalg.norm(v)
    if not norm > DEGENERATE_EPS:
        raise DegenerateGeometryError(f"Cannot normalize {what}: norm {float(norm):.3e}")
    return v / norm


def build_directed_frame(start: Array, stop: Array, reference_axis: Array,
                         mount_offset: float = MOUNT_OFFSET) -> Array:
    """Build the frame of a link running from ``start`` to ``stop``.

    Args:
        start: (3,) link start point in solver coordinates
        stop: (3,) link end point in solver coordinates
        reference_axis: (3,) unit vector, not parallel to the link
        mount_offset: Subtracted from the origin's Z coordinate

    Returns:
        (4, 4) transform with origin at ``start`` and rotation columns
        (z', n, y), where n is the link direction, y = n x reference_axis
        and z' = n x y.

    Raises:
        DegenerateGeometryError: if start == stop or the reference axis is
            parallel to the link.
        ValueError: if any input is not a single 3D vector.
    """
    start, stop = relabel(start), relabel(stop)
    reference_axis = jnp.asarray(reference_axis, dtype=start.dtype)
    for name, v in (('start', start), ('stop', stop), ('reference axis', reference_axis)):
        if v.shape != (3,):
            raise ValueError(f"Expected {name} of shape (3,), got {v.shape}")

    origin = start - jnp.array([0.0, 0.0, mount_offset], dtype=start.dtype)

    n = _normalize(stop - start, "link direction (start == stop)")
    y = _normalize(jnp.cross(n, reference_axis), "secondary axis (reference axis parallel to link)")
    z = jnp.cross(n, y)

    rotation = jnp.stack([z, n, y], axis=-1)
    return se3.from_position_and_rotation(origin, rotation)


def build_arm_links(a: Array, b: Array, c: Array, reference_axis: Array,
                    mount_offset: float = MOUNT_OFFSET) -> Tuple[Array, Array]:
    """Frames of one arm's upper (A -> B) and lower (B -> C) links."""
    upper = build_directed_frame(a, b, reference_axis, mount_offset)
    lower = build_directed_frame(b, c, reference_axis, mount_offset)
    return upper, lower


def build_end_effector_frame(distal_points: Array, mount_offset: float = MOUNT_OFFSET) -> Array:
    """Frame of the end-effector platform.

    The origin is the centroid of the four distal points with the same
    relabeling and mount offset as the link frames. The platform stays
    parallel to the base, so the rotation is identity.

    Args:
        distal_points: (4, 3) distal chain point of every arm

    Returns:
        (4, 4) transform
    """
    distal_points = jnp.asarray(distal_points, dtype=jnp.result_type(float))
    if distal_points.shape != (4, 3):
        raise ValueError(f"Expected 4 distal points of shape (4, 3), got {distal_points.shape}")
    distal_points = relabel(distal_points)

    center = jnp.mean(distal_points, axis=0)
    center = center - jnp.array([0.0, 0.0, mount_offset], dtype=center.dtype)
    return se3.from_position(center)


def arm_link_names(arm: int) -> Tuple[str, str]:
    """Upper and lower link names of an arm. Link numbering runs opposite to arm index."""
    number = 4 - arm
    return f"upper_arm_{number}", f"lower_arm_{number}"


def build_frame_set(points: IntermediatePoints, axis_table: AxisTable,
                    geometry: RagnarGeometry = RagnarGeometry()) -> FrameSet:
    """Compute every link frame for one robot configuration.

    Args:
        points: Chain points of all four arms
        axis_table: Reference axes, indexed by the same arm order as ``points``
        geometry: Mechanical constants supplying the vertical offsets

    Returns:
        Dictionary mapping link names to (4, 4) transforms relative to
        ``base_link``, in publishing order: arm links, ``ee_link``,
        ``base_link2``.
    """
    frames: FrameSet = {}

    for arm in range(len(axis_table)):
        a, b, c = points.arm(arm)
        upper, lower = build_arm_links(a, b, c, axis_table[arm], geometry.mount_offset)
        upper_name, lower_name = arm_link_names(arm)
        frames[upper_name] = upper
        frames[lower_name] = lower

    frames["ee_link"] = build_end_effector_frame(points.c, geometry.mount_offset)
    frames["base_link2"] = se3.from_position(jnp.array([0.0, 0.0, geometry.base_link2_offset]))

    return frames
