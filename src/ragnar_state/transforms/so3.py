"""SO(3) rotation helpers in JAX.

Rotations are (..., 3, 3) matrices. Everything here is pure and operates on
JAX arrays, so it can be used both eagerly and under ``jax.jit``.
"""

import jax
import jax.numpy as jnp

Array = jax.Array


def skew_symmetric(v: Array) -> Array:
    """
    Convert 3D vector to skew-symmetric cross-product matrix.

    Args:
        v: (..., 3) vector

    Returns:
        (..., 3, 3) matrix K such that K @ u == cross(v, u)
    """
    zeros = jnp.zeros(v.shape[:-1], dtype=v.dtype)

    return jnp.stack([
        jnp.stack([zeros, -v[..., 2], v[..., 1]], axis=-1),
        jnp.stack([v[..., 2], zeros, -v[..., 0]], axis=-1),
        jnp.stack([-v[..., 1], v[..., 0], zeros], axis=-1)
    ], axis=-2)


def exp(log_r: Array) -> Array:
    """
    SO(3) exponential map (Rodrigues' formula).

    Args:
        log_r: (..., 3) axis-angle vectors

    Returns:
        (..., 3, 3) rotation matrices
    """
    log_r = jnp.asarray(log_r, dtype=jnp.result_type(float))
    angle = jnp.linalg.norm(log_r, axis=-1, keepdims=True)
    small_angle = angle < 1e-8

    # Taylor expansion near zero keeps the result finite
    cos_angle = jnp.where(small_angle, 1.0 - 0.5 * angle**2, jnp.cos(angle))
    sin_angle = jnp.where(small_angle, angle - angle**3 / 6.0, jnp.sin(angle))
    axis = jnp.where(small_angle, log_r, log_r / jnp.where(small_angle, 1.0, angle))

    K = skew_symmetric(axis)
    I = jnp.broadcast_to(jnp.eye(3, dtype=log_r.dtype), log_r.shape[:-1] + (3, 3))

    return I + sin_angle[..., None] * K + (1.0 - cos_angle)[..., None] * jnp.matmul(K, K)


def from_euler_ypr(yaw: float, pitch: float, roll: float) -> Array:
    """
    Build a rotation from yaw-pitch-roll angles.

    Uses the fixed-axis convention R = Rz(yaw) @ Ry(pitch) @ Rx(roll), the
    same one used by ``tf::Matrix3x3::setEulerYPR`` and URDF ``rpy`` origins.

    Args:
        yaw: rotation about Z in radians
        pitch: rotation about Y in radians
        roll: rotation about X in radians

    Returns:
        (3, 3) rotation matrix
    """
    R_z = exp(jnp.array([0.0, 0.0, yaw]))
    R_y = exp(jnp.array([0.0, pitch, 0.0]))
    R_x = exp(jnp.array([roll, 0.0, 0.0]))
    return R_z @ R_y @ R_x


def to_quaternion(matrix: Array) -> Array:
    """
    Convert rotation matrices to unit quaternions (w, x, y, z).

    Evaluates all four branches of Shepperd's method and keeps the one with
    the largest pivot, so it stays batch-safe and JIT-friendly. The scalar
    part of the result is non-negative.

    Args:
        matrix: (..., 3, 3) rotation matrices

    Returns:
        (..., 4) quaternions
    """
    m = matrix
    trace = m[..., 0, 0] + m[..., 1, 1] + m[..., 2, 2]

    # Pivots: 4w^2, 4x^2, 4y^2, 4z^2
    pivots = jnp.stack([
        1.0 + trace,
        1.0 + m[..., 0, 0] - m[..., 1, 1] - m[..., 2, 2],
        1.0 - m[..., 0, 0] + m[..., 1, 1] - m[..., 2, 2],
        1.0 - m[..., 0, 0] - m[..., 1, 1] + m[..., 2, 2],
    ], axis=-1)

    candidates = jnp.stack([
        jnp.stack([pivots[..., 0],
                   m[..., 2, 1] - m[..., 1, 2],
                   m[..., 0, 2] - m[..., 2, 0],
                   m[..., 1, 0] - m[..., 0, 1]], axis=-1),
        jnp.stack([m[..., 2, 1] - m[..., 1, 2],
                   pivots[..., 1],
                   m[..., 0, 1] + m[..., 1, 0],
                   m[..., 0, 2] + m[..., 2, 0]], axis=-1),
        jnp.stack([m[..., 0, 2] - m[..., 2, 0],
                   m[..., 0, 1] + m[..., 1, 0],
                   pivots[..., 2],
                   m[..., 1, 2] + m[..., 2, 1]], axis=-1),
        jnp.stack([m[..., 1, 0] - m[..., 0, 1],
                   m[..., 0, 2] + m[..., 2, 0],
                   m[..., 1, 2] + m[..., 2, 1],
                   pivots[..., 3]], axis=-1),
    ], axis=-2)

    best = jnp.argmax(pivots, axis=-1)
    quaternion = jnp.take_along_axis(candidates, best[..., None, None], axis=-2)[..., 0, :]

    quaternion = jnp.where(quaternion[..., 0:1] < 0, -quaternion, quaternion)
    return quaternion / jnp.linalg.norm(quaternion, axis=-1, keepdims=True)
