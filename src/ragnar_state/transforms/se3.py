"""SE(3) rigid-body transforms as homogeneous matrices in JAX.

A rigid transform is a (..., 4, 4) matrix whose top-left block is a
rotation and whose last column holds the translation.
"""

import jax
import jax.numpy as jnp

from . import so3

Array = jax.Array


def from_position_and_rotation(p: Array, R: Array) -> Array:
    """
    Construct SE(3) transform from position and rotation.

    Args:
        p: (..., 3) position vector
        R: (..., 3, 3) rotation matrix

    Returns:
        (..., 4, 4) homogeneous transformation matrix
    """
    p = jnp.asarray(p)
    R = jnp.asarray(R)
    batch_shape = jnp.broadcast_shapes(p.shape[:-1], R.shape[:-2])
    dtype = jnp.result_type(p, R)
    p = jnp.broadcast_to(p, batch_shape + (3,)).astype(dtype)
    R = jnp.broadcast_to(R, batch_shape + (3, 3)).astype(dtype)

    T = jnp.zeros(batch_shape + (4, 4), dtype=dtype)
    T = T.at[..., :3, :3].set(R)
    T = T.at[..., :3, 3].set(p)
    T = T.at[..., 3, 3].set(1.0)

    return T


def from_position(p: Array) -> Array:
    """Pure translation with identity rotation."""
    p = jnp.asarray(p, dtype=jnp.result_type(float))
    return from_position_and_rotation(p, jnp.eye(3, dtype=p.dtype))


def identity() -> Array:
    """The (4, 4) identity transform."""
    return jnp.eye(4, dtype=jnp.result_type(float))


def get_position(T: Array) -> Array:
    """(..., 3) translation of T."""
    return T[..., :3, 3]


def get_rotation(T: Array) -> Array:
    """(..., 3, 3) rotation block of T."""
    return T[..., :3, :3]


def get_quaternion(T: Array) -> Array:
    """(..., 4) rotation of T as a (w, x, y, z) quaternion."""
    return so3.to_quaternion(get_rotation(T))
