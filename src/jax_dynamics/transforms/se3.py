"""SE(3) placements and their action on spatial vectors in JAX.

Placements are 4x4 homogeneous matrices ``T = [[R, p], [0, 1]]`` mapping
coordinates of a child frame into its parent frame. Spatial motion vectors
are ordered ``[linear, angular]`` and spatial forces ``[force, torque]``.

Every ``act_*`` function accepts either a single 6-vector or a (6, k) block
whose columns are transformed independently, which is how Jacobian columns
and motion subspaces are moved between frames.
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
    dtype = jnp.result_type(p, R, jnp.float32)
    p = jnp.broadcast_to(p, batch_shape + (3,))
    R = jnp.broadcast_to(R, batch_shape + (3, 3))

    T = jnp.zeros(batch_shape + (4, 4), dtype=dtype)
    T = T.at[..., :3, :3].set(R)
    T = T.at[..., :3, 3].set(p)
    T = T.at[..., 3, 3].set(1.0)

    return T


def translation(p: Array) -> Array:
    """Pure translation placement (identity rotation) of ``p``."""
    p = jnp.asarray(p)
    return from_position_and_rotation(p, jnp.eye(3, dtype=jnp.result_type(p, jnp.float32)))


def identity() -> Array:
    return jnp.eye(4)


def inverse(T: Array) -> Array:
    """
    Compute inverse of SE(3) transformation matrix.

    Uses the block structure for efficient computation:
    T^-1 = [[R^T, -R^T @ t], [0, 1]]

    Args:
        T: (..., 4, 4) transformation matrix

    Returns:
        (..., 4, 4) inverse transformation matrix
    """
    R = T[..., :3, :3]
    t = T[..., :3, 3]

    R_inv = jnp.swapaxes(R, -1, -2)
    t_inv = -jnp.einsum("...ij,...j->...i", R_inv, t)

    return from_position_and_rotation(t_inv, R_inv)


def get_position(T: Array) -> Array:
    return T[..., :3, 3]


def get_rotation(T: Array) -> Array:
    return T[..., :3, :3]


def adjoint(T: Array) -> Array:
    """
    Motion transform matrix Ad(T) = [[R, [t]_x R], [0, R]].

    Maps a spatial velocity expressed in the child frame of ``T`` into
    the parent frame.

    Args:
        T: (4, 4) transformation matrix

    Returns:
        (6, 6) adjoint matrix
    """
    R = T[:3, :3]
    t_skew = so3.skew_symmetric(T[:3, 3])
    zeros = jnp.zeros_like(R)

    top = jnp.concatenate([R, jnp.matmul(t_skew, R)], axis=-1)
    bottom = jnp.concatenate([zeros, R], axis=-1)
    return jnp.concatenate([top, bottom], axis=-2)


def adjoint_inverse(T: Array) -> Array:
    """
    Ad(T)^-1 = [[R^T, -R^T [t]_x], [0, R^T]], built without inverting ``T``.

    Args:
        T: (4, 4) transformation matrix

    Returns:
        (6, 6) inverse adjoint matrix
    """
    Rt = T[:3, :3].T
    t_skew = so3.skew_symmetric(T[:3, 3])
    zeros = jnp.zeros_like(Rt)

    top = jnp.concatenate([Rt, -jnp.matmul(Rt, t_skew)], axis=-1)
    bottom = jnp.concatenate([zeros, Rt], axis=-1)
    return jnp.concatenate([top, bottom], axis=-2)


def act_motion(T: Array, m: Array) -> Array:
    """Express motion ``m`` (child coordinates) in the parent frame of ``T``."""
    return adjoint(T) @ m


def act_inv_motion(T: Array, m: Array) -> Array:
    """Express motion ``m`` (parent coordinates) in the child frame of ``T``."""
    return adjoint_inverse(T) @ m


def act_force(T: Array, f: Array) -> Array:
    """
    Express force ``f`` (child coordinates) in the parent frame of ``T``.

    Force transforms are the dual of motion transforms, Ad(T)^-T, so that
    the power ``f · m`` is frame independent.
    """
    return adjoint_inverse(T).T @ f


def act_inv_force(T: Array, f: Array) -> Array:
    """Express force ``f`` (parent coordinates) in the child frame of ``T``."""
    return adjoint(T).T @ f


def act_inertia(T: Array, Y: Array) -> Array:
    """
    Express a (6, 6) spatial inertia given in the child frame in the parent frame.

    Y_parent = Ad(T)^-T · Y_child · Ad(T)^-1
    """
    X_inv = adjoint_inverse(T)
    return X_inv.T @ Y @ X_inv
