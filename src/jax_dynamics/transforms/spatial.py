"""Spatial cross products and rigid-body inertias.

Conventions follow :mod:`jax_dynamics.transforms.se3`: motion vectors are
``[v, ω]`` and forces ``[f, n]``. Inertias are 6x6 matrices about the origin
of the frame they are expressed in, so that ``Y @ v`` is the body momentum.
"""

import jax
import jax.numpy as jnp

from . import so3

Array = jax.Array


def motion_cross_matrix(v: Array) -> Array:
    """
    Matrix of the motion cross product ``v ×``.

    For ``v = [v_lin, ω]``::

        [v×] = [[[ω]_x, [v_lin]_x],
                [  0  ,   [ω]_x  ]]

    Args:
        v: (6,) spatial motion vector

    Returns:
        (6, 6) matrix such that ``motion_cross_matrix(v) @ m == v × m``
    """
    w_skew = so3.skew_symmetric(v[3:])
    v_skew = so3.skew_symmetric(v[:3])
    zeros = jnp.zeros_like(w_skew)

    top = jnp.concatenate([w_skew, v_skew], axis=-1)
    bottom = jnp.concatenate([zeros, w_skew], axis=-1)
    return jnp.concatenate([top, bottom], axis=-2)


def force_cross_matrix(v: Array) -> Array:
    """Matrix of the force cross product ``v ×*``, equal to ``-[v×]^T``."""
    return -motion_cross_matrix(v).T


def motion_cross(v: Array, m: Array) -> Array:
    """Spatial motion cross product ``v × m``; ``m`` may be (6,) or (6, k)."""
    return motion_cross_matrix(v) @ m


def force_cross(v: Array, f: Array) -> Array:
    """Spatial force cross product ``v ×* f``; ``f`` may be (6,) or (6, k)."""
    return force_cross_matrix(v) @ f


def inertia(mass, com, inertia_at_com) -> Array:
    """
    Spatial inertia of a rigid body about the origin of its frame.

    Args:
        mass: body mass
        com: (3,) center of mass in the body frame
        inertia_at_com: (3, 3) rotational inertia about the center of mass,
            expressed in the body frame axes

    Returns:
        (6, 6) spatial inertia ``[[m I, -m [c]], [m [c], I_c - m [c][c]]]``
    """
    com = jnp.asarray(com, dtype=jnp.float64)
    inertia_at_com = jnp.asarray(inertia_at_com, dtype=jnp.float64)
    if com.shape != (3,):
        raise ValueError(f"com must have shape (3,), got {com.shape}")
    if inertia_at_com.shape != (3, 3):
        raise ValueError(f"inertia_at_com must have shape (3, 3), got {inertia_at_com.shape}")

    c = so3.skew_symmetric(com)
    top = jnp.concatenate([mass * jnp.eye(3), -mass * c], axis=-1)
    bottom = jnp.concatenate([mass * c, inertia_at_com - mass * c @ c], axis=-1)
    return jnp.concatenate([top, bottom], axis=-2)


def point_mass(mass, com) -> Array:
    return inertia(mass, com, jnp.zeros((3, 3)))
