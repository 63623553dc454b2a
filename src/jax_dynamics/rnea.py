"""Inverse dynamics with the Recursive Newton-Euler Algorithm.

Pass 1 runs root to leaf and computes, for each body, the net spatial force
needed to produce its motion::

    f[i] = Y_i a_gf[i] + v[i] ×* (Y_i v[i]) - fext[i]

where ``a_gf`` is the joint acceleration plus the gravity field, obtained
by giving the universe an upward acceleration ``-gravity``. Pass 2 runs leaf
to root, projects each force on its joint and hands the rest to the parent::

    tau_i   = S_i^T f[i]
    f[p]   += Ad(liMi)^-T f[i]

Since ``tau(q, v, a) = M(q) a + b(q, v)``, setting ``a = 0`` yields the
non-linear effects ``b`` (Coriolis, centrifugal and gravity terms).
"""

from typing import Optional, Sequence

import jax
import jax.numpy as jnp

from jax_dynamics._checks import check_vector
from jax_dynamics.core.data import Data, Stage
from jax_dynamics.core.joints import motion_subspace
from jax_dynamics.core.model import Model
from jax_dynamics.errors import DimensionError
from jax_dynamics.kinematics import propagate_joint
from jax_dynamics.transforms import se3, spatial

Array = jax.Array


def rnea(
    model: Model,
    data: Data,
    q: Array,
    v: Array,
    a: Array,
    fext: Optional[Sequence[Array]] = None,
) -> Array:
    """Generalized forces producing acceleration ``a`` at state ``(q, v)``.

    Args:
        model: Kinematic tree with inertias and gravity.
        data: Workspace; receives placements, velocities, accelerations,
              joint forces and ``tau``.
        q: (nq,) configuration.
        v: (nv,) joint velocity.
        a: (nv,) joint acceleration.
        fext: Optional external force on each joint's body, one (6,) entry
              per joint (universe included), expressed in the joint frame.

    Returns:
        (nv,) generalized forces ``tau``, also stored in ``data.tau``.
    """
    q = check_vector("q", q, model.nq)
    v = check_vector("v", v, model.nv)
    a = check_vector("a", a, model.nv)
    fext = _check_external_forces(model, fext)

    data.invalidate()
    minus_gravity = -model.gravity
    for i in range(1, model.njoints):
        propagate_joint(model, data, i, q, v, a)
        data.a_gf[i] = data.a[i] + se3.act_inv_motion(data.oMi[i], minus_gravity)

        Y = model.inertias[i]
        data.f[i] = Y @ data.a_gf[i] + spatial.force_cross(data.v[i], Y @ data.v[i])
        if fext is not None:
            data.f[i] = data.f[i] - fext[i]

    tau = jnp.zeros(model.nv)
    for i in range(model.njoints - 1, 0, -1):
        joint = model.joints[i]
        if joint.nv:
            tau = tau.at[joint.idx_v:joint.idx_v + joint.nv].set(
                motion_subspace(joint).T @ data.f[i]
            )
        parent = model.parents[i]
        if parent > 0:
            data.f[parent] = data.f[parent] + se3.act_force(data.liMi[i], data.f[i])

    data.tau = tau
    data.mark(Stage.POSITION, Stage.VELOCITY, Stage.ACCELERATION)
    return tau


def non_linear_effects(model: Model, data: Data, q: Array, v: Array) -> Array:
    """Bias forces ``b(q, v)``: RNEA with zero acceleration and no external force.

    Returns:
        (nv,) non-linear effects, also stored in ``data.nle``.
    """
    data.nle = rnea(model, data, q, v, jnp.zeros(model.nv))
    return data.nle


def compute_generalized_gravity(model: Model, data: Data, q: Array) -> Array:
    """Gravity contribution ``g(q)``: RNEA at rest with zero acceleration.

    Returns:
        (nv,) generalized gravity, also stored in ``data.g``.
    """
    zeros = jnp.zeros(model.nv)
    data.g = rnea(model, data, q, zeros, zeros)
    return data.g


def _check_external_forces(model: Model, fext):
    if fext is None:
        return None
    if len(fext) != model.njoints:
        raise DimensionError(
            f"fext must hold one force per joint: expected {model.njoints}, got {len(fext)}"
        )
    return [check_vector(f"fext[{i}]", force, 6) for i, force in enumerate(fext)]
