"""Forward kinematics: root-to-leaf propagation of placements and motions.

For joint ``i`` with parent ``p``::

    liMi  = placement_i · M_i(q_i)
    oMi   = oMi[p] · liMi
    v[i]  = Ad(liMi)^-1 v[p] + S_i v_i
    a[i]  = Ad(liMi)^-1 a[p] + S_i a_i + v[i] × (S_i v_i)

Velocities and accelerations are expressed in the joint frame. The universe
is immobile and carries no gravity here; RNEA adds the gravity field itself.
"""

from typing import Optional

import jax
import jax.numpy as jnp

from jax_dynamics._checks import check_vector
from jax_dynamics.core.data import Data, Stage
from jax_dynamics.core.joints import joint_transform, motion_subspace
from jax_dynamics.core.model import Model
from jax_dynamics.transforms import se3, spatial

Array = jax.Array


def forward_kinematics(
    model: Model,
    data: Data,
    q: Array,
    v: Optional[Array] = None,
    a: Optional[Array] = None,
) -> None:
    """Update joint placements, and optionally velocities and accelerations.

    Args:
        model: Kinematic tree.
        data: Workspace receiving ``liMi``, ``oMi`` and, when given, ``v``/``a``.
        q: (nq,) configuration.
        v: (nv,) joint velocity. Required when ``a`` is given.
        a: (nv,) joint acceleration.
    """
    if a is not None and v is None:
        raise TypeError("forward_kinematics needs a velocity when an acceleration is given")
    q = check_vector("q", q, model.nq)
    if v is not None:
        v = check_vector("v", v, model.nv)
    if a is not None:
        a = check_vector("a", a, model.nv)

    data.invalidate()
    for i in range(1, model.njoints):
        propagate_joint(model, data, i, q, v, a)

    data.mark(Stage.POSITION)
    if v is not None:
        data.mark(Stage.VELOCITY)
    if a is not None:
        data.mark(Stage.ACCELERATION)


def propagate_joint(
    model: Model,
    data: Data,
    i: int,
    q: Array,
    v: Optional[Array] = None,
    a: Optional[Array] = None,
) -> Optional[Array]:
    """One forward step for joint ``i``; its parent must already be done.

    Returns:
        The joint's own spatial velocity ``S_i v_i`` when ``v`` is given.
    """
    joint = model.joints[i]
    parent = model.parents[i]

    liMi = model.joint_placements[i] @ joint_transform(joint, joint.q_slice(q))
    data.liMi[i] = liMi
    data.oMi[i] = data.oMi[parent] @ liMi
    if v is None:
        return None

    S = motion_subspace(joint)
    vJ = S @ joint.v_slice(v)
    data.v[i] = se3.act_inv_motion(liMi, data.v[parent]) + vJ
    if a is not None:
        data.a[i] = (
            se3.act_inv_motion(liMi, data.a[parent])
            + S @ joint.v_slice(a)
            + spatial.motion_cross(data.v[i], vJ)
        )
    return vJ
