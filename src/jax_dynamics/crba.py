"""Joint-space inertia matrix with the Composite Rigid Body Algorithm.

Bodies are folded into composite inertias from the leaves up. The force
``Yc_i S_i`` needed to accelerate the composite of joint ``i`` along its
motion subspace is carried up the ancestor chain; projecting it on each
ancestor's subspace gives the off-diagonal blocks of ``M``.
"""

import jax
import jax.numpy as jnp

from jax_dynamics.core.data import Data
from jax_dynamics.core.joints import motion_subspace
from jax_dynamics.core.model import Model
from jax_dynamics.kinematics import forward_kinematics
from jax_dynamics.transforms import se3

Array = jax.Array


def crba(model: Model, data: Data, q: Array) -> Array:
    """Compute the symmetric (nv, nv) joint-space inertia matrix ``M(q)``.

    Runs position forward kinematics on ``data``; both triangles of the
    result are filled. The matrix is also stored in ``data.M``.
    """
    forward_kinematics(model, data, q)

    M = jnp.zeros((model.nv, model.nv))
    composite = [model.inertias[i] for i in range(model.njoints)]

    for i in range(model.njoints - 1, 0, -1):
        joint = model.joints[i]
        if joint.nv:
            S_i = motion_subspace(joint)
            cols_i = slice(joint.idx_v, joint.idx_v + joint.nv)
            F = composite[i] @ S_i
            M = M.at[cols_i, cols_i].set(S_i.T @ F)

            j = i
            while model.parents[j] > 0:
                F = se3.act_force(data.liMi[j], F)
                j = model.parents[j]
                ancestor = model.joints[j]
                if ancestor.nv == 0:
                    continue
                cols_j = slice(ancestor.idx_v, ancestor.idx_v + ancestor.nv)
                block = motion_subspace(ancestor).T @ F
                M = M.at[cols_j, cols_i].set(block)
                M = M.at[cols_i, cols_j].set(block.T)

        parent = model.parents[i]
        if parent > 0:
            composite[parent] = composite[parent] + se3.act_inertia(data.liMi[i], composite[i])

    data.M = M
    return M
