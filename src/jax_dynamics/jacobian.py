"""Jacobians of joints and frames, and their time variation.

:func:`compute_joint_jacobians` stores in ``data.J`` the column block
``Ad(oMi) · S_i`` of every joint, i.e. its motion subspace expressed at the
world origin with world axes. A joint or frame Jacobian is then assembled by
walking the ancestor chain of the attachment joint and re-expressing each of
those blocks at the queried point; columns of joints that are not ancestors
stay exactly zero.

Two reference conventions are available:

* ``LOCAL``: axes and origin of the queried frame.
* ``WORLD``: axes aligned with the world, origin at the queried frame.
"""

import enum
import functools
import warnings
from typing import Optional

import jax
import jax.numpy as jnp

from jax_dynamics._checks import check_frame_id, check_joint_id
from jax_dynamics.core.data import Data, Stage
from jax_dynamics.core.joints import motion_subspace
from jax_dynamics.core.model import Model
from jax_dynamics.kinematics import forward_kinematics
from jax_dynamics.transforms import se3, spatial

Array = jax.Array


class ReferenceFrame(enum.Enum):
    LOCAL = "local"
    WORLD = "world"


def compute_joint_jacobians(model: Model, data: Data, q: Optional[Array] = None) -> Array:
    """Fill ``data.J`` with the world Jacobian columns of every joint.

    Args:
        model: Kinematic tree.
        data: Workspace. Without ``q`` it must hold joint placements.
        q: (nq,) configuration; when given, position kinematics run first.

    Returns:
        ``data.J``, shape (6, nv).
    """
    if q is not None:
        forward_kinematics(model, data, q)
    data.require(Stage.POSITION, "compute_joint_jacobians")

    data.J = _stack_columns(model, [
        se3.act_motion(data.oMi[i], motion_subspace(model.joints[i]))
        for i in range(1, model.njoints)
    ])
    data.mark(Stage.JACOBIANS)
    return data.J


def compute_joint_jacobians_time_variation(model: Model, data: Data, q: Array, v: Array) -> Array:
    """Fill ``data.J`` and its time derivative ``data.dJ``.

    Each world column block moves with its joint, so its derivative is
    ``ov_i × J_i`` where ``ov_i`` is the joint velocity in world coordinates.

    Returns:
        ``data.dJ``, shape (6, nv).
    """
    forward_kinematics(model, data, q, v)

    columns, derivatives = [], []
    for i in range(1, model.njoints):
        data.ov[i] = se3.act_motion(data.oMi[i], data.v[i])
        J_i = se3.act_motion(data.oMi[i], motion_subspace(model.joints[i]))
        columns.append(J_i)
        derivatives.append(spatial.motion_cross(data.ov[i], J_i))

    data.J = _stack_columns(model, columns)
    data.dJ = _stack_columns(model, derivatives)
    data.mark(Stage.JACOBIANS, Stage.JACOBIANS_TIME_VARIATION)
    return data.dJ


def get_joint_jacobian(
    model: Model,
    data: Data,
    joint_id: int,
    reference_frame: ReferenceFrame = ReferenceFrame.LOCAL,
) -> Array:
    """Jacobian of a joint frame, from columns computed beforehand.

    :func:`compute_joint_jacobians` must have run first.

    Returns:
        (6, nv) matrix, zero outside the ancestor columns of ``joint_id``.
    """
    check_joint_id(model, joint_id)
    reference_frame = ReferenceFrame(reference_frame)
    data.require(Stage.JACOBIANS, "get_joint_jacobian")
    return _express_columns(model, data.J, joint_id, data.oMi[joint_id], reference_frame)


def get_frame_jacobian(
    model: Model,
    data: Data,
    frame_id: int,
    reference_frame: ReferenceFrame,
) -> Array:
    """Jacobian of an operational frame.

    :func:`compute_joint_jacobians` followed by
    :func:`~jax_dynamics.frames.frames_forward_kinematics` must have run
    first; the frame placement is read from ``data.oMf``.

    Returns:
        (6, nv) matrix mapping joint velocity to the frame spatial velocity.
    """
    check_frame_id(model, frame_id)
    reference_frame = ReferenceFrame(reference_frame)
    data.require(Stage.JACOBIANS, "get_frame_jacobian")
    data.require(Stage.FRAMES, "get_frame_jacobian")

    joint_id = model.frames[frame_id].parent
    return _express_columns(model, data.J, joint_id, data.oMf[frame_id], reference_frame)


def get_joint_jacobian_time_variation(
    model: Model,
    data: Data,
    joint_id: int,
    reference_frame: ReferenceFrame = ReferenceFrame.LOCAL,
) -> Array:
    """Time derivative of :func:`get_joint_jacobian`.

    :func:`compute_joint_jacobians_time_variation` must have run first.
    """
    check_joint_id(model, joint_id)
    reference_frame = ReferenceFrame(reference_frame)
    data.require(Stage.JACOBIANS_TIME_VARIATION, "get_joint_jacobian_time_variation")
    return _time_variation(model, data, joint_id, data.oMi[joint_id], reference_frame)


def get_frame_jacobian_time_variation(
    model: Model,
    data: Data,
    frame_id: int,
    reference_frame: ReferenceFrame,
) -> Array:
    """Time derivative of :func:`get_frame_jacobian`.

    :func:`compute_joint_jacobians_time_variation` followed by
    :func:`~jax_dynamics.frames.frames_forward_kinematics` must have run
    first. The result is a new array whose non-ancestor columns are zero;
    no caller-side buffer or zero-fill is involved.

    Returns:
        (6, nv) matrix ``dJ`` such that the frame acceleration is
        ``J · a + dJ · v``.
    """
    check_frame_id(model, frame_id)
    reference_frame = ReferenceFrame(reference_frame)
    data.require(Stage.JACOBIANS_TIME_VARIATION, "get_frame_jacobian_time_variation")
    data.require(Stage.FRAMES, "get_frame_jacobian_time_variation")

    joint_id = model.frames[frame_id].parent
    return _time_variation(model, data, joint_id, data.oMf[frame_id], reference_frame)


def _stack_columns(model: Model, blocks) -> Array:
    if not blocks:
        return jnp.zeros((6, model.nv))
    return jnp.concatenate(blocks, axis=1)


def _reference_placement(oMx: Array, reference_frame: ReferenceFrame) -> Array:
    if reference_frame == ReferenceFrame.LOCAL:
        return oMx
    return se3.translation(se3.get_position(oMx))


def _express_columns(
    model: Model,
    world_columns: Array,
    joint_id: int,
    oMx: Array,
    reference_frame: ReferenceFrame,
) -> Array:
    """Move the ancestor blocks of ``joint_id`` to the point placed at ``oMx``."""
    X = _reference_placement(oMx, reference_frame)
    out = jnp.zeros((6, model.nv))
    for k in model.supports[joint_id]:
        joint = model.joints[k]
        if joint.nv == 0:
            continue
        cols = slice(joint.idx_v, joint.idx_v + joint.nv)
        out = out.at[:, cols].set(se3.act_inv_motion(X, world_columns[:, cols]))
    return out


def _time_variation(
    model: Model,
    data: Data,
    joint_id: int,
    oMx: Array,
    reference_frame: ReferenceFrame,
) -> Array:
    J = _express_columns(model, data.J, joint_id, oMx, reference_frame)
    dJ = _express_columns(model, data.dJ, joint_id, oMx, reference_frame)

    # Motion of the reference itself: the whole frame for LOCAL, only the
    # translation of its origin for WORLD.
    X = _reference_placement(oMx, reference_frame)
    v_ref = se3.act_inv_motion(X, data.ov[joint_id])
    if reference_frame == ReferenceFrame.WORLD:
        v_ref = jnp.concatenate([v_ref[:3], jnp.zeros(3, dtype=v_ref.dtype)])
    return dJ - spatial.motion_cross(v_ref, J)


def _deprecated(replacement: str):
    def decorator(fn):
        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            warnings.warn(
                f"{fn.__name__} is deprecated, call {replacement} instead",
                DeprecationWarning,
                stacklevel=2,
            )
            return fn(*args, **kwargs)
        return wrapper
    return decorator


@_deprecated("get_frame_jacobian(..., ReferenceFrame.LOCAL)")
def get_frame_jacobian_local(model: Model, data: Data, frame_id: int) -> Array:
    return get_frame_jacobian(model, data, frame_id, ReferenceFrame.LOCAL)


@_deprecated("get_frame_jacobian(..., ReferenceFrame.WORLD)")
def get_frame_jacobian_world(model: Model, data: Data, frame_id: int) -> Array:
    return get_frame_jacobian(model, data, frame_id, ReferenceFrame.WORLD)


@_deprecated("get_frame_jacobian_time_variation(..., ReferenceFrame.LOCAL)")
def get_frame_jacobian_time_variation_local(model: Model, data: Data, frame_id: int) -> Array:
    return get_frame_jacobian_time_variation(model, data, frame_id, ReferenceFrame.LOCAL)


@_deprecated("get_frame_jacobian_time_variation(..., ReferenceFrame.WORLD)")
def get_frame_jacobian_time_variation_world(model: Model, data: Data, frame_id: int) -> Array:
    return get_frame_jacobian_time_variation(model, data, frame_id, ReferenceFrame.WORLD)
