"""Placement, velocity and acceleration of operational frames.

Frames are derived from joint quantities already stored in ``Data`` by
:func:`~jax_dynamics.kinematics.forward_kinematics`: a frame with placement
``jMf`` on joint ``j`` has ``oMf = oMi[j] · jMf`` and its motion is the joint
motion transported by ``Ad(jMf)^-1``.
"""

from typing import Optional

import jax

from jax_dynamics._checks import check_frame_id
from jax_dynamics.core.data import Data, Stage
from jax_dynamics.core.model import Model
from jax_dynamics.kinematics import forward_kinematics
from jax_dynamics.transforms import se3

Array = jax.Array


def frames_forward_kinematics(model: Model, data: Data, q: Optional[Array] = None) -> None:
    """Update the world placement of every frame.

    Args:
        model: Kinematic tree.
        data: Workspace. Without ``q`` it must hold joint placements from a
              previous forward kinematics call.
        q: (nq,) configuration; when given, forward kinematics runs first.
    """
    if q is not None:
        forward_kinematics(model, data, q)
    data.require(Stage.POSITION, "frames_forward_kinematics")

    for frame_id, frame in enumerate(model.frames):
        data.oMf[frame_id] = data.oMi[frame.parent] @ frame.placement
    data.mark(Stage.FRAMES)


def update_frame_placement(model: Model, data: Data, frame_id: int) -> Array:
    """Update and return the world placement of a single frame."""
    check_frame_id(model, frame_id)
    data.require(Stage.POSITION, "update_frame_placement")

    frame = model.frames[frame_id]
    data.oMf[frame_id] = data.oMi[frame.parent] @ frame.placement
    return data.oMf[frame_id]


def get_frame_velocity(model: Model, data: Data, frame_id: int) -> Array:
    """Spatial velocity of a frame, expressed in the frame itself.

    Forward kinematics with a velocity must have run first.
    """
    check_frame_id(model, frame_id)
    data.require(Stage.VELOCITY, "get_frame_velocity")

    frame = model.frames[frame_id]
    return se3.act_inv_motion(frame.placement, data.v[frame.parent])


def get_frame_acceleration(model: Model, data: Data, frame_id: int) -> Array:
    """Spatial acceleration of a frame, expressed in the frame itself.

    Forward kinematics with velocity and acceleration must have run first.
    """
    check_frame_id(model, frame_id)
    data.require(Stage.ACCELERATION, "get_frame_acceleration")

    frame = model.frames[frame_id]
    return se3.act_inv_motion(frame.placement, data.a[frame.parent])
