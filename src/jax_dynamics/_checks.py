"""Argument validation shared by the algorithm entry points."""

import jax.numpy as jnp

from jax_dynamics.errors import DimensionError, ModelIndexError


def check_vector(name: str, x, size: int):
    """Return ``x`` as an array after checking it has shape ``(size,)``."""
    x = jnp.asarray(x, dtype=float)
    if x.shape != (size,):
        raise DimensionError(f"{name} has wrong shape: expected ({size},), got {x.shape}")
    return x


def check_joint_id(model, joint_id: int) -> int:
    if not 0 <= joint_id < model.njoints:
        raise ModelIndexError(
            f"Joint index {joint_id} out of range (model has {model.njoints} joints)"
        )
    return joint_id


def check_frame_id(model, frame_id: int) -> int:
    if not 0 <= frame_id < model.nframes:
        raise ModelIndexError(
            f"Frame index {frame_id} out of range (model has {model.nframes} frames)"
        )
    return frame_id
