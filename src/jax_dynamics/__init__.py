"""
JAX Dynamics: rigid-body kinematics and inverse dynamics for articulated robots.

This library provides recursive spatial-algebra algorithms over a kinematic
tree: forward kinematics, frame kinematics, joint and frame Jacobians (and
their time variation), the Recursive Newton-Euler Algorithm and the
Composite Rigid Body Algorithm, all written with JAX primitives.
"""

import jax
jax.config.update("jax_enable_x64", True)

from . import config
from . import core
from . import errors
from . import transforms
from .core import Data, FrameType, JointType, Model, ModelBuilder, neutral
from .crba import crba
from .errors import DimensionError, DynamicsError, ModelIndexError, PreconditionError
from .frames import (
    frames_forward_kinematics,
    get_frame_acceleration,
    get_frame_velocity,
    update_frame_placement,
)
from .jacobian import (
    ReferenceFrame,
    compute_joint_jacobians,
    compute_joint_jacobians_time_variation,
    get_frame_jacobian,
    get_frame_jacobian_local,
    get_frame_jacobian_time_variation,
    get_frame_jacobian_time_variation_local,
    get_frame_jacobian_time_variation_world,
    get_frame_jacobian_world,
    get_joint_jacobian,
    get_joint_jacobian_time_variation,
)
from .kinematics import forward_kinematics
from .rnea import compute_generalized_gravity, non_linear_effects, rnea

__version__ = "0.1.0"
__all__ = [
    "config",
    "core",
    "errors",
    "transforms",
    "Data",
    "FrameType",
    "JointType",
    "Model",
    "ModelBuilder",
    "neutral",
    "DimensionError",
    "DynamicsError",
    "ModelIndexError",
    "PreconditionError",
    "ReferenceFrame",
    "forward_kinematics",
    "frames_forward_kinematics",
    "update_frame_placement",
    "get_frame_velocity",
    "get_frame_acceleration",
    "compute_joint_jacobians",
    "compute_joint_jacobians_time_variation",
    "get_joint_jacobian",
    "get_joint_jacobian_time_variation",
    "get_frame_jacobian",
    "get_frame_jacobian_time_variation",
    "get_frame_jacobian_local",
    "get_frame_jacobian_world",
    "get_frame_jacobian_time_variation_local",
    "get_frame_jacobian_time_variation_world",
    "rnea",
    "non_linear_effects",
    "compute_generalized_gravity",
    "crba",
]
