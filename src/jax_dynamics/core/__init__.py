"""Core data structures for jax_dynamics.

This module provides the immutable kinematic tree (``Model``), its joint
kinds, and the mutable workspace (``Data``) written by the algorithms.
"""

from .data import Data, Stage
from .joints import JointModel, JointType, joint_transform, motion_subspace
from .model import Frame, FrameType, Model, ModelBuilder, neutral

__all__ = [
    "Data",
    "Stage",
    "JointModel",
    "JointType",
    "joint_transform",
    "motion_subspace",
    "Frame",
    "FrameType",
    "Model",
    "ModelBuilder",
    "neutral",
]
