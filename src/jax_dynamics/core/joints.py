"""Joint kinds and their local kinematics.

Each joint kind provides exactly two pieces of kinematics: the placement of
the joint frame relative to its parent-side frame as a function of the
joint's own configuration slice, and the motion subspace ``S`` mapping the
joint's velocity slice to a spatial velocity in the joint frame. Everything
above this module is generic over the kind.

The set of kinds is closed; dispatch is a single switch on ``JointType``.
"""

import enum

import jax
import jax.numpy as jnp
from flax import struct

from jax_dynamics.transforms import se3, so3

Array = jax.Array


class JointType(enum.Enum):
    FIXED = "fixed"
    REVOLUTE = "revolute"
    PRISMATIC = "prismatic"
    SPHERICAL = "spherical"
    FREE_FLYER = "free_flyer"
    PLANAR = "planar"
    TRANSLATION = "translation"


# (nq, nv) per kind
_DIMENSIONS = {
    JointType.FIXED: (0, 0),
    JointType.REVOLUTE: (1, 1),
    JointType.PRISMATIC: (1, 1),
    JointType.SPHERICAL: (4, 3),
    JointType.FREE_FLYER: (7, 6),
    JointType.PLANAR: (3, 3),
    JointType.TRANSLATION: (3, 3),
}

# Kinds whose motion depends on a user supplied axis
AXIS_JOINTS = (JointType.REVOLUTE, JointType.PRISMATIC)


def joint_dimensions(kind: JointType):
    """Return ``(nq, nv)`` for a joint kind."""
    return _DIMENSIONS[kind]


@struct.dataclass
class JointModel:
    """Immutable description of one joint of the kinematic tree.

    Attributes:
        kind: Joint kind, static for JIT compilation.
        idx_q: Offset of the joint slice in the configuration vector.
        idx_v: Offset of the joint slice in velocity-sized vectors.
        axis: (3,) unit axis for revolute and prismatic joints, unused
              (zero) for the other kinds.
    """
    kind: JointType = struct.field(pytree_node=False)
    idx_q: int = struct.field(pytree_node=False)
    idx_v: int = struct.field(pytree_node=False)
    axis: Array

    @property
    def nq(self) -> int:
        return _DIMENSIONS[self.kind][0]

    @property
    def nv(self) -> int:
        return _DIMENSIONS[self.kind][1]

    def q_slice(self, q: Array) -> Array:
        return q[self.idx_q:self.idx_q + self.nq]

    def v_slice(self, v: Array) -> Array:
        return v[self.idx_v:self.idx_v + self.nv]


def joint_transform(joint: JointModel, q_joint: Array) -> Array:
    """Placement of the joint frame after the joint's own motion.

    Args:
        joint: Joint description.
        q_joint: (nq,) configuration slice of this joint. Quaternions are
                 (w, x, y, z).

    Returns:
        (4, 4) placement ``M(q)`` of the moving side in the fixed side.
    """
    kind = joint.kind
    if kind == JointType.REVOLUTE:
        R = so3.from_axis_angle(joint.axis, q_joint[0])
        return se3.from_position_and_rotation(jnp.zeros(3, dtype=R.dtype), R)
    if kind == JointType.PRISMATIC:
        return se3.translation(joint.axis * q_joint[0])
    if kind == JointType.SPHERICAL:
        R = so3.from_quaternion(q_joint)
        return se3.from_position_and_rotation(jnp.zeros(3, dtype=R.dtype), R)
    if kind == JointType.FREE_FLYER:
        return se3.from_position_and_rotation(q_joint[:3], so3.from_quaternion(q_joint[3:]))
    if kind == JointType.PLANAR:
        R = so3.from_axis_angle(jnp.array([0.0, 0.0, 1.0]), q_joint[2])
        p = jnp.concatenate([q_joint[:2], jnp.zeros(1, dtype=q_joint.dtype)])
        return se3.from_position_and_rotation(p, R)
    if kind == JointType.TRANSLATION:
        return se3.translation(q_joint)
    if kind == JointType.FIXED:
        return se3.identity()
    raise ValueError(f"Unsupported joint type: {kind}")


def motion_subspace(joint: JointModel) -> Array:
    """Motion subspace ``S`` of the joint, expressed in the joint frame.

    ``S`` is constant in the joint frame for every supported kind, so the
    joint contributes no velocity-product term of its own to the
    acceleration.

    Returns:
        (6, nv) matrix mapping the joint velocity slice to a spatial velocity.
    """
    kind = joint.kind
    zeros3 = jnp.zeros(3)
    if kind == JointType.REVOLUTE:
        return jnp.concatenate([zeros3, joint.axis])[:, None]
    if kind == JointType.PRISMATIC:
        return jnp.concatenate([joint.axis, zeros3])[:, None]
    if kind == JointType.SPHERICAL:
        return jnp.concatenate([jnp.zeros((3, 3)), jnp.eye(3)], axis=0)
    if kind == JointType.FREE_FLYER:
        return jnp.eye(6)
    if kind == JointType.PLANAR:
        # vx, vy in the plane, wz about its normal
        return jnp.eye(6)[:, [0, 1, 5]]
    if kind == JointType.TRANSLATION:
        return jnp.concatenate([jnp.eye(3), jnp.zeros((3, 3))], axis=0)
    if kind == JointType.FIXED:
        return jnp.zeros((6, 0))
    raise ValueError(f"Unsupported joint type: {kind}")


def neutral_configuration(joint: JointModel) -> Array:
    """Neutral configuration slice: zero motion and identity rotations."""
    kind = joint.kind
    if kind == JointType.SPHERICAL:
        return jnp.array([1.0, 0.0, 0.0, 0.0])
    if kind == JointType.FREE_FLYER:
        return jnp.array([0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0])
    return jnp.zeros(joint.nq)
