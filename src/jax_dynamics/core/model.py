"""Immutable kinematic tree description.

This module defines the static model consumed by every algorithm. Topology
(names, parents, index offsets) lives in static fields so that jitted
functions closing over a ``Model`` unroll the tree at trace time; geometric
and inertial parameters are JAX arrays.

Joint 0 is the fixed "universe". Joints are stored in topological order:
``parents[i] < i`` for every ``i > 0``.
"""

import enum
import logging
from typing import Optional, Sequence, Tuple

import jax
import jax.numpy as jnp
import numpy as np
from flax import struct

from jax_dynamics.core.joints import (
    AXIS_JOINTS,
    JointModel,
    JointType,
    joint_dimensions,
    neutral_configuration,
)
from jax_dynamics.errors import ModelIndexError
from jax_dynamics.transforms import se3

Array = jax.Array

logger = logging.getLogger(__name__)

UNIVERSE = "universe"
STANDARD_GRAVITY = (0.0, 0.0, -9.81, 0.0, 0.0, 0.0)


class FrameType(enum.Enum):
    """Role of a frame. The tag never changes the kinematics."""
    JOINT = "joint"
    FIXED_JOINT = "fixed_joint"
    BODY = "body"
    OP_FRAME = "op_frame"
    SENSOR = "sensor"


@struct.dataclass
class Frame:
    """A named placement rigidly attached to a joint.

    Attributes:
        name: Frame name, unique in the model.
        parent: Index of the joint the frame is attached to.
        frame_type: Role tag.
        placement: (4, 4) placement of the frame in its joint frame.
    """
    name: str = struct.field(pytree_node=False)
    parent: int = struct.field(pytree_node=False)
    frame_type: FrameType = struct.field(pytree_node=False)
    placement: Array


@struct.dataclass
class Model:
    """Immutable PyTree representation of a kinematic tree with inertias.

    Attributes:
        names: Joint names, index 0 is ``"universe"``.
        parents: Parent joint index of every joint (``parents[0] == 0``).
        supports: For every joint, its ancestors from the root down to and
                  including itself, the universe excluded.
        nq: Configuration vector size.
        nv: Velocity vector size.
        joints: Per-joint kind and index offsets.
        joint_placements: (njoints, 4, 4) constant placement of each joint
                          frame in its parent joint frame.
        inertias: (njoints, 6, 6) spatial inertia of the body carried by each
                  joint, expressed in the joint frame.
        frames: Operational frames, frame 0 is the universe frame.
        gravity: (6,) spatial gravity acceleration expressed in the world.
    """
    names: Tuple[str, ...] = struct.field(pytree_node=False)
    parents: Tuple[int, ...] = struct.field(pytree_node=False)
    supports: Tuple[Tuple[int, ...], ...] = struct.field(pytree_node=False)
    nq: int = struct.field(pytree_node=False)
    nv: int = struct.field(pytree_node=False)
    joints: Tuple[JointModel, ...]
    joint_placements: Array
    inertias: Array
    frames: Tuple[Frame, ...]
    gravity: Array

    @property
    def njoints(self) -> int:
        return len(self.names)

    @property
    def nframes(self) -> int:
        return len(self.frames)

    def get_joint_id(self, name: str) -> int:
        try:
            return self.names.index(name)
        except ValueError:
            raise ModelIndexError(f"Joint '{name}' not found in model") from None

    def get_frame_id(self, name: str) -> int:
        for index, frame in enumerate(self.frames):
            if frame.name == name:
                return index
        raise ModelIndexError(f"Frame '{name}' not found in model")

    def exists_frame(self, name: str) -> bool:
        return any(frame.name == name for frame in self.frames)

    def joint_of_velocity_index(self, index: int) -> int:
        """Index of the joint owning column ``index`` of a Jacobian."""
        for joint_id, joint in enumerate(self.joints):
            if joint.idx_v <= index < joint.idx_v + joint.nv:
                return joint_id
        raise ModelIndexError(f"Velocity index {index} out of range for nv={self.nv}")


def neutral(model: Model) -> Array:
    """Neutral configuration of the whole model (identity quaternions)."""
    slices = [neutral_configuration(joint) for joint in model.joints]
    return jnp.concatenate(slices) if model.nq else jnp.zeros(0)


class ModelBuilder:
    """Incrementally assembles a :class:`Model`.

    Parsing robot description files is left to callers; this builder is the
    programmatic interface they feed. Joints must be added parent first,
    which makes the resulting order topological by construction.

    Example::

        builder = ModelBuilder()
        shoulder = builder.add_joint(0, JointType.REVOLUTE, se3.identity(),
                                     "shoulder", axis=[0, 1, 0])
        builder.append_body_to_joint(shoulder, spatial.point_mass(1.0, [0, 0, -0.5]))
        builder.add_frame("hand", shoulder, se3.translation([0, 0, -0.5]))
        model = builder.build()
    """

    def __init__(self, gravity: Optional[Sequence[float]] = None) -> None:
        self.gravity = np.asarray(STANDARD_GRAVITY if gravity is None else gravity, dtype=np.float64)
        if self.gravity.shape != (6,):
            raise ValueError(f"gravity must be a spatial 6-vector, got shape {self.gravity.shape}")

        self._names = [UNIVERSE]
        self._parents = [0]
        self._kinds = [JointType.FIXED]
        self._axes = [np.zeros(3)]
        self._placements = [np.eye(4)]
        self._inertias = [np.zeros((6, 6))]
        self._frames = [(UNIVERSE, 0, FrameType.FIXED_JOINT, np.eye(4))]

    @property
    def njoints(self) -> int:
        return len(self._names)

    def add_joint(
        self,
        parent: int,
        kind: JointType,
        placement,
        name: str,
        axis: Optional[Sequence[float]] = None,
    ) -> int:
        """Add a joint below ``parent`` and a JOINT frame of the same name.

        Args:
            parent: Index of an existing joint.
            kind: Joint kind.
            placement: (4, 4) placement of the new joint frame in the parent
                       joint frame, at zero configuration.
            name: Unique joint name.
            axis: Motion axis for revolute and prismatic joints, normalized
                  here. Defaults to ``z``.

        Returns:
            Index of the new joint.
        """
        if not 0 <= parent < self.njoints:
            raise ModelIndexError(
                f"Parent joint {parent} does not exist (model has {self.njoints} joints)"
            )
        if name in self._names:
            raise ValueError(f"Joint '{name}' already exists")
        if any(existing[0] == name for existing in self._frames):
            raise ValueError(f"Frame '{name}' already exists")
        kind = JointType(kind)
        placement = _as_placement(placement)

        if kind in AXIS_JOINTS:
            axis = np.asarray([0.0, 0.0, 1.0] if axis is None else axis, dtype=np.float64)
            norm = np.linalg.norm(axis)
            if axis.shape != (3,) or norm < 1e-12:
                raise ValueError(f"Joint '{name}' needs a non-zero 3D axis, got {axis}")
            axis = axis / norm
        else:
            axis = np.zeros(3)

        joint_id = self.njoints
        self._names.append(name)
        self._parents.append(parent)
        self._kinds.append(kind)
        self._axes.append(axis)
        self._placements.append(placement)
        self._inertias.append(np.zeros((6, 6)))
        self.add_frame(name, joint_id, np.eye(4), FrameType.JOINT)

        logger.debug("Added %s joint '%s' (id=%d, parent=%d)", kind.value, name, joint_id, parent)
        return joint_id

    def append_body_to_joint(self, joint_id: int, inertia, placement=None) -> None:
        """Rigidly attach a body to a joint, summing it into the joint inertia.

        Args:
            joint_id: Joint carrying the body.
            inertia: (6, 6) spatial inertia of the body in its own frame.
            placement: (4, 4) placement of the body frame in the joint frame,
                       identity if omitted.
        """
        self._check_joint(joint_id)
        inertia = np.asarray(inertia, dtype=np.float64)
        if inertia.shape != (6, 6):
            raise ValueError(f"inertia must have shape (6, 6), got {inertia.shape}")
        if placement is not None:
            inertia = np.asarray(se3.act_inertia(jnp.asarray(_as_placement(placement)), inertia))
        self._inertias[joint_id] = self._inertias[joint_id] + inertia

    def add_frame(
        self,
        name: str,
        parent: int,
        placement=None,
        frame_type: FrameType = FrameType.OP_FRAME,
    ) -> int:
        """Attach a named frame to joint ``parent`` and return its index."""
        self._check_joint(parent)
        if any(existing[0] == name for existing in self._frames):
            raise ValueError(f"Frame '{name}' already exists")
        placement = np.eye(4) if placement is None else _as_placement(placement)
        self._frames.append((name, parent, FrameType(frame_type), placement))
        return len(self._frames) - 1

    def build(self) -> Model:
        joints = []
        idx_q = idx_v = 0
        for kind, axis in zip(self._kinds, self._axes):
            nq, nv = joint_dimensions(kind)
            joints.append(JointModel(kind=kind, idx_q=idx_q, idx_v=idx_v, axis=jnp.asarray(axis)))
            idx_q += nq
            idx_v += nv

        supports = [()]
        for joint_id in range(1, self.njoints):
            supports.append(supports[self._parents[joint_id]] + (joint_id,))

        frames = tuple(
            Frame(name=name, parent=parent, frame_type=frame_type, placement=jnp.asarray(placement))
            for name, parent, frame_type, placement in self._frames
        )
        model = Model(
            names=tuple(self._names),
            parents=tuple(self._parents),
            supports=tuple(supports),
            nq=idx_q,
            nv=idx_v,
            joints=tuple(joints),
            joint_placements=jnp.asarray(np.stack(self._placements)),
            inertias=jnp.asarray(np.stack(self._inertias)),
            frames=frames,
            gravity=jnp.asarray(self.gravity),
        )
        logger.debug(
            "Built model: %d joints, %d frames, nq=%d, nv=%d",
            model.njoints, model.nframes, model.nq, model.nv,
        )
        return model

    def _check_joint(self, joint_id: int) -> None:
        if not 0 <= joint_id < self.njoints:
            raise ModelIndexError(
                f"Joint {joint_id} does not exist (model has {self.njoints} joints)"
            )


def _as_placement(placement) -> np.ndarray:
    placement = np.asarray(placement, dtype=np.float64)
    if placement.shape != (4, 4):
        raise ValueError(f"placement must have shape (4, 4), got {placement.shape}")
    return placement
