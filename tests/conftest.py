"""Shared robot models for the test-suite."""

import jax.numpy as jnp
import numpy as np
import pytest

from jax_dynamics.core import FrameType, JointType, ModelBuilder, neutral
from jax_dynamics.transforms import se3, so3, spatial

PENDULUM_MASS = 2.0
PENDULUM_LENGTH = 0.5


def random_inertia(rng: np.random.Generator) -> np.ndarray:
    """Physically valid spatial inertia with an off-origin center of mass."""
    A = rng.normal(size=(3, 3))
    inertia_at_com = 0.1 * (A @ A.T) + 0.05 * np.eye(3)
    return np.asarray(spatial.inertia(rng.uniform(0.5, 2.0), rng.normal(scale=0.2, size=3), inertia_at_com))


def random_placement(rng: np.random.Generator, scale: float = 0.3) -> np.ndarray:
    quat = rng.normal(size=4)
    return np.asarray(se3.from_position_and_rotation(
        jnp.asarray(rng.normal(scale=scale, size=3)),
        so3.from_quaternion(jnp.asarray(quat)),
    ))


def random_quaternion(rng: np.random.Generator) -> np.ndarray:
    quat = rng.normal(size=4)
    return quat / np.linalg.norm(quat)


@pytest.fixture
def pendulum():
    """Single revolute joint about y carrying a point mass hanging at -z."""
    builder = ModelBuilder()
    joint = builder.add_joint(0, JointType.REVOLUTE, np.eye(4), "hinge", axis=[0.0, 1.0, 0.0])
    builder.append_body_to_joint(joint, spatial.point_mass(PENDULUM_MASS, [0.0, 0.0, -PENDULUM_LENGTH]))
    builder.add_frame("bob", joint, se3.translation(jnp.array([0.0, 0.0, -PENDULUM_LENGTH])))
    return builder.build()


@pytest.fixture
def planar_two_link():
    """Two revolute joints about y with links along x, gravity along -z."""
    builder = ModelBuilder()
    shoulder = builder.add_joint(0, JointType.REVOLUTE, np.eye(4), "shoulder", axis=[0, 1, 0])
    builder.append_body_to_joint(
        shoulder, spatial.inertia(1.5, [0.5, 0.0, 0.0], np.diag([0.01, 0.12, 0.12]))
    )
    elbow = builder.add_joint(
        shoulder, JointType.REVOLUTE, se3.translation(jnp.array([1.0, 0.0, 0.0])), "elbow", axis=[0, 1, 0]
    )
    builder.append_body_to_joint(
        elbow, spatial.inertia(1.0, [0.4, 0.0, 0.0], np.diag([0.01, 0.06, 0.06]))
    )
    builder.add_frame("tip", elbow, se3.translation(jnp.array([0.8, 0.0, 0.0])))
    return builder.build()


@pytest.fixture
def serial_arm():
    """Six-joint chain of revolute and prismatic joints with skewed axes.

    Every configuration coordinate is also a velocity coordinate, so
    ``dq/dt == v`` and kinematic derivatives can be checked with ``jax.jvp``.
    """
    rng = np.random.default_rng(7)
    builder = ModelBuilder()
    kinds = [
        JointType.REVOLUTE,
        JointType.REVOLUTE,
        JointType.PRISMATIC,
        JointType.REVOLUTE,
        JointType.REVOLUTE,
        JointType.PRISMATIC,
    ]
    parent = 0
    for index, kind in enumerate(kinds, start=1):
        parent = builder.add_joint(
            parent, kind, random_placement(rng), f"joint{index}", axis=rng.normal(size=3)
        )
        builder.append_body_to_joint(parent, random_inertia(rng))
    builder.add_frame("elbow_sensor", 3, random_placement(rng), FrameType.SENSOR)
    builder.add_frame("tool", parent, random_placement(rng))
    return builder.build()


@pytest.fixture
def branched_tree():
    """Floating base with two arms covering every joint kind.

    base (free-flyer)
    ├── left_shoulder (spherical) ── left_elbow (revolute) ── left_mount (fixed)
    │                                                           └── left_slider (prismatic)
    └── right_hip (planar) ── right_knee (translation) ── right_ankle (revolute)
    """
    rng = np.random.default_rng(11)
    builder = ModelBuilder()

    def joint(parent, kind, name, axis=None):
        joint_id = builder.add_joint(parent, kind, random_placement(rng), name, axis=axis)
        builder.append_body_to_joint(joint_id, random_inertia(rng))
        return joint_id

    base = joint(0, JointType.FREE_FLYER, "base")
    left_shoulder = joint(base, JointType.SPHERICAL, "left_shoulder")
    left_elbow = joint(left_shoulder, JointType.REVOLUTE, "left_elbow", axis=[1.0, 0.0, 0.0])
    left_mount = joint(left_elbow, JointType.FIXED, "left_mount")
    left_slider = joint(left_mount, JointType.PRISMATIC, "left_slider", axis=[0.3, 0.0, 1.0])
    right_hip = joint(base, JointType.PLANAR, "right_hip")
    right_knee = joint(right_hip, JointType.TRANSLATION, "right_knee")
    right_ankle = joint(right_knee, JointType.REVOLUTE, "right_ankle", axis=[0.0, 1.0, 1.0])

    builder.add_frame("left_hand", left_slider, random_placement(rng))
    builder.add_frame("left_mount_body", left_mount, random_placement(rng), FrameType.BODY)
    builder.add_frame("right_foot", right_ankle, random_placement(rng))
    builder.add_frame("imu", base, random_placement(rng), FrameType.SENSOR)
    return builder.build()


def random_state(model, seed: int):
    """Random ``(q, v, a)`` with unit quaternions where the model needs them."""
    rng = np.random.default_rng(seed)
    q = np.asarray(neutral(model)).copy()
    for joint in model.joints:
        if joint.nq == 0:
            continue
        block = rng.uniform(-1.0, 1.0, size=joint.nq)
        if joint.kind == JointType.SPHERICAL:
            block = random_quaternion(rng)
        elif joint.kind == JointType.FREE_FLYER:
            block[3:] = random_quaternion(rng)
        q[joint.idx_q:joint.idx_q + joint.nq] = block
    v = rng.uniform(-1.0, 1.0, size=model.nv)
    a = rng.uniform(-1.0, 1.0, size=model.nv)
    return jnp.asarray(q), jnp.asarray(v), jnp.asarray(a)
