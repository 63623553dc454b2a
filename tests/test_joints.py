"""Tests for per-kind joint kinematics."""

import jax
import jax.numpy as jnp
import numpy as np
import pytest

from jax_dynamics.core.joints import (
    JointModel,
    JointType,
    joint_dimensions,
    joint_transform,
    motion_subspace,
    neutral_configuration,
)
from jax_dynamics.transforms import se3, so3


def _joint(kind, axis=(0.0, 0.0, 0.0)):
    return JointModel(kind=kind, idx_q=0, idx_v=0, axis=jnp.asarray(axis, dtype=jnp.float64))


@pytest.mark.parametrize("kind, nq, nv", [
    (JointType.FIXED, 0, 0),
    (JointType.REVOLUTE, 1, 1),
    (JointType.PRISMATIC, 1, 1),
    (JointType.SPHERICAL, 4, 3),
    (JointType.FREE_FLYER, 7, 6),
    (JointType.PLANAR, 3, 3),
    (JointType.TRANSLATION, 3, 3),
])
def test_dimensions(kind, nq, nv):
    joint = _joint(kind)
    assert joint_dimensions(kind) == (nq, nv)
    assert (joint.nq, joint.nv) == (nq, nv)
    assert motion_subspace(joint).shape == (6, nv)
    assert neutral_configuration(joint).shape == (nq,)


@pytest.mark.parametrize("kind", list(JointType))
def test_neutral_configuration_is_identity(kind):
    joint = _joint(kind, axis=(0.0, 0.0, 1.0))
    np.testing.assert_allclose(joint_transform(joint, neutral_configuration(joint)), jnp.eye(4), atol=1e-12)


def test_revolute_transform():
    axis = jnp.array([1.0, 1.0, 0.0]) / jnp.sqrt(2.0)
    T = joint_transform(_joint(JointType.REVOLUTE, axis), jnp.array([0.7]))
    np.testing.assert_allclose(se3.get_rotation(T), so3.from_axis_angle(axis, 0.7), atol=1e-12)
    np.testing.assert_allclose(se3.get_position(T), jnp.zeros(3), atol=1e-12)


def test_prismatic_transform():
    T = joint_transform(_joint(JointType.PRISMATIC, (0.0, 1.0, 0.0)), jnp.array([0.25]))
    np.testing.assert_allclose(T, se3.translation(jnp.array([0.0, 0.25, 0.0])), atol=1e-12)


def test_spherical_transform_normalizes_quaternion():
    joint = _joint(JointType.SPHERICAL)
    q = jnp.array([1.0, 0.0, 0.0, 1.0])  # 90° about z, not normalized
    expected = so3.from_axis_angle(jnp.array([0.0, 0.0, 1.0]), jnp.pi / 2)
    np.testing.assert_allclose(se3.get_rotation(joint_transform(joint, q)), expected, atol=1e-12)


def test_free_flyer_transform():
    joint = _joint(JointType.FREE_FLYER)
    q = jnp.array([1.0, -2.0, 0.5, np.cos(0.2), np.sin(0.2), 0.0, 0.0])
    T = joint_transform(joint, q)
    np.testing.assert_allclose(se3.get_position(T), [1.0, -2.0, 0.5], atol=1e-12)
    np.testing.assert_allclose(
        se3.get_rotation(T), so3.from_axis_angle(jnp.array([1.0, 0.0, 0.0]), 0.4), atol=1e-12
    )
    np.testing.assert_allclose(motion_subspace(joint), jnp.eye(6))


def test_planar_transform():
    T = joint_transform(_joint(JointType.PLANAR), jnp.array([0.3, -0.1, 0.5]))
    np.testing.assert_allclose(se3.get_position(T), [0.3, -0.1, 0.0], atol=1e-12)
    np.testing.assert_allclose(
        se3.get_rotation(T), so3.from_axis_angle(jnp.array([0.0, 0.0, 1.0]), 0.5), atol=1e-12
    )


def test_fixed_joint_has_no_motion():
    joint = _joint(JointType.FIXED)
    np.testing.assert_allclose(joint_transform(joint, jnp.zeros(0)), jnp.eye(4))
    assert motion_subspace(joint).shape == (6, 0)


@pytest.mark.parametrize("kind, axis, q", [
    (JointType.REVOLUTE, (0.0, 0.6, 0.8), [0.4]),
    (JointType.PRISMATIC, (0.6, 0.0, -0.8), [-0.3]),
    (JointType.TRANSLATION, (0.0, 0.0, 0.0), [0.1, 0.2, -0.3]),
])
def test_motion_subspace_is_derivative_of_transform(kind, axis, q):
    """M(q)^-1 dM/dq · dq is the twist S · dq for joints where dq/dt == v."""
    joint = _joint(kind, axis)
    q = jnp.asarray(q)
    dq = jnp.linspace(0.5, 1.0, joint.nv)

    T, dT = jax.jvp(lambda x: joint_transform(joint, x), (q,), (dq,))
    twist = se3.inverse(T) @ dT
    linear = twist[:3, 3]
    angular = jnp.array([twist[2, 1], twist[0, 2], twist[1, 0]])
    np.testing.assert_allclose(jnp.concatenate([linear, angular]), motion_subspace(joint) @ dq, atol=1e-12)
