"""SO(3) operations in JAX.

Rotation matrices built from axis-angle pairs and unit quaternions. All
functions are pure, JIT-able, and operate on JAX arrays.
"""

import jax
import jax.numpy as jnp

Array = jax.Array


def skew_symmetric(v: Array) -> Array:
    """
    Convert 3D vector to skew-symmetric matrix, so that ``skew(a) @ b == a × b``.

    Args:
        v: (..., 3) vector

    Returns:
        (..., 3, 3) skew-symmetric matrix
    """
    zeros = jnp.zeros(v.shape[:-1], dtype=v.dtype)

    return jnp.stack([
        jnp.stack([zeros, -v[..., 2], v[..., 1]], axis=-1),
        jnp.stack([v[..., 2], zeros, -v[..., 0]], axis=-1),
        jnp.stack([-v[..., 1], v[..., 0], zeros], axis=-1)
    ], axis=-2)


def from_axis_angle(axis: Array, angle: Array) -> Array:
    """
    Rotation of ``angle`` radians about a unit ``axis`` (Rodrigues' formula).

    Unlike an exponential map on ``axis * angle`` this never divides by the
    angle, so it stays differentiable at zero, which is where joint
    configurations usually start.

    Args:
        axis: (3,) unit rotation axis
        angle: scalar rotation angle

    Returns:
        (3, 3) rotation matrix
    """
    K = skew_symmetric(axis)
    I = jnp.eye(3, dtype=K.dtype)

    # R = I + sin(θ) K + (1 - cos(θ)) K²
    return I + jnp.sin(angle) * K + (1.0 - jnp.cos(angle)) * jnp.matmul(K, K)


def from_quaternion(quaternions: Array) -> Array:
    """
    Convert quaternions to rotation matrices.

    The input is normalized first, so configurations drifting off the unit
    sphere still yield proper rotations.

    Args:
        quaternions: (..., 4) array of quaternions in (w, x, y, z) format

    Returns:
        (..., 3, 3) array of rotation matrices
    """
    quaternions = quaternions / jnp.linalg.norm(quaternions, axis=-1, keepdims=True)

    # Unpack quaternion components - preserving batch dimensions
    w, x, y, z = jnp.moveaxis(quaternions, -1, 0)

    xx, yy, zz = x*x, y*y, z*z
    wx, wy, wz = w*x, w*y, w*z
    xy, xz, yz = x*y, x*z, y*z

    return jnp.stack([
        jnp.stack([1 - 2*(yy + zz), 2*(xy - wz), 2*(xz + wy)], axis=-1),
        jnp.stack([2*(xy + wz), 1 - 2*(xx + zz), 2*(yz - wx)], axis=-1),
        jnp.stack([2*(xz - wy), 2*(yz + wx), 1 - 2*(xx + yy)], axis=-1)
    ], axis=-2)
