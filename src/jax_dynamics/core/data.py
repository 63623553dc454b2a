"""Mutable per-model workspace written by the algorithms.

A ``Data`` is sized once from a :class:`~jax_dynamics.core.model.Model` and
then overwritten by each algorithm call. Entries are JAX arrays that are
replaced, not mutated, so a ``Data`` may also be created and filled inside a
function traced by ``jax.jit`` or ``jax.jvp``.

Producers stamp the stages they completed; a new configuration wipes every
stamp. Consumers declare what they read through :meth:`Data.require`, which
only raises when debug checks are enabled.
"""

import enum
import logging
from typing import List, Set

import jax
import jax.numpy as jnp

from jax_dynamics import config
from jax_dynamics.core.model import Model
from jax_dynamics.errors import PreconditionError

Array = jax.Array

logger = logging.getLogger(__name__)


class Stage(enum.Enum):
    POSITION = "position"
    VELOCITY = "velocity"
    ACCELERATION = "acceleration"
    FRAMES = "frames"
    JACOBIANS = "jacobians"
    JACOBIANS_TIME_VARIATION = "jacobians_time_variation"


class Data:
    """Workspace buffers, indexed parallel to the model joints and frames.

    Attributes:
        oMi: World placement of each joint frame.
        liMi: Placement of each joint frame in its parent joint frame.
        v: Spatial velocity of each joint, in the joint frame.
        a: Spatial acceleration of each joint, in the joint frame.
        a_gf: Acceleration including the gravity field (RNEA only).
        ov: Spatial velocity of each joint, in world coordinates.
        f: Spatial force accumulated at each joint, in the joint frame.
        oMf: World placement of each frame.
        J: (6, nv) world Jacobian columns of every joint.
        dJ: (6, nv) time variation of ``J``.
        tau: (nv,) generalized forces from the last RNEA call.
        nle: (nv,) non-linear effects.
        g: (nv,) generalized gravity.
        M: (nv, nv) joint-space inertia matrix.
    """

    def __init__(self, model: Model) -> None:
        njoints, nv = model.njoints, model.nv
        identity = jnp.eye(4)
        zero_motion = jnp.zeros(6)

        self.oMi: List[Array] = [identity] * njoints
        self.liMi: List[Array] = [identity] * njoints
        self.v: List[Array] = [zero_motion] * njoints
        self.a: List[Array] = [zero_motion] * njoints
        self.a_gf: List[Array] = [zero_motion] * njoints
        self.ov: List[Array] = [zero_motion] * njoints
        self.f: List[Array] = [zero_motion] * njoints
        self.oMf: List[Array] = [identity] * model.nframes

        self.J = jnp.zeros((6, nv))
        self.dJ = jnp.zeros((6, nv))
        self.tau = jnp.zeros(nv)
        self.nle = jnp.zeros(nv)
        self.g = jnp.zeros(nv)
        self.M = jnp.zeros((nv, nv))

        self._stages: Set[Stage] = set()
        logger.debug("Allocated data for %d joints, %d frames, nv=%d", njoints, model.nframes, nv)

    def invalidate(self) -> None:
        """Forget every stage, as happens whenever a new configuration is set."""
        self._stages.clear()

    def mark(self, *stages: Stage) -> None:
        self._stages.update(stages)

    def has(self, stage: Stage) -> bool:
        return stage in self._stages

    def require(self, stage: Stage, caller: str) -> None:
        """Check that ``stage`` was produced, when debug checks are enabled."""
        if config.debug_checks_enabled() and stage not in self._stages:
            raise PreconditionError(
                f"{caller} reads {stage.value} data that is stale or was never computed"
            )
