"""Runtime configuration for jax_dynamics.

Debug checks turn silent staleness into errors: when enabled, every consumer
of :class:`~jax_dynamics.core.data.Data` verifies that the producer it
depends on ran since the last configuration change and raises
:class:`~jax_dynamics.errors.PreconditionError` otherwise. They are off by
default and can be switched on with the ``JAX_DYNAMICS_DEBUG_CHECKS``
environment variable.
"""

import contextlib
import logging
import os
from typing import Iterator

logger = logging.getLogger(__name__)

DEBUG_CHECKS_ENV = "JAX_DYNAMICS_DEBUG_CHECKS"
_TRUTHY = {"1", "true", "yes", "on"}

_debug_checks = os.environ.get(DEBUG_CHECKS_ENV, "").strip().lower() in _TRUTHY


def debug_checks_enabled() -> bool:
    return _debug_checks


def set_debug_checks(enabled: bool) -> None:
    """Enable or disable workspace staleness checks globally."""
    global _debug_checks
    _debug_checks = bool(enabled)
    logger.debug("Debug checks %s", "enabled" if _debug_checks else "disabled")


@contextlib.contextmanager
def debug_checks(enabled: bool = True) -> Iterator[None]:
    """Temporarily set debug checks, restoring the previous value on exit."""
    previous = _debug_checks
    set_debug_checks(enabled)
    try:
        yield
    finally:
        set_debug_checks(previous)
