"""Exceptions raised by jax_dynamics.

Size and index errors are caller bugs: they are raised at the call boundary,
before any workspace is touched, and are never retried or logged away.
"""


class DynamicsError(Exception):
    """Base class for every error raised by this package."""


class DimensionError(DynamicsError, ValueError):
    """An input vector or matrix does not have the size the model requires."""


class ModelIndexError(DynamicsError, IndexError):
    """A joint or frame index (or name) does not exist in the model."""


class PreconditionError(DynamicsError, RuntimeError):
    """A consumer read workspace entries that no producer has filled.

    Only raised while debug checks are enabled, see :mod:`jax_dynamics.config`.
    """
