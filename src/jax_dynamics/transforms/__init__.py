"""
Spatial algebra for rigid-body kinematics and dynamics.

This module provides JIT-compilable implementations of:
- SO(3) rotations (so3 module)
- SE(3) placements and their action on motions, forces and inertias (se3 module)
- Spatial cross products and rigid-body inertias (spatial module)

All functions are pure, stateless, and operate on JAX arrays.
"""

from . import so3
from . import se3
from . import spatial

__all__ = [
    "so3",
    "se3",
    "spatial",
]
