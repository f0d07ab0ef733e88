"""
Branching rules for procedural arterial trees.
"""

import numpy as np
from typing import List

from arterial_tree.core.types import Direction2D
from .config import BranchingConfig


def count_children(remaining_depth: int, config: BranchingConfig) -> int:
    """
    Number of child branches spawned at the end of a segment.

    Parameters
    ----------
    remaining_depth : int
        Depth budget of the segment that was just emitted
    config : BranchingConfig
        Branching configuration

    Returns
    -------
    n : int
        0 for the last level, 2 while the depth budget exceeds
        ``config.bifurcation_depth``, otherwise 1
    """
    if remaining_depth <= 1:
        return 0
    return 2 if remaining_depth > config.bifurcation_depth else 1


def child_directions(
    direction: Direction2D,
    num_children: int,
    config: BranchingConfig,
) -> List[Direction2D]:
    """
    Rotate the parent direction by +angle for the first child and -angle
    for the second. ``Direction2D`` re-normalizes the result.
    """
    angles = [config.branch_angle, -config.branch_angle][:num_children]
    return [direction.rotated(angle) for angle in angles]


def jitter_offset(rng: np.random.Generator, amount: float) -> np.ndarray:
    """Uniform noise in [-amount, amount) for x then y."""
    return rng.uniform(-amount, amount, size=2)
