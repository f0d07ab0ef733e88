"""
Procedural arterial tree generator.

Synthesizes a 2D segment soup by recursive stochastic branching from a
fixed seed, so every run yields the same tree. Used when no geometry file
is available.
"""

from .config import ProceduralTreeConfig, BranchingConfig, BranchSeed, default_arterial_seeds
from .growth import generate_procedural_tree, grow_branch
from .presets import placeholder_tree, get_preset, list_presets

__all__ = [
    "ProceduralTreeConfig",
    "BranchingConfig",
    "BranchSeed",
    "default_arterial_seeds",
    "generate_procedural_tree",
    "grow_branch",
    "placeholder_tree",
    "get_preset",
    "list_presets",
]
