"""Named presets for procedural trees, plus the fixed placeholder tree.

The placeholder is what the viewer draws when the active soup is empty.
"""

from typing import Callable, Dict, List

from arterial_tree.core.types import Point2D, Segment
from arterial_tree.core.soup import SegmentSoup
from .config import ProceduralTreeConfig, BranchSeed, default_arterial_seeds


def placeholder_tree() -> SegmentSoup:
    """
    Small hand-built test tree: a trunk, two forked arms and two basal twigs.
    """
    def seg(x0, y0, x1, y1, r0, r1):
        return Segment(Point2D(x0, y0), Point2D(x1, y1), r0, r1)

    return SegmentSoup([
        seg(0.0, -0.8, 0.0, 0.0, 0.08, 0.06),
        seg(0.0, 0.0, 0.4, 0.3, 0.06, 0.03),
        seg(0.4, 0.3, 0.6, 0.5, 0.03, 0.01),
        seg(0.0, 0.0, -0.4, 0.2, 0.06, 0.03),
        seg(-0.4, 0.2, -0.5, 0.4, 0.03, 0.01),
        seg(0.0, -0.4, 0.2, -0.7, 0.05, 0.02),
        seg(0.0, -0.4, -0.2, -0.7, 0.05, 0.02),
    ], source="placeholder")


def arterial_default() -> ProceduralTreeConfig:
    """Trunk with basal and middle lateral branch groups, seed 42."""
    return ProceduralTreeConfig()


def trunk_only() -> ProceduralTreeConfig:
    """
    Just the trunk seed. Every segment is reachable from the root, which
    makes it the preset of choice for hierarchy checks.
    """
    return ProceduralTreeConfig(seeds=default_arterial_seeds()[:1])


def dense_trunk() -> ProceduralTreeConfig:
    """Deeper trunk (depth 9) for stress-testing reconstruction."""
    return ProceduralTreeConfig(
        seeds=[BranchSeed((0.0, -0.9), (0.0, 1.0), 0.55, 0.08, 9, name="trunk")],
    )


PRESETS: Dict[str, Callable[[], ProceduralTreeConfig]] = {
    "arterial_default": arterial_default,
    "trunk_only": trunk_only,
    "dense_trunk": dense_trunk,
}


def list_presets() -> List[str]:
    """Names of available presets."""
    return list(PRESETS.keys())


def get_preset(name: str) -> ProceduralTreeConfig:
    """
    Get a fresh preset configuration by name.

    Raises
    ------
    ValueError
        If the preset name is unknown
    """
    if name not in PRESETS:
        raise ValueError(f"Unknown preset {name!r}. Available: {list_presets()}")
    return PRESETS[name]()
