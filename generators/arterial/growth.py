"""
Procedural arterial tree growth.

Branches are grown depth-first with an explicit work stack. Segments are
emitted in exactly the order a recursive "emit, then grow first child,
then second child" formulation would produce, and random draws happen in
that same order, so a given seed always yields the same soup.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from arterial_tree.core.types import Point2D, Direction2D, Segment
from arterial_tree.core.soup import SegmentSoup
from .config import ProceduralTreeConfig, BranchSeed
from .rules import count_children, child_directions, jitter_offset

logger = logging.getLogger(__name__)


@dataclass
class BranchTip:
    """Pending branch on the work stack."""

    start: Point2D
    direction: Direction2D
    length: float
    radius: float
    remaining_depth: int


def grow_branch(
    seed: BranchSeed,
    config: ProceduralTreeConfig,
    rng: np.random.Generator,
) -> List[Segment]:
    """
    Grow one branch group from a seed.

    Parameters
    ----------
    seed : BranchSeed
        Start point, direction, length, radius and depth budget
    config : ProceduralTreeConfig
        Generation configuration
    rng : np.random.Generator
        Random number generator shared across all seeds of one tree

    Returns
    -------
    segments : List[Segment]
        Segments in pre-order
    """
    branching = config.branching
    segments = []

    stack = [BranchTip(
        start=Point2D.from_tuple(seed.start),
        direction=Direction2D.from_tuple(seed.direction),
        length=seed.length,
        radius=seed.radius,
        remaining_depth=seed.max_depth,
    )]

    while stack:
        tip = stack.pop()

        if tip.remaining_depth <= 0 or tip.length < branching.min_length:
            continue

        jx, jy = jitter_offset(rng, config.jitter)
        end = Point2D(
            tip.start.x + tip.direction.dx * tip.length + jx,
            tip.start.y + tip.direction.dy * tip.length + jy,
        )

        segments.append(Segment(
            start=tip.start,
            end=end,
            start_radius=tip.radius,
            end_radius=tip.radius * branching.taper_ratio,
        ))

        n_children = count_children(tip.remaining_depth, branching)
        directions = child_directions(tip.direction, n_children, branching)

        # reversed so the first child is popped (and grown) first
        for direction in reversed(directions):
            stack.append(BranchTip(
                start=end,
                direction=direction,
                length=tip.length * branching.length_ratio,
                radius=tip.radius * branching.radius_ratio,
                remaining_depth=tip.remaining_depth - 1,
            ))

    return segments


def generate_procedural_tree(
    config: Optional[ProceduralTreeConfig] = None,
) -> SegmentSoup:
    """
    Generate a full arterial tree soup from all configured seeds.

    Parameters
    ----------
    config : ProceduralTreeConfig, optional
        Configuration for generation. If None, uses defaults (seed 42).

    Returns
    -------
    soup : SegmentSoup
        Segments of every seed, in seed order
    """
    if config is None:
        config = ProceduralTreeConfig()

    rng = np.random.default_rng(config.random_seed)
    soup = SegmentSoup(source="procedural")

    for seed in config.seeds:
        segments = grow_branch(seed, config, rng)
        logger.debug(f"Seed {seed.name or '<unnamed>'}: {len(segments)} segments")
        soup.extend(segments)

    logger.info(f"Procedural tree created with {len(soup)} segments")
    return soup
