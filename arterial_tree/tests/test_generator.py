"""
Tests for the procedural arterial tree generator.
"""

import pytest
import numpy as np
from arterial_tree.core.types import Point2D, Direction2D, Segment
from generators.arterial import (
    ProceduralTreeConfig,
    BranchingConfig,
    BranchSeed,
    default_arterial_seeds,
    generate_procedural_tree,
    placeholder_tree,
    get_preset,
    list_presets,
)
from generators.arterial.rules import count_children, child_directions


def recursive_reference(config):
    """Straightforward recursive generator used as an oracle."""
    rng = np.random.default_rng(config.random_seed)
    branching = config.branching
    out = []

    def grow(start, direction, length, radius, depth):
        if depth <= 0 or length < branching.min_length:
            return
        jx, jy = rng.uniform(-config.jitter, config.jitter, size=2)
        end = Point2D(start.x + direction.dx * length + jx, start.y + direction.dy * length + jy)
        out.append(Segment(start, end, radius, radius * branching.taper_ratio))
        n = count_children(depth, branching)
        if n >= 1:
            grow(end, direction.rotated(branching.branch_angle), length * branching.length_ratio,
                 radius * branching.radius_ratio, depth - 1)
        if n >= 2:
            grow(end, direction.rotated(-branching.branch_angle), length * branching.length_ratio,
                 radius * branching.radius_ratio, depth - 1)

    for seed in config.seeds:
        grow(Point2D.from_tuple(seed.start), Direction2D.from_tuple(seed.direction),
             seed.length, seed.radius, seed.max_depth)
    return out


def test_deterministic_with_default_seed():
    soup1 = generate_procedural_tree()
    soup2 = generate_procedural_tree()

    assert soup1 == soup2
    assert soup1.source == "procedural"


def test_different_seed_changes_tree():
    soup1 = generate_procedural_tree()
    soup2 = generate_procedural_tree(ProceduralTreeConfig(random_seed=7))

    assert len(soup1) == len(soup2)
    assert soup1 != soup2


@pytest.mark.parametrize("preset", list_presets())
def test_matches_recursive_reference(preset):
    config = get_preset(preset)

    assert generate_procedural_tree(config).segments == recursive_reference(config)


def test_default_tree_segment_counts():
    """Trunk 31, each basal group 7, each middle group 3."""
    soup = generate_procedural_tree()

    assert len(soup) == 31 + 2 * 7 + 2 * 3


def test_trunk_is_first_segment():
    soup = generate_procedural_tree()

    assert soup[0].start == Point2D(0.0, -0.8)
    assert soup[0].start_radius == pytest.approx(0.08)
    assert soup[0].end_radius == pytest.approx(0.08 * 0.7)


def test_children_start_at_parent_end():
    soup = generate_procedural_tree(get_preset("trunk_only"))

    # pre-order: segment 1 is the first child of segment 0
    assert soup[1].start == soup[0].end


def test_jitter_bounds():
    config = ProceduralTreeConfig(seeds=default_arterial_seeds()[:1])
    soup = generate_procedural_tree(config)
    seg = soup[0]

    assert abs(seg.end.x - 0.0) <= config.jitter
    assert abs(seg.end.y - (-0.8 + 0.6)) <= config.jitter


def test_zero_jitter_is_exact():
    config = ProceduralTreeConfig(seeds=default_arterial_seeds()[:1], jitter=0.0)
    soup = generate_procedural_tree(config)

    assert soup[0].end.x == pytest.approx(0.0)
    assert soup[0].end.y == pytest.approx(-0.2)


def test_count_children_rule():
    branching = BranchingConfig()

    assert count_children(6, branching) == 2
    assert count_children(4, branching) == 2
    assert count_children(3, branching) == 1
    assert count_children(2, branching) == 1
    assert count_children(1, branching) == 0


def test_child_directions_rotate_both_ways():
    up = Direction2D(0.0, 1.0)
    left, right = child_directions(up, 2, BranchingConfig(branch_angle=0.5))

    assert left.dx == pytest.approx(-np.sin(0.5))
    assert right.dx == pytest.approx(np.sin(0.5))
    assert left.dy == pytest.approx(np.cos(0.5))


def test_min_length_stops_growth():
    config = ProceduralTreeConfig(
        seeds=[BranchSeed((0.0, 0.0), (1.0, 0.0), 0.005, 0.05, 4)],
    )

    assert len(generate_procedural_tree(config)) == 0


def test_config_roundtrip():
    config = ProceduralTreeConfig(random_seed=3, jitter=0.01)
    restored = ProceduralTreeConfig.from_dict(config.to_dict())

    assert restored.random_seed == 3
    assert restored.jitter == 0.01
    assert [s.name for s in restored.seeds] == [s.name for s in config.seeds]
    assert generate_procedural_tree(restored) == generate_procedural_tree(config)


def test_config_rejects_unknown_schema():
    with pytest.raises(ValueError, match="schema"):
        ProceduralTreeConfig.from_dict({"schema_version": "9.9"})


def test_unknown_preset():
    with pytest.raises(ValueError, match="Unknown preset"):
        get_preset("liver")


def test_placeholder_tree():
    soup = placeholder_tree()

    assert len(soup) == 7
    assert soup.source == "placeholder"
    assert soup[1].start == soup[0].end
