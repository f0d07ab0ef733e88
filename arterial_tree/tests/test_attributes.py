"""
Tests for attribute mapping (color and thickness).
"""

import pytest
import numpy as np
from arterial_tree.core.types import Point2D, Segment
from arterial_tree.core.soup import SegmentSoup
from arterial_tree.analysis.topology import reconstruct_topology
from arterial_tree.analysis.hierarchy import analyze_hierarchy
from arterial_tree.visualization.attributes import (
    ColorMode,
    UnreachablePolicy,
    RenderConfig,
    map_attributes,
    segment_color,
)


def seg(x0, y0, x1, y1):
    return Segment(Point2D(x0, y0), Point2D(x1, y1))


@pytest.fixture
def trunk_soup():
    return SegmentSoup([
        seg(0, -0.2, 0, 0.3),
        seg(0, 0.3, 0.4, 0.6),
        seg(0, 0.3, -0.4, 0.6),
    ])


@pytest.fixture
def two_tree_soup():
    return SegmentSoup([
        seg(0, 0, 0, 0.5),
        seg(0, 0.5, 0.2, 0.8),
        seg(-0.5, -0.5, -0.6, -0.6),
    ])


def render(soup, **kwargs):
    metrics = analyze_hierarchy(reconstruct_topology(soup))
    return map_attributes(soup, metrics, RenderConfig(**kwargs))


def test_depth_gradient_colors(trunk_soup):
    data = render(trunk_soup, color_mode=ColorMode.DEPTH_GRADIENT)

    colors = data.segment_colors()
    np.testing.assert_allclose(colors[0], [1.0, 0.0, 0.0], atol=1e-6)
    np.testing.assert_allclose(colors[1], [0.5, 0.0, 0.5], atol=1e-6)
    np.testing.assert_allclose(colors[2], [0.5, 0.0, 0.5], atol=1e-6)


def test_descendant_gradient_colors(trunk_soup):
    data = render(trunk_soup, color_mode=ColorMode.DESCENDANT_GRADIENT)

    colors = data.segment_colors()
    # root has every descendant: red; leaves have none: blue
    np.testing.assert_allclose(colors[0], [1.0, 0.0, 0.0], atol=1e-6)
    np.testing.assert_allclose(colors[1], [0.0, 0.0, 1.0], atol=1e-6)


@pytest.mark.parametrize("mode,expected", [
    (ColorMode.PLAIN_WHITE, (1.0, 1.0, 1.0)),
    (ColorMode.MONOCHROME, (0.0, 1.0, 0.0)),
])
def test_flat_color_modes(trunk_soup, mode, expected):
    data = render(trunk_soup, color_mode=mode)

    np.testing.assert_allclose(data.colors, np.tile(expected, (6, 1)))


def test_descendant_formula():
    r, g, b = segment_color(ColorMode.DESCENDANT_GRADIENT, 0.0, 0.25)

    assert r == pytest.approx(0.5)
    assert g == 0.0
    assert b == pytest.approx(1.0 - 0.0625)


def test_buffer_layout(trunk_soup):
    data = render(trunk_soup)

    assert data.vertices.shape == (6, 2)
    assert data.colors.shape == (6, 3)
    assert data.thicknesses.shape == (3,)
    assert data.segment_indices.tolist() == [0, 1, 2]
    np.testing.assert_allclose(data.vertices[2], [0.0, 0.3], atol=1e-6)
    np.testing.assert_allclose(data.vertices[3], [0.4, 0.6], atol=1e-6)
    # both vertices of a segment share its color
    np.testing.assert_array_equal(data.colors[0::2], data.colors[1::2])


def test_thickness_off_uses_base_width(trunk_soup):
    data = render(trunk_soup)

    assert not data.thickness_mode
    np.testing.assert_allclose(data.thicknesses, [3.0, 3.0, 3.0])


def test_thickness_mode(trunk_soup):
    data = render(trunk_soup, thickness_mode=True)

    # 2 + normalized_descendants * 13
    np.testing.assert_allclose(data.thicknesses, [15.0, 2.0, 2.0])
    np.testing.assert_allclose(data.draw_widths(), [10.0, 2.0, 2.0])


def test_thickness_independent_of_color(trunk_soup):
    a = render(trunk_soup, thickness_mode=True, color_mode=ColorMode.PLAIN_WHITE)
    b = render(trunk_soup, thickness_mode=True, color_mode=ColorMode.DEPTH_GRADIENT)

    np.testing.assert_array_equal(a.thicknesses, b.thicknesses)


def test_empty_soup():
    data = render(SegmentSoup())

    assert data.is_empty()
    assert data.vertices.shape == (0, 2)
    assert data.colors.shape == (0, 3)


def test_unreachable_sentinel(two_tree_soup):
    data = render(two_tree_soup, color_mode=ColorMode.DEPTH_GRADIENT)

    np.testing.assert_allclose(data.segment_colors()[2], [0.5, 0.5, 0.5])


def test_unreachable_sentinel_only_in_gradient_modes(two_tree_soup):
    data = render(two_tree_soup, color_mode=ColorMode.MONOCHROME)

    np.testing.assert_allclose(data.segment_colors()[2], [0.0, 1.0, 0.0])


def test_unreachable_fold(two_tree_soup):
    data = render(
        two_tree_soup,
        color_mode=ColorMode.DEPTH_GRADIENT,
        unreachable_policy=UnreachablePolicy.FOLD,
    )

    np.testing.assert_allclose(data.segment_colors()[2], [1.0, 0.0, 0.0])


def test_unreachable_hide(two_tree_soup):
    data = render(two_tree_soup, unreachable_policy=UnreachablePolicy.HIDE)

    assert data.num_segments == 2
    assert data.segment_indices.tolist() == [0, 1]


def test_metrics_length_mismatch(trunk_soup):
    metrics = analyze_hierarchy(reconstruct_topology(trunk_soup))
    trunk_soup.append(seg(1, 1, 2, 2))

    with pytest.raises(ValueError, match="segments"):
        map_attributes(trunk_soup, metrics)


def test_color_mode_cycle():
    mode = ColorMode.PLAIN_WHITE
    seen = []
    for _ in range(4):
        seen.append(mode)
        mode = mode.cycle()

    assert mode == ColorMode.PLAIN_WHITE
    assert len(set(seen)) == 4


def test_color_mode_from_name():
    assert ColorMode.from_name("depth") == ColorMode.DEPTH_GRADIENT
    assert ColorMode.from_name("DESCENDANT_GRADIENT") == ColorMode.DESCENDANT_GRADIENT
    with pytest.raises(ValueError):
        ColorMode.from_name("rainbow")


def test_render_config_immutable_updates():
    config = RenderConfig()
    updated = config.with_color_mode(ColorMode.MONOCHROME).with_thickness(True)

    assert config.color_mode == ColorMode.DEPTH_GRADIENT
    assert not config.thickness_mode
    assert updated.color_mode == ColorMode.MONOCHROME
    assert updated.thickness_mode
    assert RenderConfig.from_dict(updated.to_dict()) == updated
