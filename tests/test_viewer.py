import json
import logging

import pytest
import numpy as np

from arterial_tree.core.result import ErrorCode, LoadStatus, RootStatus
from arterial_tree.core.soup import SegmentSoup
from arterial_tree.visualization.attributes import ColorMode
from arterial_tree.pipeline import (
    TreeViewer,
    ViewerConfig,
    analyze_tree,
    build_render_data,
    load_tree,
    load_viewer_config,
)
from generators.arterial import generate_procedural_tree, placeholder_tree


def test_single_segment_pipeline(single_segment_soup):
    """A single segment is root and leaf: depth 0, no descendants."""
    analysis = analyze_tree(single_segment_soup)

    assert analysis.topology.root == 0
    assert analysis.topology.children[0] == []
    assert analysis.metrics.depth.tolist() == [0]
    assert analysis.metrics.descendant_count.tolist() == [0]


def test_y_pipeline_colors(y_soup):
    data = build_render_data(y_soup)

    colors = data.segment_colors()
    np.testing.assert_allclose(colors[0], [1.0, 0.0, 0.0], atol=1e-6)
    np.testing.assert_allclose(colors[1], [0.5, 0.0, 0.5], atol=1e-6)


def test_empty_soup_renders_nothing():
    data = build_render_data(SegmentSoup())

    assert data.is_empty()


def test_load_vtk_tree(vtk_tree_file):
    result = load_tree(vtk_tree_file)

    assert result.status == LoadStatus.SUCCESS
    assert len(result.soup) == 3
    assert result.metadata["skipped_connections"] == 1
    assert ErrorCode.CONNECTIONS_SKIPPED.value in result.error_codes
    assert len(result.warnings) == 1

    # normalized into the display range, radii scaled alongside
    assert result.soup[0].end.to_tuple() == pytest.approx((0.0, 0.0))
    assert result.soup[0].start_radius == pytest.approx(0.36)

    analysis = analyze_tree(result.soup)
    assert analysis.topology.children[0] == [1, 2]
    assert analysis.topology.root_status == RootStatus.UNIQUE


def test_missing_file_falls_back(temp_dir):
    result = load_tree(temp_dir / "missing.vtk")

    assert result.is_fallback()
    assert result.soup == generate_procedural_tree()
    assert result.error_codes == [ErrorCode.FILE_NOT_FOUND.value]
    assert len(result.errors) == 1


def test_missing_file_logs_warning(temp_dir, caplog):
    with caplog.at_level(logging.WARNING, logger="arterial_tree"):
        load_tree(temp_dir / "missing.vtk")

    assert any("procedural" in r.message for r in caplog.records)


def test_viewer_cycles_files(vtk_tree_file, temp_dir):
    missing = str(temp_dir / "missing.vtk")
    viewer = TreeViewer(ViewerConfig(tree_files=[str(vtk_tree_file), missing]))

    first = viewer.load_current()
    assert not first.is_fallback()
    assert len(viewer.soup) == 3

    second = viewer.next_tree()
    assert viewer.current_index == 1
    assert second.is_fallback()
    assert viewer.soup.source == "procedural"

    viewer.next_tree()
    assert viewer.current_index == 0
    assert len(viewer.soup) == 3

    viewer.previous_tree()
    assert viewer.current_index == 1


def test_viewer_without_files():
    viewer = TreeViewer()

    assert viewer.load_current() is None
    assert viewer.next_tree() is None
    assert viewer.soup.is_empty()


def test_placeholder_only_in_frame():
    viewer = TreeViewer()

    assert viewer.render_pass().is_empty()

    data = viewer.frame()
    assert data.num_segments == len(placeholder_tree())
    # the active soup stays empty
    assert viewer.soup.is_empty()


def test_placeholder_can_be_disabled():
    viewer = TreeViewer(ViewerConfig(placeholder_on_empty=False))

    assert viewer.frame().is_empty()


def test_first_frame_logged_once(y_soup, caplog):
    viewer = TreeViewer()
    viewer.set_soup(y_soup)

    with caplog.at_level(logging.INFO, logger="arterial_tree"):
        viewer.frame()
        viewer.frame()

    messages = [r.message for r in caplog.records if "Rendering tree" in r.message]
    assert len(messages) == 1


def test_viewer_modes(y_soup):
    viewer = TreeViewer()
    viewer.set_soup(y_soup)

    viewer.set_color_mode(ColorMode.PLAIN_WHITE)
    np.testing.assert_allclose(viewer.frame().colors, np.ones((6, 3)))

    assert viewer.cycle_color_mode() == ColorMode.MONOCHROME
    assert viewer.toggle_thickness_mode() is True
    data = viewer.frame()
    assert data.thickness_mode
    np.testing.assert_allclose(data.thicknesses, [15.0, 2.0, 2.0])


def test_replacing_soup_recomputes(y_soup, chain_soup):
    viewer = TreeViewer()
    viewer.set_soup(y_soup)
    viewer.frame()

    viewer.set_soup(chain_soup)
    analysis = viewer.analyze()

    assert analysis.metrics.depth.tolist() == [0, 1, 2]


def test_forest_mode_colors_lateral_groups():
    soup = generate_procedural_tree()

    single = TreeViewer()
    single.set_soup(soup)
    forest = TreeViewer(ViewerConfig(forest=True))
    forest.set_soup(soup)

    assert single.analyze().metrics.num_unreachable > 0
    assert forest.analyze().metrics.num_unreachable == 0


def test_viewer_config_file(temp_dir):
    config = ViewerConfig(tree_files=["a.vtk"], match_method="kdtree", forest=True)
    path = temp_dir / "viewer.json"
    path.write_text(json.dumps(config.to_dict()))

    loaded = load_viewer_config(path)

    assert loaded.tree_files == ["a.vtk"]
    assert loaded.match_method == "kdtree"
    assert loaded.forest
    assert loaded.render == config.render


def test_viewer_config_validation():
    with pytest.raises(ValueError):
        ViewerConfig(match_method="octree")
    with pytest.raises(ValueError):
        ViewerConfig(tolerance=-1.0)


def test_save_render(y_soup, temp_dir):
    from arterial_tree.visualization import save_render

    path = save_render(build_render_data(y_soup), temp_dir / "tree.png", title="y")

    assert path.exists()
    assert path.stat().st_size > 0
