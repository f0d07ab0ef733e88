import logging
import tempfile
from pathlib import Path

import pytest

import matplotlib
matplotlib.use("Agg")

from arterial_tree.core.types import Point2D, Segment
from arterial_tree.core.soup import SegmentSoup


def make_segment(x0, y0, x1, y1, r0=0.05, r1=0.02):
    return Segment(Point2D(x0, y0), Point2D(x1, y1), r0, r1)


@pytest.fixture(autouse=True)
def reset_package_loggers():
    """Drop handlers installed by setup_logging so they do not outlive a test."""
    yield
    for name in ("arterial_tree", "generators"):
        pkg_logger = logging.getLogger(name)
        pkg_logger.handlers.clear()
        pkg_logger.setLevel(logging.NOTSET)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def single_segment_soup():
    """One segment: the root and only leaf."""
    return SegmentSoup([make_segment(0, 0, 0, 1)], source="test")


@pytest.fixture
def y_soup():
    """Trunk with two branches starting at its end point."""
    return SegmentSoup([
        make_segment(0, 0, 0, 1),
        make_segment(0, 1, 1, 2),
        make_segment(0, 1, -1, 2),
    ], source="test")


@pytest.fixture
def chain_soup():
    """Three-segment chain, listed in order."""
    return SegmentSoup([
        make_segment(0, 0, 0, 1),
        make_segment(0, 1, 0, 2),
        make_segment(0, 2, 0, 3),
    ], source="test")


@pytest.fixture
def vtk_tree_file(temp_dir):
    """Small legacy VTK file: a Y with radii and one out-of-range line."""
    path = temp_dir / "tree.vtk"
    path.write_text(
        "# vtk DataFile Version 3.0\n"
        "arterial tree\n"
        "ASCII\n"
        "DATASET POLYDATA\n"
        "POINTS 4 float\n"
        "0 0 0  0 1 0\n"
        "1 2 0\n"
        "-1 2 0\n"
        "LINES 4 12\n"
        "2 0 1\n"
        "2 1 2\n"
        "2 1 3\n"
        "2 1 9\n"
        "POINT_DATA 4\n"
        "SCALARS radius float 1\n"
        "LOOKUP_TABLE default\n"
        "0.4 0.3 0.2 0.2\n"
    )
    return path
