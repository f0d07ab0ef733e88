"""
Arterial Tree Viewer - topology reconstruction and hierarchy coloring for 2D vascular trees

Trees arrive as a "segment soup": 2D line segments with no parent/child
pointers, read from a VTK file or synthesized procedurally. This package
rebuilds the tree from endpoint coincidence, measures every segment's
depth and subtree size, and maps those metrics to colors and line widths.

Key Features:
- Coincidence-based topology reconstruction (brute force, grid hash or KD-tree)
- Breadth-first depth and iterative descendant counts
- Four color modes and descendant-driven thickness
- Deterministic procedural fallback tree (see the ``generators`` package)

Example Usage:
    from arterial_tree import reconstruct_topology, analyze_hierarchy, map_attributes
    from arterial_tree.visualization import RenderConfig, ColorMode
    from generators.arterial import generate_procedural_tree

    soup = generate_procedural_tree()
    topology = reconstruct_topology(soup)
    metrics = analyze_hierarchy(topology)
    data = map_attributes(soup, metrics, RenderConfig(color_mode=ColorMode.DEPTH_GRADIENT))

    # or let the viewer own the active tree:
    from arterial_tree.pipeline import TreeViewer, ViewerConfig
    viewer = TreeViewer(ViewerConfig(tree_files=["data/tree.vtk"]))
    viewer.load_current()
    data = viewer.frame()
"""

__version__ = "0.1.0"

from .core.types import Point2D, Direction2D, Segment
from .core.soup import SegmentSoup
from .core.result import (
    ArterialTreeError,
    GeometryLoadError,
    RootStatus,
    LoadStatus,
    LoadResult,
)

from .analysis.topology import EPSILON, Topology, TreeComponent, reconstruct_topology
from .analysis.hierarchy import HierarchyMetrics, analyze_hierarchy
from .analysis.structure import (
    get_leaf_segments,
    get_paths_from_root,
    measure_segment_lengths,
    compute_tree_stats,
)

from .visualization.attributes import (
    ColorMode,
    UnreachablePolicy,
    RenderConfig,
    RenderData,
    map_attributes,
)

from .io.serialize import save_json, load_json
from .io.vtk_loader import load_vtk_soup

__all__ = [
    "Point2D",
    "Direction2D",
    "Segment",
    "SegmentSoup",
    "ArterialTreeError",
    "GeometryLoadError",
    "RootStatus",
    "LoadStatus",
    "LoadResult",
    "EPSILON",
    "Topology",
    "TreeComponent",
    "reconstruct_topology",
    "HierarchyMetrics",
    "analyze_hierarchy",
    "get_leaf_segments",
    "get_paths_from_root",
    "measure_segment_lengths",
    "compute_tree_stats",
    "ColorMode",
    "UnreachablePolicy",
    "RenderConfig",
    "RenderData",
    "map_attributes",
    "save_json",
    "load_json",
    "load_vtk_soup",
]
