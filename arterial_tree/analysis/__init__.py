"""Topology reconstruction and hierarchy analysis for segment soups."""

from .topology import (
    EPSILON,
    MATCH_METHODS,
    Topology,
    TreeComponent,
    find_parent_candidates,
    reconstruct_topology,
)
from .hierarchy import (
    UNREACHED,
    HierarchyMetrics,
    compute_depths,
    compute_descendant_counts,
    analyze_hierarchy,
)
from .structure import (
    get_leaf_segments,
    get_paths_from_root,
    measure_segment_lengths,
    compute_tree_stats,
)

__all__ = [
    "EPSILON",
    "MATCH_METHODS",
    "Topology",
    "TreeComponent",
    "find_parent_candidates",
    "reconstruct_topology",
    "UNREACHED",
    "HierarchyMetrics",
    "compute_depths",
    "compute_descendant_counts",
    "analyze_hierarchy",
    "get_leaf_segments",
    "get_paths_from_root",
    "measure_segment_lengths",
    "compute_tree_stats",
]
