"""
Query and summary functions over a reconstructed tree.
"""

from typing import Dict, List, Optional
import numpy as np

from ..core.soup import SegmentSoup
from .topology import Topology
from .hierarchy import HierarchyMetrics


def get_leaf_segments(topology: Topology) -> List[int]:
    """
    Get all leaf (terminal) segments, i.e. segments with no children.

    Parameters
    ----------
    topology : Topology
        Reconstructed topology

    Returns
    -------
    segment_ids : List[int]
        Leaf segment indices in soup order
    """
    return [i for i in range(topology.num_segments) if not topology.children[i]]


def get_paths_from_root(
    topology: Topology,
    root: Optional[int] = None,
) -> List[List[int]]:
    """
    Get all root-to-leaf paths.

    Parameters
    ----------
    topology : Topology
        Reconstructed topology
    root : int, optional
        Start segment (default: ``topology.root``)

    Returns
    -------
    paths : List[List[int]]
        Paths as lists of segment indices, in depth-first order
    """
    if topology.is_empty():
        return []
    if root is None:
        root = topology.root

    paths = []
    stack = [(root, [root])]
    while stack:
        node, path = stack.pop()
        children = [c for c in topology.children[node] if c not in path]
        if not children:
            paths.append(path)
            continue
        for child in reversed(children):
            stack.append((child, path + [child]))

    return paths


def measure_segment_lengths(soup: SegmentSoup) -> Dict[str, float]:
    """
    Measure segment length statistics.

    Returns
    -------
    stats : dict
        Dictionary with keys: mean, std, min, max, total, count
    """
    lengths = [seg.length() for seg in soup]

    if not lengths:
        return {
            "mean": 0.0,
            "std": 0.0,
            "min": 0.0,
            "max": 0.0,
            "total": 0.0,
            "count": 0,
        }

    lengths_arr = np.array(lengths)

    return {
        "mean": float(np.mean(lengths_arr)),
        "std": float(np.std(lengths_arr)),
        "min": float(np.min(lengths_arr)),
        "max": float(np.max(lengths_arr)),
        "total": float(np.sum(lengths_arr)),
        "count": len(lengths),
    }


def compute_tree_stats(
    soup: SegmentSoup,
    topology: Topology,
    metrics: HierarchyMetrics,
) -> Dict:
    """
    Summarize a reconstructed tree.

    Returns
    -------
    stats : dict
        Segment/root/leaf counts, depth histogram, branching histogram and
        length statistics.
    """
    depth_histogram: Dict[int, int] = {}
    for d in metrics.depth.tolist():
        depth_histogram[d] = depth_histogram.get(d, 0) + 1

    branching_histogram: Dict[int, int] = {}
    for children in topology.children.values():
        k = len(children)
        branching_histogram[k] = branching_histogram.get(k, 0) + 1

    return {
        "num_segments": len(soup),
        "source": soup.source,
        "root": topology.root,
        "root_status": topology.root_status.value,
        "num_roots": len(topology.roots),
        "num_components": len(topology.components()),
        "num_leaves": len(get_leaf_segments(topology)) if not topology.is_empty() else 0,
        "num_ambiguous": len(topology.ambiguous),
        "num_unreachable": metrics.num_unreachable,
        "max_depth": int(metrics.depth.max()) if len(metrics.depth) else 0,
        "max_descendants": int(metrics.descendant_count.max()) if len(metrics.descendant_count) else 0,
        "depth_histogram": depth_histogram,
        "branching_histogram": branching_histogram,
        "lengths": measure_segment_lengths(soup),
    }
