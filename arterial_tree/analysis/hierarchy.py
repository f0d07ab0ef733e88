"""
Hierarchy metrics over a reconstructed topology: depth and descendant count.
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from .topology import Topology

logger = logging.getLogger(__name__)

UNREACHED = -1


@dataclass
class HierarchyMetrics:
    """
    Per-segment hierarchy metrics, all arrays of length n.

    ``depth`` is -1 for segments not reachable from the analysed root(s).
    ``max_depth`` and ``max_descendants`` are floored at 1 so the
    normalized arrays never divide by zero.
    """

    depth: np.ndarray
    descendant_count: np.ndarray
    normalized_depth: np.ndarray
    normalized_descendants: np.ndarray
    max_depth: int
    max_descendants: int
    sources: List[int]

    @property
    def num_segments(self) -> int:
        return len(self.depth)

    @property
    def reachable(self) -> np.ndarray:
        """Boolean mask of segments reached from the source root(s)."""
        return self.depth != UNREACHED

    @property
    def num_unreachable(self) -> int:
        return int(np.count_nonzero(self.depth == UNREACHED))

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "depth": self.depth.tolist(),
            "descendant_count": self.descendant_count.tolist(),
            "max_depth": self.max_depth,
            "max_descendants": self.max_descendants,
            "sources": list(self.sources),
        }


def compute_depths(topology: Topology, sources: Sequence[int]) -> np.ndarray:
    """
    Breadth-first depth from one or more source roots.

    Every segment is enqueued at most once; its depth is fixed on first
    visit. Sources are seeded in the given order.
    """
    n = topology.num_segments
    depth = np.full(n, UNREACHED, dtype=int)
    queue = deque()

    for source in sources:
        if depth[source] == UNREACHED:
            depth[source] = 0
            queue.append(source)

    while queue:
        current = queue.popleft()
        for child in topology.children[current]:
            if depth[child] == UNREACHED:
                depth[child] = depth[current] + 1
                queue.append(child)

    return depth


def compute_descendant_counts(topology: Topology, sources: Sequence[int]) -> np.ndarray:
    """
    Post-order subtree sizes, excluding the segment itself.

    ``count[i] = sum(1 + count[c] for c in children[i])``. Uses an explicit
    work stack so deep procedural trees cannot hit the recursion limit.
    Children that are already on the current path (cycles in malformed
    input) are not counted. Segments never visited keep 0.
    """
    n = topology.num_segments
    counts = np.zeros(n, dtype=int)
    # 0 = unvisited, 1 = on the current path, 2 = finished
    state = np.zeros(n, dtype=np.int8)

    for source in sources:
        if state[source]:
            continue
        stack = [source]
        while stack:
            node = stack[-1]
            if state[node] == 0:
                state[node] = 1
                for child in reversed(topology.children[node]):
                    if state[child] == 0:
                        stack.append(child)
            elif state[node] == 1:
                stack.pop()
                counts[node] = sum(
                    1 + counts[child]
                    for child in topology.children[node]
                    if state[child] == 2
                )
                state[node] = 2
            else:
                stack.pop()

    return counts


def analyze_hierarchy(topology: Topology, forest: bool = False) -> HierarchyMetrics:
    """
    Compute depth, descendant count and their normalized forms.

    Parameters
    ----------
    topology : Topology
        Output of ``reconstruct_topology``
    forest : bool
        If False (default) only the tree under ``topology.root`` is
        analysed and segments outside it keep depth -1. If True, every
        parentless root in soup order is a source and each segment is
        measured from the root of the component that claims it (see
        ``Topology.components``).

    Returns
    -------
    metrics : HierarchyMetrics
        Raw and normalized metrics. Normalized values lie in [0, 1];
        unreachable segments get 0.0.
    """
    if topology.is_empty():
        empty_int = np.zeros(0, dtype=int)
        empty_float = np.zeros(0, dtype=float)
        return HierarchyMetrics(
            depth=empty_int,
            descendant_count=empty_int.copy(),
            normalized_depth=empty_float,
            normalized_descendants=empty_float.copy(),
            max_depth=1,
            max_descendants=1,
            sources=[],
        )

    if forest:
        components = topology.components()
        sources = [c.root for c in components]
        depth = np.full(topology.num_segments, UNREACHED, dtype=int)
        # a segment shared by two roots takes its depth from the root that claims it
        for component in components:
            members = np.asarray(component.members, dtype=int)
            depth[members] = compute_depths(topology, [component.root])[members]
    else:
        sources = [topology.root]
        depth = compute_depths(topology, sources)

    counts = compute_descendant_counts(topology, sources)

    reachable = depth != UNREACHED
    max_depth = max(int(depth[reachable].max()), 1)
    max_descendants = max(int(counts.max()), 1)

    normalized_depth = np.where(reachable, depth / max_depth, 0.0)
    normalized_descendants = counts / max_descendants

    unreached = int(np.count_nonzero(~reachable))
    if unreached:
        logger.debug(f"{unreached} of {len(depth)} segments not reachable from {sources}")

    return HierarchyMetrics(
        depth=depth,
        descendant_count=counts,
        normalized_depth=normalized_depth.astype(float),
        normalized_descendants=normalized_descendants.astype(float),
        max_depth=max_depth,
        max_descendants=max_descendants,
        sources=sources,
    )
