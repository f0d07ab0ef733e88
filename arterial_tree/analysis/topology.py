"""
Topology reconstruction from endpoint coincidence.

A segment's parent is a segment whose end point lies within ``tolerance``
(Manhattan distance) of its start point. Nothing about the tree is stored
in the soup, so the whole structure is rebuilt from geometry on every
pass. Ties are always broken by soup order.

Scaling note: ``method="brute"`` tests every ordered pair and is O(n^2);
fine for a few thousand segments, but use ``"grid"`` or ``"kdtree"`` for
anything larger. All three methods return identical results.
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np
from scipy.spatial import cKDTree

from ..core.result import RootStatus
from ..core.soup import SegmentSoup
from ..spatial.grid_index import EndpointGridIndex, manhattan_distances

logger = logging.getLogger(__name__)

EPSILON = 1e-3
MATCH_METHODS = ("brute", "grid", "kdtree")


@dataclass
class TreeComponent:
    """One connected tree: its root and every segment reachable from it."""

    root: int
    members: List[int]

    def __len__(self) -> int:
        return len(self.members)


@dataclass
class Topology:
    """
    Reconstructed parent/child structure over a segment soup.

    ``children`` has a key for every segment index, each list in soup
    order. ``parents[i]`` is the first parent candidate in soup order, or
    None for parentless segments. ``root`` is None only for an empty soup.
    """

    root: Optional[int]
    children: Dict[int, List[int]]
    parents: List[Optional[int]]
    parent_candidates: List[List[int]]
    roots: List[int]
    root_status: RootStatus
    tolerance: float = EPSILON
    method: str = "grid"

    @property
    def num_segments(self) -> int:
        return len(self.parents)

    @property
    def ambiguous(self) -> List[int]:
        """Segments whose start coincides with more than one end point."""
        return [i for i, cands in enumerate(self.parent_candidates) if len(cands) > 1]

    def is_empty(self) -> bool:
        return self.root is None

    def reachable_from(self, root: int) -> List[int]:
        """Segments reachable from ``root`` in breadth-first order."""
        seen = {root}
        order = []
        queue = deque([root])
        while queue:
            current = queue.popleft()
            order.append(current)
            for child in self.children.get(current, ()):
                if child not in seen:
                    seen.add(child)
                    queue.append(child)
        return order

    def components(self) -> List[TreeComponent]:
        """
        Split the soup into trees, one per parentless root.

        Roots are taken in soup order; a segment reachable from more than
        one root belongs to the first. When no segment is parentless the
        whole structure is reported as a single component rooted at 0.
        """
        if self.is_empty():
            return []

        roots = self.roots if self.roots else [self.root]
        claimed = set()
        components = []
        for root in roots:
            members = [i for i in self.reachable_from(root) if i not in claimed]
            claimed.update(members)
            components.append(TreeComponent(root=root, members=members))
        return components

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "root": self.root,
            "root_status": self.root_status.value,
            "roots": list(self.roots),
            "children": {str(k): list(v) for k, v in self.children.items()},
            "parents": list(self.parents),
            "ambiguous": self.ambiguous,
            "tolerance": self.tolerance,
            "method": self.method,
        }


def _match_brute(starts: np.ndarray, ends: np.ndarray, tolerance: float) -> List[List[int]]:
    candidates = []
    for i in range(len(starts)):
        dist = manhattan_distances(ends, starts[i])
        hits = np.nonzero(dist < tolerance)[0]
        candidates.append([int(j) for j in hits if j != i])
    return candidates


def _match_grid(starts: np.ndarray, ends: np.ndarray, tolerance: float) -> List[List[int]]:
    index = EndpointGridIndex(ends, cell_size=tolerance)
    return [
        [j for j in index.query(starts[i], tolerance) if j != i]
        for i in range(len(starts))
    ]


def _match_kdtree(starts: np.ndarray, ends: np.ndarray, tolerance: float) -> List[List[int]]:
    tree = cKDTree(ends)
    # query_ball_point is inclusive of the radius, the coincidence test is not
    nearby = tree.query_ball_point(starts, r=tolerance, p=1)
    candidates = []
    for i, hits in enumerate(nearby):
        if not hits:
            candidates.append([])
            continue
        hits = np.array(sorted(hits))
        dist = manhattan_distances(ends[hits], starts[i])
        candidates.append([int(j) for j in hits[dist < tolerance] if j != i])
    return candidates


_MATCHERS = {
    "brute": _match_brute,
    "grid": _match_grid,
    "kdtree": _match_kdtree,
}


def find_parent_candidates(
    soup: SegmentSoup,
    tolerance: float = EPSILON,
    method: str = "grid",
) -> List[List[int]]:
    """
    For every segment i, list the segments j != i whose end point lies
    strictly within ``tolerance`` (L1) of the start point of i.

    Parameters
    ----------
    soup : SegmentSoup
        Segments to match
    tolerance : float
        Coincidence tolerance
    method : {"brute", "grid", "kdtree"}
        Matching strategy

    Returns
    -------
    candidates : List[List[int]]
        Candidate parents per segment, ascending (soup order)
    """
    if method not in _MATCHERS:
        raise ValueError(f"method must be one of {MATCH_METHODS}, got {method!r}")
    if tolerance <= 0:
        raise ValueError(f"tolerance must be positive, got {tolerance}")
    if len(soup) == 0:
        return []

    return _MATCHERS[method](soup.starts_array(), soup.ends_array(), tolerance)


def reconstruct_topology(
    soup: SegmentSoup,
    tolerance: float = EPSILON,
    method: str = "grid",
) -> Topology:
    """
    Infer root and children adjacency for a segment soup.

    The root is the first segment in soup order whose start point touches
    no other segment's end point. If every segment has a parent, index 0
    is used and the result is tagged ``RootStatus.FALLBACK``. An empty
    soup yields an empty topology with ``root=None``.

    Parameters
    ----------
    soup : SegmentSoup
        Segments to reconstruct
    tolerance : float
        Coincidence tolerance (Manhattan distance, exclusive)
    method : {"brute", "grid", "kdtree"}
        Matching strategy

    Returns
    -------
    topology : Topology
        Root, children and per-segment parent information
    """
    candidates = find_parent_candidates(soup, tolerance=tolerance, method=method)
    n = len(candidates)

    if n == 0:
        return Topology(
            root=None,
            children={},
            parents=[],
            parent_candidates=[],
            roots=[],
            root_status=RootStatus.EMPTY,
            tolerance=tolerance,
            method=method,
        )

    parents = [cands[0] if cands else None for cands in candidates]
    roots = [i for i, parent in enumerate(parents) if parent is None]

    children: Dict[int, List[int]] = {i: [] for i in range(n)}
    for j, cands in enumerate(candidates):
        for i in cands:
            children[i].append(j)

    if len(roots) == 1:
        root, status = roots[0], RootStatus.UNIQUE
    elif roots:
        root, status = roots[0], RootStatus.MULTIPLE
        logger.debug(f"{len(roots)} parentless segments, using segment {root} as root")
    else:
        root, status = 0, RootStatus.FALLBACK
        logger.info("Every segment has a parent, falling back to segment 0 as root")

    topology = Topology(
        root=root,
        children=children,
        parents=parents,
        parent_candidates=candidates,
        roots=roots,
        root_status=status,
        tolerance=tolerance,
        method=method,
    )

    ambiguous = topology.ambiguous
    if ambiguous:
        logger.debug(
            f"{len(ambiguous)} segments have several parent candidates, "
            f"first in soup order used"
        )

    return topology
