"""
Adapter for converting a reconstructed tree into a NetworkX graph.

This enables graph algorithms and GraphML export on top of the
reconstructed parent/child structure.
"""

import networkx as nx
from pathlib import Path
from typing import Optional, Union

from ..core.soup import SegmentSoup
from ..analysis.topology import Topology
from ..analysis.hierarchy import HierarchyMetrics


def to_networkx_digraph(
    soup: SegmentSoup,
    topology: Topology,
    metrics: Optional[HierarchyMetrics] = None,
) -> nx.DiGraph:
    """
    Convert a reconstructed tree to a directed NetworkX graph.

    Nodes are segment indices; edges point from parent to child segment.

    The resulting graph has node attributes:
    - 'start': [x, y] start point
    - 'end': [x, y] end point
    - 'start_radius', 'end_radius': float radii
    - 'length': float segment length
    - 'depth', 'descendants': int metrics (only if ``metrics`` given)

    Graph attributes: 'root', 'root_status', 'source'.

    Parameters
    ----------
    soup : SegmentSoup
        Segment soup the topology was built from
    topology : Topology
        Reconstructed topology
    metrics : HierarchyMetrics, optional
        Metrics to attach to the nodes

    Returns
    -------
    G : nx.DiGraph
        Directed graph representation
    """
    G = nx.DiGraph(
        root=topology.root if topology.root is not None else -1,
        root_status=topology.root_status.value,
        source=soup.source,
    )

    for idx, seg in enumerate(soup):
        attrs = dict(
            start=[seg.start.x, seg.start.y],
            end=[seg.end.x, seg.end.y],
            start_radius=seg.start_radius,
            end_radius=seg.end_radius,
            length=seg.length(),
        )
        if metrics is not None:
            attrs["depth"] = int(metrics.depth[idx])
            attrs["descendants"] = int(metrics.descendant_count[idx])
        G.add_node(idx, **attrs)

    for parent, children in topology.children.items():
        for child in children:
            G.add_edge(parent, child)

    return G


def write_graphml(G: nx.DiGraph, path: Union[str, Path]) -> Path:
    """
    Write a tree graph to GraphML.

    List-valued attributes are flattened to ``<name>_x``/``<name>_y``
    scalars since GraphML only stores scalar values.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    H = G.copy()
    for _, data in H.nodes(data=True):
        for key in ("start", "end"):
            if key in data:
                x, y = data.pop(key)
                data[f"{key}_x"] = float(x)
                data[f"{key}_y"] = float(y)

    nx.write_graphml(H, str(path))
    return path
