"""
Adapters for exporting reconstructed trees to other libraries.
"""

from .networkx_adapter import to_networkx_digraph, write_graphml

__all__ = [
    "to_networkx_digraph",
    "write_graphml",
]
