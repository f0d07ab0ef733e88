"""Spatial indexing for endpoint coincidence queries."""

from .grid_index import EndpointGridIndex, manhattan_distances

__all__ = ["EndpointGridIndex", "manhattan_distances"]
