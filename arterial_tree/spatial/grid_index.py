"""
Uniform grid-based spatial hash for fast endpoint coincidence queries.
"""

from collections import defaultdict
from typing import Dict, List, Tuple
import numpy as np


def manhattan_distances(points: np.ndarray, point: np.ndarray) -> np.ndarray:
    """L1 distance from ``point`` to every row of ``points``."""
    return np.abs(points[:, 0] - point[0]) + np.abs(points[:, 1] - point[1])


class EndpointGridIndex:
    """
    Uniform 2D grid over a set of points.

    Each cell stores the indices of the points that fall in it. With the
    cell size equal to the query tolerance, a point within tolerance of
    the query lies in the query's cell or one of its 8 neighbours, which
    turns the all-pairs coincidence scan into a near-linear one.
    """

    def __init__(self, points: np.ndarray, cell_size: float = 0.001):
        """
        Initialize spatial index.

        Parameters
        ----------
        points : (n, 2) array
            Points to index; row position is the returned index
        cell_size : float
            Size of grid cells. Should be about the query tolerance.
        """
        if cell_size <= 0:
            raise ValueError(f"cell_size must be positive, got {cell_size}")
        self.points = np.asarray(points, dtype=float).reshape(-1, 2)
        self.cell_size = cell_size
        self.grid: Dict[Tuple[int, int], List[int]] = defaultdict(list)

        self._build_index()

    def _get_cell_coords(self, point: np.ndarray) -> Tuple[int, int]:
        """Convert world coordinates to grid cell coordinates."""
        return (
            int(np.floor(point[0] / self.cell_size)),
            int(np.floor(point[1] / self.cell_size)),
        )

    def _build_index(self) -> None:
        """Build spatial index from points."""
        self.grid.clear()

        for idx, point in enumerate(self.points):
            self.grid[self._get_cell_coords(point)].append(idx)

    def query(self, point: np.ndarray, radius: float) -> List[int]:
        """
        Indices of indexed points strictly closer than ``radius`` (L1).

        Parameters
        ----------
        point : (2,) array
            Query point
        radius : float
            Exclusive search radius

        Returns
        -------
        indices : List[int]
            Matching indices in ascending order
        """
        cell_radius = int(np.ceil(radius / self.cell_size))
        center_cell = self._get_cell_coords(point)

        candidates = []
        for di in range(-cell_radius, cell_radius + 1):
            for dj in range(-cell_radius, cell_radius + 1):
                cell = (center_cell[0] + di, center_cell[1] + dj)
                candidates.extend(self.grid.get(cell, ()))

        if not candidates:
            return []

        candidates = np.array(sorted(candidates))
        dist = manhattan_distances(self.points[candidates], point)
        return [int(i) for i in candidates[dist < radius]]
