"""
Segment soup: an ordered sequence of segments with no stored topology.
"""

import logging
from typing import Iterator, List, Optional, Sequence, Tuple
import numpy as np

from .types import Point2D, Segment

logger = logging.getLogger(__name__)

DEFAULT_RADII = (0.05, 0.02)


class SegmentSoup:
    """
    Ordered collection of segments.

    A segment's position in the soup is its identity for one
    reconstruction pass. Nothing computed from a soup is stored on it.
    """

    def __init__(self, segments: Optional[Sequence[Segment]] = None, source: str = ""):
        """
        Parameters
        ----------
        segments : sequence of Segment, optional
            Segments in soup order
        source : str
            Free-form label of where the soup came from
        """
        self.segments: List[Segment] = list(segments) if segments else []
        self.source = source

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self) -> Iterator[Segment]:
        return iter(self.segments)

    def __getitem__(self, index: int) -> Segment:
        return self.segments[index]

    def __eq__(self, other) -> bool:
        if not isinstance(other, SegmentSoup):
            return NotImplemented
        return self.segments == other.segments

    def __repr__(self) -> str:
        return f"SegmentSoup({len(self.segments)} segments, source={self.source!r})"

    def is_empty(self) -> bool:
        return not self.segments

    def append(self, segment: Segment) -> None:
        self.segments.append(segment)

    def extend(self, segments: Sequence[Segment]) -> None:
        self.segments.extend(segments)

    def starts_array(self) -> np.ndarray:
        """Start points as an (n, 2) float array."""
        if not self.segments:
            return np.zeros((0, 2))
        return np.array([[s.start.x, s.start.y] for s in self.segments], dtype=float)

    def ends_array(self) -> np.ndarray:
        """End points as an (n, 2) float array."""
        if not self.segments:
            return np.zeros((0, 2))
        return np.array([[s.end.x, s.end.y] for s in self.segments], dtype=float)

    def bounds(self) -> Optional[Tuple[float, float, float, float]]:
        """Axis-aligned bounds as (xmin, ymin, xmax, ymax), or None when empty."""
        if not self.segments:
            return None
        pts = np.vstack([self.starts_array(), self.ends_array()])
        xmin, ymin = pts.min(axis=0)
        xmax, ymax = pts.max(axis=0)
        return (float(xmin), float(ymin), float(xmax), float(ymax))

    @classmethod
    def from_geometry(
        cls,
        points: Sequence[Tuple[float, float]],
        connections: Sequence[Tuple[int, int]],
        radii: Optional[Sequence[float]] = None,
        source: str = "",
        default_radii: Tuple[float, float] = DEFAULT_RADII,
    ) -> Tuple["SegmentSoup", int]:
        """
        Build a soup from a point list and index-pair connections.

        Connections referencing a point index outside ``points`` are skipped
        one by one. Radii are taken from ``radii`` only when both endpoints
        have an entry, otherwise ``default_radii`` is used for that segment.

        Returns
        -------
        soup : SegmentSoup
            Segments in connection order
        skipped : int
            Number of connections dropped for out-of-range indices
        """
        radii = list(radii) if radii is not None else []
        n_points = len(points)
        segments = []
        skipped = 0

        for a, b in connections:
            if not (0 <= a < n_points and 0 <= b < n_points):
                skipped += 1
                continue

            if a < len(radii) and b < len(radii):
                start_radius, end_radius = float(radii[a]), float(radii[b])
            else:
                start_radius, end_radius = default_radii

            segments.append(Segment(
                start=Point2D.from_tuple(points[a]),
                end=Point2D.from_tuple(points[b]),
                start_radius=start_radius,
                end_radius=end_radius,
            ))

        if skipped:
            logger.debug(f"Skipped {skipped} out-of-range connections")

        return cls(segments, source=source), skipped

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "source": self.source,
            "segments": [seg.to_dict() for seg in self.segments],
        }

    @classmethod
    def from_dict(cls, d: dict) -> "SegmentSoup":
        """Create from dictionary."""
        return cls(
            [Segment.from_dict(s) for s in d.get("segments", [])],
            source=d.get("source", ""),
        )
