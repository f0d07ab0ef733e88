"""Core data structures for arterial trees."""

from .types import Point2D, Direction2D, Segment
from .soup import SegmentSoup, DEFAULT_RADII
from .result import (
    ArterialTreeError,
    GeometryLoadError,
    RootStatus,
    LoadStatus,
    ErrorCode,
    LoadResult,
)

__all__ = [
    "Point2D",
    "Direction2D",
    "Segment",
    "SegmentSoup",
    "DEFAULT_RADII",
    "ArterialTreeError",
    "GeometryLoadError",
    "RootStatus",
    "LoadStatus",
    "ErrorCode",
    "LoadResult",
]
