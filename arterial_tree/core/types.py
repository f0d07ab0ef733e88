"""
Geometric primitive types for 2D arterial trees.
"""

from dataclasses import dataclass
from typing import Tuple
import numpy as np


@dataclass(frozen=True)
class Point2D:
    """2D point in display space."""

    x: float
    y: float

    def to_array(self) -> np.ndarray:
        """Convert to numpy array."""
        return np.array([self.x, self.y])

    @classmethod
    def from_array(cls, arr: np.ndarray) -> "Point2D":
        """Create from numpy array."""
        return cls(float(arr[0]), float(arr[1]))

    def to_tuple(self) -> Tuple[float, float]:
        """Convert to tuple."""
        return (self.x, self.y)

    @classmethod
    def from_tuple(cls, t: Tuple[float, float]) -> "Point2D":
        """Create from tuple."""
        return cls(float(t[0]), float(t[1]))

    def distance_to(self, other: "Point2D") -> float:
        """Compute Euclidean distance to another point."""
        dx = self.x - other.x
        dy = self.y - other.y
        return float(np.sqrt(dx**2 + dy**2))

    def manhattan_to(self, other: "Point2D") -> float:
        """Compute Manhattan (L1) distance to another point."""
        return abs(self.x - other.x) + abs(self.y - other.y)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, d: dict) -> "Point2D":
        """Create from dictionary."""
        return cls(d["x"], d["y"])


@dataclass
class Direction2D:
    """2D direction vector (unit vector)."""

    dx: float
    dy: float

    def __post_init__(self):
        """Normalize on creation."""
        self.normalize()

    def normalize(self) -> None:
        """Normalize to unit length."""
        length = np.sqrt(self.dx**2 + self.dy**2)
        if length < 1e-10:
            raise ValueError("Cannot normalize zero-length vector")
        self.dx = float(self.dx / length)
        self.dy = float(self.dy / length)

    def rotated(self, angle: float) -> "Direction2D":
        """Return this direction rotated counter-clockwise by ``angle`` radians."""
        cos_a = np.cos(angle)
        sin_a = np.sin(angle)
        return Direction2D(
            self.dx * cos_a - self.dy * sin_a,
            self.dx * sin_a + self.dy * cos_a,
        )

    def to_array(self) -> np.ndarray:
        """Convert to numpy array."""
        return np.array([self.dx, self.dy])

    def to_tuple(self) -> Tuple[float, float]:
        """Convert to tuple."""
        return (self.dx, self.dy)

    @classmethod
    def from_tuple(cls, t: Tuple[float, float]) -> "Direction2D":
        """Create from tuple (will be normalized)."""
        return cls(float(t[0]), float(t[1]))

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {"dx": self.dx, "dy": self.dy}

    @classmethod
    def from_dict(cls, d: dict) -> "Direction2D":
        """Create from dictionary."""
        return cls(d["dx"], d["dy"])


@dataclass
class Segment:
    """
    One edge of an arterial tree.

    The radius tapers linearly from ``start_radius`` to ``end_radius``.
    Segments carry no parent/child information; topology is inferred
    from endpoint coincidence.
    """

    start: Point2D
    end: Point2D
    start_radius: float = 0.1
    end_radius: float = 0.05

    def length(self) -> float:
        """Compute segment length."""
        return self.start.distance_to(self.end)

    def direction(self) -> Direction2D:
        """Get direction from start to end."""
        return Direction2D(self.end.x - self.start.x, self.end.y - self.start.y)

    def mean_radius(self) -> float:
        """Get mean radius."""
        return (self.start_radius + self.end_radius) / 2.0

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "start": self.start.to_dict(),
            "end": self.end.to_dict(),
            "start_radius": self.start_radius,
            "end_radius": self.end_radius,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Segment":
        """Create from dictionary."""
        return cls(
            start=Point2D.from_dict(d["start"]),
            end=Point2D.from_dict(d["end"]),
            start_radius=d.get("start_radius", 0.1),
            end_radius=d.get("end_radius", 0.05),
        )
