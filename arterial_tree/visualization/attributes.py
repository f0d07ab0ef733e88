"""
Attribute mapping: hierarchy metrics to per-vertex color and per-segment
thickness.

The output ``RenderData`` is derived data. It is rebuilt for every render
pass and holds no references back into the soup.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Tuple

import numpy as np

from ..core.soup import SegmentSoup
from ..analysis.hierarchy import HierarchyMetrics


class ColorMode(Enum):
    """How segments are colored."""
    PLAIN_WHITE = "plain"
    MONOCHROME = "monochrome"
    DEPTH_GRADIENT = "depth"
    DESCENDANT_GRADIENT = "descendants"

    def cycle(self) -> "ColorMode":
        """Next mode, wrapping around."""
        modes = list(ColorMode)
        return modes[(modes.index(self) + 1) % len(modes)]

    @classmethod
    def from_name(cls, name: str) -> "ColorMode":
        """Look up a mode by value (``"depth"``) or member name (``"DEPTH_GRADIENT"``)."""
        for mode in cls:
            if name in (mode.value, mode.name, mode.name.lower()):
                return mode
        raise ValueError(
            f"Unknown color mode {name!r}. Available: {[m.value for m in cls]}"
        )


class UnreachablePolicy(Enum):
    """What to do with segments not reachable from the root."""
    SENTINEL = "sentinel"  # draw in the sentinel color in gradient modes
    FOLD = "fold"  # treat as normalized 0 (root-like color)
    HIDE = "hide"  # leave out of the render data


GRADIENT_MODES = (ColorMode.DEPTH_GRADIENT, ColorMode.DESCENDANT_GRADIENT)


@dataclass(frozen=True)
class RenderConfig:
    """
    Immutable display configuration passed into every mapping call.

    Mode changes produce a new config rather than mutating shared state.
    """

    color_mode: ColorMode = ColorMode.DEPTH_GRADIENT
    thickness_mode: bool = False
    base_width: float = 3.0
    min_width: float = 1.0
    max_width: float = 10.0
    thickness_offset: float = 2.0
    thickness_scale: float = 13.0
    unreachable_policy: UnreachablePolicy = UnreachablePolicy.SENTINEL
    sentinel_color: Tuple[float, float, float] = (0.5, 0.5, 0.5)

    def with_color_mode(self, mode: ColorMode) -> "RenderConfig":
        return replace(self, color_mode=mode)

    def with_thickness(self, enabled: bool) -> "RenderConfig":
        return replace(self, thickness_mode=enabled)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "color_mode": self.color_mode.value,
            "thickness_mode": self.thickness_mode,
            "base_width": self.base_width,
            "min_width": self.min_width,
            "max_width": self.max_width,
            "thickness_offset": self.thickness_offset,
            "thickness_scale": self.thickness_scale,
            "unreachable_policy": self.unreachable_policy.value,
            "sentinel_color": list(self.sentinel_color),
        }

    @classmethod
    def from_dict(cls, d: dict) -> "RenderConfig":
        """Create from dictionary."""
        kwargs = dict(d)
        if "color_mode" in kwargs:
            kwargs["color_mode"] = ColorMode.from_name(kwargs["color_mode"])
        if "unreachable_policy" in kwargs:
            kwargs["unreachable_policy"] = UnreachablePolicy(kwargs["unreachable_policy"])
        if "sentinel_color" in kwargs:
            kwargs["sentinel_color"] = tuple(kwargs["sentinel_color"])
        return cls(**kwargs)


@dataclass
class RenderData:
    """
    Render-ready buffers.

    ``vertices`` and ``colors`` hold two rows per emitted segment (start,
    end). ``thicknesses`` holds one unclamped width per emitted segment,
    ``default_width`` the single width for batched draws.
    ``segment_indices`` maps each emitted segment back to its soup index.
    """

    vertices: np.ndarray = field(default_factory=lambda: np.zeros((0, 2), dtype=np.float32))
    colors: np.ndarray = field(default_factory=lambda: np.zeros((0, 3), dtype=np.float32))
    thicknesses: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.float32))
    segment_indices: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=int))
    default_width: float = 3.0
    thickness_mode: bool = False
    min_width: float = 1.0
    max_width: float = 10.0

    @property
    def num_segments(self) -> int:
        return len(self.thicknesses)

    def is_empty(self) -> bool:
        return self.num_segments == 0

    def draw_widths(self) -> np.ndarray:
        """Per-segment widths clamped for individual draws."""
        return np.clip(self.thicknesses, self.min_width, self.max_width)

    def segment_colors(self) -> np.ndarray:
        """One color per segment (the start-vertex color)."""
        return self.colors[0::2]

    def line_segments(self) -> np.ndarray:
        """Vertices reshaped to (n, 2, 2) start/end pairs."""
        return self.vertices.reshape(-1, 2, 2)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "vertices": self.vertices.tolist(),
            "colors": self.colors.tolist(),
            "thicknesses": self.thicknesses.tolist(),
            "segment_indices": self.segment_indices.tolist(),
            "default_width": self.default_width,
            "thickness_mode": self.thickness_mode,
        }


def segment_color(
    mode: ColorMode,
    normalized_depth: float,
    normalized_descendants: float,
) -> Tuple[float, float, float]:
    """
    Color of one segment for a given mode.

    Depth gradient runs from red at the root to violet at the deepest
    leaves; descendant gradient from blue for leaves to red for the root.
    """
    if mode == ColorMode.PLAIN_WHITE:
        return (1.0, 1.0, 1.0)
    if mode == ColorMode.MONOCHROME:
        return (0.0, 1.0, 0.0)
    if mode == ColorMode.DEPTH_GRADIENT:
        d = normalized_depth
        return (1.0 - 0.5 * d, 0.0, 0.5 * d)
    if mode == ColorMode.DESCENDANT_GRADIENT:
        s = normalized_descendants
        return (float(np.sqrt(s)), 0.0, 1.0 - s * s)
    raise ValueError(f"Unsupported color mode: {mode}")


def segment_thickness(normalized_descendants: float, config: RenderConfig) -> float:
    """Unclamped width of one segment."""
    if not config.thickness_mode:
        return config.base_width
    return config.thickness_offset + normalized_descendants * config.thickness_scale


def map_attributes(
    soup: SegmentSoup,
    metrics: HierarchyMetrics,
    config: RenderConfig = RenderConfig(),
) -> RenderData:
    """
    Turn a soup and its hierarchy metrics into render buffers.

    Parameters
    ----------
    soup : SegmentSoup
        Active segment soup
    metrics : HierarchyMetrics
        Metrics computed for this exact soup
    config : RenderConfig
        Color mode, thickness mode and width constants

    Returns
    -------
    data : RenderData
        Two vertices per segment sharing one color, one thickness per
        segment. Empty for an empty soup.
    """
    if len(soup) != metrics.num_segments:
        raise ValueError(
            f"Metrics cover {metrics.num_segments} segments but soup has {len(soup)}"
        )

    reachable = metrics.reachable
    vertices: List[Tuple[float, float]] = []
    colors: List[Tuple[float, float, float]] = []
    thicknesses: List[float] = []
    indices: List[int] = []

    for i, seg in enumerate(soup):
        is_reachable = bool(reachable[i])
        if not is_reachable and config.unreachable_policy == UnreachablePolicy.HIDE:
            continue

        nd = float(metrics.normalized_depth[i])
        ns = float(metrics.normalized_descendants[i])

        if (not is_reachable
                and config.unreachable_policy == UnreachablePolicy.SENTINEL
                and config.color_mode in GRADIENT_MODES):
            color = tuple(config.sentinel_color)
        else:
            color = segment_color(config.color_mode, nd, ns)

        vertices.append(seg.start.to_tuple())
        vertices.append(seg.end.to_tuple())
        colors.append(color)
        colors.append(color)
        thicknesses.append(segment_thickness(ns, config))
        indices.append(i)

    if not indices:
        return RenderData(
            default_width=config.base_width,
            thickness_mode=config.thickness_mode,
            min_width=config.min_width,
            max_width=config.max_width,
        )

    return RenderData(
        vertices=np.array(vertices, dtype=np.float32),
        colors=np.array(colors, dtype=np.float32),
        thicknesses=np.array(thicknesses, dtype=np.float32),
        segment_indices=np.array(indices, dtype=int),
        default_width=config.base_width,
        thickness_mode=config.thickness_mode,
        min_width=config.min_width,
        max_width=config.max_width,
    )
