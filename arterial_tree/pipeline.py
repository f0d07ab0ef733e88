"""
Viewer pipeline: owns the active segment soup and produces render data.

Each render pass recomputes topology, hierarchy and attributes from the
active soup; nothing is cached between passes. Loading a tree replaces
the active soup in full.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from .core.result import GeometryLoadError, LoadResult, ErrorCode
from .core.soup import SegmentSoup
from .analysis.topology import EPSILON, MATCH_METHODS, Topology, reconstruct_topology
from .analysis.hierarchy import HierarchyMetrics, analyze_hierarchy
from .visualization.attributes import ColorMode, RenderConfig, RenderData, map_attributes
from .io.vtk_loader import load_vtk_soup
from .utils import timed_stage

from generators.arterial import ProceduralTreeConfig, generate_procedural_tree, placeholder_tree

logger = logging.getLogger(__name__)


@dataclass
class ViewerConfig:
    """Configuration of a TreeViewer."""

    tree_files: List[str] = field(default_factory=list)
    tolerance: float = EPSILON
    match_method: str = "grid"
    forest: bool = False
    placeholder_on_empty: bool = True
    normalize: bool = True
    render: RenderConfig = field(default_factory=RenderConfig)
    generator: ProceduralTreeConfig = field(default_factory=ProceduralTreeConfig)

    def __post_init__(self):
        if self.match_method not in MATCH_METHODS:
            raise ValueError(
                f"match_method must be one of {MATCH_METHODS}, got {self.match_method!r}"
            )
        if self.tolerance <= 0:
            raise ValueError(f"tolerance must be positive, got {self.tolerance}")

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "tree_files": list(self.tree_files),
            "tolerance": self.tolerance,
            "match_method": self.match_method,
            "forest": self.forest,
            "placeholder_on_empty": self.placeholder_on_empty,
            "normalize": self.normalize,
            "render": self.render.to_dict(),
            "generator": self.generator.to_dict(),
        }

    @classmethod
    def from_dict(cls, d: dict) -> "ViewerConfig":
        """Create from dictionary. Missing keys take their defaults."""
        kwargs = {k: v for k, v in d.items() if k not in ("render", "generator")}
        if "render" in d:
            kwargs["render"] = RenderConfig.from_dict(d["render"])
        if "generator" in d:
            kwargs["generator"] = ProceduralTreeConfig.from_dict(d["generator"])
        return cls(**kwargs)


def load_viewer_config(path: Union[str, Path]) -> ViewerConfig:
    """Read a ViewerConfig from a JSON file."""
    with open(Path(path), "r") as f:
        return ViewerConfig.from_dict(json.load(f))


@dataclass
class TreeAnalysis:
    """Topology and metrics computed for one soup in one pass."""

    soup: SegmentSoup
    topology: Topology
    metrics: HierarchyMetrics


def analyze_tree(
    soup: SegmentSoup,
    tolerance: float = EPSILON,
    method: str = "grid",
    forest: bool = False,
) -> TreeAnalysis:
    """
    Reconstruct topology and compute hierarchy metrics for a soup.

    Returns
    -------
    analysis : TreeAnalysis
        Fresh results; safe to discard after the pass
    """
    with timed_stage("topology"):
        topology = reconstruct_topology(soup, tolerance=tolerance, method=method)
    with timed_stage("hierarchy"):
        metrics = analyze_hierarchy(topology, forest=forest)
    return TreeAnalysis(soup=soup, topology=topology, metrics=metrics)


def build_render_data(
    soup: SegmentSoup,
    config: RenderConfig = RenderConfig(),
    tolerance: float = EPSILON,
    method: str = "grid",
    forest: bool = False,
) -> RenderData:
    """Full pass: soup to topology to metrics to render buffers."""
    analysis = analyze_tree(soup, tolerance=tolerance, method=method, forest=forest)
    return map_attributes(soup, analysis.metrics, config)


def load_tree(
    path: Union[str, Path],
    generator_config: Optional[ProceduralTreeConfig] = None,
    normalize: bool = True,
) -> LoadResult:
    """
    Load a tree file, falling back to the procedural tree on any load error.

    Parameters
    ----------
    path : str or Path
        VTK tree file
    generator_config : ProceduralTreeConfig, optional
        Configuration for the fallback tree
    normalize : bool
        Fit file coordinates into the display range

    Returns
    -------
    result : LoadResult
        Always carries a non-empty soup
    """
    logger.info(f"Loading: {path}")
    try:
        soup, skipped = load_vtk_soup(path, normalize=normalize)
    except GeometryLoadError as e:
        logger.warning(f"{e}; generating procedural arterial tree instead")
        soup = generate_procedural_tree(generator_config)
        result = LoadResult.fallback(
            soup,
            message=f"Procedural tree with {len(soup)} segments (could not load {path})",
            metadata={"path": str(path)},
        )
        result.add_error(str(e), code=e.code)
        return result

    result = LoadResult.success(
        soup,
        message=f"Loaded {len(soup)} segments from {path}",
        metadata={"path": str(path), "skipped_connections": skipped},
    )
    if skipped:
        result.add_warning(
            f"Skipped {skipped} connections with out-of-range point indices",
            code=ErrorCode.CONNECTIONS_SKIPPED,
        )
    return result


class TreeViewer:
    """
    Holds the active tree and the current display modes.

    Input handling calls the load/cycle and mode methods; the render loop
    calls ``frame()`` (or ``render_pass()``) once per frame.
    """

    def __init__(self, config: Optional[ViewerConfig] = None):
        """
        Parameters
        ----------
        config : ViewerConfig, optional
            Viewer configuration (default: no files, depth gradient)
        """
        self.config = config or ViewerConfig()
        self.render_config = self.config.render
        self.soup = SegmentSoup()
        self.current_index = 0
        self.last_result: Optional[LoadResult] = None
        self._first_frame = True

        logger.debug(f"Tree files configured: {len(self.config.tree_files)}")

    @property
    def tree_files(self) -> List[str]:
        return self.config.tree_files

    def set_soup(self, soup: SegmentSoup) -> None:
        """Replace the active tree."""
        self.soup = soup

    def load_file(self, path: Union[str, Path]) -> LoadResult:
        """Load a file (or its procedural fallback) as the active tree."""
        result = load_tree(path, self.config.generator, normalize=self.config.normalize)
        self.set_soup(result.soup)
        self.last_result = result
        logger.info(result.message)
        return result

    def load_procedural(self) -> LoadResult:
        """Make a freshly generated procedural tree the active tree."""
        soup = generate_procedural_tree(self.config.generator)
        self.set_soup(soup)
        self.last_result = LoadResult.success(soup, message=f"Procedural tree with {len(soup)} segments")
        return self.last_result

    def load_current(self) -> Optional[LoadResult]:
        """Load the file at ``current_index``; None when no files are configured."""
        if not self.tree_files:
            return None
        return self.load_file(self.tree_files[self.current_index])

    def next_tree(self) -> Optional[LoadResult]:
        """Advance to the next file, wrapping around."""
        if not self.tree_files:
            return None
        self.current_index = (self.current_index + 1) % len(self.tree_files)
        return self.load_current()

    def previous_tree(self) -> Optional[LoadResult]:
        """Go back to the previous file, wrapping around."""
        if not self.tree_files:
            return None
        self.current_index = (self.current_index - 1) % len(self.tree_files)
        return self.load_current()

    def set_color_mode(self, mode: ColorMode) -> None:
        self.render_config = self.render_config.with_color_mode(mode)
        logger.info(f"Color mode: {mode.value}")

    def cycle_color_mode(self) -> ColorMode:
        self.set_color_mode(self.render_config.color_mode.cycle())
        return self.render_config.color_mode

    def set_thickness_mode(self, enabled: bool) -> None:
        self.render_config = self.render_config.with_thickness(enabled)
        logger.info(f"Thickness mode: {'ON' if enabled else 'OFF'}")

    def toggle_thickness_mode(self) -> bool:
        self.set_thickness_mode(not self.render_config.thickness_mode)
        return self.render_config.thickness_mode

    def analyze(self) -> TreeAnalysis:
        """Reconstruct and measure the active tree."""
        return analyze_tree(
            self.soup,
            tolerance=self.config.tolerance,
            method=self.config.match_method,
            forest=self.config.forest,
        )

    def render_pass(self) -> RenderData:
        """Render data for the active tree; empty when there is no tree."""
        return build_render_data(
            self.soup,
            self.render_config,
            tolerance=self.config.tolerance,
            method=self.config.match_method,
            forest=self.config.forest,
        )

    def frame(self) -> RenderData:
        """
        Render data for display. An empty active tree is replaced by the
        placeholder tree when ``placeholder_on_empty`` is set.
        """
        soup = self.soup
        if soup.is_empty() and self.config.placeholder_on_empty:
            soup = placeholder_tree()
            if self._first_frame:
                logger.info("No tree loaded, rendering placeholder tree")
        elif self._first_frame:
            logger.info(f"Rendering tree with {len(soup)} segments")
        self._first_frame = False

        return build_render_data(
            soup,
            self.render_config,
            tolerance=self.config.tolerance,
            method=self.config.match_method,
            forest=self.config.forest,
        )
