"""
Reader for legacy ASCII VTK polydata tree files.

Only what a 2D tree needs is extracted: point coordinates (z dropped),
2-point line cells as connections, and per-point radii either from a
``RADIUS``/``RADII`` section or from a ``SCALARS radius`` point-data block.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple, Union

import numpy as np

from ..core.result import GeometryLoadError, ErrorCode
from ..core.soup import SegmentSoup

logger = logging.getLogger(__name__)

RADIUS_SCALAR_NAMES = ("radius", "radii", "radius_m", "radius_mm")

# keywords that open a section whose payload is not needed here
SKIPPED_SECTIONS = (
    "VERTICES", "POLYGONS", "TRIANGLE_STRIPS", "CELL_DATA", "VECTORS",
    "NORMALS", "TEXTURE_COORDINATES", "TENSORS", "FIELD", "CELLS", "CELL_TYPES",
)


@dataclass
class RawGeometry:
    """Unprocessed geometry as read from a file."""

    points: List[Tuple[float, float]] = field(default_factory=list)
    connections: List[Tuple[int, int]] = field(default_factory=list)
    radii: List[float] = field(default_factory=list)


def _is_number(token: str) -> bool:
    try:
        float(token)
    except ValueError:
        return False
    return True


def _header_count(tokens: List[str], line_no: int) -> int:
    if len(tokens) < 2:
        return 0
    try:
        return int(tokens[1])
    except ValueError as e:
        raise GeometryLoadError(
            f"Bad {tokens[0]} count on line {line_no}: {tokens[1]!r}",
            code=ErrorCode.PARSE_ERROR,
        ) from e


def parse_vtk_text(text: str) -> RawGeometry:
    """
    Parse the body of a legacy VTK polydata file.

    Coordinates may be spread over any number of lines. Line cells with
    more than two points are split into consecutive pairs.

    Raises
    ------
    GeometryLoadError
        If a numeric payload cannot be parsed
    """
    geometry = RawGeometry()

    section = None
    points_expected = 0
    coord_buffer: List[float] = []
    cells_expected = 0
    cell_buffer: List[int] = []

    for line_no, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue

        tokens = line.split()
        keyword = tokens[0].upper()

        if not _is_number(tokens[0]):
            if keyword == "POINTS":
                section = "points"
                points_expected = _header_count(tokens, line_no)
                coord_buffer = []
            elif keyword == "LINES":
                section = "lines"
                cells_expected = _header_count(tokens, line_no)
                cell_buffer = []
            elif keyword in ("RADIUS", "RADII"):
                section = "radii"
            elif keyword == "SCALARS":
                name = tokens[1].lower() if len(tokens) > 1 else ""
                section = "radii" if name in RADIUS_SCALAR_NAMES else "skip"
            elif keyword == "LOOKUP_TABLE":
                pass
            elif keyword in SKIPPED_SECTIONS:
                section = "skip"
            else:
                section = None
            continue

        try:
            if section == "points":
                coord_buffer.extend(float(t) for t in tokens)
                while len(coord_buffer) >= 3 and len(geometry.points) < points_expected:
                    x, y = coord_buffer[0], coord_buffer[1]
                    del coord_buffer[:3]
                    geometry.points.append((x, y))
            elif section == "lines":
                cell_buffer.extend(int(t) for t in tokens)
                while cell_buffer and cells_expected > 0:
                    size = cell_buffer[0]
                    if len(cell_buffer) < size + 1:
                        break
                    ids = cell_buffer[1:size + 1]
                    del cell_buffer[:size + 1]
                    cells_expected -= 1
                    geometry.connections.extend(zip(ids[:-1], ids[1:]))
            elif section == "radii":
                geometry.radii.extend(float(t) for t in tokens)
        except ValueError as e:
            raise GeometryLoadError(
                f"Could not parse line {line_no}: {raw_line!r} ({e})",
                code=ErrorCode.PARSE_ERROR,
            ) from e

    if len(geometry.points) < points_expected:
        logger.warning(
            f"POINTS declared {points_expected} points but only "
            f"{len(geometry.points)} were read"
        )

    return geometry


def read_vtk_geometry(path: Union[str, Path]) -> RawGeometry:
    """
    Read points, connections and radii from a VTK file.

    Raises
    ------
    GeometryLoadError
        If the file does not exist, cannot be read, or cannot be parsed
    """
    path = Path(path)

    if not path.is_file():
        raise GeometryLoadError(f"Geometry file not found: {path}", code=ErrorCode.FILE_NOT_FOUND)

    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise GeometryLoadError(f"Cannot read {path}: {e}", code=ErrorCode.FILE_NOT_FOUND) from e

    return parse_vtk_text(text)


def normalize_geometry(raw: RawGeometry, extent: float = 0.9) -> RawGeometry:
    """
    Center the points and scale them uniformly into [-extent, extent].

    The bounding box center moves to the origin and the larger half-extent
    becomes ``extent``. Radii are scaled by the same factor.
    """
    if not raw.points:
        return RawGeometry([], list(raw.connections), list(raw.radii))

    pts = np.asarray(raw.points, dtype=float)
    lo = pts.min(axis=0)
    hi = pts.max(axis=0)
    center = (lo + hi) / 2.0
    half = float(np.max(hi - lo)) / 2.0
    scale = extent / half if half > 1e-12 else 1.0

    normalized = (pts - center) * scale

    return RawGeometry(
        points=[(float(x), float(y)) for x, y in normalized],
        connections=list(raw.connections),
        radii=[float(r) * scale for r in raw.radii],
    )


def load_vtk_soup(
    path: Union[str, Path],
    normalize: bool = True,
    extent: float = 0.9,
) -> Tuple[SegmentSoup, int]:
    """
    Load a VTK tree file as a segment soup in display coordinates.

    Parameters
    ----------
    path : str or Path
        VTK file
    normalize : bool
        Fit coordinates into [-extent, extent] (default: True)
    extent : float
        Target half-extent after normalization

    Returns
    -------
    soup : SegmentSoup
        Segments in file connection order
    skipped : int
        Connections dropped for out-of-range point indices

    Raises
    ------
    GeometryLoadError
        If the file is missing, malformed, or yields no segments
    """
    raw = read_vtk_geometry(path)

    if not raw.points or not raw.connections:
        raise GeometryLoadError(
            f"{path} has {len(raw.points)} points and {len(raw.connections)} connections",
            code=ErrorCode.NO_SEGMENTS,
        )

    if normalize:
        raw = normalize_geometry(raw, extent=extent)

    soup, skipped = SegmentSoup.from_geometry(
        raw.points,
        raw.connections,
        raw.radii,
        source=f"file:{path}",
    )

    if soup.is_empty():
        raise GeometryLoadError(
            f"No valid segments in {path} ({skipped} connections out of range)",
            code=ErrorCode.NO_SEGMENTS,
        )

    logger.info(f"Loaded {len(soup)} segments from {path}")
    return soup, skipped
