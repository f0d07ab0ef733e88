"""I/O functions for loading tree geometry and saving segment soups."""

from .serialize import save_json, load_json
from .vtk_loader import (
    RawGeometry,
    parse_vtk_text,
    read_vtk_geometry,
    normalize_geometry,
    load_vtk_soup,
)

__all__ = [
    "save_json",
    "load_json",
    "RawGeometry",
    "parse_vtk_text",
    "read_vtk_geometry",
    "normalize_geometry",
    "load_vtk_soup",
]
