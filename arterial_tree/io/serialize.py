"""
JSON serialization for segment soups.
"""

import json
from pathlib import Path
from typing import Union
from ..core.soup import SegmentSoup

SCHEMA_VERSION = "1.0"


def save_json(
    soup: SegmentSoup,
    filepath: Union[str, Path],
    indent: int = 2,
) -> None:
    """
    Save a segment soup to a JSON file.

    Parameters
    ----------
    soup : SegmentSoup
        Soup to save
    filepath : str or Path
        Output file path
    indent : int
        JSON indentation level

    Example
    -------
    >>> from arterial_tree import save_json, load_json
    >>> from generators.arterial import generate_procedural_tree
    >>> save_json(generate_procedural_tree(), "procedural_tree.json")
    >>> len(load_json("procedural_tree.json"))
    51
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    data = {"schema_version": SCHEMA_VERSION, **soup.to_dict()}

    with open(filepath, 'w') as f:
        json.dump(data, f, indent=indent)


def load_json(filepath: Union[str, Path]) -> SegmentSoup:
    """
    Load a segment soup from a JSON file.

    Parameters
    ----------
    filepath : str or Path
        Input file path

    Returns
    -------
    soup : SegmentSoup
        Loaded soup, segments in saved order

    Raises
    ------
    ValueError
        If the file was written with another schema version
    """
    filepath = Path(filepath)

    with open(filepath, 'r') as f:
        data = json.load(f)

    schema_version = data.get("schema_version", SCHEMA_VERSION)
    if schema_version != SCHEMA_VERSION:
        raise ValueError(f"Unsupported schema version: {schema_version}")

    return SegmentSoup.from_dict(data)
