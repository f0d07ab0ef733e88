"""
Result and status types for structured feedback.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional, TYPE_CHECKING
from enum import Enum

if TYPE_CHECKING:
    from .soup import SegmentSoup


class ArterialTreeError(Exception):
    """Base class for errors raised by this package."""


class GeometryLoadError(ArterialTreeError):
    """A geometry file could not be turned into a segment soup."""

    def __init__(self, message: str, code: Optional["ErrorCode"] = None):
        super().__init__(message)
        self.code = code


class RootStatus(Enum):
    """How the root of a reconstructed tree was determined."""
    UNIQUE = "unique"
    MULTIPLE = "multiple"  # several parentless segments, first in soup order chosen
    FALLBACK = "fallback"  # no parentless segment, index 0 used
    EMPTY = "empty"


class LoadStatus(Enum):
    """Outcome of loading a tree into the viewer."""
    SUCCESS = "success"
    FALLBACK = "fallback"


class ErrorCode(Enum):
    """Standard error codes for geometry loading."""
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    PARSE_ERROR = "PARSE_ERROR"
    NO_SEGMENTS = "NO_SEGMENTS"
    CONNECTIONS_SKIPPED = "CONNECTIONS_SKIPPED"


@dataclass
class LoadResult:
    """
    Structured result from loading a tree.

    ``soup`` is always set: when the file could not be used it holds the
    procedural fallback tree and ``status`` is ``LoadStatus.FALLBACK``.
    """

    status: LoadStatus
    soup: "SegmentSoup"
    message: str = ""
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    error_codes: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def is_fallback(self) -> bool:
        """Check if the procedural fallback was used."""
        return self.status == LoadStatus.FALLBACK

    def add_warning(self, warning: str, code: Optional[ErrorCode] = None) -> None:
        """Add a warning message with optional error code."""
        self.warnings.append(warning)
        if code is not None:
            self.error_codes.append(code.value)

    def add_error(self, error: str, code: Optional[ErrorCode] = None) -> None:
        """Add an error message with optional error code."""
        self.errors.append(error)
        if code is not None:
            self.error_codes.append(code.value)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization (JSON-safe)."""
        return {
            "status": self.status.value,
            "message": self.message,
            "num_segments": len(self.soup),
            "source": self.soup.source,
            "warnings": self.warnings,
            "errors": self.errors,
            "error_codes": self.error_codes,
            "metadata": self.metadata,
        }

    @classmethod
    def success(cls, soup: "SegmentSoup", message: str = "", **kwargs) -> "LoadResult":
        """Create a success result."""
        return cls(status=LoadStatus.SUCCESS, soup=soup, message=message, **kwargs)

    @classmethod
    def fallback(cls, soup: "SegmentSoup", message: str = "", **kwargs) -> "LoadResult":
        """Create a fallback result."""
        return cls(status=LoadStatus.FALLBACK, soup=soup, message=message, **kwargs)
