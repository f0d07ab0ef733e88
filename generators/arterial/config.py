"""
Configuration dataclasses for procedural arterial tree generation.

Units: all spatial parameters are in normalized display units, the tree
fits roughly inside [-1, 1] x [-1, 1]. Angles are in radians.
"""

from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass
class BranchSeed:
    """Starting conditions for one independently grown branch group."""

    start: Tuple[float, float]
    direction: Tuple[float, float]  # normalized when grown
    length: float
    radius: float
    max_depth: int
    name: str = ""

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "start": list(self.start),
            "direction": list(self.direction),
            "length": self.length,
            "radius": self.radius,
            "max_depth": self.max_depth,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "BranchSeed":
        """Create from dictionary."""
        return cls(
            start=tuple(d["start"]),
            direction=tuple(d["direction"]),
            length=d["length"],
            radius=d["radius"],
            max_depth=d["max_depth"],
            name=d.get("name", ""),
        )


def default_arterial_seeds() -> List[BranchSeed]:
    """
    Trunk plus two basal and two middle lateral branch groups.

    The trunk comes first so its first segment is segment 0 of the soup,
    which is the root the reconstruction is expected to find.
    """
    return [
        BranchSeed((0.0, -0.8), (0.0, 1.0), 0.6, 0.08, 6, name="trunk"),
        BranchSeed((0.0, -0.6), (0.8, 0.4), 0.3, 0.04, 4, name="basal_right"),
        BranchSeed((0.0, -0.6), (-0.8, 0.4), 0.3, 0.04, 4, name="basal_left"),
        BranchSeed((0.0, -0.3), (0.9, 0.2), 0.25, 0.03, 3, name="middle_right"),
        BranchSeed((0.0, -0.3), (-0.9, 0.2), 0.25, 0.03, 3, name="middle_left"),
    ]


@dataclass
class BranchingConfig:
    """Configuration for recursive branching."""

    branch_angle: float = 0.5  # first child +angle, second child -angle
    length_ratio: float = 0.6  # child length / parent length
    radius_ratio: float = 0.7  # child radius / parent radius
    taper_ratio: float = 0.7  # segment end radius / start radius
    bifurcation_depth: int = 3  # two children while remaining depth exceeds this
    min_length: float = 0.01


@dataclass
class ProceduralTreeConfig:
    """Complete configuration for procedural tree generation."""

    seeds: List[BranchSeed] = field(default_factory=default_arterial_seeds)
    branching: BranchingConfig = field(default_factory=BranchingConfig)

    jitter: float = 0.05  # uniform end point noise per axis, [-jitter, jitter]
    random_seed: int = 42

    schema_version: str = "1.0"

    def to_dict(self):
        """Convert config to dictionary for serialization."""
        return {
            "schema_version": self.schema_version,
            "random_seed": self.random_seed,
            "jitter": self.jitter,
            "seeds": [seed.to_dict() for seed in self.seeds],
            "branching": {
                "branch_angle": self.branching.branch_angle,
                "length_ratio": self.branching.length_ratio,
                "radius_ratio": self.branching.radius_ratio,
                "taper_ratio": self.branching.taper_ratio,
                "bifurcation_depth": self.branching.bifurcation_depth,
                "min_length": self.branching.min_length,
            },
        }

    @classmethod
    def from_dict(cls, d: dict) -> "ProceduralTreeConfig":
        """Create config from dictionary."""
        schema_version = d.get("schema_version", "1.0")
        if schema_version != "1.0":
            raise ValueError(f"Unsupported schema version: {schema_version}")

        seeds = d.get("seeds")
        return cls(
            seeds=[BranchSeed.from_dict(s) for s in seeds] if seeds is not None else default_arterial_seeds(),
            branching=BranchingConfig(**d.get("branching", {})),
            jitter=d.get("jitter", 0.05),
            random_seed=d.get("random_seed", 42),
        )
