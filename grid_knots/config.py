"""
Immutable configuration for curve building and relaxation.

Every tunable constant lives here; callers pass a config object down the
pipeline instead of setting module globals.
"""

from __future__ import annotations
import json
from dataclasses import dataclass, field, fields, replace
from pathlib import Path


@dataclass(frozen=True)
class CurveConfig:
    """How a resolved circuit becomes a polyline."""
    # Height of lifted (over-strand) crossing vertices; keep it comparable to
    # the tube radius used for rendering.
    lift_amount: float = 0.1
    minimum_segment_length: float = 0.25

    def __post_init__(self):
        if self.lift_amount <= 0:
            raise ValueError(f"lift_amount must be positive, got {self.lift_amount}")
        if self.minimum_segment_length <= 0:
            raise ValueError(
                f"minimum_segment_length must be positive, got {self.minimum_segment_length}"
            )


@dataclass(frozen=True)
class RelaxationConfig:
    """Constants of the neighbour-attraction / all-pairs-repulsion force law.

    Neighbours attract with ``attraction * r**(1 + attraction_exponent)``;
    every other vertex repels with ``repulsion * r**-(2 + repulsion_exponent)``.
    """
    attraction: float = 1.0            # H
    attraction_exponent: float = 1.0   # beta
    repulsion: float = 0.5             # K
    repulsion_exponent: float = 4.0    # alpha
    mass: float = 1.0
    damping: float = 0.9
    max_displacement: float = 0.05     # per-step cap on |v|
    epsilon: float = 1e-6

    def __post_init__(self):
        if self.mass <= 0:
            raise ValueError(f"mass must be positive, got {self.mass}")
        if not 0.0 <= self.damping < 1.0:
            raise ValueError(f"damping must lie in [0, 1), got {self.damping}")
        if self.max_displacement <= 0:
            raise ValueError(
                f"max_displacement must be positive, got {self.max_displacement}"
            )
        if self.epsilon <= 0:
            raise ValueError(f"epsilon must be positive, got {self.epsilon}")


def _build(cls, data: dict, section: str):
    known = {f.name for f in fields(cls)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(
            f"Unknown {section} option(s): {', '.join(sorted(unknown))}. "
            f"Valid options: {', '.join(sorted(known))}"
        )
    return cls(**{k: float(v) for k, v in data.items()})


@dataclass(frozen=True)
class KnotConfig:
    """Top-level configuration: curve + relaxation."""
    curve: CurveConfig = field(default_factory=CurveConfig)
    relaxation: RelaxationConfig = field(default_factory=RelaxationConfig)

    @classmethod
    def from_dict(cls, data: dict) -> "KnotConfig":
        """Create a KnotConfig from ``{"curve": {...}, "relaxation": {...}}``."""
        unknown = set(data) - {"curve", "relaxation"}
        if unknown:
            raise ValueError(f"Unknown config section(s): {', '.join(sorted(unknown))}")
        return cls(
            curve=_build(CurveConfig, data.get("curve", {}), "curve"),
            relaxation=_build(RelaxationConfig, data.get("relaxation", {}), "relaxation"),
        )

    @classmethod
    def from_file(cls, path: str | Path) -> "KnotConfig":
        """Load a KnotConfig from a JSON file."""
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ValueError(f"{path}: invalid JSON ({exc})") from exc
        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a JSON object at the top level")
        return cls.from_dict(data)

    def with_curve(self, **changes) -> "KnotConfig":
        return replace(self, curve=replace(self.curve, **changes))
