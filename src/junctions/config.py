from __future__ import annotations

import math
from dataclasses import dataclass

# Width of one lane, meters.
LANE_THICKNESS = 2.5
# How far degree 1 and 2 intersections reach back along their roads, meters.
DEGENERATE_INTERSECTION_HALF_LENGTH = 5.0
# Adjacent borders closer than this in angle are not intersected directly.
PARALLEL_THRESHOLD_DEGREES = 15.0


@dataclass(frozen=True)
class GeometryConfig:
    lane_thickness: float = LANE_THICKNESS
    degenerate_half_length: float = DEGENERATE_INTERSECTION_HALF_LENGTH
    parallel_threshold_degrees: float = PARALLEL_THRESHOLD_DEGREES

    def __post_init__(self) -> None:
        for name in (
            "lane_thickness",
            "degenerate_half_length",
            "parallel_threshold_degrees",
        ):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"{name} must be finite and >= 0, got {value}")
        if self.degenerate_half_length == 0:
            raise ValueError("degenerate_half_length must be positive")

    def road_width(self, lanes: int) -> float:
        """Width of a band of lanes on one side of a centerline."""
        if lanes < 0:
            raise ValueError(f"lane count must be >= 0, got {lanes}")
        return self.lane_thickness * lanes


DEFAULT_CONFIG = GeometryConfig()
