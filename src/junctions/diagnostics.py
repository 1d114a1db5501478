from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .types import IntersectionID, Ring2D, RoadID


class Severity(Enum):
    NOTE = "note"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Diagnostic:
    """Degraded or unresolved geometry at one intersection. Observational only."""

    severity: Severity
    intersection_id: IntersectionID
    message: str
    road_ids: tuple[RoadID, ...] = ()
    degree: int | None = None

    def format(self) -> str:
        return f"intersection {self.intersection_id}: {self.message}"


@dataclass
class IntersectionPolygon:
    """
    Result of resolving one intersection.
    polygon: (R,2) closed ring, first point repeated as last.
    strategy: name of the strategy that produced the points.
    """

    intersection_id: IntersectionID
    polygon: Ring2D
    strategy: str
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def degraded(self) -> bool:
        return any(d.severity is not Severity.NOTE for d in self.diagnostics)
