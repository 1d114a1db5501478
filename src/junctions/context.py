from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .config import GeometryConfig
from .diagnostics import Diagnostic, Severity
from .network import RoadNetwork
from .types import IntersectionID, RoadID

if TYPE_CHECKING:
    from .borders import RoadBorders


@dataclass
class SolveContext:
    """Everything a polygon strategy reads or writes for one intersection."""

    intersection_id: IntersectionID
    network: RoadNetwork
    lines: list[RoadBorders]
    config: GeometryConfig
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def degree(self) -> int:
        return len(self.lines)

    def report(
        self, severity: Severity, message: str, road_ids: tuple[RoadID, ...] = ()
    ) -> None:
        self.diagnostics.append(
            Diagnostic(
                severity=severity,
                intersection_id=self.intersection_id,
                message=message,
                road_ids=road_ids,
                degree=self.degree,
            )
        )

    def note(self, message: str, road_ids: tuple[RoadID, ...] = ()) -> None:
        self.report(Severity.NOTE, message, road_ids)

    def warn(self, message: str, road_ids: tuple[RoadID, ...] = ()) -> None:
        self.report(Severity.WARNING, message, road_ids)

    def error(self, message: str, road_ids: tuple[RoadID, ...] = ()) -> None:
        self.report(Severity.ERROR, message, road_ids)
