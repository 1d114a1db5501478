from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from shapely.geometry import Polygon
from shapely.validation import explain_validity
from tqdm import tqdm  # type: ignore[reportMissingModuleSource]

from ..utils import debug, debug_helpers
from .config import DEFAULT_CONFIG, GeometryConfig
from .diagnostics import Diagnostic, IntersectionPolygon, Severity
from .geom import dedup_points
from .network import RoadNetwork
from .polygon import initial_intersection_polygon


@dataclass
class BuildReport:
    results: list[IntersectionPolygon] = field(default_factory=list)
    skipped: list[int] = field(default_factory=list)

    def diagnostics(self) -> list[Diagnostic]:
        return [d for r in self.results for d in r.diagnostics]

    def count(self, severity: Severity) -> int:
        return sum(1 for d in self.diagnostics() if d.severity is severity)

    def summary(self) -> str:
        strategies = Counter(r.strategy for r in self.results)
        by_strategy = " ".join(f"{k}={v}" for k, v in sorted(strategies.items()))
        return (
            f"intersections={len(self.results)} skipped={len(self.skipped)} "
            f"notes={self.count(Severity.NOTE)} "
            f"warnings={self.count(Severity.WARNING)} "
            f"errors={self.count(Severity.ERROR)} {by_strategy}"
        ).rstrip()


def audit_polygon(result: IntersectionPolygon) -> Diagnostic | None:
    """
    Flag a ring that isn't a valid simple polygon. Rings with fewer than three
    distinct points come from fallbacks that already reported themselves.
    """
    distinct = dedup_points(list(result.polygon[:-1]))
    if len(distinct) < 3:
        return None
    poly = Polygon(result.polygon)
    if poly.is_valid:
        return None
    return Diagnostic(
        severity=Severity.WARNING,
        intersection_id=result.intersection_id,
        message=f"polygon is invalid: {explain_validity(poly)}",
    )


def make_all_intersection_polygons(
    network: RoadNetwork,
    config: GeometryConfig = DEFAULT_CONFIG,
    *,
    progress: bool = False,
) -> BuildReport:
    """
    Resolve every intersection in id order, one at a time. Each intersection
    trims its own end of the shared road centerlines, so order matters and
    the loop must not run concurrently over shared roads.
    """
    network.validate()
    report = BuildReport()
    intersections = network.intersections
    if progress:
        intersections = tqdm(intersections, desc="Intersection polygons", unit="intersection")
    for intersection in intersections:
        if intersection.degree == 0:
            debug_helpers.log_once(
                "isolated_intersection",
                f"skipping intersections without roads, first is {intersection.id}",
            )
            report.skipped.append(intersection.id)
            continue
        result = initial_intersection_polygon(intersection, network, config)
        audit = audit_polygon(result)
        if audit is not None:
            result.diagnostics.append(audit)
        for diagnostic in result.diagnostics:
            debug.log(diagnostic.format(), severity=diagnostic.severity.value)
        report.results.append(result)

    debug.log(f"make_all_intersection_polygons: {report.summary()}")
    return report
