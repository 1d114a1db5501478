from __future__ import annotations

from typing import Callable, TypeAlias

import numpy as np
from beartype import beartype
from jaxtyping import jaxtyped

from .borders import road_borders
from .config import DEFAULT_CONFIG, GeometryConfig
from .context import SolveContext
from .corners import pair_fallback, solve_corners
from .degenerate import dead_end, dead_end_raw, two_way, two_way_raw
from .diagnostics import IntersectionPolygon
from .network import Intersection, RoadNetwork
from .types import Pt2D, Ring2D

# A strategy returns polygon points, or None when it doesn't apply.
Strategy: TypeAlias = Callable[[SolveContext], "list[Pt2D] | None"]


def strategies_for_degree(degree: int) -> tuple[Strategy, ...]:
    """Tried in order; the last one for each degree always produces points."""
    if degree == 1:
        return (dead_end, dead_end_raw)
    if degree == 2:
        return (two_way, two_way_raw)
    return (solve_corners, pair_fallback)


@jaxtyped(typechecker=beartype)
def close_ring(points: list[Pt2D]) -> Ring2D:
    if not points:
        raise ValueError("can't close an empty ring")
    return np.vstack(points + [points[0]])


def initial_intersection_polygon(
    intersection: Intersection,
    network: RoadNetwork,
    config: GeometryConfig = DEFAULT_CONFIG,
) -> IntersectionPolygon:
    """
    Footprint polygon of one intersection, trimming its incident roads'
    centerlines back to it. Sets intersection.polygon.

    Carves space out of the incident roads' lane bands and never reaches past
    them. Geometry problems degrade the result and show up in its diagnostics;
    only inconsistent road/intersection records raise (NetworkIntegrityError).
    """
    if intersection.degree == 0:
        raise ValueError(f"intersection {intersection.id} has no roads")
    lines = road_borders(intersection, network, config)
    ctx = SolveContext(
        intersection_id=intersection.id,
        network=network,
        lines=lines,
        config=config,
    )

    points: list[Pt2D] | None = None
    strategy_name = ""
    for strategy in strategies_for_degree(ctx.degree):
        points = strategy(ctx)
        if points is not None:
            strategy_name = strategy.__name__
            break
    if points is None:
        raise AssertionError(f"no strategy resolved intersection {intersection.id}")

    polygon = close_ring(points)
    intersection.polygon = polygon
    return IntersectionPolygon(
        intersection_id=intersection.id,
        polygon=polygon,
        strategy=strategy_name,
        diagnostics=ctx.diagnostics,
    )
