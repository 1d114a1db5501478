from __future__ import annotations

from .context import SolveContext
from .geom import dedup_points
from .network import Road
from .types import IntersectionID, Pt2D


def trim_at_intersection(road: Road, i: IntersectionID, dist: float) -> None:
    """Shorten road's centerline by dist on the end touching intersection i."""
    length = road.center_pts.length()
    if road.src_i == i:
        road.center_pts = road.center_pts.slice(dist, length)
    else:
        road.center_pts = road.center_pts.slice(0.0, length - dist)


def dead_end(ctx: SolveContext) -> list[Pt2D] | None:
    """
    Degree 1: a box reaching twice the half length back along the road.
    None when the road is too short for that.
    """
    borders = ctx.lines[0]
    road = ctx.network.road(borders.road_id)
    dist = 2.0 * ctx.config.degenerate_half_length

    hit_normal = borders.normal.reversed().safe_dist_along(dist)
    hit_reverse = borders.reverse.reversed().safe_dist_along(dist)
    if hit_normal is None or hit_reverse is None:
        return None
    if road.center_pts.length() <= dist:
        return None

    trim_at_intersection(road, ctx.intersection_id, dist)
    return [
        hit_normal[0],
        hit_reverse[0],
        borders.reverse.last_pt(),
        borders.normal.last_pt(),
    ]


def dead_end_raw(ctx: SolveContext) -> list[Pt2D]:
    borders = ctx.lines[0]
    ctx.error(
        f"{ctx.intersection_id} is a dead-end for road {borders.road_id}, which is "
        "too short to make degenerate intersection geometry",
        road_ids=(borders.road_id,),
    )
    return [borders.normal.last_pt(), borders.reverse.last_pt()]


def two_way(ctx: SolveContext) -> list[Pt2D] | None:
    """
    Degree 2: the quad half a length back along both roads. The raw border
    endpoints are left out; they look wrong when the two widths differ.
    """
    first, second = ctx.lines
    half = ctx.config.degenerate_half_length
    borders = (first.normal, first.reverse, second.normal, second.reverse)
    if any(pl.length() < half for pl in borders):
        return None
    roads = [ctx.network.road(first.road_id), ctx.network.road(second.road_id)]
    if any(road.center_pts.length() <= half for road in roads):
        return None

    points = dedup_points(
        [
            first.normal.reversed().dist_along(half)[0],
            second.reverse.reversed().dist_along(half)[0],
            second.normal.reversed().dist_along(half)[0],
            first.reverse.reversed().dist_along(half)[0],
        ]
    )
    for road in roads:
        trim_at_intersection(road, ctx.intersection_id, half)
    return points


def two_way_raw(ctx: SolveContext) -> list[Pt2D]:
    first, second = ctx.lines
    ctx.error(
        f"{ctx.intersection_id} has only roads {first.road_id} and {second.road_id}, "
        "some of which are too short to make degenerate intersection geometry",
        road_ids=(first.road_id, second.road_id),
    )
    return [
        first.normal.last_pt(),
        first.reverse.last_pt(),
        second.normal.last_pt(),
        second.reverse.last_pt(),
    ]
