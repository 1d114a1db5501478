from __future__ import annotations

from dataclasses import dataclass

from ..utils.collections import wraparound_get
from .borders import RoadBorders, band_widths, facing_centerline, shifted_borders
from .context import SolveContext
from .geom import Line, PolyLine, dedup_points, project_away, pt_eq
from .types import Pt2D


@dataclass(frozen=True, eq=False)
class CornerCandidate:
    """A corner between two adjacent borders, and the centerline trimmed to it."""

    hit: Pt2D
    center: PolyLine


def corner_candidate(
    border: PolyLine, adjacent: PolyLine, center: PolyLine
) -> CornerCandidate | None:
    """
    Where border meets the adjacent road's border, and the centerline cut at the
    perpendicular through that corner. None if they don't meet, or the
    perpendicular misses the centerline or would leave nothing of it.
    """
    found = border.intersection(adjacent)
    if found is None:
        return None
    hit, angle = found
    perp = Line(hit, project_away(hit, 1.0, angle.rotate_degs(90.0)))
    trim_to = center.intersection_infinite_line(perp)
    if trim_to is None or pt_eq(trim_to, center.first_pt()):
        return None
    trimmed = center.copy()
    trimmed.trim_to_pt(trim_to)
    return CornerCandidate(hit=hit, center=trimmed)


@dataclass(frozen=True, eq=False)
class _PlannedTrim:
    borders: RoadBorders
    fwd_hit: Pt2D | None
    center: PolyLine
    back_hit: Pt2D | None


def solve_corners(ctx: SolveContext) -> list[Pt2D] | None:
    """
    Two corners per road against its angular neighbours; each road is trimmed
    back to the nearer one. None if any road has no corner at all, in which
    case no road has been touched.
    """
    planned: list[_PlannedTrim] = []
    for idx, borders in enumerate(ctx.lines):
        prev = wraparound_get(ctx.lines, idx - 1)
        nxt = wraparound_get(ctx.lines, idx + 1)
        road = ctx.network.road(borders.road_id)
        center = facing_centerline(road, ctx.intersection_id)

        fwd = corner_candidate(borders.normal, prev.reverse, center)
        back = corner_candidate(borders.reverse, nxt.normal, center)
        if fwd is None and back is None:
            ctx.note(
                f"couldn't find a corner for road {borders.road_id} at "
                f"{ctx.intersection_id} with {ctx.degree} roads",
                road_ids=(borders.road_id,),
            )
            return None
        # Conservative: the shorter centerline leaves room for both corners.
        found = [c for c in (fwd, back) if c is not None]
        shorter = min(found, key=lambda c: c.center.length()).center
        planned.append(
            _PlannedTrim(
                borders=borders,
                fwd_hit=None if fwd is None else fwd.hit,
                center=shorter,
                back_hit=None if back is None else back.hit,
            )
        )

    points: list[Pt2D] = []
    for plan in planned:
        road = ctx.network.road(plan.borders.road_id)
        if road.src_i == ctx.intersection_id:
            road.center_pts = plan.center.reversed()
        else:
            road.center_pts = plan.center.copy()
        width_normal, width_reverse = band_widths(road, ctx.intersection_id, ctx.config)
        normal, reverse = shifted_borders(plan.center, width_normal, width_reverse)

        # Corner hits are on the untrimmed borders.
        if plan.fwd_hit is not None:
            points.append(plan.fwd_hit)
        points.append(normal.last_pt())
        points.append(reverse.last_pt())
        if plan.back_hit is not None:
            points.append(plan.back_hit)
    return dedup_points(points)


def pair_fallback(ctx: SolveContext) -> list[Pt2D]:
    """
    One or two points per pair of angular neighbours, straight from the
    untrimmed borders. Never trims.
    """
    points: list[Pt2D] = []
    for idx1 in range(ctx.degree):
        idx2 = idx1 + 1
        first = wraparound_get(ctx.lines, idx1)
        second = wraparound_get(ctx.lines, idx2)
        pl1 = first.reverse
        pl2 = second.normal

        # Nearly opposite borders either miss or hit somewhere useless.
        angle_diff = abs(
            pl1.last_line().angle().opposite().normalized_degrees()
            - pl2.last_line().angle().normalized_degrees()
        )
        if angle_diff > ctx.config.parallel_threshold_degrees:
            found = pl1.intersection(pl2)
            if found is not None:
                points.append(found[0])
                continue

        ok = True
        # Fall back to the borders of the roads on the far side of each.
        inf_line1 = wraparound_get(ctx.lines, idx1 - 1).reverse.last_line()
        hit1 = pl1.intersection_infinite_line(inf_line1)
        if hit1 is None:
            points.append(pl1.last_pt())
            ok = False
        else:
            points.append(hit1)

        inf_line2 = wraparound_get(ctx.lines, idx2 + 1).normal.last_line()
        hit2 = pl2.intersection_infinite_line(inf_line2)
        if hit2 is None:
            points.append(pl2.last_pt())
            ok = False
        else:
            points.append(hit2)

        if not ok:
            ctx.warn(
                f"No hit btwn roads {first.road_id} and {second.road_id}, for "
                f"{ctx.intersection_id} with {ctx.degree} incident roads",
                road_ids=(first.road_id, second.road_id),
            )
    return points
