from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .config import GeometryConfig
from .geom import Angle, PolyLine
from .network import Intersection, NetworkIntegrityError, Road, RoadNetwork
from .types import IntersectionID, Pts2D, RoadID


@dataclass(frozen=True, eq=False)
class RoadBorders:
    """
    One incident road seen from an intersection. Both borders end at the
    intersection; angle is the direction of the last centerline segment.
    """

    road_id: RoadID
    angle: Angle
    normal: PolyLine
    reverse: PolyLine


def facing_centerline(road: Road, i: IntersectionID) -> PolyLine:
    """The road's centerline, oriented to end at intersection i."""
    if road.src_i == i:
        return road.center_pts.reversed()
    if road.dst_i == i:
        return road.center_pts.copy()
    raise NetworkIntegrityError(f"Incident road {road.id} doesn't have an endpoint at {i}")


def band_widths(road: Road, i: IntersectionID, config: GeometryConfig) -> tuple[float, float]:
    """(normal, reverse) widths for the road as seen from intersection i."""
    fwd_width = config.road_width(road.lanes_forward)
    back_width = config.road_width(road.lanes_backward)
    if road.src_i == i:
        return back_width, fwd_width
    if road.dst_i == i:
        return fwd_width, back_width
    raise NetworkIntegrityError(f"Incident road {road.id} doesn't have an endpoint at {i}")


def shifted_borders(
    line: PolyLine, width_normal: float, width_reverse: float
) -> tuple[PolyLine, PolyLine]:
    normal = line.shift(width_normal)
    reverse = line.reversed().shift(width_reverse).reversed()
    return normal, reverse


def angle_bucket(borders: RoadBorders) -> int:
    return int(borders.angle.normalized_degrees())


def road_borders(
    intersection: Intersection, network: RoadNetwork, config: GeometryConfig
) -> list[RoadBorders]:
    """
    Border pair for every incident road, sorted by the whole-degree angle of
    the road's approach. Equal buckets keep incidence order.
    """
    lines: list[RoadBorders] = []
    for road_id in intersection.roads:
        road = network.road(road_id)
        line = facing_centerline(road, intersection.id)
        width_normal, width_reverse = band_widths(road, intersection.id, config)
        normal, reverse = shifted_borders(line, width_normal, width_reverse)
        lines.append(
            RoadBorders(
                road_id=road_id,
                angle=line.last_line().angle(),
                normal=normal,
                reverse=reverse,
            )
        )
    lines.sort(key=angle_bucket)
    return lines


def road_band(road: Road, config: GeometryConfig) -> Pts2D:
    """
    Outline of the road's full lane band, as an open ring (N,2): the forward
    edge from src to dst, then the backward edge from dst to src.
    """
    fwd_edge, back_edge = shifted_borders(
        road.center_pts,
        config.road_width(road.lanes_forward),
        config.road_width(road.lanes_backward),
    )
    return np.vstack([fwd_edge.points, back_edge.points[::-1]])
