from __future__ import annotations

import numpy as np
import svgwrite  # type: ignore[reportMissingTypeStubs]

from .borders import road_band
from .config import DEFAULT_CONFIG, GeometryConfig
from .network import RoadNetwork


def _flip(points: np.ndarray) -> np.ndarray:
    # Map y points up, SVG y points down.
    return points * np.array([1.0, -1.0])


def _to_point_list(points: np.ndarray) -> list[tuple[float, float]]:
    return [(float(p[0]), float(p[1])) for p in _flip(points)]


def network_viewbox(
    network: RoadNetwork, pad: float = 10.0
) -> tuple[float, float, float, float]:
    """(minx, miny, width, height) of everything drawn, in flipped SVG coords."""
    chunks = [r.center_pts.points for r in network.roads]
    chunks.extend(i.point[None, :] for i in network.intersections)
    chunks.extend(i.polygon for i in network.intersections if i.polygon is not None)
    if not chunks:
        return (0.0, 0.0, 2 * pad, 2 * pad)
    allp = _flip(np.vstack(chunks))
    minx, miny = allp.min(axis=0)
    maxx, maxy = allp.max(axis=0)
    return (
        float(minx - pad),
        float(miny - pad),
        float((maxx - minx) + 2 * pad),
        float((maxy - miny) + 2 * pad),
    )


def export_network_svg(
    out_path: str,
    network: RoadNetwork,
    config: GeometryConfig = DEFAULT_CONFIG,
    *,
    band_fill: str = "#bbbbbb",
    polygon_fill: str = "#555555",
    polygon_stroke: str = "#222222",
    centerline_stroke: str = "#d4a017",
    stroke_width: float | str = 0.3,
    viewbox: tuple[float, float, float, float] | None = None,
    canvas_size: tuple[float, float] | tuple[str, str] | None = None,
) -> None:
    """
    Road bands underneath, intersection polygons over them, centerlines on top.
    Roads with no lanes on either side only get their centerline.
    """
    if viewbox is None:
        viewbox = network_viewbox(network)

    if canvas_size is None:
        dwg = svgwrite.Drawing(out_path, profile="tiny")
    else:
        dwg = svgwrite.Drawing(out_path, profile="tiny", size=canvas_size)
    dwg.attribs["viewBox"] = f"{viewbox[0]} {viewbox[1]} {viewbox[2]} {viewbox[3]}"

    for road in network.roads:
        if road.lanes_forward + road.lanes_backward == 0:
            continue
        dwg.add(
            dwg.polygon(
                points=_to_point_list(road_band(road, config)),
                fill=band_fill,
                stroke="none",
            )
        )

    for intersection in network.intersections:
        if intersection.polygon is None:
            continue
        dwg.add(
            dwg.polygon(
                points=_to_point_list(intersection.polygon),
                fill=polygon_fill,
                stroke=polygon_stroke,
                stroke_width=stroke_width,
            )
        )

    for road in network.roads:
        dwg.add(
            dwg.polyline(
                points=_to_point_list(road.center_pts.points),
                stroke=centerline_stroke,
                fill="none",
                stroke_width=stroke_width,
            )
        )

    dwg.save()
