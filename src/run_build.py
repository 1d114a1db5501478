from __future__ import annotations

import argparse
from typing import Protocol, cast

import numpy as np

from .junctions.build import make_all_intersection_polygons
from .junctions.config import (
    DEGENERATE_INTERSECTION_HALF_LENGTH,
    LANE_THICKNESS,
    PARALLEL_THRESHOLD_DEGREES,
    GeometryConfig,
)
from .junctions.export_svg import export_network_svg
from .junctions.network import RoadNetwork
from .utils import debug, debug_helpers


class CliArgs(Protocol):
    input: str
    output: str
    svg: str | None
    lane_thickness: float
    half_length: float
    parallel_threshold: float
    progress: bool
    verbose: bool


def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser(
        description="Build intersection polygons and trim road centerlines"
    )
    ap.add_argument("--input", required=True, help="Input network JSON")
    ap.add_argument("--output", required=True, help="Output network JSON")
    ap.add_argument("--svg", default=None, help="Optional SVG rendering of the result")
    ap.add_argument(
        "--lane_thickness", type=float, default=LANE_THICKNESS, help="Width of one lane (m)"
    )
    ap.add_argument(
        "--half_length",
        type=float,
        default=DEGENERATE_INTERSECTION_HALF_LENGTH,
        help="How far dead ends and two-way intersections reach back (m)",
    )
    ap.add_argument(
        "--parallel_threshold",
        type=float,
        default=PARALLEL_THRESHOLD_DEGREES,
        help="Angle (degrees) below which adjacent borders aren't intersected directly",
    )
    ap.add_argument("--progress", action="store_true", help="Show a progress bar")
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable debug logs")

    args = cast(CliArgs, ap.parse_args(argv))
    debug.set_verbose(args.verbose)

    config = GeometryConfig(
        lane_thickness=args.lane_thickness,
        degenerate_half_length=args.half_length,
        parallel_threshold_degrees=args.parallel_threshold,
    )

    network = RoadNetwork.load_json(args.input)
    debug.log(
        f"loaded: intersections={len(network.intersections)} roads={len(network.roads)}"
    )
    if network.intersections:
        debug_helpers.log_points(
            "intersection points", np.vstack([i.point for i in network.intersections])
        )

    report = make_all_intersection_polygons(network, config, progress=args.progress)

    network.save_json(args.output)
    if args.svg is not None:
        export_network_svg(args.svg, network, config)
        debug.log(f"svg: {args.svg}")
    print(f"Saved: {args.output}  {report.summary()}")


if __name__ == "__main__":
    main()
