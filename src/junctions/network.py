from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import numpy as np

from .geom import PolyLine, pt_eq
from .types import IntersectionID, Pt2D, Ring2D, RoadID


class NetworkIntegrityError(ValueError):
    """Road and intersection records contradict each other."""


@dataclass(eq=False)
class Road:
    """
    center_pts always runs from src_i to dst_i. lanes_forward carries traffic
    along that direction, lanes_backward against it.
    """

    id: RoadID
    src_i: IntersectionID
    dst_i: IntersectionID
    center_pts: PolyLine
    lanes_forward: int = 1
    lanes_backward: int = 1


@dataclass(eq=False)
class Intersection:
    id: IntersectionID
    point: Pt2D
    roads: list[RoadID] = field(default_factory=list)
    polygon: Ring2D | None = None

    @property
    def degree(self) -> int:
        return len(self.roads)


@dataclass
class RoadNetwork:
    """Arena of roads and intersections; ids are list positions and never move."""

    roads: list[Road] = field(default_factory=list)
    intersections: list[Intersection] = field(default_factory=list)

    def add_intersection(self, point: Any) -> IntersectionID:
        pt = np.array(point, dtype=np.float64)
        if pt.shape != (2,) or not np.isfinite(pt).all():
            raise ValueError(f"intersection point must be 2 finite numbers, got {point}")
        i = len(self.intersections)
        self.intersections.append(Intersection(id=i, point=pt))
        return i

    def add_road(
        self,
        src_i: IntersectionID,
        dst_i: IntersectionID,
        center_pts: PolyLine | Any,
        lanes_forward: int = 1,
        lanes_backward: int = 1,
    ) -> RoadID:
        for i in (src_i, dst_i):
            if not 0 <= i < len(self.intersections):
                raise ValueError(f"unknown intersection {i}")
        if src_i == dst_i:
            raise ValueError(f"road loops back to intersection {src_i}")
        if lanes_forward < 0 or lanes_backward < 0:
            raise ValueError("lane counts must be >= 0")
        if not isinstance(center_pts, PolyLine):
            center_pts = PolyLine(center_pts)
        r = len(self.roads)
        self.roads.append(
            Road(
                id=r,
                src_i=src_i,
                dst_i=dst_i,
                center_pts=center_pts,
                lanes_forward=lanes_forward,
                lanes_backward=lanes_backward,
            )
        )
        self.intersections[src_i].roads.append(r)
        self.intersections[dst_i].roads.append(r)
        return r

    def road(self, r: RoadID) -> Road:
        return self.roads[r]

    def intersection(self, i: IntersectionID) -> Intersection:
        return self.intersections[i]

    def validate(self, *, check_endpoints: bool = True) -> None:
        """
        Raise NetworkIntegrityError unless every intersection's roads really end
        there. With check_endpoints, centerline ends must also sit on their
        intersections, which only holds before any trimming.
        """
        for idx, intersection in enumerate(self.intersections):
            if intersection.id != idx:
                raise NetworkIntegrityError(
                    f"intersection at position {idx} has id {intersection.id}"
                )
            for r in intersection.roads:
                if not 0 <= r < len(self.roads):
                    raise NetworkIntegrityError(
                        f"intersection {idx} lists unknown road {r}"
                    )
                road = self.roads[r]
                if idx not in (road.src_i, road.dst_i):
                    raise NetworkIntegrityError(
                        f"Incident road {r} doesn't have an endpoint at {idx}"
                    )
        for idx, road in enumerate(self.roads):
            if road.id != idx:
                raise NetworkIntegrityError(f"road at position {idx} has id {road.id}")
            if road.lanes_forward < 0 or road.lanes_backward < 0:
                raise NetworkIntegrityError(f"road {idx} has a negative lane count")
            for i in (road.src_i, road.dst_i):
                if idx not in self.intersections[i].roads:
                    raise NetworkIntegrityError(
                        f"road {idx} ends at {i}, which doesn't list it"
                    )
            if not check_endpoints:
                continue
            src_pt = self.intersections[road.src_i].point
            dst_pt = self.intersections[road.dst_i].point
            if not pt_eq(road.center_pts.first_pt(), src_pt):
                raise NetworkIntegrityError(
                    f"road {idx} doesn't start at intersection {road.src_i}"
                )
            if not pt_eq(road.center_pts.last_pt(), dst_pt):
                raise NetworkIntegrityError(
                    f"road {idx} doesn't end at intersection {road.dst_i}"
                )

    def to_dict(self) -> dict[str, Any]:
        return {
            "intersections": [
                {
                    "id": i.id,
                    "point": [float(v) for v in i.point],
                    "polygon": None if i.polygon is None else i.polygon.tolist(),
                }
                for i in self.intersections
            ],
            "roads": [
                {
                    "id": r.id,
                    "src_i": r.src_i,
                    "dst_i": r.dst_i,
                    "center_pts": r.center_pts.points.tolist(),
                    "lanes_forward": r.lanes_forward,
                    "lanes_backward": r.lanes_backward,
                }
                for r in self.roads
            ],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RoadNetwork:
        if "intersections" not in data or "roads" not in data:
            raise ValueError("network needs 'intersections' and 'roads'")
        network = cls()
        for idx, raw in enumerate(data["intersections"]):
            if raw.get("id", idx) != idx:
                raise ValueError(f"intersection ids must equal positions, got {raw['id']} at {idx}")
            i = network.add_intersection(raw["point"])
            polygon = raw.get("polygon")
            if polygon is not None:
                network.intersections[i].polygon = np.array(polygon, dtype=np.float64)
        for idx, raw in enumerate(data["roads"]):
            if raw.get("id", idx) != idx:
                raise ValueError(f"road ids must equal positions, got {raw['id']} at {idx}")
            network.add_road(
                int(raw["src_i"]),
                int(raw["dst_i"]),
                raw["center_pts"],
                lanes_forward=int(raw.get("lanes_forward", 1)),
                lanes_backward=int(raw.get("lanes_backward", 1)),
            )
        return network

    def save_json(self, path: str | Path) -> None:
        Path(path).write_text(
            json.dumps(self.to_dict(), indent=2, sort_keys=True), encoding="utf-8"
        )

    @classmethod
    def load_json(cls, path: str | Path) -> RoadNetwork:
        return cls.from_dict(json.loads(Path(path).read_text(encoding="utf-8")))
