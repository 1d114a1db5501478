from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterator

import numpy as np
from beartype import beartype
from jaxtyping import jaxtyped
from shapely.geometry import LineString
from shapely.ops import linemerge, substring

from .types import Pt2D, Pts2D

# Points closer than this are the same point.
EPSILON_DIST = 1e-6
# Slack on segment parameters, so corners touching at an endpoint still count.
_PARAM_EPS = 1e-9
# sin of the smallest angle between two lines that is not treated as parallel.
_PARALLEL_EPS = 1e-12
# Mitre joins longer than this many widths get bevelled.
_MITER_LIMIT = 10.0


def as_pt(x: float, y: float) -> Pt2D:
    return np.array([x, y], dtype=np.float64)


@jaxtyped(typechecker=beartype)
def pt_eq(a: Pt2D, b: Pt2D, eps: float = EPSILON_DIST) -> bool:
    return bool(np.hypot(a[0] - b[0], a[1] - b[1]) <= eps)


@dataclass(frozen=True)
class Angle:
    """Direction in radians; y axis up, counter-clockwise positive."""

    radians: float

    @classmethod
    def from_degrees(cls, degrees: float) -> Angle:
        return cls(math.radians(degrees))

    def normalized_degrees(self) -> float:
        """Degrees in [0, 360)."""
        d = math.degrees(self.radians) % 360.0
        if d >= 360.0:
            d -= 360.0
        return d

    def opposite(self) -> Angle:
        return Angle(self.radians + math.pi)

    def rotate_degs(self, degrees: float) -> Angle:
        return Angle(self.radians + math.radians(degrees))


@jaxtyped(typechecker=beartype)
def project_away(pt: Pt2D, dist: float, angle: Angle) -> Pt2D:
    direction = np.array(
        [math.cos(angle.radians), math.sin(angle.radians)], dtype=np.float64
    )
    return pt + dist * direction


@jaxtyped(typechecker=beartype)
def point_segment_dist(p: Pt2D, a: Pt2D, b: Pt2D, eps: float = 1e-18) -> float:
    ab = b - a
    t = float(np.dot(p - a, ab)) / (float(np.dot(ab, ab)) + eps)
    t = min(1.0, max(0.0, t))
    q = a + t * ab
    return float(np.hypot(p[0] - q[0], p[1] - q[1]))


@jaxtyped(typechecker=beartype)
def polyline_length(pts: Pts2D) -> float:
    seg = pts[1:, :] - pts[:-1, :]
    return float(np.sum(np.linalg.norm(seg, axis=-1)))


@jaxtyped(typechecker=beartype)
def dedup_points(points: list[Pt2D]) -> list[Pt2D]:
    """Drop points equal to their predecessor. Only consecutive runs collapse."""
    out: list[Pt2D] = []
    for pt in points:
        if out and pt_eq(out[-1], pt):
            continue
        out.append(pt)
    return out


def _cross(u: np.ndarray, v: np.ndarray) -> float:
    return float(u[0] * v[1] - u[1] * v[0])


def _line_params(
    a: np.ndarray, b: np.ndarray, c: np.ndarray, d: np.ndarray
) -> tuple[float, float] | None:
    """
    Solve a + t (b - a) = c + s (d - c) for (t, s).
    None when the two lines are parallel (collinear included).
    """
    r = b - a
    q = d - c
    denom = _cross(r, q)
    scale = float(np.linalg.norm(r) * np.linalg.norm(q))
    if abs(denom) <= _PARALLEL_EPS * scale:
        return None
    w = c - a
    return _cross(w, q) / denom, _cross(w, r) / denom


def _in_unit(t: float) -> bool:
    return -_PARAM_EPS <= t <= 1.0 + _PARAM_EPS


def _at(a: np.ndarray, b: np.ndarray, t: float) -> Pt2D:
    t = min(1.0, max(0.0, t))
    return (a + t * (b - a)).astype(np.float64)


@dataclass(frozen=True, eq=False)
class Line:
    """Segment from pt1 to pt2. Also used as the infinite line through both."""

    pt1: Pt2D
    pt2: Pt2D

    def __post_init__(self) -> None:
        if pt_eq(self.pt1, self.pt2):
            raise ValueError("Line endpoints must be distinct")

    def angle(self) -> Angle:
        d = self.pt2 - self.pt1
        return Angle(math.atan2(float(d[1]), float(d[0])))

    def intersection(self, other: Line) -> Pt2D | None:
        """Segment against segment, endpoints inclusive."""
        params = _line_params(self.pt1, self.pt2, other.pt1, other.pt2)
        if params is None:
            return None
        t, s = params
        if _in_unit(t) and _in_unit(s):
            return _at(self.pt1, self.pt2, t)
        return None


def _drop_repeats(pts: np.ndarray) -> np.ndarray:
    keep: list[int] = [0]
    for i in range(1, len(pts)):
        if not pt_eq(pts[i], pts[keep[-1]]):
            keep.append(i)
    return pts[keep]


class PolyLine:
    """
    Ordered, direction-significant point sequence with at least two distinct
    points. Consecutive repeats are dropped on construction.
    """

    def __init__(self, points: Any) -> None:
        pts = np.array(points, dtype=np.float64)
        if pts.ndim != 2 or pts.shape[1] != 2:
            raise ValueError("points must have shape (N,2)")
        if not np.isfinite(pts).all():
            raise ValueError("points contain non-finite coordinates")
        if pts.shape[0] > 0:
            pts = _drop_repeats(pts)
        if pts.shape[0] < 2:
            raise ValueError("PolyLine needs at least two distinct points")
        self._pts = pts

    def __repr__(self) -> str:
        return f"PolyLine({self._pts.tolist()})"

    def __len__(self) -> int:
        return int(self._pts.shape[0])

    @property
    def points(self) -> Pts2D:
        return self._pts.copy()

    def copy(self) -> PolyLine:
        return PolyLine(self._pts)

    def reversed(self) -> PolyLine:
        return PolyLine(self._pts[::-1])

    def first_pt(self) -> Pt2D:
        return self._pts[0].copy()

    def last_pt(self) -> Pt2D:
        return self._pts[-1].copy()

    def _segments(self) -> Iterator[tuple[np.ndarray, np.ndarray]]:
        for i in range(len(self._pts) - 1):
            yield self._pts[i], self._pts[i + 1]

    def last_line(self) -> Line:
        return Line(self._pts[-2].copy(), self._pts[-1].copy())

    def length(self) -> float:
        return polyline_length(self._pts)

    def dist_along(self, dist: float) -> tuple[Pt2D, Angle]:
        """Point at arclength dist from the start, and the angle there."""
        length = self.length()
        if dist < 0.0 or dist > length + EPSILON_DIST:
            raise ValueError(
                f"dist_along({dist}) is off a PolyLine of length {length}"
            )
        hit = self.to_shapely().interpolate(min(dist, length))
        pt = np.asarray(hit.coords[0], dtype=np.float64)
        # Segment holding dist; a vertex belongs to the segment ending there.
        ends = np.cumsum(np.linalg.norm(np.diff(self._pts, axis=0), axis=-1))
        idx = min(int(np.searchsorted(ends, dist, side="left")), len(ends) - 1)
        return pt, Line(self._pts[idx].copy(), self._pts[idx + 1].copy()).angle()

    def safe_dist_along(self, dist: float) -> tuple[Pt2D, Angle] | None:
        if dist < 0.0 or dist > self.length() + EPSILON_DIST:
            return None
        return self.dist_along(dist)

    def slice(self, start: float, end: float) -> PolyLine:
        """Sub-polyline between arclengths start and end."""
        length = self.length()
        if start < 0.0 or end > length + EPSILON_DIST or end - start <= EPSILON_DIST:
            raise ValueError(
                f"can't slice [{start}, {end}] from a PolyLine of length {length}"
            )
        piece = substring(self.to_shapely(), start, min(end, length))
        return PolyLine(np.asarray(piece.coords, dtype=np.float64))

    def trim_to_pt(self, pt: Pt2D) -> None:
        """
        Cut the line in place so it ends at pt, which must lie on it.
        Trimming to the current last point is a no-op.
        """
        for idx, (a, b) in enumerate(self._segments()):
            if point_segment_dist(pt, a, b) <= EPSILON_DIST:
                pts = _drop_repeats(np.vstack([self._pts[: idx + 1], pt[None, :]]))
                if pts.shape[0] < 2:
                    raise ValueError("trimming would leave fewer than two points")
                self._pts = pts
                return
        raise ValueError(f"{pt.tolist()} is not on {self!r}")

    def shift(self, width: float) -> PolyLine:
        """
        Offset sideways by width, toward +90 degrees of the travel direction
        (left of it for positive widths), keeping the direction of travel.
        Interior vertices are mitred, or bevelled when the mitre runs away.
        """
        if width == 0.0:
            return self.copy()
        offset = self.to_shapely().offset_curve(
            width, join_style="mitre", mitre_limit=_MITER_LIMIT
        )
        if offset.is_empty:
            raise ValueError(f"offsetting {self!r} by {width} left nothing")
        if offset.geom_type == "MultiLineString":
            # Loops cut off at tight inner bends leave pieces, still in order.
            offset = linemerge(offset)
        if offset.geom_type == "MultiLineString":
            coords = np.vstack([np.asarray(part.coords) for part in offset.geoms])
        else:
            coords = np.asarray(offset.coords)
        return PolyLine(coords[:, :2])

    def intersection(self, other: PolyLine) -> tuple[Pt2D, Angle] | None:
        """First crossing along self, with the angle of self's segment there."""
        for a, b in self._segments():
            mine = Line(a, b)
            for c, d in other._segments():
                hit = mine.intersection(Line(c, d))
                if hit is not None:
                    return hit, mine.angle()
        return None

    def intersection_infinite_line(self, line: Line) -> Pt2D | None:
        """First point along self that lies on the infinite line."""
        for a, b in self._segments():
            params = _line_params(a, b, line.pt1, line.pt2)
            if params is not None and _in_unit(params[0]):
                return _at(a, b, params[0])
        return None

    def to_shapely(self) -> LineString:
        return LineString(self._pts)
