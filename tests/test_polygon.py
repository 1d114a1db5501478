import math

import numpy as np
import pytest
from shapely.geometry import Polygon
from shapely.ops import unary_union

from src.junctions.borders import road_band
from src.junctions.config import DEFAULT_CONFIG, GeometryConfig
from src.junctions.corners import pair_fallback, solve_corners
from src.junctions.degenerate import dead_end, dead_end_raw, two_way, two_way_raw
from src.junctions.network import NetworkIntegrityError, RoadNetwork
from src.junctions.polygon import close_ring, initial_intersection_polygon, strategies_for_degree


def _star(positions_deg: list[float], length: float = 50.0) -> RoadNetwork:
    network = RoadNetwork()
    center = network.add_intersection([0.0, 0.0])
    for k, deg in enumerate(positions_deg):
        far = [length * math.cos(math.radians(deg)), length * math.sin(math.radians(deg))]
        outer = network.add_intersection(far)
        # Alternate directions so both band orientations get exercised.
        if k % 2:
            network.add_road(center, outer, [[0.0, 0.0], far])
        else:
            network.add_road(outer, center, [far, [0.0, 0.0]])
    return network


def test_strategies_for_degree() -> None:
    assert strategies_for_degree(1) == (dead_end, dead_end_raw)
    assert strategies_for_degree(2) == (two_way, two_way_raw)
    assert strategies_for_degree(3) == (solve_corners, pair_fallback)
    assert strategies_for_degree(7) == (solve_corners, pair_fallback)


def test_close_ring() -> None:
    pts = [np.array([0.0, 0.0]), np.array([1.0, 0.0]), np.array([0.0, 1.0])]
    ring = close_ring(pts)
    assert ring.shape == (4, 2)
    np.testing.assert_allclose(ring[0], ring[-1])
    with pytest.raises(ValueError):
        close_ring([])


@pytest.mark.parametrize(
    "positions",
    [
        [0.0],
        [0.0, 180.0],
        [0.0, 100.0, 230.0],
        [10.0, 95.0, 185.0, 280.0],
    ],
)
def test_polygon_is_closed_and_inside_bands(positions: list[float]) -> None:
    network = _star(positions)
    bands = unary_union([Polygon(road_band(r, DEFAULT_CONFIG)) for r in network.roads])
    result = initial_intersection_polygon(network.intersection(0), network)

    assert result.polygon.ndim == 2 and result.polygon.shape[1] == 2
    assert np.isfinite(result.polygon).all()
    np.testing.assert_allclose(result.polygon[0], result.polygon[-1])
    assert not result.degraded
    assert bands.buffer(1e-6).covers(Polygon(result.polygon))
    for road in network.roads:
        assert 0.0 < road.center_pts.length() < 50.0


def test_custom_config_changes_reach() -> None:
    network = _star([0.0])
    config = GeometryConfig(degenerate_half_length=2.0)
    result = initial_intersection_polygon(network.intersection(0), network, config)
    assert result.strategy == "dead_end"
    assert network.road(0).center_pts.length() == pytest.approx(46.0)


def test_isolated_intersection_rejected() -> None:
    network = RoadNetwork()
    network.add_intersection([0.0, 0.0])
    with pytest.raises(ValueError):
        initial_intersection_polygon(network.intersection(0), network)


def test_road_not_ending_at_intersection_is_fatal() -> None:
    network = _star([0.0, 120.0, 240.0])
    # Intersection 1 claims road 1, which runs between 0 and 2.
    network.intersection(1).roads.append(1)
    with pytest.raises(NetworkIntegrityError):
        initial_intersection_polygon(network.intersection(1), network)
