import numpy as np
import pytest

from src.junctions.diagnostics import Severity
from src.junctions.geom import dedup_points
from src.junctions.network import RoadNetwork
from src.junctions.polygon import initial_intersection_polygon


def _dead_end(length: float) -> RoadNetwork:
    network = RoadNetwork()
    start = network.add_intersection([0.0, 0.0])
    end = network.add_intersection([length, 0.0])
    network.add_road(start, end, [[0.0, 0.0], [length, 0.0]], lanes_forward=1, lanes_backward=2)
    return network


def _straight(length: float) -> RoadNetwork:
    """West road into intersection 1 at the origin, east road out of it."""
    network = RoadNetwork()
    west = network.add_intersection([-length, 0.0])
    center = network.add_intersection([0.0, 0.0])
    east = network.add_intersection([length, 0.0])
    network.add_road(west, center, [[-length, 0.0], [0.0, 0.0]])
    network.add_road(center, east, [[0.0, 0.0], [length, 0.0]])
    return network


def test_dead_end_box_and_trim() -> None:
    network = _dead_end(30.0)
    result = initial_intersection_polygon(network.intersection(1), network)

    assert result.strategy == "dead_end"
    assert result.diagnostics == []
    assert result.polygon.shape == (5, 2)
    np.testing.assert_allclose(result.polygon[0], result.polygon[-1])
    np.testing.assert_allclose(
        result.polygon[:-1],
        [[20.0, 2.5], [20.0, -5.0], [30.0, -5.0], [30.0, 2.5]],
        atol=1e-9,
    )
    assert network.road(0).center_pts.length() == pytest.approx(30.0 - 10.0)
    np.testing.assert_allclose(network.road(0).center_pts.first_pt(), [0.0, 0.0])
    assert network.intersection(1).polygon is result.polygon


def test_dead_end_at_road_source_trims_the_start() -> None:
    network = _dead_end(30.0)
    result = initial_intersection_polygon(network.intersection(0), network)
    assert result.strategy == "dead_end"
    np.testing.assert_allclose(network.road(0).center_pts.first_pt(), [10.0, 0.0], atol=1e-9)
    np.testing.assert_allclose(network.road(0).center_pts.last_pt(), [30.0, 0.0])


def test_dead_end_too_short_degrades() -> None:
    network = _dead_end(4.0)
    result = initial_intersection_polygon(network.intersection(1), network)

    assert result.strategy == "dead_end_raw"
    assert result.polygon.shape == (3, 2)
    np.testing.assert_allclose(result.polygon[0], result.polygon[-1])
    assert network.road(0).center_pts.length() == pytest.approx(4.0)
    assert [d.severity for d in result.diagnostics] == [Severity.ERROR]
    assert result.diagnostics[0].road_ids == (0,)
    assert result.diagnostics[0].intersection_id == 1
    assert result.degraded


def test_two_way_quad_and_trim() -> None:
    network = _straight(40.0)
    result = initial_intersection_polygon(network.intersection(1), network)

    assert result.strategy == "two_way"
    assert result.diagnostics == []
    ring = result.polygon[:-1]
    assert len(dedup_points(list(ring))) <= 4
    np.testing.assert_allclose(
        ring,
        [[-5.0, 2.5], [5.0, 2.5], [5.0, -2.5], [-5.0, -2.5]],
        atol=1e-9,
    )
    np.testing.assert_allclose(result.polygon[0], result.polygon[-1])

    west, east = network.road(0), network.road(1)
    assert west.center_pts.length() == pytest.approx(35.0)
    assert east.center_pts.length() == pytest.approx(35.0)
    np.testing.assert_allclose(west.center_pts.last_pt(), [-5.0, 0.0], atol=1e-9)
    np.testing.assert_allclose(east.center_pts.first_pt(), [5.0, 0.0], atol=1e-9)
    np.testing.assert_allclose(west.center_pts.first_pt(), [-40.0, 0.0])


def test_two_way_too_short_degrades() -> None:
    network = _straight(3.0)
    result = initial_intersection_polygon(network.intersection(1), network)

    assert result.strategy == "two_way_raw"
    assert result.polygon.shape == (5, 2)
    assert [d.severity for d in result.diagnostics] == [Severity.ERROR]
    assert set(result.diagnostics[0].road_ids) == {0, 1}
    assert network.road(0).center_pts.length() == pytest.approx(3.0)
    assert network.road(1).center_pts.length() == pytest.approx(3.0)


def test_two_way_turn_stays_closed() -> None:
    network = RoadNetwork()
    west = network.add_intersection([-40.0, 0.0])
    center = network.add_intersection([0.0, 0.0])
    north = network.add_intersection([0.0, 40.0])
    network.add_road(west, center, [[-40.0, 0.0], [0.0, 0.0]], lanes_forward=2, lanes_backward=1)
    network.add_road(north, center, [[0.0, 40.0], [0.0, 0.0]])
    result = initial_intersection_polygon(network.intersection(center), network)
    assert result.strategy == "two_way"
    np.testing.assert_allclose(result.polygon[0], result.polygon[-1])
    assert len(dedup_points(list(result.polygon[:-1]))) >= 3
    assert network.road(0).center_pts.length() == pytest.approx(35.0)
    assert network.road(1).center_pts.length() == pytest.approx(35.0)
