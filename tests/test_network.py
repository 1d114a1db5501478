from pathlib import Path

import numpy as np
import pytest

from src.junctions.geom import PolyLine
from src.junctions.network import NetworkIntegrityError, RoadNetwork


def _two_roads() -> RoadNetwork:
    network = RoadNetwork()
    a = network.add_intersection([0.0, 0.0])
    b = network.add_intersection([20.0, 0.0])
    c = network.add_intersection([20.0, 30.0])
    network.add_road(a, b, [[0.0, 0.0], [20.0, 0.0]], lanes_forward=2, lanes_backward=1)
    network.add_road(b, c, [[20.0, 0.0], [20.0, 30.0]])
    return network


def test_add_road_registers_both_ends() -> None:
    network = _two_roads()
    assert network.intersection(0).roads == [0]
    assert network.intersection(1).roads == [0, 1]
    assert network.intersection(2).roads == [1]
    assert network.intersection(1).degree == 2
    network.validate()


def test_add_road_rejects_bad_input() -> None:
    network = _two_roads()
    with pytest.raises(ValueError):
        network.add_road(0, 0, [[0.0, 0.0], [1.0, 1.0]])
    with pytest.raises(ValueError):
        network.add_road(0, 9, [[0.0, 0.0], [1.0, 1.0]])
    with pytest.raises(ValueError):
        network.add_road(0, 1, [[0.0, 0.0], [20.0, 0.0]], lanes_forward=-1)
    with pytest.raises(ValueError):
        network.add_intersection([0.0, np.inf])


def test_validate_catches_wrong_incidence() -> None:
    network = _two_roads()
    network.intersection(2).roads.append(0)
    with pytest.raises(NetworkIntegrityError):
        network.validate()


def test_validate_catches_detached_centerline() -> None:
    network = _two_roads()
    network.road(1).center_pts = PolyLine([[20.0, 1.0], [20.0, 30.0]])
    with pytest.raises(NetworkIntegrityError):
        network.validate()
    network.validate(check_endpoints=False)


def test_json_round_trip(tmp_path: Path) -> None:
    network = _two_roads()
    network.road(0).center_pts = network.road(0).center_pts.slice(0.0, 15.0)
    network.intersection(0).polygon = np.array(
        [[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 0.0]]
    )
    path = tmp_path / "net.json"
    network.save_json(path)

    loaded = RoadNetwork.load_json(path)
    assert len(loaded.roads) == 2
    assert len(loaded.intersections) == 3
    assert loaded.intersection(1).roads == [0, 1]
    assert loaded.road(0).lanes_forward == 2
    assert loaded.road(0).lanes_backward == 1
    np.testing.assert_allclose(loaded.road(0).center_pts.points, [[0.0, 0.0], [15.0, 0.0]])
    assert loaded.intersection(0).polygon is not None
    np.testing.assert_allclose(loaded.intersection(0).polygon, network.intersection(0).polygon)
    assert loaded.intersection(1).polygon is None


def test_from_dict_requires_positional_ids() -> None:
    data = _two_roads().to_dict()
    data["roads"][0]["id"] = 5
    with pytest.raises(ValueError):
        RoadNetwork.from_dict(data)
    with pytest.raises(ValueError):
        RoadNetwork.from_dict({"roads": []})
