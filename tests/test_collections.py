import pytest

from src.utils.collections import wraparound_get


def test_wraparound_get_in_range() -> None:
    items = ["a", "b", "c"]
    assert [wraparound_get(items, i) for i in range(3)] == items


@pytest.mark.parametrize(
    ("index", "expected"),
    [(3, "a"), (4, "b"), (-1, "c"), (-3, "a"), (-4, "c"), (301, "b")],
)
def test_wraparound_get_wraps(index: int, expected: str) -> None:
    assert wraparound_get(["a", "b", "c"], index) == expected


def test_wraparound_get_single_item() -> None:
    assert wraparound_get([7], -5) == 7
    assert wraparound_get([7], 5) == 7
