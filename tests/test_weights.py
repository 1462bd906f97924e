import pytest

from lifemap_flow.weights import WeightPolicy


def test_default_points_increase_with_weight():
    policy = WeightPolicy()
    values = [policy.point_value(weight) for weight in (1, 2, 3)]
    assert values == sorted(values)
    assert values[0] < values[2]


def test_unknown_weight_uses_per_unit():
    policy = WeightPolicy(points={1: 1.0}, per_unit=2.0)
    assert policy.point_value(4) == 8.0
    assert policy.point_value(-1) == 0.0


def test_shares_sum_to_one():
    shares = WeightPolicy().shares([1, 2, 3, 3])
    assert sum(shares) == pytest.approx(1.0)
    assert shares[2] == pytest.approx(shares[3])


def test_all_zero_points_split_evenly():
    policy = WeightPolicy(points={1: 0.0, 2: 0.0})
    assert policy.shares([1, 2]) == [0.5, 0.5]


def test_points_keys_are_normalized():
    policy = WeightPolicy(points={"1": "0.25", "2": 1})
    assert policy.point_value(1) == 0.25


def test_decreasing_points_are_rejected():
    with pytest.raises(ValueError):
        WeightPolicy(points={1: 1.0, 2: 0.3})


def test_negative_points_are_rejected():
    with pytest.raises(ValueError):
        WeightPolicy(points={1: -1.0})


def test_fallback_weights_stay_monotonic_around_table():
    policy = WeightPolicy(points={1: 2.0, 2: 3.0, 3: 4.0})
    values = [policy.point_value(weight) for weight in (0, 1, 2, 3, 4, 10)]
    assert values == sorted(values)
    assert policy.point_value(4) == 4.0
    assert policy.point_value(10) == 5.0
    assert policy.point_value(0) == 0.0


def test_fallback_weights_between_table_entries_are_clamped():
    policy = WeightPolicy(points={1: 0.5, 5: 0.6}, per_unit=1.0)
    values = [policy.point_value(weight) for weight in range(1, 7)]
    assert values == sorted(values)
    assert policy.point_value(3) == 0.6
    assert policy.point_value(6) == 6.0
