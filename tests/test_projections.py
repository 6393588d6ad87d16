"""Tests for carbon projections."""

import pytest

from co2de_meter.projections import project, real_world_equivalent, trees_to_offset


def test_periods_and_scopes(make_metrics) -> None:
    summary = project(make_metrics(energy=0.002, carbon=1.0), executions_per_day=100)

    assert [p.period for p in summary.projections] == ["daily", "weekly", "monthly", "biannual", "annual"]
    daily = summary.by_period("daily")
    annual = summary.by_period("annual")
    assert daily.executions == 100
    assert daily.co2 == pytest.approx(0.1)
    assert daily.energy == pytest.approx(0.2)
    assert daily.equivalent == "50 smartphone charges"
    assert annual.co2 == pytest.approx(36.5)
    assert annual.equivalent == "0.4 short flights"
    assert summary.scope1 == 0.0
    assert summary.scope2 == pytest.approx(36.5)
    assert summary.scope3 == pytest.approx(5.475)


def test_zero_carbon_needs_one_tree(make_metrics) -> None:
    summary = project(make_metrics(energy=0.0, carbon=0.0))
    assert all(p.trees == 1 for p in summary.projections)
    assert summary.by_period("hourly") is None


@pytest.mark.parametrize(
    "kg, expected",
    [(0.5, "250 smartphone charges"), (2.1, "10 km by car"), (45, "0.5 short flights"), (850, "100 days of home energy"),
     (0.001, "1 smartphone charges"), (106.25, "13 days of home energy")],
)
def test_real_world_equivalent(kg, expected) -> None:
    assert real_world_equivalent(kg) == expected


def test_trees_scale_to_a_year() -> None:
    assert trees_to_offset(21.77, 365) == 1
    assert trees_to_offset(21.77, 30) > 1
