from __future__ import annotations

import pytest
from pytest import approx

from aquarium.sim.systems.metrics import format_duration, health_status, summarize


@pytest.mark.parametrize(
    "balance, label, color",
    [
        (1.0, "Excellent", "#4caf50"),
        (0.8, "Excellent", "#4caf50"),
        (0.79, "Good", "#8bc34a"),
        (0.4, "Fair", "#ffeb3b"),
        (0.2, "Poor", "#ff9800"),
        (0.19, "Critical", "#f44336"),
        (0.0, "Critical", "#f44336"),
    ],
)
def test_health_status_buckets(balance, label, color):
    assert health_status(balance) == (label, color)


@pytest.mark.parametrize(
    "seconds, expected",
    [(0, "0s"), (59, "59s"), (60, "1m"), (3599, "59m"), (3600, "1h 0m"), (5400, "1h 30m")],
)
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected


def test_summarize_aquarium(fish_factory, state_factory):
    state = state_factory(
        fish_factory(vx=3, vy=4, age=2.0, fish_id="a"),
        fish_factory(vx=0, vy=0, age=4.0, health=0.3, fish_id="b"),
        water_quality=0.25,
        work_life_balance=0.6,
    )

    metrics = summarize(state, tick=7)

    assert metrics.tick == 7
    assert metrics.population == 2
    assert metrics.average_speed == approx(2.5)
    assert metrics.average_age == approx(3.0)
    assert metrics.distressed == 1
    assert metrics.water_quality_percent == approx(25.0)
    assert metrics.work_life_balance_percent == approx(60.0)
    assert metrics.health_status == "Good"


def test_summarize_empty_aquarium(state_factory):
    metrics = summarize(state_factory())

    assert metrics.population == 0
    assert metrics.average_speed == 0.0
    assert metrics.average_age == 0.0
    assert metrics.distressed == 0
