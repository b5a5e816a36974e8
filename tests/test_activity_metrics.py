"""Tests for GPS activity metrics."""

import math
import random
from datetime import UTC, datetime, timedelta

import pytest

from fitness_tracker.domain.activities import ActivityType, GpsFix, PauseInterval
from fitness_tracker.domain.errors import InvalidInputError
from fitness_tracker.services.activities import (
    accumulate_distance_km,
    active_duration_seconds,
    build_route,
    compute_activity_metrics,
    elevation_gain_m,
    haversine_km,
)

# 0.0009 degrees of latitude is about 100 m.
LEG_DEGREES = 0.0009


def _track(seed: int, count: int) -> list[GpsFix]:
    rng = random.Random(seed)
    latitude, longitude = 47.6, -122.3
    fixes = []
    for index in range(count):
        fixes.append(GpsFix(latitude, longitude, timestamp_ms=index * 1000))
        latitude += rng.uniform(0.0002, 0.0005)
        longitude += rng.uniform(-0.0003, 0.0003)
    return fixes


def _jitter(fix: GpsFix, rng: random.Random) -> GpsFix:
    return GpsFix(
        latitude=fix.latitude + rng.uniform(-0.00002, 0.00002),
        longitude=fix.longitude + rng.uniform(-0.00002, 0.00002),
        timestamp_ms=fix.timestamp_ms + 1,
    )


def test_right_triangle_distance_and_pace() -> None:
    fixes = [
        GpsFix(0.0, 0.0, 0),
        GpsFix(LEG_DEGREES, 0.0, 30_000),
        GpsFix(LEG_DEGREES, LEG_DEGREES, 60_000),
    ]

    metrics = compute_activity_metrics(fixes, ActivityType.RUNNING, 60)

    assert metrics.distance_km == pytest.approx(0.2, abs=0.005)
    assert metrics.avg_pace_min_per_km == pytest.approx(1 / metrics.distance_km)
    assert metrics.avg_pace_min_per_km == pytest.approx(5.0, abs=0.15)


@pytest.mark.parametrize("count", [0, 1])
def test_fewer_than_two_fixes_have_zero_distance(count: int) -> None:
    fixes = [GpsFix(10.0, 10.0, 0)][:count]

    metrics = compute_activity_metrics(fixes, "walking", 120)

    assert metrics.distance_km == 0
    assert metrics.avg_pace_min_per_km is None
    assert metrics.estimated_calories == 0


@pytest.mark.parametrize("seed", [11, 12, 13, 14])
def test_inserting_fix_within_noise_threshold_keeps_distance(seed: int) -> None:
    rng = random.Random(seed)
    track = _track(seed, 40)
    baseline = accumulate_distance_km(track)

    noisy: list[GpsFix] = []
    for fix in track:
        noisy.append(fix)
        for _ in range(rng.randint(0, 3)):
            jittered = _jitter(fix, rng)
            assert haversine_km(fix, jittered) <= 0.005
            noisy.append(jittered)

    assert len(noisy) > len(track)
    assert accumulate_distance_km(noisy) == pytest.approx(baseline)


def test_stationary_jitter_adds_no_distance() -> None:
    rng = random.Random(5)
    anchor = GpsFix(51.5, -0.12, 0)
    fixes = [anchor] + [_jitter(anchor, rng) for _ in range(50)]

    assert accumulate_distance_km(fixes) == 0


def test_dense_track_accumulates_where_per_pair_filtering_would_not() -> None:
    # 0.00003 degrees of latitude is about 3.3 m, under the noise threshold.
    fixes = [GpsFix(0.00003 * index, 0.0, index * 1000) for index in range(301)]
    assert all(
        haversine_km(previous, current) <= 0.005
        for previous, current in zip(fixes, fixes[1:], strict=False)
    )

    assert accumulate_distance_km(fixes) == pytest.approx(1.0, abs=0.01)


def test_pace_is_none_without_distance_or_duration() -> None:
    stationary = [GpsFix(1.0, 1.0, 0), GpsFix(1.0, 1.0, 1000)]
    moving = [GpsFix(0.0, 0.0, 0), GpsFix(LEG_DEGREES, 0.0, 1000)]

    still = compute_activity_metrics(stationary, "running", 300)
    instant = compute_activity_metrics(moving, "running", 0)

    assert still.avg_pace_min_per_km is None
    assert instant.avg_pace_min_per_km is None


def test_calories_are_linear_in_distance_per_activity_type() -> None:
    fixes = [GpsFix(0.0, 0.0, 0), GpsFix(LEG_DEGREES * 10, 0.0, 1000)]
    distance = accumulate_distance_km(fixes)

    for activity_type, per_km in (
        ("running", 60),
        ("cycling", 30),
        ("walking", 50),
        ("hiking", 55),
    ):
        metrics = compute_activity_metrics(fixes, activity_type, 600)
        assert metrics.estimated_calories == pytest.approx(distance * per_km)


def test_unknown_activity_type_is_rejected() -> None:
    with pytest.raises(InvalidInputError):
        compute_activity_metrics([], "swimming", 10)


def test_negative_duration_is_rejected() -> None:
    with pytest.raises(InvalidInputError):
        compute_activity_metrics([], "running", -1)


def test_elevation_gain_sums_positive_deltas() -> None:
    altitudes = [100.0, 105.0, 103.0, 110.0, 110.0]
    fixes = [
        GpsFix(0.0, 0.0, index, altitude) for index, altitude in enumerate(altitudes)
    ]

    assert elevation_gain_m(fixes) == 12


def test_missing_altitude_skips_adjacent_steps() -> None:
    altitudes = [100.0, None, 130.0, 140.0]
    fixes = [
        GpsFix(0.0, 0.0, index, altitude) for index, altitude in enumerate(altitudes)
    ]

    assert elevation_gain_m(fixes) == 10


def test_zero_altitude_is_a_real_reading() -> None:
    fixes = [GpsFix(0.0, 0.0, 0, 0.0), GpsFix(0.0, 0.0, 1, 8.0)]

    assert elevation_gain_m(fixes) == 8


def test_duration_excludes_paused_intervals() -> None:
    start = datetime(2024, 5, 1, 7, tzinfo=UTC)
    pauses = [
        PauseInterval(start + timedelta(minutes=2), start + timedelta(minutes=3)),
        PauseInterval(start + timedelta(minutes=5), start + timedelta(minutes=7)),
    ]

    seconds = active_duration_seconds(start, start + timedelta(minutes=10), pauses)

    assert seconds == 7 * 60


def test_overlapping_and_trailing_pauses_count_once() -> None:
    start = datetime(2024, 5, 1, 7, tzinfo=UTC)
    stop = start + timedelta(minutes=10)
    pauses = [
        PauseInterval(start + timedelta(minutes=4), start + timedelta(minutes=6)),
        PauseInterval(start + timedelta(minutes=1), start + timedelta(minutes=5)),
        PauseInterval(start + timedelta(minutes=9), start + timedelta(minutes=20)),
    ]

    assert active_duration_seconds(start, stop, pauses) == 4 * 60


def test_duration_truncates_to_whole_seconds() -> None:
    start = datetime(2024, 5, 1, 7, tzinfo=UTC)

    assert active_duration_seconds(start, start + timedelta(seconds=59.9)) == 59


def test_stop_before_start_is_rejected() -> None:
    start = datetime(2024, 5, 1, 7, tzinfo=UTC)

    with pytest.raises(InvalidInputError):
        active_duration_seconds(start, start - timedelta(seconds=1))


def test_route_is_longitude_latitude_line_string() -> None:
    route = build_route([GpsFix(10.0, 20.0, 0), GpsFix(11.0, 21.0, 1)])

    assert route.type == "LineString"
    assert route.coordinates == [[20.0, 10.0], [21.0, 11.0]]


def test_metrics_never_leak_nan() -> None:
    metrics = compute_activity_metrics([GpsFix(0.0, 0.0, 0)] * 3, "hiking", 0)

    for value in (
        metrics.distance_km,
        metrics.elevation_gain_m,
        metrics.estimated_calories,
    ):
        assert math.isfinite(value)
