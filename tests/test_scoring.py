"""Tests for the maintenance score heuristic."""

from datetime import datetime, timedelta, timezone

import pytest

from maintenance_score.models import RegistryRecord, RiskTier
from maintenance_score.scoring import (
    assess,
    calculate_score,
    days_since,
    inactivity_score,
    popularity_bonus,
    risk_tier_for,
)


@pytest.mark.parametrize(
    "days, downloads, expected_score, expected_tier",
    [
        (10, 0, 80, RiskTier.LOW),
        (400, 2_000_000, 30, RiskTier.HIGH),
        (1000, 0, 0, RiskTier.HIGH),
        (45, 60_000_000, 90, RiskTier.LOW),
    ],
)
def test_calculate_score_scenarios(days, downloads, expected_score, expected_tier):
    assert calculate_score(days, downloads) == (expected_score, expected_tier)


def test_inactivity_boundaries_are_inclusive():
    assert inactivity_score(0) == 80
    assert inactivity_score(30) == 80
    assert inactivity_score(31) == 70
    assert inactivity_score(90) == 70
    assert inactivity_score(91) == 60
    assert inactivity_score(180) == 60
    assert inactivity_score(181) == 40
    assert inactivity_score(365) == 40
    assert inactivity_score(366) == 20
    assert inactivity_score(730) == 20
    assert inactivity_score(731) == 0


def test_popularity_boundaries_are_exclusive():
    assert popularity_bonus(0) == 0
    assert popularity_bonus(100_000) == 0
    assert popularity_bonus(100_001) == 5
    assert popularity_bonus(1_000_000) == 5
    assert popularity_bonus(1_000_001) == 10
    assert popularity_bonus(10_000_000) == 10
    assert popularity_bonus(10_000_001) == 15
    assert popularity_bonus(50_000_000) == 15
    assert popularity_bonus(50_000_001) == 20


def test_inactivity_is_non_increasing():
    days = [0, 29, 30, 31, 89, 90, 91, 179, 180, 181, 364, 365, 366, 729, 730, 731, 5000]
    scores = [inactivity_score(d) for d in days]
    assert scores == sorted(scores, reverse=True)


def test_bonus_is_non_decreasing():
    downloads = [0, 99_999, 100_000, 100_001, 1_000_001, 10_000_001, 50_000_001, 10**12]
    bonuses = [popularity_bonus(d) for d in downloads]
    assert bonuses == sorted(bonuses)


def test_score_is_clamped_to_100():
    score, tier = calculate_score(0, 10**9)
    assert score == 100
    assert tier is RiskTier.LOW


def test_score_bounds_over_grid():
    for days in (0, 30, 31, 365, 731, 10_000):
        for downloads in (0, 100_001, 50_000_001):
            score, _ = calculate_score(days, downloads)
            assert 0 <= score <= 100


def test_risk_tier_boundaries():
    assert risk_tier_for(100) is RiskTier.LOW
    assert risk_tier_for(70) is RiskTier.LOW
    assert risk_tier_for(69) is RiskTier.MEDIUM
    assert risk_tier_for(40) is RiskTier.MEDIUM
    assert risk_tier_for(39) is RiskTier.HIGH
    assert risk_tier_for(0) is RiskTier.HIGH


def test_negative_inputs_rejected():
    with pytest.raises(ValueError):
        inactivity_score(-1)
    with pytest.raises(ValueError):
        popularity_bonus(-1)


def test_days_since_counts_whole_days():
    now = datetime(2024, 6, 10, 12, 0, tzinfo=timezone.utc)
    assert days_since(now - timedelta(days=3, hours=23), now) == 3
    assert days_since(now - timedelta(days=4), now) == 4


def test_days_since_normalizes_offsets():
    now = datetime(2024, 6, 10, 0, 30, tzinfo=timezone.utc)
    updated = datetime(2024, 6, 9, 2, 0, tzinfo=timezone(timedelta(hours=2)))
    # 2024-06-09T00:00Z, so 1 day and 30 minutes earlier
    assert days_since(updated, now) == 1


def test_days_since_clamps_future_timestamps():
    now = datetime(2024, 6, 10, tzinfo=timezone.utc)
    assert days_since(now + timedelta(hours=5), now) == 0


def test_assess_builds_assessment():
    now = datetime(2024, 6, 10, tzinfo=timezone.utc)
    record = RegistryRecord(
        updated_at=now - timedelta(days=400),
        recent_downloads=2_000_000,
        max_version="1.2.3",
    )

    result = assess(record, now)

    assert result.days_since_update == 400
    assert result.recent_downloads == 2_000_000
    assert result.max_version == "1.2.3"
    assert result.score == 30
    assert result.risk_tier is RiskTier.HIGH
