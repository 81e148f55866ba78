"""
Maintenance score heuristic.

The score combines how recently a crate was published with how widely it is
downloaded:

    score = min(inactivity_score(days) + popularity_bonus(downloads), 100)

and maps onto a risk tier (>= 70 Low, >= 40 Medium, otherwise High).
"""

from __future__ import annotations

from datetime import datetime
from typing import Tuple

from .models import MaintenanceAssessment, RegistryRecord, RiskTier
from .time_utils import ensure_utc


MAX_SCORE = 100

# (upper bound in days, inclusive; score)
INACTIVITY_STEPS = (
    (30, 80),
    (90, 70),
    (180, 60),
    (365, 40),
    (730, 20),
)

# (exclusive lower bound in downloads; bonus)
POPULARITY_STEPS = (
    (50_000_000, 20),
    (10_000_000, 15),
    (1_000_000, 10),
    (100_000, 5),
)

LOW_RISK_THRESHOLD = 70
MEDIUM_RISK_THRESHOLD = 40


def inactivity_score(days_since_update: int) -> int:
    """Score publication recency; non-increasing in days."""
    if days_since_update < 0:
        raise ValueError(f"days_since_update must be non-negative, got {days_since_update}")
    for upper_bound, score in INACTIVITY_STEPS:
        if days_since_update <= upper_bound:
            return score
    return 0


def popularity_bonus(recent_downloads: int) -> int:
    """Bonus for widely used crates; non-decreasing in downloads."""
    if recent_downloads < 0:
        raise ValueError(f"recent_downloads must be non-negative, got {recent_downloads}")
    for lower_bound, bonus in POPULARITY_STEPS:
        if recent_downloads > lower_bound:
            return bonus
    return 0


def risk_tier_for(score: int) -> RiskTier:
    if score >= LOW_RISK_THRESHOLD:
        return RiskTier.LOW
    if score >= MEDIUM_RISK_THRESHOLD:
        return RiskTier.MEDIUM
    return RiskTier.HIGH


def calculate_score(days_since_update: int, recent_downloads: int) -> Tuple[int, RiskTier]:
    """Return the bounded score and its risk tier.

    Args:
        days_since_update: Whole days since the last publish
        recent_downloads: Downloads over the registry's rolling window

    Returns:
        Tuple of (score in [0, 100], risk tier)
    """
    total = min(inactivity_score(days_since_update) + popularity_bonus(recent_downloads), MAX_SCORE)
    return total, risk_tier_for(total)


def days_since(updated_at: datetime, now: datetime) -> int:
    """Whole days elapsed between ``updated_at`` and ``now``.

    Timestamps ahead of ``now`` (clock skew) count as zero days.
    """
    elapsed = ensure_utc(now) - ensure_utc(updated_at)
    return max(elapsed.days, 0)


def assess(record: RegistryRecord, now: datetime) -> MaintenanceAssessment:
    """Score a registry record as of ``now``."""
    days = days_since(record.updated_at, now)
    score, tier = calculate_score(days, record.recent_downloads)
    return MaintenanceAssessment(
        days_since_update=days,
        recent_downloads=record.recent_downloads,
        max_version=record.max_version,
        score=score,
        risk_tier=tier,
    )
