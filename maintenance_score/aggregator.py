"""
Collect per-dependency outcomes into a ranked report.
"""

from __future__ import annotations

import time
from typing import Callable, List, Optional, Set

from .models import FetchOutcome, MaintenanceAssessment, Report, ReportEntry, RiskTier


class ReportAggregator:
    """Accumulate fetch outcomes in extraction order and build the Report."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: List[ReportEntry] = []
        self._seen: Set[str] = set()
        self._started_at: Optional[float] = None

    def start(self) -> None:
        """Mark the start of the batch."""
        self._started_at = self._clock()

    def add(self, name: str, outcome: FetchOutcome) -> None:
        if name in self._seen:
            raise ValueError(f"Outcome for {name} already recorded")
        if self._started_at is None:
            self.start()
        self._seen.add(name)
        self._entries.append(ReportEntry(name=name, outcome=outcome))

    def __len__(self) -> int:
        return len(self._entries)

    def finish(self) -> Report:
        """Sort riskiest-first, tally tiers and record elapsed time.

        Failures sort as score 0 but are left out of the tier counts.
        """
        if self._started_at is None:
            elapsed = 0.0
        else:
            elapsed = self._clock() - self._started_at

        # sorted() is stable: equal scores keep extraction order
        ordered = sorted(self._entries, key=lambda entry: entry.effective_score)

        counts = {tier: 0 for tier in RiskTier}
        for entry in ordered:
            if isinstance(entry.outcome, MaintenanceAssessment):
                counts[entry.outcome.risk_tier] += 1

        return Report(
            entries=tuple(ordered),
            high=counts[RiskTier.HIGH],
            medium=counts[RiskTier.MEDIUM],
            low=counts[RiskTier.LOW],
            elapsed_seconds=elapsed,
        )
