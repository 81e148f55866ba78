"""
Core data models for maintenance scoring.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple, Union

from .errors import FetchError


class RiskTier(str, Enum):
    """Risk classification derived from a maintenance score."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


@dataclass(frozen=True)
class DeclaredDependency:
    """A dependency edge as reported by the build graph."""

    name: str
    declared_by: Optional[str] = None
    kind: str = "normal"
    source: Optional[str] = None


@dataclass(frozen=True)
class RegistryRecord:
    """Registry metadata for one crate."""

    updated_at: datetime
    recent_downloads: int
    max_version: str


@dataclass(frozen=True)
class MaintenanceAssessment:
    """Scored maintenance state for a dependency."""

    days_since_update: int
    recent_downloads: int
    max_version: str
    score: int
    risk_tier: RiskTier


@dataclass(frozen=True)
class FetchFailure:
    """A dependency whose metadata could not be fetched or parsed."""

    error: FetchError

    @property
    def message(self) -> str:
        return str(self.error)


FetchOutcome = Union[MaintenanceAssessment, FetchFailure]


@dataclass(frozen=True)
class ReportEntry:
    """One dependency and its fetch outcome."""

    name: str
    outcome: FetchOutcome

    @property
    def succeeded(self) -> bool:
        return isinstance(self.outcome, MaintenanceAssessment)

    @property
    def effective_score(self) -> int:
        """Score used for ordering; failures rank as the riskiest entries."""
        if isinstance(self.outcome, MaintenanceAssessment):
            return self.outcome.score
        return 0


@dataclass(frozen=True)
class Report:
    """Ranked audit results for a single run."""

    entries: Tuple[ReportEntry, ...]
    high: int
    medium: int
    low: int
    elapsed_seconds: float

    @property
    def total(self) -> int:
        return len(self.entries)

    @property
    def failures(self) -> Tuple[ReportEntry, ...]:
        return tuple(entry for entry in self.entries if not entry.succeeded)
