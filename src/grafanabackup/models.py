"""Shared domain models for GrafanaBackup."""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from .constants import STATUS_FAILED, STATUS_SUCCESS


@dataclass(frozen=True)
class DashboardOutcome:
    """Result of backing up a single dashboard."""

    uid: str
    status: str
    title: Optional[str] = None
    path: Optional[str] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status == STATUS_SUCCESS


@dataclass(frozen=True)
class SavedDashboard:
    title: str
    path: str


@dataclass(frozen=True)
class RunResult:
    """Terminal state of a completed backup run."""

    output_directory: str
    backed_up_count: int
    started_at: str
    finished_at: str
    outcomes: Tuple[DashboardOutcome, ...] = field(default_factory=tuple)

    @property
    def failed_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status == STATUS_FAILED)
