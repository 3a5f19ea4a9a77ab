# bot_dashboard/domain/models.py
from dataclasses import dataclass
from datetime import datetime, date
from typing import Optional


@dataclass(frozen=True)
class Workspace:
    """A workspace whose bots report monthly metrics."""
    id: int
    name: str
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class MetricRecord:
    """Metrics reported by one workspace for the period starting at `date`."""
    id: int
    workspace_id: int
    date: date
    # Additive counters
    sessions: Optional[int] = 0
    tickets_handled: Optional[int] = 0
    decommissioned_bots: Optional[int] = 0
    # Snapshot gauges
    active_bots: Optional[int] = 0
    total_users: Optional[int] = 0


@dataclass(frozen=True)
class DashboardSummary:
    """Aggregated dashboard totals for global or single-workspace scope."""
    total_sessions: int = 0
    total_active_bots: int = 0
    total_users: int = 0
    total_decommissioned_bots: int = 0
    total_tickets_handled: int = 0


@dataclass(frozen=True)
class TrendPoint:
    """One point of a per-date chart series."""
    date: date
    value: int


@dataclass(frozen=True)
class WorkspaceActiveBots:
    """Active bots of a workspace taken from its latest metric record."""
    workspace_id: int
    name: str
    active_bots: int
