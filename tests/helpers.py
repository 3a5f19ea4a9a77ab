from dataclasses import replace
from datetime import date, datetime
from typing import Dict, List, Optional

from bot_dashboard.domain.errors import RepositoryUnavailableError
from bot_dashboard.domain.interfaces import IMetricsRepository
from bot_dashboard.domain.models import MetricRecord, Workspace


class InMemoryMetricsRepository(IMetricsRepository):
    """Metrics repository keeping workspaces and records in lists."""

    def __init__(self) -> None:
        self.workspaces: Dict[int, Workspace] = {}
        self.records: List[MetricRecord] = []
        self.list_metrics_calls: List[Optional[int]] = []

    async def list_workspaces(self) -> List[Workspace]:
        return [self.workspaces[k] for k in sorted(self.workspaces)]

    async def get_workspace(self, workspace_id: int) -> Optional[Workspace]:
        return self.workspaces.get(workspace_id)

    async def list_metrics(self, workspace_id: Optional[int] = None) -> List[MetricRecord]:
        self.list_metrics_calls.append(workspace_id)
        records = [r for r in self.records if workspace_id is None or r.workspace_id == workspace_id]
        return sorted(records, key=lambda r: (r.date, r.id))

    async def create_workspace(self, name: str) -> Workspace:
        workspace = Workspace(id=len(self.workspaces) + 1, name=name, created_at=datetime(2024, 1, 1))
        self.workspaces[workspace.id] = workspace
        return workspace

    async def add_metric(self, record: MetricRecord) -> MetricRecord:
        stored = replace(record, id=len(self.records) + 1)
        self.records.append(stored)
        return stored


class UnavailableMetricsRepository(InMemoryMetricsRepository):
    """Repository whose reads always fail."""

    async def list_workspaces(self) -> List[Workspace]:
        raise RepositoryUnavailableError("database is down")

    async def get_workspace(self, workspace_id: int) -> Optional[Workspace]:
        raise RepositoryUnavailableError("database is down")

    async def list_metrics(self, workspace_id: Optional[int] = None) -> List[MetricRecord]:
        raise RepositoryUnavailableError("database is down")


def metric(workspace_id: int, day: str, record_id: int = 0, **values) -> MetricRecord:
    return MetricRecord(id=record_id, workspace_id=workspace_id, date=date.fromisoformat(day), **values)


