import logging
from collections import defaultdict
from datetime import date
from typing import Dict, List, Optional

from ...domain.errors import WorkspaceNotFoundError
from ...domain.interfaces import IMetricsRepository
from ...domain.models import TrendPoint, WorkspaceActiveBots, Workspace
from ..services.dashboard_service import latest_by_workspace

logger = logging.getLogger(__name__)


class DashboardChartsUseCase:
    """Use case for workspace lookup and the chart series shown on the dashboard."""

    def __init__(self, metrics_repo: IMetricsRepository):
        self._metrics_repo = metrics_repo

    async def require_workspace(self, workspace_id: int) -> Workspace:
        """
        Returns the workspace, raising WorkspaceNotFoundError if it does not exist.
        """
        workspace = await self._metrics_repo.get_workspace(workspace_id)
        if workspace is None:
            raise WorkspaceNotFoundError(workspace_id)
        return workspace

    async def session_trend(self, workspace_id: Optional[int] = None) -> List[TrendPoint]:
        """Sessions per date, summed across the workspaces in scope."""
        return await self._trend("sessions", workspace_id)

    async def tickets_trend(self, workspace_id: Optional[int] = None) -> List[TrendPoint]:
        """Tickets handled per date, summed across the workspaces in scope."""
        return await self._trend("tickets_handled", workspace_id)

    async def active_bots_by_workspace(self) -> List[WorkspaceActiveBots]:
        """
        Active bots of every workspace according to its latest metric record,
        busiest workspace first. Workspaces without records report zero.
        """
        workspaces = await self._metrics_repo.list_workspaces()
        latest = latest_by_workspace(await self._metrics_repo.list_metrics())
        rows = [
            WorkspaceActiveBots(
                workspace_id=ws.id,
                name=ws.name,
                active_bots=(latest[ws.id].active_bots or 0) if ws.id in latest else 0
            )
            for ws in workspaces
        ]
        return sorted(rows, key=lambda row: (-row.active_bots, row.name))

    async def _trend(self, field: str, workspace_id: Optional[int]) -> List[TrendPoint]:
        scope = "all" if workspace_id is None else workspace_id
        logger.debug(f"Building {field} trend for workspace {scope}")
        totals: Dict[date, int] = defaultdict(int)
        for record in await self._metrics_repo.list_metrics(workspace_id):
            totals[record.date] += getattr(record, field) or 0
        return [TrendPoint(date=d, value=totals[d]) for d in sorted(totals)]
