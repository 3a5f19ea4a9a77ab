# bot_dashboard/application/services/dashboard_service.py
import logging
from enum import Enum
from typing import Dict, Iterable, List, Optional

from ...domain.interfaces import IDashboardService, IMetricsRepository
from ...domain.models import DashboardSummary, MetricRecord, Workspace

logger = logging.getLogger(__name__)


class AggregationKind(Enum):
    SUM = "sum"  # summed over every record in scope
    LATEST = "latest"  # latest record per workspace, summed over workspaces


# record field -> (aggregation kind, summary field)
METRIC_AGGREGATIONS = {
    "sessions": (AggregationKind.SUM, "total_sessions"),
    "decommissioned_bots": (AggregationKind.SUM, "total_decommissioned_bots"),
    "tickets_handled": (AggregationKind.SUM, "total_tickets_handled"),
    "active_bots": (AggregationKind.LATEST, "total_active_bots"),
    "total_users": (AggregationKind.LATEST, "total_users"),
}


def _value(record: MetricRecord, field: str) -> int:
    return getattr(record, field) or 0


def latest_by_workspace(records: Iterable[MetricRecord]) -> Dict[int, MetricRecord]:
    """
    Groups records by workspace and keeps the latest one of each group.

    The latest record has the maximum date; records sharing that date are
    ordered by ID and the highest ID wins. The result does not depend on the
    order of `records`.
    """
    latest: Dict[int, MetricRecord] = {}
    for record in records:
        current = latest.get(record.workspace_id)
        if current is None or (record.date, record.id) > (current.date, current.id):
            latest[record.workspace_id] = record
    return latest


def summarize(records: List[MetricRecord]) -> DashboardSummary:
    """Reduces metric records to a summary using METRIC_AGGREGATIONS."""
    latest_records = list(latest_by_workspace(records).values())
    totals = {}
    for field, (kind, summary_field) in METRIC_AGGREGATIONS.items():
        source = records if kind is AggregationKind.SUM else latest_records
        totals[summary_field] = sum(_value(record, field) for record in source)
    return DashboardSummary(**totals)


class DashboardService(IDashboardService):
    """Service computing dashboard summaries from the metrics repository."""

    def __init__(self, metrics_repo: IMetricsRepository):
        self._metrics_repo = metrics_repo

    async def compute_summary(self, workspace_id: Optional[int] = None) -> DashboardSummary:
        records = await self._metrics_repo.list_metrics(workspace_id)
        summary = summarize(records)
        scope = "global" if workspace_id is None else f"workspace {workspace_id}"
        logger.debug(f"Computed {scope} summary from {len(records)} metric records")
        return summary

    async def list_workspaces(self) -> List[Workspace]:
        return await self._metrics_repo.list_workspaces()

    async def get_workspace(self, workspace_id: int) -> Optional[Workspace]:
        return await self._metrics_repo.get_workspace(workspace_id)

    async def list_metrics(self, workspace_id: Optional[int] = None) -> List[MetricRecord]:
        return await self._metrics_repo.list_metrics(workspace_id)
