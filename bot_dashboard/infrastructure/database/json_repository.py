# bot_dashboard/infrastructure/database/json_repository.py
import json
import logging
from datetime import datetime, date
from typing import Any, Dict, List, Optional, Tuple

from ...domain.errors import RepositoryUnavailableError
from ...domain.interfaces import IMetricsRepository
from ...domain.models import Workspace, MetricRecord

logger = logging.getLogger(__name__)


class JsonFileMetricsRepository(IMetricsRepository):
    """
    Read-only metrics repository backed by a JSON data file.

    The file holds a list of workspaces, each with its metrics inline:
    [{"id": 1, "name": "...", "metrics": [{"date": "2024-01-01", "sessions": 10, ...}]}]
    The file is re-read on every call. Metric record IDs are assigned 1..N in
    file order.
    """

    def __init__(self, data_path: str = "data.json"):
        self.data_path = data_path

    def _read_data(self) -> Tuple[List[Workspace], List[MetricRecord]]:
        try:
            with open(self.data_path, encoding="utf-8") as f:
                data = json.load(f)
            return self._parse(data)
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.error(f"Cannot read metrics data file {self.data_path}: {e}")
            raise RepositoryUnavailableError(f"Cannot read metrics data file: {e}") from e

    @staticmethod
    def _parse(data: List[Dict[str, Any]]) -> Tuple[List[Workspace], List[MetricRecord]]:
        workspaces: List[Workspace] = []
        records: List[MetricRecord] = []
        if not isinstance(data, list):
            raise ValueError("data file must hold a list of workspaces")
        for ws in data:
            if not isinstance(ws, dict) or not isinstance(ws.get("metrics", []), list):
                raise ValueError(f"malformed workspace entry: {ws!r}")
            created_at = ws.get("createdAt")
            workspaces.append(Workspace(
                id=int(ws["id"]),
                name=ws["name"],
                created_at=datetime.fromisoformat(created_at) if created_at else None
            ))
            for m in ws.get("metrics", []):
                if not isinstance(m, dict):
                    raise ValueError(f"malformed metric entry in workspace {ws['id']}: {m!r}")
                records.append(MetricRecord(
                    id=len(records) + 1,
                    workspace_id=int(ws["id"]),
                    date=date.fromisoformat(m["date"]),
                    sessions=m.get("sessions"),
                    active_bots=m.get("activeBots"),
                    total_users=m.get("totalUsers"),
                    decommissioned_bots=m.get("decommissionedBots"),
                    tickets_handled=m.get("ticketsHandled")
                ))
        return workspaces, records

    async def list_workspaces(self) -> List[Workspace]:
        workspaces, _ = self._read_data()
        return sorted(workspaces, key=lambda ws: ws.id)

    async def get_workspace(self, workspace_id: int) -> Optional[Workspace]:
        workspaces, _ = self._read_data()
        return next((ws for ws in workspaces if ws.id == workspace_id), None)

    async def list_metrics(self, workspace_id: Optional[int] = None) -> List[MetricRecord]:
        _, records = self._read_data()
        if workspace_id is not None:
            records = [r for r in records if r.workspace_id == workspace_id]
        return sorted(records, key=lambda r: (r.date, r.id))

    async def create_workspace(self, name: str) -> Workspace:
        raise NotImplementedError("JSON data file repository is read-only.")

    async def add_metric(self, record: MetricRecord) -> MetricRecord:
        raise NotImplementedError("JSON data file repository is read-only.")
