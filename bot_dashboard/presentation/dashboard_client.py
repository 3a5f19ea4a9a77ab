# dashboard_client.py - Client library for the dashboard HTTP API
import aiohttp
import logging
from datetime import datetime, date
from typing import Any, Dict, List, Optional

from ..domain.errors import DashboardClientError
from ..domain.models import DashboardSummary, MetricRecord, Workspace

logger = logging.getLogger(__name__)


class DashboardClient:
    """Client for reading workspaces, metrics and summaries from the dashboard API."""

    def __init__(
            self,
            base_url: str,
            api_key: Optional[str] = None,
            session: Optional[aiohttp.ClientSession] = None
    ):
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key
        self.session = session

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session."""
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession()
        return self.session

    async def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None, allow_404: bool = False):
        session = await self._get_session()
        async with session.get(f"{self.base_url}{path}", params=params, headers=self._headers()) as response:
            if response.status == 404 and allow_404:
                return None
            if response.status != 200:
                error_text = await response.text()
                logger.error(f"Dashboard API request {path} failed: {response.status} - {error_text}")
                raise DashboardClientError(response.status, error_text)
            return await response.json()

    def _headers(self) -> Dict[str, str]:
        return {"X-API-Key": self.api_key} if self.api_key else {}

    @staticmethod
    def _scope_params(workspace_id: Optional[int]) -> Dict[str, Any]:
        return {"workspaceId": workspace_id} if workspace_id is not None else {}

    @staticmethod
    def _to_workspace(data: Dict[str, Any]) -> Workspace:
        created_at = data.get("createdAt")
        return Workspace(
            id=data["id"],
            name=data["name"],
            created_at=datetime.fromisoformat(created_at) if created_at else None
        )

    async def list_workspaces(self) -> List[Workspace]:
        data = await self._get_json("/api/workspaces")
        return [self._to_workspace(item) for item in data]

    async def get_workspace(self, workspace_id: int) -> Optional[Workspace]:
        """Get a workspace, or None if the API reports it as not found."""
        data = await self._get_json(f"/api/workspaces/{workspace_id}", allow_404=True)
        return self._to_workspace(data) if data is not None else None

    async def list_metrics(self, workspace_id: Optional[int] = None) -> List[MetricRecord]:
        data = await self._get_json("/api/metrics", params=self._scope_params(workspace_id))
        return [
            MetricRecord(
                id=item["id"],
                workspace_id=item["workspaceId"],
                date=date.fromisoformat(item["date"]),
                sessions=item.get("sessions"),
                active_bots=item.get("activeBots"),
                total_users=item.get("totalUsers"),
                decommissioned_bots=item.get("decommissionedBots"),
                tickets_handled=item.get("ticketsHandled")
            )
            for item in data
        ]

    async def get_summary(self, workspace_id: Optional[int] = None) -> DashboardSummary:
        data = await self._get_json("/api/metrics/summary", params=self._scope_params(workspace_id))
        return DashboardSummary(
            total_sessions=data["totalSessions"],
            total_active_bots=data["totalActiveBots"],
            total_users=data["totalUsers"],
            total_decommissioned_bots=data["totalDecommissionedBots"],
            total_tickets_handled=data["totalTicketsHandled"]
        )

    async def close(self):
        """Close the HTTP session."""
        if self.session and not self.session.closed:
            await self.session.close()
