# bot_dashboard/infrastructure/http/dashboard_server.py
from dataclasses import asdict
from datetime import datetime, date
from typing import List, Optional
import logging

from fastapi import FastAPI, HTTPException, Depends, Header, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ...application.use_cases.dashboard_charts import DashboardChartsUseCase
from ...domain.errors import RepositoryUnavailableError, WorkspaceNotFoundError
from ...domain.interfaces import IDashboardService

logger = logging.getLogger(__name__)


class CamelModel(BaseModel):
    """Response model serialized with camelCase field names."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class WorkspaceResponse(CamelModel):
    id: int
    name: str
    created_at: Optional[datetime] = None


class MetricResponse(CamelModel):
    id: int
    workspace_id: int
    date: date
    sessions: Optional[int] = None
    active_bots: Optional[int] = None
    total_users: Optional[int] = None
    decommissioned_bots: Optional[int] = None
    tickets_handled: Optional[int] = None


class SummaryResponse(CamelModel):
    total_sessions: int
    total_active_bots: int
    total_users: int
    total_decommissioned_bots: int
    total_tickets_handled: int


class TrendPointResponse(CamelModel):
    date: date
    value: int


class WorkspaceActiveBotsResponse(CamelModel):
    workspace_id: int
    name: str
    active_bots: int


class ChartsResponse(CamelModel):
    session_trend: List[TrendPointResponse]
    tickets_trend: List[TrendPointResponse]
    active_bots_by_workspace: List[WorkspaceActiveBotsResponse]


class DashboardHttpServer:
    """HTTP API serving workspaces, metrics and dashboard summaries."""

    def __init__(
            self,
            dashboard_service: IDashboardService,
            charts: DashboardChartsUseCase,
            api_key: Optional[str] = None
    ):
        self.dashboard_service = dashboard_service
        self.charts = charts
        self.api_key = api_key
        self.app = FastAPI(title="Bot Dashboard API", version="1.0.0")
        self._setup_error_handlers()
        self._setup_routes()

    def _verify_api_key(self, x_api_key: Optional[str] = Header(None)) -> bool:
        """Verify API key when one is configured."""
        if self.api_key and x_api_key != self.api_key:
            raise HTTPException(status_code=401, detail="Invalid API key")
        return True

    def _setup_error_handlers(self) -> None:
        """Map domain errors to HTTP responses."""

        @self.app.exception_handler(WorkspaceNotFoundError)
        async def workspace_not_found(request: Request, exc: WorkspaceNotFoundError):
            return JSONResponse(status_code=404, content={"message": "Workspace not found"})

        @self.app.exception_handler(RepositoryUnavailableError)
        async def repository_unavailable(request: Request, exc: RepositoryUnavailableError):
            logger.error(f"Storage unavailable while serving {request.url.path}: {exc}")
            return JSONResponse(status_code=503, content={"message": "Metrics storage unavailable"})

    def _setup_routes(self) -> None:
        """Setup HTTP routes."""

        @self.app.get("/health")
        async def health_check():
            """Health check endpoint."""
            return {"status": "healthy", "timestamp": datetime.now()}

        @self.app.get("/api/workspaces", response_model=List[WorkspaceResponse])
        async def list_workspaces(_: bool = Depends(self._verify_api_key)):
            workspaces = await self.dashboard_service.list_workspaces()
            return [WorkspaceResponse(**asdict(ws)) for ws in workspaces]

        @self.app.get("/api/workspaces/{workspace_id}", response_model=WorkspaceResponse)
        async def get_workspace(workspace_id: int, _: bool = Depends(self._verify_api_key)):
            workspace = await self.dashboard_service.get_workspace(workspace_id)
            if workspace is None:
                raise WorkspaceNotFoundError(workspace_id)
            return WorkspaceResponse(**asdict(workspace))

        @self.app.get("/api/metrics", response_model=List[MetricResponse])
        async def list_metrics(
                workspace_id: Optional[int] = Query(None, alias="workspaceId"),
                _: bool = Depends(self._verify_api_key)
        ):
            records = await self.dashboard_service.list_metrics(workspace_id)
            return [MetricResponse(**asdict(record)) for record in records]

        @self.app.get("/api/metrics/summary", response_model=SummaryResponse)
        async def get_summary(
                workspace_id: Optional[int] = Query(None, alias="workspaceId"),
                _: bool = Depends(self._verify_api_key)
        ):
            """Dashboard summary, globally or for one existing workspace."""
            if workspace_id is not None:
                await self.charts.require_workspace(workspace_id)
            summary = await self.dashboard_service.compute_summary(workspace_id)
            return SummaryResponse(**asdict(summary))

        @self.app.get("/api/metrics/charts", response_model=ChartsResponse)
        async def get_charts(
                workspace_id: Optional[int] = Query(None, alias="workspaceId"),
                _: bool = Depends(self._verify_api_key)
        ):
            """Chart series for the dashboard or a workspace page."""
            if workspace_id is not None:
                await self.charts.require_workspace(workspace_id)
            active_bots = await self.charts.active_bots_by_workspace()
            if workspace_id is not None:
                active_bots = [row for row in active_bots if row.workspace_id == workspace_id]
            return ChartsResponse(
                session_trend=[
                    TrendPointResponse(**asdict(p)) for p in await self.charts.session_trend(workspace_id)
                ],
                tickets_trend=[
                    TrendPointResponse(**asdict(p)) for p in await self.charts.tickets_trend(workspace_id)
                ],
                active_bots_by_workspace=[WorkspaceActiveBotsResponse(**asdict(row)) for row in active_bots]
            )
