# bot_dashboard/domain/interfaces.py
from abc import ABC, abstractmethod
from typing import List, Optional

from .models import Workspace, MetricRecord, DashboardSummary


class IMetricsRepository(ABC):
    """Repository interface for workspaces and their metric records."""

    @abstractmethod
    async def list_workspaces(self) -> List[Workspace]:
        """Retrieve all workspaces ordered by ID."""
        pass

    @abstractmethod
    async def get_workspace(self, workspace_id: int) -> Optional[Workspace]:
        """Retrieve a workspace by ID."""
        pass

    @abstractmethod
    async def list_metrics(self, workspace_id: Optional[int] = None) -> List[MetricRecord]:
        """
        Retrieve metric records, for one workspace or for all of them.
        Records are ordered by ascending date, then ascending record ID.
        """
        pass

    @abstractmethod
    async def create_workspace(self, name: str) -> Workspace:
        """Create a new workspace."""
        pass

    @abstractmethod
    async def add_metric(self, record: MetricRecord) -> MetricRecord:
        """Store a metric record. The record ID is assigned by the repository."""
        pass


class IDashboardService(ABC):
    """Service interface for dashboard operations."""

    @abstractmethod
    async def compute_summary(self, workspace_id: Optional[int] = None) -> DashboardSummary:
        """Compute the dashboard summary, globally or for one workspace."""
        pass

    @abstractmethod
    async def list_workspaces(self) -> List[Workspace]:
        """List all workspaces."""
        pass

    @abstractmethod
    async def get_workspace(self, workspace_id: int) -> Optional[Workspace]:
        """Get a workspace, or None if it does not exist."""
        pass

    @abstractmethod
    async def list_metrics(self, workspace_id: Optional[int] = None) -> List[MetricRecord]:
        """List metric records in date order."""
        pass
