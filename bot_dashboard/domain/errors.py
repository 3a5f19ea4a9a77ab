# bot_dashboard/domain/errors.py


class RepositoryUnavailableError(Exception):
    """Raised when the metrics storage cannot be read."""


class WorkspaceNotFoundError(LookupError):
    """Raised when a workspace-scoped request names an unknown workspace."""

    def __init__(self, workspace_id: int):
        super().__init__(f"Workspace {workspace_id} not found")
        self.workspace_id = workspace_id


class DashboardClientError(Exception):
    """Raised by the API client when the dashboard API returns an error."""

    def __init__(self, status: int, message: str):
        super().__init__(f"Dashboard API error {status}: {message}")
        self.status = status
        self.message = message
