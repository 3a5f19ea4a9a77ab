"""Dashboard HTTP API tests."""

from httpx import ASGITransport, AsyncClient

from bot_dashboard.application.services.dashboard_service import DashboardService
from bot_dashboard.application.use_cases.dashboard_charts import DashboardChartsUseCase
from bot_dashboard.infrastructure.http.dashboard_server import DashboardHttpServer

from helpers import UnavailableMetricsRepository


def _server(repo, api_key=None) -> DashboardHttpServer:
    return DashboardHttpServer(
        dashboard_service=DashboardService(metrics_repo=repo),
        charts=DashboardChartsUseCase(metrics_repo=repo),
        api_key=api_key,
    )


def _client(server: DashboardHttpServer) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=server.app), base_url="http://test")


async def test_health():
    async with _client(_server(UnavailableMetricsRepository())) as client:
        response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


async def test_global_summary_uses_camel_case(seeded_repo):
    async with _client(_server(seeded_repo)) as client:
        response = await client.get("/api/metrics/summary")

    assert response.status_code == 200
    assert response.json() == {
        "totalSessions": 330,
        "totalActiveBots": 8,
        "totalUsers": 75,
        "totalDecommissionedBots": 0,
        "totalTicketsHandled": 0,
    }


async def test_workspace_summary(seeded_repo):
    async with _client(_server(seeded_repo)) as client:
        response = await client.get("/api/metrics/summary", params={"workspaceId": 1})

    assert response.status_code == 200
    assert response.json()["totalSessions"] == 250
    assert response.json()["totalActiveBots"] == 6


async def test_empty_workspace_summary_is_zero(seeded_repo):
    async with _client(_server(seeded_repo)) as client:
        response = await client.get("/api/metrics/summary", params={"workspaceId": 3})

    assert response.status_code == 200
    assert set(response.json().values()) == {0}


async def test_unknown_workspace_summary_is_not_found(seeded_repo):
    async with _client(_server(seeded_repo)) as client:
        response = await client.get("/api/metrics/summary", params={"workspaceId": 99})

    assert response.status_code == 404
    assert response.json() == {"message": "Workspace not found"}


async def test_invalid_workspace_id_is_rejected(seeded_repo):
    async with _client(_server(seeded_repo)) as client:
        response = await client.get("/api/metrics/summary", params={"workspaceId": "abc"})

    assert response.status_code == 422


async def test_list_and_get_workspaces(seeded_repo):
    async with _client(_server(seeded_repo)) as client:
        listing = await client.get("/api/workspaces")
        found = await client.get("/api/workspaces/2")
        missing = await client.get("/api/workspaces/42")

    assert [ws["name"] for ws in listing.json()] == ["Alpha", "Beta", "Gamma"]
    assert found.json()["id"] == 2
    assert "createdAt" in found.json()
    assert missing.status_code == 404


async def test_list_metrics_for_workspace(seeded_repo):
    async with _client(_server(seeded_repo)) as client:
        response = await client.get("/api/metrics", params={"workspaceId": 1})

    body = response.json()
    assert [m["date"] for m in body] == ["2024-01-01", "2024-02-01"]
    assert body[1]["workspaceId"] == 1
    assert body[1]["activeBots"] == 6
    assert body[1]["ticketsHandled"] == 0


async def test_charts(seeded_repo):
    async with _client(_server(seeded_repo)) as client:
        response = await client.get("/api/metrics/charts")
        scoped = await client.get("/api/metrics/charts", params={"workspaceId": 2})

    body = response.json()
    assert body["sessionTrend"] == [{"date": "2024-01-01", "value": 100}, {"date": "2024-02-01", "value": 230}]
    assert body["activeBotsByWorkspace"][0] == {"workspaceId": 1, "name": "Alpha", "activeBots": 6}
    assert scoped.json()["activeBotsByWorkspace"] == [{"workspaceId": 2, "name": "Beta", "activeBots": 2}]
    assert scoped.json()["sessionTrend"] == [{"date": "2024-02-01", "value": 80}]


async def test_storage_failure_maps_to_service_unavailable():
    async with _client(_server(UnavailableMetricsRepository())) as client:
        response = await client.get("/api/metrics/summary")

    assert response.status_code == 503
    assert response.json() == {"message": "Metrics storage unavailable"}


async def test_api_key_required_when_configured(seeded_repo):
    async with _client(_server(seeded_repo, api_key="secret")) as client:
        denied = await client.get("/api/workspaces")
        allowed = await client.get("/api/workspaces", headers={"X-API-Key": "secret"})

    assert denied.status_code == 401
    assert allowed.status_code == 200
