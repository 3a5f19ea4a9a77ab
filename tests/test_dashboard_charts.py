"""Chart series tests."""

import logging
from datetime import date

import pytest

from bot_dashboard.application.use_cases.dashboard_charts import DashboardChartsUseCase
from bot_dashboard.domain.errors import WorkspaceNotFoundError
from bot_dashboard.domain.models import TrendPoint, WorkspaceActiveBots

from helpers import metric


async def test_session_trend_sums_workspaces_per_date(seeded_repo):
    charts = DashboardChartsUseCase(metrics_repo=seeded_repo)

    trend = await charts.session_trend()

    assert trend == [
        TrendPoint(date=date(2024, 1, 1), value=100),
        TrendPoint(date=date(2024, 2, 1), value=230),
    ]


async def test_session_trend_for_one_workspace(seeded_repo):
    charts = DashboardChartsUseCase(metrics_repo=seeded_repo)

    trend = await charts.session_trend(2)

    assert trend == [TrendPoint(date=date(2024, 2, 1), value=80)]


async def test_tickets_trend_treats_missing_as_zero(repo):
    ws = await repo.create_workspace("Support")
    await repo.add_metric(metric(ws.id, "2024-02-01", tickets_handled=7))
    await repo.add_metric(metric(ws.id, "2024-01-01", tickets_handled=None))

    trend = await DashboardChartsUseCase(metrics_repo=repo).tickets_trend()

    assert [p.value for p in trend] == [0, 7]
    assert [p.date for p in trend] == [date(2024, 1, 1), date(2024, 2, 1)]


async def test_active_bots_by_workspace_uses_latest_record(seeded_repo):
    charts = DashboardChartsUseCase(metrics_repo=seeded_repo)

    rows = await charts.active_bots_by_workspace()

    assert rows == [
        WorkspaceActiveBots(workspace_id=1, name="Alpha", active_bots=6),
        WorkspaceActiveBots(workspace_id=2, name="Beta", active_bots=2),
        WorkspaceActiveBots(workspace_id=3, name="Gamma", active_bots=0),
    ]


async def test_require_workspace_raises_for_unknown_id(seeded_repo):
    charts = DashboardChartsUseCase(metrics_repo=seeded_repo)

    assert (await charts.require_workspace(2)).name == "Beta"
    with pytest.raises(WorkspaceNotFoundError):
        await charts.require_workspace(42)


async def test_trend_log_names_workspace_zero(seeded_repo, caplog):
    charts = DashboardChartsUseCase(metrics_repo=seeded_repo)

    with caplog.at_level(logging.DEBUG, logger="bot_dashboard.application.use_cases.dashboard_charts"):
        assert await charts.tickets_trend(0) == []
        await charts.session_trend()

    assert "Building tickets_handled trend for workspace 0" in caplog.text
    assert "Building sessions trend for workspace all" in caplog.text
