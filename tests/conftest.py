import pytest

from helpers import InMemoryMetricsRepository, metric


@pytest.fixture
def repo() -> InMemoryMetricsRepository:
    return InMemoryMetricsRepository()


@pytest.fixture
async def seeded_repo(repo: InMemoryMetricsRepository) -> InMemoryMetricsRepository:
    """Alpha has two months of data, Beta one month, Gamma none."""
    alpha = await repo.create_workspace("Alpha")
    beta = await repo.create_workspace("Beta")
    await repo.create_workspace("Gamma")
    await repo.add_metric(metric(alpha.id, "2024-01-01", sessions=100, active_bots=5, total_users=50))
    await repo.add_metric(metric(alpha.id, "2024-02-01", sessions=150, active_bots=6, total_users=55))
    await repo.add_metric(metric(beta.id, "2024-02-01", sessions=80, active_bots=2, total_users=20))
    return repo
