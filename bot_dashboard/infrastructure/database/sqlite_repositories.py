# bot_dashboard/infrastructure/database/sqlite_repositories.py
import sqlite3
import logging
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime, date
from typing import Iterator, List, Optional

from ...domain.errors import RepositoryUnavailableError
from ...domain.interfaces import IMetricsRepository
from ...domain.models import Workspace, MetricRecord

logger = logging.getLogger(__name__)

COUNTER_FIELDS = ("sessions", "active_bots", "total_users", "decommissioned_bots", "tickets_handled")


class SQLiteMetricsRepository(IMetricsRepository):
    """SQLite implementation of the metrics repository."""

    def __init__(self, db_path: str = "bot_dashboard.db"):
        self.db_path = db_path
        self._init_database()

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Opens a connection, translating driver failures into RepositoryUnavailableError."""
        try:
            conn = sqlite3.connect(self.db_path)
        except sqlite3.Error as e:
            logger.error(f"Cannot open metrics database {self.db_path}: {e}")
            raise RepositoryUnavailableError(f"Cannot open metrics database: {e}") from e
        try:
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA foreign_keys = ON")
            yield conn
        except sqlite3.IntegrityError:
            raise
        except sqlite3.Error as e:
            logger.error(f"SQLite error on {self.db_path}: {e}")
            raise RepositoryUnavailableError(f"Metrics query failed: {e}") from e
        finally:
            conn.close()

    def _init_database(self) -> None:
        """Initialize database tables."""
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS workspaces (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS metrics (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    workspace_id INTEGER NOT NULL,
                    date DATE NOT NULL,
                    sessions INTEGER DEFAULT 0,
                    active_bots INTEGER DEFAULT 0,
                    total_users INTEGER DEFAULT 0,
                    decommissioned_bots INTEGER DEFAULT 0,
                    tickets_handled INTEGER DEFAULT 0,
                    FOREIGN KEY (workspace_id) REFERENCES workspaces (id)
                )
            """)
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_metrics_workspace_date ON metrics(workspace_id, date)")
            conn.commit()

    @staticmethod
    def _to_workspace(row: sqlite3.Row) -> Workspace:
        return Workspace(
            id=row['id'],
            name=row['name'],
            created_at=datetime.fromisoformat(row['created_at']) if row['created_at'] else None
        )

    @staticmethod
    def _to_metric(row: sqlite3.Row) -> MetricRecord:
        return MetricRecord(
            id=row['id'],
            workspace_id=row['workspace_id'],
            date=date.fromisoformat(row['date']),
            sessions=row['sessions'],
            active_bots=row['active_bots'],
            total_users=row['total_users'],
            decommissioned_bots=row['decommissioned_bots'],
            tickets_handled=row['tickets_handled']
        )

    async def list_workspaces(self) -> List[Workspace]:
        """Retrieve all workspaces ordered by ID."""
        with self._connect() as conn:
            rows = conn.execute("SELECT * FROM workspaces ORDER BY id").fetchall()
            return [self._to_workspace(row) for row in rows]

    async def get_workspace(self, workspace_id: int) -> Optional[Workspace]:
        """Retrieve a workspace by ID."""
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM workspaces WHERE id = ?", (workspace_id,)).fetchone()
            return self._to_workspace(row) if row else None

    async def list_metrics(self, workspace_id: Optional[int] = None) -> List[MetricRecord]:
        """Retrieve metric records ordered by date, then by insertion."""
        with self._connect() as conn:
            if workspace_id is None:
                cursor = conn.execute("SELECT * FROM metrics ORDER BY date ASC, id ASC")
            else:
                cursor = conn.execute("""
                    SELECT * FROM metrics WHERE workspace_id = ?
                    ORDER BY date ASC, id ASC
                """, (workspace_id,))
            records = [self._to_metric(row) for row in cursor.fetchall()]
        scope = "all" if workspace_id is None else workspace_id
        logger.debug(f"Loaded {len(records)} metric records for workspace {scope}")
        return records

    async def create_workspace(self, name: str) -> Workspace:
        """Create a new workspace."""
        if not name or not name.strip():
            raise ValueError("Workspace name must not be empty.")
        created_at = datetime.now().replace(microsecond=0)
        with self._connect() as conn:
            cursor = conn.execute(
                "INSERT INTO workspaces (name, created_at) VALUES (?, ?)",
                (name, created_at.isoformat(sep=' '))
            )
            conn.commit()
            return Workspace(id=cursor.lastrowid, name=name, created_at=created_at)

    async def add_metric(self, record: MetricRecord) -> MetricRecord:
        """Store a metric record and return it with its assigned ID."""
        for field in COUNTER_FIELDS:
            value = getattr(record, field)
            if value is not None and value < 0:
                raise ValueError(f"Metric {field} must not be negative, got {value}.")
        with self._connect() as conn:
            try:
                cursor = conn.execute("""
                    INSERT INTO metrics (
                        workspace_id, date, sessions, active_bots, total_users,
                        decommissioned_bots, tickets_handled
                    ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """, (
                    record.workspace_id,
                    record.date.isoformat(),
                    record.sessions,
                    record.active_bots,
                    record.total_users,
                    record.decommissioned_bots,
                    record.tickets_handled
                ))
                conn.commit()
            except sqlite3.IntegrityError as e:
                logger.error(f"SQLite integrity error adding metric for workspace_id={record.workspace_id}: {e}")
                raise ValueError(f"Could not add metric. Workspace {record.workspace_id} might not exist: {e}")
        return replace(record, id=cursor.lastrowid)
