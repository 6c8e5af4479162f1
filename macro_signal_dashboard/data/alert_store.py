"""Alert configuration stores.

The store holds the canonical copy of every alert. The evaluator only
returns updated copies; callers write them back here. Stores do not
serialize concurrent evaluations: at most one evaluation per alert id
is assumed to be in flight.
"""

import json
import sqlite3
from abc import ABC, abstractmethod
from pathlib import Path

from macro_signal_dashboard.models.alerts import AlertConfig, validate_alert_config


class AlertStore(ABC):
    """Key-value store of alerts keyed by id."""

    @abstractmethod
    def get_all(self) -> list[AlertConfig]:
        pass

    @abstractmethod
    def get(self, alert_id: str) -> AlertConfig | None:
        pass

    @abstractmethod
    def set(self, alert_id: str, alert: AlertConfig) -> None:
        pass

    @abstractmethod
    def delete(self, alert_id: str) -> bool:
        pass

    def count(self) -> int:
        return len(self.get_all())


class InMemoryAlertStore(AlertStore):
    """Process-local store. Construct one per process (or per test)."""

    def __init__(self) -> None:
        self._alerts: dict[str, AlertConfig] = {}

    def get_all(self) -> list[AlertConfig]:
        return list(self._alerts.values())

    def get(self, alert_id: str) -> AlertConfig | None:
        return self._alerts.get(alert_id)

    def set(self, alert_id: str, alert: AlertConfig) -> None:
        self._alerts[alert_id] = alert

    def delete(self, alert_id: str) -> bool:
        return self._alerts.pop(alert_id, None) is not None

    def count(self) -> int:
        return len(self._alerts)


class SqliteAlertStore(AlertStore):
    """SQLite-backed store, one JSON document per alert."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        self._init_db()

    def _get_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, timeout=30)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self) -> None:
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS alerts (
                    id TEXT PRIMARY KEY,
                    document TEXT NOT NULL,
                    created_at TEXT NOT NULL
                )
            """)

    def get_all(self) -> list[AlertConfig]:
        with self._get_connection() as conn:
            rows = conn.execute(
                "SELECT document FROM alerts ORDER BY created_at, id"
            ).fetchall()
        return [validate_alert_config(json.loads(row["document"])) for row in rows]

    def get(self, alert_id: str) -> AlertConfig | None:
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT document FROM alerts WHERE id = ?", (alert_id,)
            ).fetchone()
        if row is None:
            return None
        return validate_alert_config(json.loads(row["document"]))

    def set(self, alert_id: str, alert: AlertConfig) -> None:
        with self._get_connection() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO alerts (id, document, created_at) VALUES (?, ?, ?)",
                (alert_id, json.dumps(alert.to_dict()), alert.created_at.isoformat()),
            )

    def delete(self, alert_id: str) -> bool:
        with self._get_connection() as conn:
            cursor = conn.execute("DELETE FROM alerts WHERE id = ?", (alert_id,))
        return cursor.rowcount > 0

    def count(self) -> int:
        with self._get_connection() as conn:
            row = conn.execute("SELECT COUNT(*) AS n FROM alerts").fetchone()
        return int(row["n"])
