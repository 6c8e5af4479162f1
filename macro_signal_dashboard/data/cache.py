"""SQLite cache for FRED observations."""

import sqlite3
from datetime import date, datetime
from pathlib import Path
from typing import Iterable

import pandas as pd

from macro_signal_dashboard.models.market_data import (
    Observation,
    SeriesMetadata,
    observations_from_frame,
)


class DataCache:
    """SQLite-based cache for FRED data."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        self._init_db()

    def _get_connection(self) -> sqlite3.Connection:
        """Get database connection with row factory."""
        conn = sqlite3.connect(self.db_path, timeout=30)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self) -> None:
        """Initialize database schema."""
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS observations (
                    series_id TEXT NOT NULL,
                    date TEXT NOT NULL,
                    value REAL NOT NULL,
                    fetched_at TEXT NOT NULL,
                    PRIMARY KEY (series_id, date)
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS series_metadata (
                    series_id TEXT PRIMARY KEY,
                    title TEXT,
                    frequency TEXT,
                    units TEXT,
                    last_updated TEXT
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS fetch_log (
                    series_id TEXT PRIMARY KEY,
                    last_fetched TEXT NOT NULL
                )
            """)

    def get_latest_date(self, series_id: str) -> date | None:
        """Get the most recent date we have cached for a series."""
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT MAX(date) as max_date FROM observations WHERE series_id = ?",
                (series_id,),
            ).fetchone()
            if row and row["max_date"]:
                return date.fromisoformat(row["max_date"])
        return None

    def store_observations(
        self, series_id: str, observations: Iterable[Observation], fetched_at: datetime
    ) -> int:
        """
        Store observations for a series. Missing values are skipped.

        Returns:
            Number of rows inserted/updated
        """
        fetched_str = fetched_at.isoformat()
        rows = [
            (series_id, obs.date.isoformat(), float(obs.value), fetched_str)
            for obs in observations
            if obs.value is not None
        ]
        if not rows:
            return 0

        with self._get_connection() as conn:
            conn.executemany(
                """
                INSERT OR REPLACE INTO observations (series_id, date, value, fetched_at)
                VALUES (?, ?, ?, ?)
                """,
                rows,
            )
        return len(rows)

    def store_metadata(
        self,
        series_id: str,
        title: str,
        frequency: str,
        units: str,
        last_updated: datetime,
    ) -> None:
        """Store or update series metadata."""
        with self._get_connection() as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO series_metadata
                (series_id, title, frequency, units, last_updated)
                VALUES (?, ?, ?, ?, ?)
                """,
                (series_id, title, frequency, units, last_updated.isoformat()),
            )

    def get_metadata(self, series_id: str) -> SeriesMetadata | None:
        """Stored metadata for a series, if it was ever fetched."""
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT * FROM series_metadata WHERE series_id = ?",
                (series_id,),
            ).fetchone()
        if row is None:
            return None
        return SeriesMetadata(
            series_id=row["series_id"],
            title=row["title"] or "",
            frequency=row["frequency"] or "",
            units=row["units"] or "",
            last_updated=datetime.fromisoformat(row["last_updated"]),
        )

    def touch(self, series_id: str, fetched_at: datetime) -> None:
        """Record that the series was checked against the API."""
        with self._get_connection() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO fetch_log (series_id, last_fetched) VALUES (?, ?)",
                (series_id, fetched_at.isoformat()),
            )

    def get_last_fetched(self, series_id: str) -> datetime | None:
        """When the series was last checked against the API."""
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT last_fetched FROM fetch_log WHERE series_id = ?",
                (series_id,),
            ).fetchone()
        if row is None:
            return None
        return datetime.fromisoformat(row["last_fetched"])

    def get_series(
        self, series_id: str, start_date: date | None = None, end_date: date | None = None
    ) -> pd.DataFrame:
        """
        Retrieve cached data for a series.

        Returns:
            DataFrame with DatetimeIndex and 'value' column
        """
        query = "SELECT date, value FROM observations WHERE series_id = ?"
        params: list = [series_id]

        if start_date:
            query += " AND date >= ?"
            params.append(start_date.isoformat())
        if end_date:
            query += " AND date <= ?"
            params.append(end_date.isoformat())

        query += " ORDER BY date"

        with self._get_connection() as conn:
            df = pd.read_sql_query(query, conn, params=params)

        if df.empty:
            return pd.DataFrame(columns=["value"])

        df["date"] = pd.to_datetime(df["date"])
        df.set_index("date", inplace=True)
        return df

    def get_observations(
        self, series_id: str, start_date: date | None = None, end_date: date | None = None
    ) -> list[Observation]:
        """Cached data for a series as date-ordered observations."""
        return observations_from_frame(self.get_series(series_id, start_date, end_date))

    def get_cache_status(self) -> dict[str, dict]:
        """Get status of cached data for each series."""
        with self._get_connection() as conn:
            rows = conn.execute("""
                SELECT
                    o.series_id,
                    COUNT(*) as observation_count,
                    MIN(o.date) as first_date,
                    MAX(o.date) as last_date,
                    m.title,
                    f.last_fetched
                FROM observations o
                LEFT JOIN series_metadata m ON o.series_id = m.series_id
                LEFT JOIN fetch_log f ON o.series_id = f.series_id
                GROUP BY o.series_id
            """).fetchall()

        return {
            row["series_id"]: {
                "observation_count": row["observation_count"],
                "first_date": row["first_date"],
                "last_date": row["last_date"],
                "title": row["title"],
                "last_fetched": row["last_fetched"],
            }
            for row in rows
        }

    def clear(self, series_id: str | None = None) -> None:
        """Drop cached data for one series, or everything."""
        with self._get_connection() as conn:
            for table in ("observations", "series_metadata", "fetch_log"):
                if series_id is None:
                    conn.execute(f"DELETE FROM {table}")
                else:
                    conn.execute(f"DELETE FROM {table} WHERE series_id = ?", (series_id,))
