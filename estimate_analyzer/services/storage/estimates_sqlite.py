"""
SQLite-based estimate storage for production use.

Provides persistent storage of estimates with SQL query capabilities.
"""

import sqlite3
import json
import uuid
from datetime import datetime, UTC
from typing import Optional
from .estimate_store_base import EstimateStoreBase, canonical_totals


class SQLiteEstimateStore(EstimateStoreBase):
    """
    SQLite-backed estimate store with persistent storage.

    Features:
    - Persistent storage across application restarts
    - Status-based filtering (the review queue)
    - Legacy totals spellings mapped on the way in and on the way out
    """

    def __init__(self, db_path: str = "estimates.db"):
        """
        Initialize store with database path.

        Args:
            db_path: Path to SQLite database file (default: estimates.db)
        """
        self.db_path = db_path
        self._init_database()

    def _init_database(self):
        """Create estimates table if it doesn't exist"""
        conn = sqlite3.connect(self.db_path)
        cursor = conn.cursor()

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS estimates (
                id TEXT PRIMARY KEY,
                data TEXT NOT NULL,
                status TEXT NOT NULL,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                CHECK (status IN ('parsed', 'needs_review', 'error'))
            )
        """)

        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_estimates_status
            ON estimates(status)
        """)

        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_estimates_created_at
            ON estimates(created_at)
        """)

        conn.commit()
        conn.close()

    def _get_connection(self) -> sqlite3.Connection:
        """Get database connection with row factory"""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    @staticmethod
    def _row_to_estimate(row: sqlite3.Row) -> dict:
        estimate = json.loads(row["data"])
        estimate["totals"] = canonical_totals(estimate.get("totals"))
        estimate.update({
            "id": row["id"],
            "status": row["status"],
            "created_at": row["created_at"],
            "updated_at": row["updated_at"],
        })
        return estimate

    def create_estimate(self, data: dict) -> str:
        """
        Store a new estimate and return its ID.

        Args:
            data: Estimate fields; must include a status

        Returns:
            Estimate ID (UUID string)
        """
        estimate_id = str(uuid.uuid4())
        now = datetime.now(UTC).isoformat()
        payload = dict(data)
        payload["totals"] = canonical_totals(payload.get("totals"))

        conn = self._get_connection()
        cursor = conn.cursor()

        cursor.execute("""
            INSERT INTO estimates (id, data, status, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?)
        """, (estimate_id, json.dumps(payload), payload["status"], now, now))

        conn.commit()
        conn.close()

        return estimate_id

    def get_estimate(self, estimate_id: str) -> Optional[dict]:
        conn = self._get_connection()
        cursor = conn.cursor()

        cursor.execute("""
            SELECT id, data, status, created_at, updated_at
            FROM estimates
            WHERE id = ?
        """, (estimate_id,))

        row = cursor.fetchone()
        conn.close()

        if row is None:
            return None

        return self._row_to_estimate(row)

    def update_estimate(self, estimate_id: str, changes: dict) -> bool:
        """
        Merge changes into the stored JSON document.

        Returns:
            True if successful, False if estimate not found
        """
        current = self.get_estimate(estimate_id)
        if current is None:
            return False

        for key in ("id", "created_at", "updated_at"):
            current.pop(key)
        current.update(changes)
        current["totals"] = canonical_totals(current.get("totals"))
        updated_at = datetime.now(UTC).isoformat()

        conn = self._get_connection()
        cursor = conn.cursor()

        cursor.execute("""
            UPDATE estimates
            SET data = ?,
                status = ?,
                updated_at = ?
            WHERE id = ?
        """, (json.dumps(current), current["status"], updated_at, estimate_id))

        rows_affected = cursor.rowcount
        conn.commit()
        conn.close()

        return rows_affected > 0

    def delete_estimate(self, estimate_id: str) -> bool:
        conn = self._get_connection()
        cursor = conn.cursor()

        cursor.execute("DELETE FROM estimates WHERE id = ?", (estimate_id,))

        rows_affected = cursor.rowcount
        conn.commit()
        conn.close()

        return rows_affected > 0

    def list_all(self) -> list:
        """
        List all estimates (ordered by creation time, newest first).
        """
        conn = self._get_connection()
        cursor = conn.cursor()

        cursor.execute("""
            SELECT id, data, status, created_at, updated_at
            FROM estimates
            ORDER BY created_at DESC
        """)

        rows = cursor.fetchall()
        conn.close()

        return [self._row_to_estimate(row) for row in rows]

    def query_by_status(self, status: str) -> list:
        """
        Query estimates by status.

        Args:
            status: One of 'parsed', 'needs_review', 'error'
        """
        conn = self._get_connection()
        cursor = conn.cursor()

        cursor.execute("""
            SELECT id, data, status, created_at, updated_at
            FROM estimates
            WHERE status = ?
            ORDER BY created_at DESC
        """, (status,))

        rows = cursor.fetchall()
        conn.close()

        return [self._row_to_estimate(row) for row in rows]
