"""
In-memory estimate storage (for demo purposes and tests).
In production, set ESTIMATE_DB_PATH to use the SQLite store.
"""
import copy
import uuid
from datetime import datetime, UTC
from typing import Dict, Optional
from .estimate_store_base import EstimateStoreBase, canonical_totals


class EstimateStore(EstimateStoreBase):
    def __init__(self):
        self._estimates: Dict[str, dict] = {}

    def create_estimate(self, data: dict) -> str:
        """Store a new estimate and return its ID"""
        estimate_id = str(uuid.uuid4())
        now = datetime.now(UTC).isoformat()
        estimate = copy.deepcopy(data)
        estimate["totals"] = canonical_totals(estimate.get("totals"))
        estimate.update({"id": estimate_id, "created_at": now, "updated_at": now})
        self._estimates[estimate_id] = estimate
        return estimate_id

    def get_estimate(self, estimate_id: str) -> Optional[dict]:
        estimate = self._estimates.get(estimate_id)
        return copy.deepcopy(estimate) if estimate else None

    def update_estimate(self, estimate_id: str, changes: dict) -> bool:
        if estimate_id not in self._estimates:
            return False

        changes = copy.deepcopy(changes)
        if "totals" in changes:
            changes["totals"] = canonical_totals(changes["totals"])
        self._estimates[estimate_id].update(changes)
        self._estimates[estimate_id]["updated_at"] = datetime.now(UTC).isoformat()
        return True

    def delete_estimate(self, estimate_id: str) -> bool:
        return self._estimates.pop(estimate_id, None) is not None

    def list_all(self) -> list:
        """List all estimates (newest first)"""
        return sorted(
            (copy.deepcopy(e) for e in self._estimates.values()),
            key=lambda e: e["created_at"],
            reverse=True,
        )

    def query_by_status(self, status: str) -> list:
        return [e for e in self.list_all() if e.get("status") == status]
