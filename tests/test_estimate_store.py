"""
Tests for estimate persistence.

Both backends must behave the same: create/get/update/delete, status
queries for the review queue, and legacy totals spellings mapped to the
canonical field names.
"""

import os
import sqlite3
import tempfile
import pytest
from estimate_analyzer.services.storage import (
    EstimateStore,
    SQLiteEstimateStore,
    canonical_totals,
)


@pytest.fixture
def db_path():
    """Create a temporary database file for testing"""
    fd, path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    yield path
    # Cleanup
    if os.path.exists(path):
        os.remove(path)


@pytest.fixture(params=["memory", "sqlite"])
def store(request, db_path):
    if request.param == "memory":
        return EstimateStore()
    return SQLiteEstimateStore(db_path)


def estimate(status="parsed", **totals):
    return {"customer_name": "JOHN SMITH", "status": status, "totals": totals}


def test_create_and_get(store):
    estimate_id = store.create_estimate(estimate(parts=10.0))
    stored = store.get_estimate(estimate_id)

    assert stored["id"] == estimate_id
    assert stored["customer_name"] == "JOHN SMITH"
    assert stored["totals"] == {"parts": 10.0}
    assert stored["created_at"] == stored["updated_at"]


def test_get_unknown_returns_none(store):
    assert store.get_estimate("missing") is None


def test_update_merges_changes(store):
    estimate_id = store.create_estimate(estimate())

    assert store.update_estimate(estimate_id, {"status": "needs_review", "notes": "check tax"}) is True

    stored = store.get_estimate(estimate_id)
    assert stored["status"] == "needs_review"
    assert stored["notes"] == "check tax"
    assert stored["customer_name"] == "JOHN SMITH"


def test_update_unknown_returns_false(store):
    assert store.update_estimate("missing", {"notes": "x"}) is False


def test_delete(store):
    estimate_id = store.create_estimate(estimate())

    assert store.delete_estimate(estimate_id) is True
    assert store.get_estimate(estimate_id) is None
    assert store.delete_estimate(estimate_id) is False


def test_query_by_status(store):
    store.create_estimate(estimate("parsed"))
    review_id = store.create_estimate(estimate("needs_review"))

    review = store.query_by_status("needs_review")
    assert [e["id"] for e in review] == [review_id]
    assert len(store.list_all()) == 2


def test_legacy_totals_names_are_mapped(store):
    estimate_id = store.create_estimate(estimate(misc=12.5, labor=300.0, salesTax=7.0))
    totals = store.get_estimate(estimate_id)["totals"]

    assert totals == {"miscellaneous": 12.5, "total_labor": 300.0, "sales_tax": 7.0}


def test_returned_documents_are_copies():
    store = EstimateStore()
    estimate_id = store.create_estimate(estimate(parts=10.0))

    store.get_estimate(estimate_id)["totals"]["parts"] = 99.0
    assert store.get_estimate(estimate_id)["totals"]["parts"] == 10.0


def test_canonical_name_wins_over_alias():
    assert canonical_totals({"miscellaneous": 5.0, "misc": 9.0}) == {"miscellaneous": 5.0}
    assert canonical_totals({"misc": 9.0, "miscellaneous": 5.0}) == {"miscellaneous": 5.0}
    assert canonical_totals(None) == {}


def test_sqlite_persists_across_instances(db_path):
    estimate_id = SQLiteEstimateStore(db_path).create_estimate(estimate())

    assert SQLiteEstimateStore(db_path).get_estimate(estimate_id)["customer_name"] == "JOHN SMITH"


def test_sqlite_status_column_is_constrained(db_path):
    store = SQLiteEstimateStore(db_path)
    with pytest.raises(sqlite3.IntegrityError):
        store.create_estimate(estimate("approved"))
