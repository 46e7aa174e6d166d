from ...core.config import settings
from .estimate_store_base import EstimateStoreBase, canonical_totals
from .estimates import EstimateStore
from .estimates_sqlite import SQLiteEstimateStore


def create_estimate_store() -> EstimateStoreBase:
    if settings.estimate_db_path:
        return SQLiteEstimateStore(settings.estimate_db_path)
    return EstimateStore()


# Global instance (in production, use dependency injection)
estimate_store = create_estimate_store()

__all__ = [
    "EstimateStoreBase",
    "EstimateStore",
    "SQLiteEstimateStore",
    "canonical_totals",
    "create_estimate_store",
    "estimate_store",
]
