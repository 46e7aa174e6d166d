"""
Abstract base class for estimate storage implementations.

Defines the interface that all estimate stores must implement,
enabling dependency injection and easy swapping of storage backends.
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

# Spellings older documents used for the same totals fields
LEGACY_TOTALS_ALIASES = {
    "misc": "miscellaneous",
    "labor": "total_labor",
    "bodyLabor": "body_labor",
    "paintLabor": "paint_labor",
    "mechanicalLabor": "mechanical_labor",
    "frameLabor": "frame_labor",
    "totalLabor": "total_labor",
    "paintSupplies": "paint_supplies",
    "otherCharges": "other_charges",
    "salesTax": "sales_tax",
    "grandTotal": "grand_total",
    "customerPay": "customer_pay",
    "insurancePay": "insurance_pay",
}


def canonical_totals(raw: Optional[Mapping[str, Any]]) -> dict:
    """
    Map a totals dict onto the canonical snake_case schema.

    Canonical keys win over legacy aliases when both are present.
    """
    result: dict = {}
    for key, value in (raw or {}).items():
        canonical = LEGACY_TOTALS_ALIASES.get(key, key)
        if canonical in result and key != canonical:
            continue
        result[canonical] = value
    return result


class EstimateStoreBase(ABC):
    """
    Abstract base class for estimate storage.

    Implementations can use:
    - In-memory storage (for testing/demo)
    - SQLite (for single-instance deployments)
    - A document database (for cloud deployments)
    """

    @abstractmethod
    def create_estimate(self, data: dict) -> str:
        """
        Store a new estimate and return its ID.

        Args:
            data: Estimate fields (record, totals, profits, status, ...)

        Returns:
            Estimate ID (unique identifier)
        """
        pass

    @abstractmethod
    def get_estimate(self, estimate_id: str) -> Optional[dict]:
        """
        Get an estimate by ID.

        Returns:
            Estimate dictionary including id, created_at and updated_at,
            or None if not found.
        """
        pass

    @abstractmethod
    def update_estimate(self, estimate_id: str, changes: dict) -> bool:
        """
        Merge changes into a stored estimate and bump updated_at.

        Returns:
            True if successful, False if estimate not found
        """
        pass

    @abstractmethod
    def delete_estimate(self, estimate_id: str) -> bool:
        """
        Returns:
            True if deleted, False if estimate not found
        """
        pass

    @abstractmethod
    def list_all(self) -> list:
        """List all estimates, newest first."""
        pass

    @abstractmethod
    def query_by_status(self, status: str) -> list:
        """List estimates with the given status, newest first."""
        pass
