from .estimate_types import ItemizedTotals
from .normalizer import normalize_currency


def labor_total(totals: ItemizedTotals) -> float:
    return normalize_currency(
        totals.body_labor + totals.paint_labor + totals.mechanical_labor + totals.frame_labor
    )


def with_labor_total(totals: ItemizedTotals) -> ItemizedTotals:
    """
    PDF path: recompute total_labor from the four categories.

    Subtotal and grand total stay exactly as read from the document.
    """
    return totals.model_copy(update={"total_labor": labor_total(totals)})


def with_derived_totals(totals: ItemizedTotals) -> ItemizedTotals:
    """Manual-entry and edit path: recompute total_labor, subtotal and grand_total."""
    total_labor = labor_total(totals)
    subtotal = normalize_currency(
        totals.parts
        + total_labor
        + totals.paint_supplies
        + totals.miscellaneous
        + totals.other_charges
    )
    grand_total = normalize_currency(subtotal + totals.sales_tax)
    return totals.model_copy(update={
        "total_labor": total_labor,
        "subtotal": subtotal,
        "grand_total": grand_total,
    })


def calculate_estimate_profit(totals: ItemizedTotals) -> float:
    # Profit is labor only; parts, supplies, misc and tax are pass-through costs
    return totals.total_labor
