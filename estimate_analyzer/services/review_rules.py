"""
Business rules deciding whether an extracted estimate can be trusted as-is.

Confidence is a weighted completeness score over eight signals (points out
of 100). Status is `needs_review` whenever a required field is missing,
insurance pay is not positive, or confidence falls below 0.85; otherwise
`parsed`. The weights and the threshold are fixed policy.

`error` is never produced here: it belongs to the extraction-failure path,
where no record exists to score.
"""

from typing import Callable, Dict
from loguru import logger
from pydantic import BaseModel
from .estimate_types import EstimateStatus, ExtractedRecord

MIN_CONFIDENCE = 0.85
TOTAL_POINTS = 100

# (signal name, points, predicate)
CONFIDENCE_WEIGHTS: list[tuple[str, int, Callable[[ExtractedRecord], bool]]] = [
    # Required fields
    ("customer_name", 20, lambda r: bool(r.customer_name)),
    ("claim_number", 20, lambda r: bool(r.claim_number)),
    ("insurance_company", 20, lambda r: bool(r.insurance_company)),
    ("insurance_pay", 20, lambda r: r.totals.insurance_pay > 0),
    # Optional but important fields
    ("job_number", 5, lambda r: bool(r.job_number)),
    ("vehicle_year", 5, lambda r: bool(r.vehicle.year)),
    ("parts", 5, lambda r: r.totals.parts > 0),
    ("total_labor", 5, lambda r: r.totals.total_labor > 0),
]


class StatusDecision(BaseModel):
    """Result of a status decision with explanation"""
    status: EstimateStatus
    confidence: float
    reasons: list[str]
    checks: Dict[str, bool]


def confidence_signals(record: ExtractedRecord) -> Dict[str, bool]:
    return {name: bool(predicate(record)) for name, _, predicate in CONFIDENCE_WEIGHTS}


def calculate_confidence(record: ExtractedRecord) -> float:
    """Earned points / 100. Missing signals simply earn nothing."""
    earned = sum(points for _, points, predicate in CONFIDENCE_WEIGHTS if predicate(record))
    return earned / TOTAL_POINTS


def evaluate(record: ExtractedRecord) -> StatusDecision:
    confidence = calculate_confidence(record)
    checks = confidence_signals(record)
    reasons = []

    if not record.customer_name:
        reasons.append("Customer name not found")
    if not record.insurance_company:
        reasons.append("Insurance company not found")
    if record.totals.insurance_pay <= 0:
        reasons.append("Insurance pay is missing or zero")

    checks["confidence_sufficient"] = confidence >= MIN_CONFIDENCE
    if not checks["confidence_sufficient"]:
        reasons.append(f"Confidence {confidence:.0%} below minimum {MIN_CONFIDENCE:.0%}")

    status = EstimateStatus.NEEDS_REVIEW if reasons else EstimateStatus.PARSED

    logger.info(
        "Estimate status decision",
        status=status.value,
        confidence=confidence,
        claim_number=record.claim_number,
        checks=checks
    )

    return StatusDecision(status=status, confidence=confidence, reasons=reasons, checks=checks)


def determine_status(record: ExtractedRecord) -> EstimateStatus:
    return evaluate(record).status
