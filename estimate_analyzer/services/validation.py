"""
Optional server-side validation of an estimate payload.

Errors block automatic acceptance. Warnings are soft; more than
MAX_WARNINGS of them also sends the estimate to review. Sums are
re-added independently and compared within a one-cent tolerance.
"""

import re
from typing import Any, Mapping
from pydantic import BaseModel, Field

TOLERANCE = 0.01
MAX_WARNINGS = 2
MIN_TEXT_LENGTH = 100
MAX_SPECIAL_CHAR_RATIO = 0.3

ESTIMATE_KEYWORDS = ["estimate", "total", "parts", "labor", "customer", "claim"]
AMOUNT_FIELDS = [
    "parts", "total_labor", "paint_supplies", "miscellaneous",
    "other_charges", "subtotal", "sales_tax",
]

_VIN_RE = re.compile(r"^[A-HJ-NPR-Z0-9]{17}$")


class ValidationResult(BaseModel):
    is_valid: bool = True
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


def _blank(value: Any) -> bool:
    return not value or not str(value).strip()


def _amount(totals: Mapping[str, Any], name: str) -> float:
    value = totals.get(name)
    return float(value) if isinstance(value, (int, float)) and not isinstance(value, bool) else 0.0


def validate_estimate_data(estimate: Mapping[str, Any]) -> ValidationResult:
    """
    Validate an estimate dict (snake_case keys, as stored or as produced by
    ExtractedRecord.model_dump()).
    """
    result = ValidationResult()

    def error(message: str):
        result.errors.append(message)
        result.is_valid = False

    if _blank(estimate.get("customer_name")):
        error("Customer name is required")
    if _blank(estimate.get("claim_number")):
        error("Claim number is required")
    if _blank(estimate.get("insurance_company")):
        error("Insurance company is required")

    totals = estimate.get("totals")
    if not isinstance(totals, Mapping):
        error("Totals section is missing or invalid")
    else:
        insurance_pay = totals.get("insurance_pay")
        if not isinstance(insurance_pay, (int, float)) or insurance_pay <= 0:
            error("Insurance pay amount is missing or invalid")

        for name in AMOUNT_FIELDS:
            value = totals.get(name)
            if not isinstance(value, (int, float)) or value < 0:
                result.warnings.append(f"{name} amount is missing or invalid")

        calculated_subtotal = (
            _amount(totals, "parts")
            + _amount(totals, "total_labor")
            + _amount(totals, "paint_supplies")
            + _amount(totals, "miscellaneous")
            + _amount(totals, "other_charges")
        )
        if abs(calculated_subtotal - _amount(totals, "subtotal")) > TOLERANCE:
            result.warnings.append("Subtotal does not match sum of line items")

        expected_pay = (
            _amount(totals, "subtotal")
            + _amount(totals, "sales_tax")
            - _amount(totals, "customer_pay")
        )
        if abs(expected_pay - _amount(totals, "insurance_pay")) > TOLERANCE:
            result.warnings.append("Insurance pay does not match subtotal + tax - customer pay")

    vehicle = estimate.get("vehicle") or {}
    for part in ("year", "make", "model"):
        if _blank(vehicle.get(part)):
            result.warnings.append(f"Vehicle {part} is missing")

    if _blank(estimate.get("job_number")):
        result.warnings.append("Job number is missing (optional)")

    return result


def should_force_review(result: ValidationResult) -> bool:
    return not result.is_valid or len(result.warnings) > MAX_WARNINGS


def validate_vin(vin: str | None) -> bool:
    """17 characters, letters I, O and Q excluded."""
    if not vin or not isinstance(vin, str):
        return False
    return bool(_VIN_RE.match(vin.upper()))


def detect_extraction_issues(text: str | None) -> list[str]:
    """Heuristics for text that came out of the PDF reader garbled or empty."""
    issues = []
    text = text or ""

    if len(text) < MIN_TEXT_LENGTH:
        issues.append("Text is too short - possible extraction failure")

    if "|||" in text or "###" in text or "..." in text:
        issues.append("Text contains possible OCR artifacts")

    if text:
        special = len(re.findall(r"[^a-zA-Z0-9\s]", text))
        if special / len(text) > MAX_SPECIAL_CHAR_RATIO:
            issues.append("Text contains high ratio of special characters")

    lowered = text.lower()
    found = [keyword for keyword in ESTIMATE_KEYWORDS if keyword in lowered]
    if len(found) < 3:
        issues.append("Text missing common estimate keywords")

    return issues
