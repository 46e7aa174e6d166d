import pytest
from estimate_analyzer.services.estimate_types import (
    EstimateStatus,
    ExtractedRecord,
    ItemizedTotals,
    VehicleInfo,
)
from estimate_analyzer.services.review_rules import (
    CONFIDENCE_WEIGHTS,
    TOTAL_POINTS,
    calculate_confidence,
    confidence_signals,
    determine_status,
    evaluate,
)


def complete_record(**overrides) -> ExtractedRecord:
    fields = dict(
        customer_name="JOHN SMITH",
        job_number="4821",
        claim_number="ABC123-01",
        insurance_company="STATE FARM INSURANCE",
        vehicle=VehicleInfo(year="2019", make="FORD", model="F150"),
        totals=ItemizedTotals(parts=1200.0, total_labor=430.6, insurance_pay=1356.67),
    )
    fields.update(overrides)
    return ExtractedRecord(**fields)


def test_weights_add_up_to_total_points():
    assert sum(points for _, points, _ in CONFIDENCE_WEIGHTS) == TOTAL_POINTS


def test_complete_record_is_parsed_with_full_confidence():
    decision = evaluate(complete_record())

    assert decision.confidence == 1.0
    assert decision.status == EstimateStatus.PARSED
    assert decision.reasons == []


def test_empty_record_has_zero_confidence():
    record = ExtractedRecord()
    assert calculate_confidence(record) == 0.0
    assert determine_status(record) == EstimateStatus.NEEDS_REVIEW


def test_missing_optional_fields_cost_five_points_each():
    record = complete_record(job_number=None, vehicle=VehicleInfo())
    assert calculate_confidence(record) == 0.9
    assert determine_status(record) == EstimateStatus.PARSED


def test_missing_customer_name_forces_review():
    """Confidence 0.80 and a missing required field"""
    decision = evaluate(complete_record(customer_name=""))

    assert decision.confidence == 0.8
    assert decision.status == EstimateStatus.NEEDS_REVIEW
    assert "Customer name not found" in decision.reasons


def test_zero_insurance_pay_forces_review():
    decision = evaluate(complete_record(totals=ItemizedTotals(parts=1200.0, total_labor=430.6)))

    assert decision.status == EstimateStatus.NEEDS_REVIEW
    assert "Insurance pay is missing or zero" in decision.reasons
    assert decision.checks["insurance_pay"] is False


SIGNAL_UPDATES = {
    "customer_name": {"customer_name": "JANE DOE"},
    "claim_number": {"claim_number": "X1"},
    "insurance_company": {"insurance_company": "GEICO"},
    "insurance_pay": {"totals": ItemizedTotals(insurance_pay=100.0)},
    "job_number": {"job_number": "4821"},
    "vehicle_year": {"vehicle": VehicleInfo(year="2019")},
    "parts": {"totals": ItemizedTotals(parts=10.0)},
    "total_labor": {"totals": ItemizedTotals(total_labor=10.0)},
}


def test_every_signal_has_an_update_case():
    assert set(SIGNAL_UPDATES) == {name for name, _, _ in CONFIDENCE_WEIGHTS}


@pytest.mark.parametrize("signal", sorted(SIGNAL_UPDATES))
@pytest.mark.parametrize("base", [ExtractedRecord(), complete_record(customer_name="", job_number=None)])
def test_confidence_never_decreases_when_a_field_is_filled(signal, base):
    update = dict(SIGNAL_UPDATES[signal])
    if "totals" in update:
        # Fill one amount on top of the existing totals
        update["totals"] = base.totals.model_copy(update=update["totals"].model_dump(exclude_defaults=True))
    richer = base.model_copy(update=update)

    assert calculate_confidence(richer) >= calculate_confidence(base)
    assert confidence_signals(richer)[signal] is True


def test_evaluate_never_returns_error_status():
    assert evaluate(ExtractedRecord()).status != EstimateStatus.ERROR


def test_missing_insurance_company_forces_review():
    decision = evaluate(complete_record(insurance_company=""))

    assert decision.confidence == 0.8
    assert decision.status == EstimateStatus.NEEDS_REVIEW
    assert "Insurance company not found" in decision.reasons
