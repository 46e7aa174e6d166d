from estimate_analyzer.services.validation import (
    ValidationResult,
    detect_extraction_issues,
    should_force_review,
    validate_estimate_data,
    validate_vin,
)


def valid_estimate(**overrides) -> dict:
    estimate = {
        "customer_name": "JOHN SMITH",
        "claim_number": "ABC123-01",
        "insurance_company": "STATE FARM INSURANCE",
        "job_number": "4821",
        "vehicle": {"year": "2019", "make": "FORD", "model": "F150", "vin": None},
        "totals": {
            "parts": 1200.00,
            "total_labor": 430.60,
            "paint_supplies": 80.00,
            "miscellaneous": 25.00,
            "other_charges": 15.98,
            "subtotal": 1751.58,
            "sales_tax": 105.09,
            "customer_pay": 500.00,
            "insurance_pay": 1356.67,
        },
    }
    estimate.update(overrides)
    return estimate


def test_valid_estimate_has_no_errors_or_warnings():
    result = validate_estimate_data(valid_estimate())

    assert result.is_valid is True
    assert result.errors == []
    assert result.warnings == []
    assert should_force_review(result) is False


def test_required_fields_missing():
    result = validate_estimate_data(valid_estimate(customer_name="  ", claim_number=None, insurance_company=""))

    assert result.is_valid is False
    assert "Customer name is required" in result.errors
    assert "Claim number is required" in result.errors
    assert "Insurance company is required" in result.errors
    assert should_force_review(result) is True


def test_missing_totals_is_an_error():
    result = validate_estimate_data(valid_estimate(totals=None))
    assert "Totals section is missing or invalid" in result.errors


def test_zero_insurance_pay_is_an_error():
    estimate = valid_estimate()
    estimate["totals"]["insurance_pay"] = 0
    result = validate_estimate_data(estimate)
    assert "Insurance pay amount is missing or invalid" in result.errors


def test_subtotal_mismatch_is_a_warning():
    estimate = valid_estimate()
    estimate["totals"]["subtotal"] = 1700.00
    result = validate_estimate_data(estimate)

    assert result.is_valid is True
    assert "Subtotal does not match sum of line items" in result.warnings


def test_one_cent_tolerance():
    estimate = valid_estimate()
    estimate["totals"]["subtotal"] = 1751.585
    result = validate_estimate_data(estimate)
    assert "Subtotal does not match sum of line items" not in result.warnings


def test_missing_vehicle_and_job_number_warnings():
    result = validate_estimate_data(valid_estimate(vehicle=None, job_number=None))

    assert "Vehicle year is missing" in result.warnings
    assert "Vehicle make is missing" in result.warnings
    assert "Vehicle model is missing" in result.warnings
    assert "Job number is missing (optional)" in result.warnings


def test_more_than_two_warnings_forces_review():
    result = ValidationResult(warnings=["a", "b", "c"])
    assert should_force_review(result) is True
    assert should_force_review(ValidationResult(warnings=["a", "b"])) is False


def test_validate_vin():
    assert validate_vin("1FTEW1E53KFA12345") is True
    assert validate_vin("1ftew1e53kfa12345") is True
    assert validate_vin("1FTEW1E53KFA1234") is False
    assert validate_vin("1FTEW1E53KFA1234O") is False
    assert validate_vin(None) is False


def test_detect_extraction_issues_short_text():
    issues = detect_extraction_issues("abc")
    assert "Text is too short - possible extraction failure" in issues
    assert "Text missing common estimate keywords" in issues


def test_detect_extraction_issues_clean_text(page_one, totals_page):
    assert detect_extraction_issues(f"{page_one} {totals_page}") == []


def test_detect_extraction_issues_ocr_artifacts():
    text = "estimate total parts labor ||| " + "x" * 120
    assert "Text contains possible OCR artifacts" in detect_extraction_issues(text)
