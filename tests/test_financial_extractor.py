from estimate_analyzer.services.extractors import extract_financials
from estimate_analyzer.services.extractors.financials import (
    SIMPLE_FIELD_PATTERNS,
    classify_labor,
    extract_labor,
    match_amount,
)


def test_labor_lines_by_category():
    text = (
        "Body Labor 5.7 hrs @ $ 58.00 / hr 330.60 "
        "Paint Labor 2.0 hrs @ $ 50.00 / hr 100.00"
    )
    totals = extract_financials(text)

    assert totals.body_labor == 330.60
    assert totals.paint_labor == 100.00
    assert totals.mechanical_labor == 0.0
    assert totals.frame_labor == 0.0
    assert totals.total_labor == 430.60


def test_sales_tax_takes_tax_amount_not_taxable_base():
    totals = extract_financials("Sales Tax $ 1,751.58 @ 6.0000 % 105.09")
    assert totals.sales_tax == 105.09


def test_sales_tax_fallback_stays_on_its_line():
    text = "Estimate Totals\nSales Tax 42.10\nGrand Total 100.00\nInsurance Pay 1,356.67"
    totals = extract_financials(text)

    assert totals.sales_tax == 42.10
    assert totals.grand_total == 100.00
    assert totals.insurance_pay == 1356.67


def test_paint_supplies_rate_line():
    totals = extract_financials("Paint Supplies 2.0 hrs @ $ 40.00 / hr 80.00")
    assert totals.paint_supplies == 80.00


def test_paint_supplies_fallback():
    totals = extract_financials("Paint Supplies 80.00\nMiscellaneous 5.00\nSubtotal 985.00")
    assert totals.paint_supplies == 80.00
    assert totals.miscellaneous == 5.00


def test_full_totals_page(totals_page):
    totals = extract_financials(totals_page)

    assert totals.parts == 1200.00
    assert totals.miscellaneous == 25.00
    assert totals.other_charges == 15.98
    assert totals.subtotal == 1751.58
    assert totals.grand_total == 1856.67
    assert totals.customer_pay == 500.00
    assert totals.insurance_pay == 1356.67


def test_missing_amounts_default_to_zero():
    totals = extract_financials("no amounts on this page")
    assert all(value == 0.0 for value in totals.model_dump().values())


def test_first_match_wins():
    assert match_amount("Parts 10.00 Parts 20.00", SIMPLE_FIELD_PATTERNS["parts"]) == 10.00


def test_unparseable_capture_is_not_found():
    assert match_amount("Parts ,", SIMPLE_FIELD_PATTERNS["parts"]) is None


def test_classify_labor():
    assert classify_labor("Body Labor") == "body_labor"
    assert classify_labor("FRAME LABOR") == "frame_labor"
    assert classify_labor("Mechanical Labor") == "mechanical_labor"
    assert classify_labor("Glass Labor") is None


def test_unclassified_labor_counts_in_running_total_only():
    by_category, running_total = extract_labor(
        "Body Labor 1.0 hrs @ $ 50.00 / hr 50.00 "
        "Glass Labor 1.0 hrs @ $ 40.00 / hr 40.00"
    )
    assert by_category == {"body_labor": 50.00}
    assert running_total == 90.00


def test_line_fallback_on_flattened_text_reads_last_number_on_page():
    """Space-joined page text has a single line, so the fallback can overshoot"""
    totals = extract_financials("Estimate Totals Sales Tax 42.10 Grand Total 100.00 Insurance Pay 1,356.67")
    assert totals.sales_tax == 1356.67
