"""
Itemized dollar amounts from the "Estimate Totals" page.

Every amount starts at 0.00 and stays there when no pattern matches.
Patterns are kept as tables so each one can be exercised on its own.
"""

import re
from loguru import logger
from ..estimate_types import ItemizedTotals
from ..normalizer import normalize_currency, parse_amount

AMOUNT = r"([\d,]+\.?\d*)"

# Single anchored pattern per field: "<Label> [$] <amount>"
SIMPLE_FIELD_PATTERNS: dict[str, re.Pattern] = {
    "parts": re.compile(r"Parts\s*\$?" + AMOUNT, re.IGNORECASE),
    "miscellaneous": re.compile(r"Miscellaneous\s*\$?" + AMOUNT, re.IGNORECASE),
    "other_charges": re.compile(r"Other\s*Charges\s*\$?" + AMOUNT, re.IGNORECASE),
    "subtotal": re.compile(r"Subtotal\s*\$?" + AMOUNT, re.IGNORECASE),
    "grand_total": re.compile(r"Grand\s*Total\s*\$?" + AMOUNT, re.IGNORECASE),
    "customer_pay": re.compile(r"Customer\s*Pay\s*\$?" + AMOUNT, re.IGNORECASE),
    "insurance_pay": re.compile(r"Insurance\s*Pay\s*\$?" + AMOUNT, re.IGNORECASE),
}

# "Body Labor 5.7 hrs @ $ 58.00 / hr 330.60"
LABOR_LINE_PATTERN = re.compile(
    r"(\w+\s*Labor)\s*[\d.]+\s*hrs\s*@\s*\$\s*[\d.]+\s*/\s*hr\s*" + AMOUNT,
    re.IGNORECASE,
)

LABOR_CATEGORIES = {
    "body": "body_labor",
    "paint": "paint_labor",
    "mechanical": "mechanical_labor",
    "frame": "frame_labor",
}

# Lines that print an intermediate rate before the cost: the primary pattern
# anchors the whole shape, the fallback takes the last number on the line
TIERED_FIELD_PATTERNS: dict[str, list[re.Pattern]] = {
    # "Paint Supplies 3.5 hrs @ $ 42.00 / hr 147.00"
    "paint_supplies": [
        re.compile(
            r"Paint\s*Supplies\s*[\d.]+\s*hrs\s*@\s*\$\s*[\d.]+\s*/\s*hr\s*" + AMOUNT,
            re.IGNORECASE,
        ),
        re.compile(r"Paint\s*Supplies.*?" + AMOUNT + r"\s*$", re.IGNORECASE | re.MULTILINE),
    ],
    # "Sales Tax $ 1,751.58 @ 6.0000 % 105.09"
    "sales_tax": [
        re.compile(
            r"Sales\s*Tax\s*\$\s*[\d,]+\.?\d*\s*@\s*[\d.]+\s*%\s*" + AMOUNT,
            re.IGNORECASE,
        ),
        re.compile(r"Sales\s*Tax.*?" + AMOUNT + r"\s*$", re.IGNORECASE | re.MULTILINE),
    ],
}


def match_amount(text: str, pattern: re.Pattern) -> float | None:
    """First match in document order; a non-numeric capture counts as not found."""
    match = pattern.search(text)
    if not match:
        return None
    return parse_amount(match.group(1))


def classify_labor(label: str) -> str | None:
    label = label.lower()
    for keyword, field_name in LABOR_CATEGORIES.items():
        if keyword in label:
            return field_name
    return None


def extract_labor(text: str) -> tuple[dict[str, float], float]:
    """
    Per-category labor costs plus the running sum over every labor line.

    The running sum includes lines that match no category, so a difference
    from the category sum points at an unclassified labor type.
    """
    by_category: dict[str, float] = {}
    running_total = 0.0

    for match in LABOR_LINE_PATTERN.finditer(text):
        label = match.group(1)
        cost = parse_amount(match.group(2))
        if cost is None:
            continue

        running_total = normalize_currency(running_total + cost)
        field_name = classify_labor(label)
        if field_name:
            by_category[field_name] = cost
        logger.debug("Labor line found", label=label, cost=cost, category=field_name)

    return by_category, running_total


def extract_financials(financial_text: str) -> ItemizedTotals:
    """Read every itemized amount off the totals page text."""
    text = financial_text or ""
    logger.debug("Parsing totals page", length=len(text))

    values: dict[str, float] = {}

    for field_name, pattern in SIMPLE_FIELD_PATTERNS.items():
        amount = match_amount(text, pattern)
        if amount is not None:
            values[field_name] = amount

    labor, labor_lines_total = extract_labor(text)
    values.update(labor)
    values["total_labor"] = labor_lines_total

    category_sum = normalize_currency(sum(labor.values()))
    if category_sum != labor_lines_total:
        logger.warning(
            "Labor lines do not add up to the labor categories",
            labor_lines_total=labor_lines_total,
            category_sum=category_sum,
        )

    for field_name, patterns in TIERED_FIELD_PATTERNS.items():
        for tier, pattern in enumerate(patterns):
            amount = match_amount(text, pattern)
            if amount is not None:
                if tier > 0:
                    logger.debug("Used fallback pattern", field=field_name, value=amount)
                values[field_name] = amount
                break

    totals = ItemizedTotals(**values)
    logger.debug("Financial fields extracted", **totals.model_dump())
    return totals
