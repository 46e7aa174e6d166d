"""
Pytest configuration shared by the estimate analyzer tests.

Registers the integration marker (real Azure / Google resources) and
provides sample estimate page text.
"""

import pytest

PAGE_ONE = (
    "Preliminary Estimate Customer Name JOHN SMITH Job Number: 4821 Written By: DAVE "
    "Claim #: ABC123-01 Insurance Company: STATE FARM INSURANCE 123 Main Ave (555) 123-4567 "
    "VEHICLE 2019 FORD F150 XLT Crew Cab VIN: 1FTEW1E53KFA12345 Estimate for customer claim"
)

TOTALS_PAGE = (
    "Estimate Totals Parts 1,200.00 "
    "Body Labor 5.7 hrs @ $ 58.00 / hr 330.60 "
    "Paint Labor 2.0 hrs @ $ 50.00 / hr 100.00 "
    "Paint Supplies 2.0 hrs @ $ 40.00 / hr 80.00 "
    "Miscellaneous 25.00 Other Charges 15.98 "
    "Subtotal 1,751.58 "
    "Sales Tax $ 1,751.58 @ 6.0000 % 105.09 "
    "Grand Total 1,856.67 Customer Pay 500.00 Insurance Pay 1,356.67"
)


@pytest.fixture
def page_one():
    return PAGE_ONE


@pytest.fixture
def totals_page():
    return TOTALS_PAGE


@pytest.fixture
def estimate_pages():
    """A three-page estimate with the totals section on page 2"""
    return [PAGE_ONE, TOTALS_PAGE, "Supplement notes page"]


def pytest_addoption(parser):
    """Add custom command-line options"""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run integration tests against real Azure / Google resources"
    )


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test requiring real Azure / Google resources"
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --run-integration is specified"""
    if config.getoption("--run-integration"):
        return

    skip_integration = pytest.mark.skip(reason="need --run-integration option to run")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)
