import asyncio
import json
from datetime import date
from typing import Any, Mapping
import httpx
from google.auth.transport.requests import Request
from google.oauth2 import service_account
from loguru import logger
from ..core.config import settings

# Sync appends one row per estimate to the "Estimates" tab.
# Column order is a contract with the sheet's formulas: do not reorder.

SHEETS_SCOPE = "https://www.googleapis.com/auth/spreadsheets"
SHEETS_API_BASE = "https://sheets.googleapis.com/v4/spreadsheets"

SHEET_COLUMNS = [
    "Date", "Job #", "Customer", "Claim #", "Insurance",
    "Year", "Make", "Model", "VIN",
    "Parts", "Total Labor", "Paint Supplies", "Misc", "Other",
    "Subtotal", "Sales Tax", "Grand Total",
    "Estimate Profit", "Actual Parts Cost", "Actual Profit",  # formula/manual columns
    "Link", "Status",
]

STATUS_LABELS = {"parsed": "Parsed", "needs_review": "Needs Review", "error": "Error"}


def status_label(status: Any) -> str:
    value = getattr(status, "value", status)
    return STATUS_LABELS.get(value, "Needs Review")


def build_sheet_row(estimate: Mapping[str, Any], today: date | None = None) -> list:
    """Reshape a stored estimate dict into the fixed 22-column row."""
    vehicle = estimate.get("vehicle") or {}
    totals = estimate.get("totals") or {}
    row_date = (today or date.today()).isoformat()

    return [
        row_date,
        estimate.get("job_number") or "",
        estimate.get("customer_name") or "",
        estimate.get("claim_number") or "",
        estimate.get("insurance_company") or "",
        vehicle.get("year") or "",
        vehicle.get("make") or "",
        vehicle.get("model") or "",
        vehicle.get("vin") or "",
        totals.get("parts", 0.0),
        totals.get("total_labor", 0.0),
        totals.get("paint_supplies", 0.0),
        totals.get("miscellaneous", 0.0),
        totals.get("other_charges", 0.0),
        totals.get("subtotal", 0.0),
        totals.get("sales_tax", 0.0),
        totals.get("grand_total", 0.0),
        "",  # Estimate Profit (formula)
        "",  # Actual Parts Cost (manual)
        "",  # Actual Profit (formula)
        estimate.get("pdf_url") or estimate.get("file_name") or "",
        status_label(estimate.get("status")),
    ]


# Built once; refreshed only after the token expires
_credentials = None


def _get_access_token() -> str:
    """Exchange the service-account key for a short-lived OAuth token (blocking)."""
    global _credentials
    if _credentials is None:
        _credentials = service_account.Credentials.from_service_account_info(
            json.loads(settings.service_account_key),
            scopes=[SHEETS_SCOPE],
        )
    if not _credentials.valid:
        _credentials.refresh(Request())
    return _credentials.token


async def append_estimate_row(estimate: Mapping[str, Any], estimate_id: str) -> dict:
    if not settings.google_sheets_id or not settings.service_account_key:
        logger.warning("Google Sheets integration not configured")
        return {"status": "skipped", "reason": "GOOGLE_SHEETS_ID or SERVICE_ACCOUNT_KEY not set"}

    token = await asyncio.to_thread(_get_access_token)
    url = f"{SHEETS_API_BASE}/{settings.google_sheets_id}/values/{settings.sheets_range}:append"

    async with httpx.AsyncClient(timeout=10) as client:
        r = await client.post(
            url,
            params={"valueInputOption": "RAW"},
            headers={"Authorization": f"Bearer {token}"},
            json={"values": [build_sheet_row(estimate)]},
        )
        r.raise_for_status()

    logger.info("Appended estimate to Google Sheets", estimate_id=estimate_id)
    return {"status": "sent", "http_status": r.status_code}
