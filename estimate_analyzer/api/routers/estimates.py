from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import ValidationError
from ..deps import ExtractResponse, UploadResponse, ValidateResponse, get_estimate_parser
from ...core.config import settings
from ...models.estimate import (
    EstimateUpdateRequest,
    ManualEstimateRequest,
    ParseTextRequest,
    ValidateRequest,
)
from ...services.estimate_parser import EstimateParser, build_manual_result
from ...services.estimate_types import (
    EstimateStatus,
    ExtractionFailure,
    IdentityFields,
    ItemizedTotals,
    ParseResult,
)
from ...services.normalizer import optional_text, sanitize_text
from ...services.retry import with_retry
from ...services.sheets import append_estimate_row
from ...services.storage import canonical_totals, estimate_store
from ...services.totals import calculate_estimate_profit, with_derived_totals
from ...services.validation import should_force_review, validate_estimate_data

router = APIRouter(prefix="/estimates", tags=["estimates"])


def _extraction_error(e: ExtractionFailure) -> JSONResponse:
    # Nothing is persisted for a document without usable text
    logger.error(f"Estimate extraction failed: {str(e)}")
    return JSONResponse(status_code=422, content={"status": EstimateStatus.ERROR.value, "detail": str(e)})


async def _read_pdf(request: Request, file: UploadFile | None) -> tuple[bytes, str | None]:
    if file:
        # Multipart form-data upload
        content = await file.read()
        file_name = file.filename
    else:
        # Raw binary body
        content = await request.body()
        file_name = request.headers.get("x-file-name")

    if not content:
        raise HTTPException(status_code=422, detail="No file provided (either multipart or raw body)")

    size_mb = len(content) / (1024 * 1024)
    if size_mb > settings.max_upload_mb:
        raise HTTPException(
            status_code=413,
            detail=f"File too large: {size_mb:.2f} MB (max {settings.max_upload_mb} MB)"
        )
    return content, file_name


def _to_document(result: ParseResult, file_name: str | None = None, notes: str | None = None) -> dict:
    record = result.record.model_dump()
    return {
        **record,
        "profits": result.profits.model_dump(),
        "parse_confidence": result.parse_confidence,
        "status": result.status.value,
        "file_name": file_name,
        "notes": notes,
        "pdf_url": None,
        "validation_warnings": result.validation_warnings,
        "sheets_error": None,
    }


async def _sync_to_sheets(estimate_id: str) -> dict:
    """
    Append a parsed estimate to the spreadsheet.

    A sync failure never loses the estimate: it stays stored, flipped to
    needs_review with the error recorded.
    """
    estimate = estimate_store.get_estimate(estimate_id)
    if not estimate or estimate["status"] != EstimateStatus.PARSED.value:
        return {"status": "skipped", "reason": "estimate not parsed"}

    try:
        return await with_retry(
            lambda: append_estimate_row(estimate, estimate_id),
            max_retries=settings.sheets_max_retries,
            operation_name="Google Sheets append"
        )
    except Exception as e:
        logger.warning(f"Google Sheets sync failed for {estimate_id}: {e}")
        estimate_store.update_estimate(estimate_id, {
            "status": EstimateStatus.NEEDS_REVIEW.value,
            "sheets_error": str(e),
        })
        return {"status": "failed", "error": str(e)}


async def _store_and_sync(result: ParseResult, file_name: str | None = None, notes: str | None = None) -> UploadResponse:
    estimate_id = estimate_store.create_estimate(_to_document(result, file_name, notes))
    logger.info(
        "Estimate stored",
        estimate_id=estimate_id,
        status=result.status.value,
        confidence=result.parse_confidence
    )

    sheets = await _sync_to_sheets(estimate_id)
    estimate = estimate_store.get_estimate(estimate_id)
    return UploadResponse(
        estimate_id=estimate_id,
        status=estimate["status"],
        parse_confidence=estimate["parse_confidence"],
        sheets=sheets,
        estimate=estimate,
    )


@router.post("/extract", response_model=ExtractResponse)
async def extract(
    request: Request,
    file: UploadFile = File(None),
    parser: EstimateParser = Depends(get_estimate_parser),
):
    """
    Extract an estimate from a PDF without storing it.

    Accepts either multipart/form-data or a raw application/pdf body.
    """
    content, _ = await _read_pdf(request, file)
    try:
        return parser.parse_document(content)
    except ExtractionFailure as e:
        return _extraction_error(e)


@router.post("/parse-text", response_model=ExtractResponse)
async def parse_text(req: ParseTextRequest, parser: EstimateParser = Depends(get_estimate_parser)):
    """Run the extraction engine on per-page text produced by an external PDF reader."""
    try:
        return parser.parse_pages(req.pages)
    except ExtractionFailure as e:
        return _extraction_error(e)


@router.post("/upload", response_model=UploadResponse)
async def upload(
    request: Request,
    file: UploadFile = File(None),
    parser: EstimateParser = Depends(get_estimate_parser),
):
    """
    Extract, store and (when parsed) sync an uploaded estimate PDF.

    Low-confidence estimates are stored as needs_review; only a document
    without extractable text is rejected, and then nothing is stored.
    """
    content, file_name = await _read_pdf(request, file)
    try:
        result = parser.parse_document(content)
    except ExtractionFailure as e:
        return _extraction_error(e)

    return await _store_and_sync(result, file_name=file_name)


@router.post("/manual", response_model=UploadResponse)
async def create_manual(req: ManualEstimateRequest):
    """Store an estimate typed in by hand: derived totals, confidence 1.0, parsed."""
    identity = IdentityFields(
        customer_name=sanitize_text(req.customer_name),
        job_number=optional_text(req.job_number),
        claim_number=sanitize_text(req.claim_number),
        insurance_company=sanitize_text(req.insurance_company),
        vehicle={k: optional_text(v) for k, v in req.vehicle.model_dump().items()},
    )
    result = build_manual_result(identity, req.totals)
    return await _store_and_sync(result, notes=optional_text(req.notes))


@router.get("")
async def list_estimates(status: EstimateStatus | None = None):
    if status:
        estimates = estimate_store.query_by_status(status.value)
    else:
        estimates = estimate_store.list_all()
    return {"total": len(estimates), "estimates": estimates}


@router.get("/{estimate_id}")
async def get_estimate(estimate_id: str):
    estimate = estimate_store.get_estimate(estimate_id)
    if not estimate:
        raise HTTPException(status_code=404, detail="Estimate not found")
    return estimate


@router.patch("/{estimate_id}")
async def update_estimate(estimate_id: str, req: EstimateUpdateRequest):
    """
    Edit any identity, vehicle or totals field, notes or file name.

    Every edit recomputes total labor, subtotal, grand total and profit.
    """
    estimate = estimate_store.get_estimate(estimate_id)
    if not estimate:
        raise HTTPException(status_code=404, detail="Estimate not found")

    fields = req.model_dump(exclude_unset=True)
    changes = {}

    for name in ("customer_name", "claim_number", "insurance_company"):
        if name in fields:
            changes[name] = sanitize_text(fields[name])
    for name in ("job_number", "notes", "file_name"):
        if name in fields:
            changes[name] = optional_text(fields[name])

    if "vehicle" in fields:
        vehicle = dict(estimate.get("vehicle") or {})
        vehicle.update({k: optional_text(v) for k, v in (fields["vehicle"] or {}).items()})
        changes["vehicle"] = vehicle

    merged_totals = canonical_totals(estimate.get("totals"))
    merged_totals.update(canonical_totals(fields.get("totals")))
    try:
        totals = with_derived_totals(ItemizedTotals(**merged_totals))
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False))
    changes["totals"] = totals.model_dump()

    profits = dict(estimate.get("profits") or {})
    profits["estimate_profit"] = calculate_estimate_profit(totals)
    if "actual_parts_cost" in fields:
        profits["actual_parts_cost"] = fields["actual_parts_cost"]
    changes["profits"] = profits

    if fields.get("status"):
        changes["status"] = fields["status"]

    estimate_store.update_estimate(estimate_id, changes)
    logger.info("Estimate updated", estimate_id=estimate_id, fields=sorted(fields))
    return estimate_store.get_estimate(estimate_id)


@router.delete("/{estimate_id}")
async def delete_estimate(estimate_id: str):
    if not estimate_store.delete_estimate(estimate_id):
        raise HTTPException(status_code=404, detail="Estimate not found")
    return {"deleted": True, "estimate_id": estimate_id}


@router.post("/validate", response_model=ValidateResponse)
async def validate(req: ValidateRequest):
    """Run the server-side validation pass over an estimate payload."""
    payload = req.model_dump()
    if payload["totals"] is not None:
        payload["totals"] = canonical_totals(payload["totals"])
    result = validate_estimate_data(payload)
    return ValidateResponse(
        is_valid=result.is_valid,
        errors=result.errors,
        warnings=result.warnings,
        needs_review=should_force_review(result),
    )
