from enum import Enum
from typing import Annotated
from pydantic import BaseModel, ConfigDict, Field

Amount = Annotated[float, Field(ge=0)]


class EstimateStatus(str, Enum):
    PARSED = "parsed"
    NEEDS_REVIEW = "needs_review"
    ERROR = "error"


class ExtractionFailure(Exception):
    """The document yielded no usable text, so no record can be produced."""


class NoExtractableText(ExtractionFailure):
    pass


class VehicleInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    year: str | None = None
    make: str | None = None
    model: str | None = None
    vin: str | None = None


class ItemizedTotals(BaseModel):
    # Absent amounts are 0.0, never None
    model_config = ConfigDict(frozen=True)

    parts: Amount = 0.0
    body_labor: Amount = 0.0
    paint_labor: Amount = 0.0
    mechanical_labor: Amount = 0.0
    frame_labor: Amount = 0.0
    total_labor: Amount = 0.0
    paint_supplies: Amount = 0.0
    miscellaneous: Amount = 0.0
    other_charges: Amount = 0.0
    subtotal: Amount = 0.0
    sales_tax: Amount = 0.0
    grand_total: Amount = 0.0
    customer_pay: Amount = 0.0  # Deductible
    insurance_pay: Amount = 0.0


class IdentityFields(BaseModel):
    model_config = ConfigDict(frozen=True)

    customer_name: str = ""
    job_number: str | None = None
    claim_number: str = ""
    insurance_company: str = ""
    vehicle: VehicleInfo = Field(default_factory=VehicleInfo)


class ExtractedRecord(IdentityFields):
    totals: ItemizedTotals = Field(default_factory=ItemizedTotals)
    page_count: int = 0


class Profits(BaseModel):
    estimate_profit: float = 0.0
    actual_parts_cost: float | None = None
    actual_profit: float | None = None


class SegmentedText(BaseModel):
    model_config = ConfigDict(frozen=True)

    identity_text: str
    financial_text: str
    financial_page_index: int
    page_count: int
    used_fallback: bool = False


class ParseResult(BaseModel):
    record: ExtractedRecord
    profits: Profits
    parse_confidence: float
    status: EstimateStatus
    financial_page_index: int | None = None
    used_totals_fallback: bool = False
    validation_errors: list[str] = Field(default_factory=list)
    validation_warnings: list[str] = Field(default_factory=list)
    extraction_issues: list[str] = Field(default_factory=list)
