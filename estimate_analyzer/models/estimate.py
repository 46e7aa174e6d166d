from typing import Literal
from pydantic import BaseModel, Field
from ..services.estimate_types import ItemizedTotals, VehicleInfo

class ParseTextRequest(BaseModel):
    pages: list[str] = Field(default_factory=list)  # One string per page, in order

class ManualEstimateRequest(BaseModel):
    customer_name: str = Field(min_length=1)
    claim_number: str = Field(min_length=1)
    job_number: str | None = Field(default=None)
    insurance_company: str = Field(default="")
    vehicle: VehicleInfo = Field(default_factory=VehicleInfo)
    totals: ItemizedTotals = Field(default_factory=ItemizedTotals)
    notes: str | None = Field(default=None)

class VehicleUpdate(BaseModel):
    year: str | None = None
    make: str | None = None
    model: str | None = None
    vin: str | None = None

class EstimateUpdateRequest(BaseModel):
    # Every field optional: only the fields sent are changed
    customer_name: str | None = Field(default=None)
    job_number: str | None = Field(default=None)
    claim_number: str | None = Field(default=None)
    insurance_company: str | None = Field(default=None)
    vehicle: VehicleUpdate | None = Field(default=None)
    totals: dict[str, float] | None = Field(default=None)
    actual_parts_cost: float | None = Field(default=None, ge=0)
    notes: str | None = Field(default=None)
    file_name: str | None = Field(default=None)
    status: Literal["parsed", "needs_review"] | None = Field(default=None)

class ValidateRequest(BaseModel):
    customer_name: str | None = None
    claim_number: str | None = None
    insurance_company: str | None = None
    job_number: str | None = None
    vehicle: VehicleUpdate | None = None
    totals: dict[str, float] | None = None
