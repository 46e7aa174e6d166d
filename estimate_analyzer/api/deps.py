from pydantic import BaseModel
from ..core.config import settings
from ..services.estimate_parser import EstimateParser
from ..services.estimate_types import ParseResult
from ..services.pdf_text import create_page_source
from ..services.segmenter import TextSegmenter


class UploadResponse(BaseModel):
    estimate_id: str
    status: str
    parse_confidence: float
    sheets: dict | None = None
    estimate: dict


class ValidateResponse(BaseModel):
    is_valid: bool
    errors: list[str]
    warnings: list[str]
    needs_review: bool


ExtractResponse = ParseResult


def get_estimate_parser() -> EstimateParser:
    """Build the parser with the configured page-text source (FastAPI dependency)."""
    segmenter = TextSegmenter(page_source=create_page_source())
    return EstimateParser(segmenter, strict_validation=settings.strict_validation)
