from typing import Sequence
from loguru import logger
from .estimate_types import (
    EstimateStatus,
    ExtractedRecord,
    ItemizedTotals,
    IdentityFields,
    ParseResult,
    Profits,
    SegmentedText,
)
from .extractors import extract_financials, extract_identity
from .review_rules import evaluate
from .segmenter import TextSegmenter
from .totals import calculate_estimate_profit, with_derived_totals, with_labor_total
from .validation import detect_extraction_issues, should_force_review, validate_estimate_data


class EstimateParser:
    """
    Runs one document through segmentation, extraction, totals and scoring.

    Args:
        segmenter: TextSegmenter holding the page-text source
        strict_validation: let the validation pass push records to review
    """

    def __init__(self, segmenter: TextSegmenter, strict_validation: bool = False):
        self.segmenter = segmenter
        self.strict_validation = strict_validation

    def parse_document(self, file_bytes: bytes) -> ParseResult:
        return self._parse(self.segmenter.segment_document(file_bytes))

    def parse_pages(self, pages: Sequence[str]) -> ParseResult:
        return self._parse(self.segmenter.segment(pages))

    def _parse(self, segments: SegmentedText) -> ParseResult:
        logger.info(
            "Parsing estimate",
            page_count=segments.page_count,
            totals_page=segments.financial_page_index,
            totals_fallback=segments.used_fallback
        )

        identity = extract_identity(segments.identity_text)
        totals = with_labor_total(extract_financials(segments.financial_text))
        record = ExtractedRecord(
            **identity.model_dump(),
            totals=totals,
            page_count=segments.page_count,
        )

        issues = detect_extraction_issues(f"{segments.identity_text} {segments.financial_text}")
        if issues:
            logger.warning("PDF extraction issues detected", issues=issues)

        decision = evaluate(record)
        status = decision.status

        validation = validate_estimate_data(record.model_dump())
        if self.strict_validation and status == EstimateStatus.PARSED and should_force_review(validation):
            logger.info(
                "Validation pushed estimate to review",
                errors=validation.errors,
                warnings=validation.warnings
            )
            status = EstimateStatus.NEEDS_REVIEW

        return ParseResult(
            record=record,
            profits=Profits(estimate_profit=calculate_estimate_profit(totals)),
            parse_confidence=decision.confidence,
            status=status,
            financial_page_index=segments.financial_page_index,
            used_totals_fallback=segments.used_fallback,
            validation_errors=validation.errors,
            validation_warnings=validation.warnings,
            extraction_issues=issues,
        )


def build_manual_result(
    identity: IdentityFields,
    totals: ItemizedTotals,
    actual_parts_cost: float | None = None,
) -> ParseResult:
    """
    Manual entry bypasses extraction: totals are derived, confidence is 1.0
    and the status is parsed.
    """
    totals = with_derived_totals(totals)
    record = ExtractedRecord(**identity.model_dump(), totals=totals, page_count=0)
    return ParseResult(
        record=record,
        profits=Profits(
            estimate_profit=calculate_estimate_profit(totals),
            actual_parts_cost=actual_parts_cost,
        ),
        parse_confidence=1.0,
        status=EstimateStatus.PARSED,
    )
