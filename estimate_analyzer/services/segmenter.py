from typing import Sequence
from loguru import logger
from .estimate_types import NoExtractableText, SegmentedText
from .pdf_text import PageTextSource

TOTALS_KEYWORD = "estimate total"


def flatten(text: str) -> str:
    """Join a page's text fragments with single spaces."""
    return " ".join(text.split())


class TextSegmenter:
    """
    Picks the two regions of an estimate the extractors work on.

    Page 1 carries the customer/vehicle block and is flattened to one line;
    the financial breakdown sits on the first page mentioning "estimate
    total", or on the last page when no page does. The financial page keeps
    its line breaks so per-line fallbacks stay on the label's own line.
    """

    def __init__(self, page_source: PageTextSource | None = None):
        self.page_source = page_source

    def segment_document(self, file_bytes: bytes) -> SegmentedText:
        if self.page_source is None:
            raise RuntimeError("TextSegmenter has no page source configured")
        return self.segment(self.page_source.page_texts(file_bytes))

    def segment(self, pages: Sequence[str]) -> SegmentedText:
        if not pages:
            raise NoExtractableText("Document has no pages")

        pages = [page or "" for page in pages]
        identity_text = flatten(pages[0])
        if not identity_text:
            raise NoExtractableText("No text content extracted from page 1")

        for index, text in enumerate(pages, start=1):
            if TOTALS_KEYWORD in flatten(text).lower():
                logger.debug("Found estimate totals page", page=index)
                return SegmentedText(
                    identity_text=identity_text,
                    financial_text=text,
                    financial_page_index=index,
                    page_count=len(pages),
                )

        logger.warning(
            "Estimate totals page not found, using last page as fallback",
            page_count=len(pages)
        )
        return SegmentedText(
            identity_text=identity_text,
            financial_text=pages[-1],
            financial_page_index=len(pages),
            page_count=len(pages),
            used_fallback=True,
        )
