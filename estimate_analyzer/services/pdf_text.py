"""
Local page-text source backed by pdfplumber.

Does NOT implement OCR: image-only pages come back as empty strings and the
segmenter decides whether the document is usable.
"""

import io
from typing import Protocol
import pdfplumber
from loguru import logger
from .estimate_types import ExtractionFailure
from ..core.config import settings

MAX_PAGES = 200


class PageTextSource(Protocol):
    def page_texts(self, file_bytes: bytes) -> list[str]:
        ...


class PdfPlumberPageSource:
    def page_texts(self, file_bytes: bytes) -> list[str]:
        pages = []
        try:
            with pdfplumber.open(io.BytesIO(file_bytes)) as pdf:
                if len(pdf.pages) > MAX_PAGES:
                    raise ExtractionFailure(f"PDF has {len(pdf.pages)} pages (max {MAX_PAGES})")

                for page in pdf.pages:
                    text = page.extract_text() or ""
                    # One line per text row; the segmenter flattens page 1 itself
                    pages.append("\n".join(line.strip() for line in text.splitlines()))
        except ExtractionFailure:
            raise
        except Exception as e:
            logger.error(f"PDF read error: {e}")
            raise ExtractionFailure(f"Failed to read PDF: {str(e)}") from e

        logger.debug("pdfplumber read pages", page_count=len(pages))
        return pages


def create_page_source() -> PageTextSource:
    """Pick the remote reader when Azure is configured, otherwise read locally."""
    if settings.az_di_endpoint and settings.az_di_api_key:
        from .form_recognizer import DocumentIntelligencePageSource
        return DocumentIntelligencePageSource(settings.az_di_endpoint, settings.az_di_api_key)

    logger.info("Azure Document Intelligence not configured - reading PDFs locally with pdfplumber")
    return PdfPlumberPageSource()
