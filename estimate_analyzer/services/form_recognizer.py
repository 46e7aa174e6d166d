from loguru import logger
from azure.ai.documentintelligence import DocumentIntelligenceClient
from azure.core.credentials import AzureKeyCredential
from .estimate_types import ExtractionFailure


class DocumentIntelligencePageSource:
    """
    Reads per-page text with the Azure Document Intelligence prebuilt-read model.

    Each page's lines are joined with line breaks, the same shape the local
    pdfplumber reader returns.
    """

    model_id = "prebuilt-read"

    def __init__(self, endpoint: str, api_key: str):
        self.endpoint = endpoint
        self.client = DocumentIntelligenceClient(
            endpoint=endpoint,
            credential=AzureKeyCredential(api_key)
        )

    def page_texts(self, file_bytes: bytes) -> list[str]:
        logger.info(
            "Using Azure Document Intelligence for page text",
            endpoint=self.endpoint[:50] + "..." if len(self.endpoint) > 50 else self.endpoint,
            size_bytes=len(file_bytes)
        )

        try:
            poller = self.client.begin_analyze_document(
                self.model_id,
                body=file_bytes,
                content_type="application/octet-stream"
            )
            result = poller.result()
        except Exception as e:
            logger.error(f"Azure DI read failed: {str(e)}")
            raise ExtractionFailure(f"Document read failed: {str(e)}") from e

        pages = []
        for page in result.pages or []:
            lines = page.lines or []
            pages.append("\n".join(line.content for line in lines if line.content))

        logger.info("Azure DI returned page text", page_count=len(pages))
        return pages
