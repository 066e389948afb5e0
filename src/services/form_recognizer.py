from loguru import logger
from azure.ai.documentintelligence import DocumentIntelligenceClient
from azure.core.credentials import AzureKeyCredential
from ..core.config import settings


class OcrUnavailableError(Exception):
    """Raised when OCR produced no usable text for an uploaded ticket."""


def read_ticket_text(file_bytes: bytes, content_type: str | None = None) -> str:
    """
    Produce the raw OCR text for an uploaded repair ticket.

    With Azure Document Intelligence configured the image is run through the
    read model. Without it the upload is treated as an already transcribed
    text file, which keeps local development and tests offline.

    Raises:
        OcrUnavailableError: OCR failed or returned no text
    """
    if settings.az_di_endpoint and settings.az_di_api_key:
        logger.info(
            "Using Azure Document Intelligence for ticket OCR",
            endpoint=settings.az_di_endpoint[:50] + "..." if len(settings.az_di_endpoint) > 50 else settings.az_di_endpoint,
            model=settings.az_di_model,
        )

        try:
            client = DocumentIntelligenceClient(
                endpoint=settings.az_di_endpoint,
                credential=AzureKeyCredential(settings.az_di_api_key)
            )

            logger.info(f"Analyzing ticket image of size {len(file_bytes)} bytes")

            poller = client.begin_analyze_document(
                settings.az_di_model,
                body=file_bytes,
                content_type=content_type or "application/octet-stream"
            )
            result = poller.result()
        except Exception as e:
            logger.error(f"Azure DI OCR failed: {str(e)}")
            raise OcrUnavailableError(f"OCR processing failed: {str(e)}") from e

        text = result.content if getattr(result, "content", None) else ""

    else:
        logger.warning(
            "Azure Document Intelligence not configured - treating upload as OCR text. "
            "Set AZ_DI_ENDPOINT and AZ_DI_API_KEY to OCR ticket photos."
        )
        text = (file_bytes or b"").decode("utf-8", errors="replace")

    if not text.strip():
        raise OcrUnavailableError("Text recognition returned no text. Please try with a clearer image.")

    logger.info("Ticket OCR complete", chars=len(text), lines=text.count("\n") + 1)
    return text
