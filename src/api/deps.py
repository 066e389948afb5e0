from pydantic import BaseModel
from ..services.invoice_types import ExtractedInvoiceData

class ExtractResponse(BaseModel):
    data: ExtractedInvoiceData
    raw_chars: int = 0
    content: str | None = None  # Full OCR text, shown next to the form for review

