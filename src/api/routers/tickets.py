from fastapi import APIRouter, UploadFile, File, HTTPException, Request
from loguru import logger
from ..deps import ExtractResponse
from ...models.invoice import ParseTextRequest
from ...services.form_recognizer import read_ticket_text, OcrUnavailableError
from ...services.ticket_parser import extract_invoice_data

router = APIRouter(prefix="/tickets", tags=["tickets"])


@router.post("/extract", response_model=ExtractResponse)
async def extract(request: Request, file: UploadFile = File(None)):
    """
    OCR a photographed repair ticket and extract invoice fields from it.

    Accepts either:
    - multipart/form-data (file upload via form)
    - a raw binary body (image, or plain text when OCR is not configured)

    The result pre-fills the invoice form; missing fields are left out.
    """
    try:
        if file:
            content = await file.read()
            content_type = file.content_type
        else:
            content = await request.body()
            content_type = request.headers.get("content-type")
            if not content:
                raise HTTPException(status_code=422, detail="No file provided (either multipart or raw body)")

        text = read_ticket_text(content, content_type)
        extracted = extract_invoice_data(text)
        return ExtractResponse(data=extracted, raw_chars=len(content), content=text)
    except HTTPException:
        raise
    except OcrUnavailableError as e:
        logger.warning(f"Ticket OCR failed: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Ticket extraction failed: {str(e)}")
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/parse", response_model=ExtractResponse)
async def parse(req: ParseTextRequest):
    """
    Extract invoice fields from OCR text that was produced elsewhere.

    Example request:
    {
        "text": "Invoice Number: 33740\\nDate: 3/5/24\\nAttention: Jane Doe\\n..."
    }
    """
    extracted = extract_invoice_data(req.text)
    return ExtractResponse(data=extracted, raw_chars=len(req.text), content=req.text)
