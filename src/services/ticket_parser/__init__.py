from .classifier import classify_ticket_format
from .extractor import extract_invoice_data
from .segmenter import DocumentZones, segment_text

__all__ = ["DocumentZones", "classify_ticket_format", "extract_invoice_data", "segment_text"]
