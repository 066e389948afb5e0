"""
Turn raw OCR text from a photographed repair ticket into invoice fields.

The pass is a pure function of its input: zones are recomputed for every
call, nothing is cached, and missing fields are simply left out of the
result. The diagnostic log records each decision in order.
"""

from loguru import logger
from ..invoice_types import ExtractedInvoiceData
from .classifier import classify_ticket_format
from .fields import (
    extract_customer_address,
    extract_customer_email,
    extract_customer_name,
    extract_customer_phone,
    extract_date_received,
    extract_instrument,
    extract_invoice_number,
    extract_repair_description,
)
from .materials import parse_materials
from .matchers import DiagnosticLog
from .regions import is_service_area_address
from .segmenter import segment_text


def extract_invoice_data(text: str) -> ExtractedInvoiceData:
    """
    Extract structured invoice data from OCR text.

    Never raises for missing or malformed fields; an unreadable ticket just
    yields a mostly empty result.

    Args:
        text: Plain OCR output for one ticket

    Returns:
        ExtractedInvoiceData with the diagnostic log attached
    """
    text = text or ""
    log = DiagnosticLog()

    zones = segment_text(text)
    log.add(
        f"zones: {len(zones.lines)} line(s), trouble marker at {zones.trouble_index}, "
        f"customer marker at {zones.customer_index}, item description at {zones.item_description_index}"
    )

    format_tag = classify_ticket_format(text)
    log.add(f"format: {format_tag.value}")

    result = ExtractedInvoiceData(format_tag=format_tag)
    result.invoice_number = extract_invoice_number(text, zones, log)
    result.date_received = extract_date_received(text, zones, log)
    result.customer_name = extract_customer_name(text, zones, log)
    result.customer_email = extract_customer_email(text, zones, log)
    result.customer_phone = extract_customer_phone(text, zones, log)
    result.customer_address = extract_customer_address(text, zones, log)
    result.repair_description = extract_repair_description(text, zones, log)

    instrument = extract_instrument(text, zones, result.repair_description, log)
    if instrument is not None:
        result.instruments = [instrument]

    if result.customer_address:
        result.in_service_area = is_service_area_address(result.customer_address)
        log.add(f"address: in service area = {result.in_service_area}")

    result.materials = parse_materials(zones.lines, log)
    result.diagnostic_log = log.entries

    logger.info(
        "Ticket extraction finished",
        format_tag=format_tag.value,
        invoice_number=result.invoice_number,
        has_customer=bool(result.customer_name),
        materials=len(result.materials),
        log_entries=len(log),
    )
    return result
