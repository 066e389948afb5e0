import re
from loguru import logger
from ..invoice_types import FormatTag

INVOICE_NUMBER_LABEL = re.compile(r"invoice\s+number\s*:", re.IGNORECASE)
SERVICE_LABEL = re.compile(r"\bservice\s*:", re.IGNORECASE)


def _has_table_header(text: str) -> bool:
    t = text.lower()
    return "description" in t and "quantity" in t and ("unit price" in t or "cost" in t)


def classify_ticket_format(text: str) -> FormatTag:
    """
    Tell the legacy repair form apart from the service ticket.

    The legacy form carries an "Invoice Number:" label together with either an
    items table header (Description / Quantity / Unit Price or Cost) or a
    "Service:" label. Anything else is treated as a service ticket.

    The tag is informational: extractors still try every pattern they know,
    since real tickets mix both conventions.
    """
    text = text or ""
    has_invoice_label = bool(INVOICE_NUMBER_LABEL.search(text))
    has_table = _has_table_header(text)
    has_service_label = bool(SERVICE_LABEL.search(text))

    tag = (
        FormatTag.LEGACY_REPAIR_FORM
        if has_invoice_label and (has_table or has_service_label)
        else FormatTag.SERVICE_TICKET
    )
    logger.debug(
        "Ticket format classified",
        tag=tag.value,
        invoice_label=has_invoice_label,
        table_header=has_table,
        service_label=has_service_label,
    )
    return tag
