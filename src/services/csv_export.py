import csv
import io
from typing import Iterable
from ..models.invoice import RepairInvoice
from .pricing import InvoicePricing, create_pricing_rules

CSV_HEADERS = [
    "Invoice Number",
    "Date Received",
    "Invoice Date",
    "Customer Name",
    "Customer Phone",
    "Customer Email",
    "Customer Address",
    "Instruments",
    "Repair Description",
    "Service or Material",
    "Services Total",
    "Subtotal",
    "Delivery Fee",
    "Tax",
    "Total (Your Charge)",
    "Georges Music Repair",
    "Georges Subtotal (1.54x)",
    "Georges Tax",
    "Georges Total",
    "Notes",
]


def _flatten(value: str | None) -> str:
    return (value or "").replace("\r", " ").replace("\n", " ")


def _format_instruments(invoice: RepairInvoice) -> str:
    return "; ".join(
        f"{i.type} (Instrument Model: {i.description})" if i.description else i.type
        for i in invoice.instruments
    )


def _format_materials(invoice: RepairInvoice) -> str:
    return "; ".join(f"{m.description} (${m.unit_cost:g})" for m in invoice.materials)


def invoice_to_row(invoice: RepairInvoice, pricing: InvoicePricing | None = None) -> list[str]:
    pricing = pricing or create_pricing_rules()
    totals = pricing.calculate(
        invoice.materials,
        delivery_fee=invoice.delivery_fee,
        is_georges_music=invoice.is_georges_music,
        no_delivery_fee=invoice.is_no_delivery_fee,
    )
    return [
        invoice.invoice_number,
        invoice.date_received or "",
        invoice.date or "",
        invoice.customer_name,
        invoice.customer_phone,
        invoice.customer_email,
        _flatten(invoice.customer_address),
        _format_instruments(invoice),
        _flatten(invoice.repair_description),
        _format_materials(invoice),
        f"{totals.services_total:.2f}",
        f"{totals.subtotal:.2f}",
        f"{totals.delivery:.2f}",
        f"{totals.tax:.2f}",
        f"{totals.total:.2f}",
        "Yes" if invoice.is_georges_music else "No",
        f"{totals.georges_subtotal:.2f}",
        f"{totals.georges_tax:.2f}",
        f"{totals.georges_total:.2f}",
        _flatten(invoice.notes),
    ]


def export_invoices_csv(invoices: Iterable[RepairInvoice]) -> str:
    """Render invoices as CSV text with every field quoted."""
    pricing = create_pricing_rules()
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for invoice in invoices:
        writer.writerow(invoice_to_row(invoice, pricing))
    return buffer.getvalue()
