"""
In-memory invoice storage (for tests and demos).
Set INVOICE_DB_PATH to keep records in SQLite instead.
"""
from typing import Dict, Optional
from ...models.invoice import RepairInvoice
from .invoice_store_base import InvoiceStoreBase


class InvoiceStore(InvoiceStoreBase):
    def __init__(self):
        self._invoices: Dict[str, RepairInvoice] = {}

    def save(self, invoice: RepairInvoice) -> str:
        """Save an invoice and return its ID"""
        record = self._prepare(invoice)
        self._invoices[record.id] = record
        return record.id

    def get(self, invoice_id: str) -> Optional[RepairInvoice]:
        """Get invoice by ID"""
        return self._invoices.get(invoice_id)

    def delete(self, invoice_id: str) -> bool:
        """Delete an invoice"""
        return self._invoices.pop(invoice_id, None) is not None

    def list_all(self) -> list[RepairInvoice]:
        """List all invoices in the order they were first saved"""
        return list(self._invoices.values())
