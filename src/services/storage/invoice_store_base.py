"""
Abstract base class for invoice record storage.

Defines the interface that all invoice stores implement, so the API can run
on the in-memory store in tests and on SQLite in the shop.
"""

import re
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, UTC
from typing import Optional
from ...models.invoice import RepairInvoice

# Paper invoice numbering continues from the last book used before this app
DEFAULT_INVOICE_START = 33757


class InvoiceStoreBase(ABC):

    @abstractmethod
    def save(self, invoice: RepairInvoice) -> str:
        """
        Save an invoice (insert, or replace when its id already exists).

        Args:
            invoice: Invoice record; a blank invoice number is assigned

        Returns:
            Invoice ID
        """
        pass

    @abstractmethod
    def get(self, invoice_id: str) -> Optional[RepairInvoice]:
        """Get an invoice by ID, or None if not found"""
        pass

    @abstractmethod
    def delete(self, invoice_id: str) -> bool:
        """Delete an invoice; False if it did not exist"""
        pass

    @abstractmethod
    def list_all(self) -> list[RepairInvoice]:
        """List all saved invoices"""
        pass

    def next_invoice_number(self) -> str:
        """
        Next free invoice number: one past the highest numeric invoice number
        saved, never below the paper numbering start.
        """
        numbers = []
        for invoice in self.list_all():
            digits = re.sub(r"[^0-9]", "", invoice.invoice_number or "")
            if digits and int(digits) > 0:
                numbers.append(int(digits))
        return str(max(numbers + [DEFAULT_INVOICE_START]) + 1)

    def _prepare(self, invoice: RepairInvoice) -> RepairInvoice:
        """Fill in id, creation time and invoice number before storing."""
        update = {}
        if not invoice.id:
            update["id"] = str(uuid.uuid4())
        if not invoice.created_at:
            update["created_at"] = datetime.now(UTC).isoformat()
        if not invoice.invoice_number.strip():
            update["invoice_number"] = self.next_invoice_number()
        return invoice.model_copy(update=update)
