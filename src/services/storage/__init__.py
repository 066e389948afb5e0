from ...core.config import settings
from .invoices import InvoiceStore
from .invoices_sqlite import SQLiteInvoiceStore

# Global instance (in production, use dependency injection)
invoice_store = SQLiteInvoiceStore(settings.invoice_db_path) if settings.invoice_db_path else InvoiceStore()
