"""
SQLite-based invoice storage.

Keeps invoice records across restarts, replacing the browser storage the
invoice form used to rely on.
"""

import sqlite3
from typing import Optional
from ...models.invoice import RepairInvoice
from .invoice_store_base import InvoiceStoreBase


class SQLiteInvoiceStore(InvoiceStoreBase):
    """
    SQLite-backed invoice store.

    Each record is stored as the invoice's JSON alongside a few indexed
    columns used for ordering and lookups.
    """

    def __init__(self, db_path: str = "invoices.db"):
        """
        Initialize store with database path.

        Args:
            db_path: Path to SQLite database file (default: invoices.db)
        """
        self.db_path = db_path
        self._init_database()

    def _init_database(self):
        """Create invoices table if it doesn't exist"""
        conn = sqlite3.connect(self.db_path)
        cursor = conn.cursor()

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS invoices (
                id TEXT PRIMARY KEY,
                invoice_number TEXT NOT NULL,
                customer_name TEXT,
                invoice_data TEXT NOT NULL,
                created_at TEXT NOT NULL
            )
        """)

        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_invoice_created_at
            ON invoices(created_at)
        """)

        conn.commit()
        conn.close()

    def _get_connection(self) -> sqlite3.Connection:
        """Get database connection with row factory"""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def save(self, invoice: RepairInvoice) -> str:
        """
        Insert or replace an invoice record.

        Args:
            invoice: Invoice to save

        Returns:
            Invoice ID
        """
        record = self._prepare(invoice)

        conn = self._get_connection()
        cursor = conn.cursor()

        cursor.execute("""
            INSERT OR REPLACE INTO invoices (id, invoice_number, customer_name, invoice_data, created_at)
            VALUES (?, ?, ?, ?, ?)
        """, (record.id, record.invoice_number, record.customer_name, record.model_dump_json(), record.created_at))

        conn.commit()
        conn.close()

        return record.id

    def get(self, invoice_id: str) -> Optional[RepairInvoice]:
        """Get invoice by ID, or None if not found"""
        conn = self._get_connection()
        cursor = conn.cursor()

        cursor.execute("""
            SELECT invoice_data FROM invoices WHERE id = ?
        """, (invoice_id,))

        row = cursor.fetchone()
        conn.close()

        if row is None:
            return None
        return RepairInvoice.model_validate_json(row["invoice_data"])

    def delete(self, invoice_id: str) -> bool:
        """Delete an invoice; returns False if not found"""
        conn = self._get_connection()
        cursor = conn.cursor()

        cursor.execute("DELETE FROM invoices WHERE id = ?", (invoice_id,))

        rows_affected = cursor.rowcount
        conn.commit()
        conn.close()

        return rows_affected > 0

    def list_all(self) -> list[RepairInvoice]:
        """List all invoices (ordered by creation time, newest first)"""
        conn = self._get_connection()
        cursor = conn.cursor()

        cursor.execute("""
            SELECT invoice_data FROM invoices
            ORDER BY created_at DESC
        """)

        rows = cursor.fetchall()
        conn.close()

        return [RepairInvoice.model_validate_json(row["invoice_data"]) for row in rows]
