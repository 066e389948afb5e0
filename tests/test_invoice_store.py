"""
Tests for invoice record storage: in-memory and SQLite backends share the
same behaviour, including invoice numbering.
"""

import os
import sqlite3
import tempfile
import pytest
from src.models.invoice import RepairInvoice, RepairMaterial
from src.services.storage.invoice_store_base import DEFAULT_INVOICE_START
from src.services.storage.invoices import InvoiceStore
from src.services.storage.invoices_sqlite import SQLiteInvoiceStore


@pytest.fixture
def db_path():
    """Create a temporary database file for testing"""
    fd, path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    yield path
    if os.path.exists(path):
        os.remove(path)


@pytest.fixture(params=["memory", "sqlite"])
def store(request, db_path):
    if request.param == "memory":
        return InvoiceStore()
    return SQLiteInvoiceStore(db_path)


def make_invoice(**overrides):
    data = dict(
        customer_name="Jane Doe",
        repair_description="Setup",
        materials=[RepairMaterial(description="Setup", quantity=1, unit_cost=65.0)],
    )
    data.update(overrides)
    return RepairInvoice(**data)


def test_save_assigns_id_number_and_timestamp(store):
    invoice_id = store.save(make_invoice())
    saved = store.get(invoice_id)

    assert saved.id == invoice_id
    assert saved.invoice_number == str(DEFAULT_INVOICE_START + 1)
    assert saved.created_at is not None
    assert saved.materials[0].unit_cost == 65.0


def test_numbers_continue_from_highest_saved(store):
    store.save(make_invoice(invoice_number="33800"))
    store.save(make_invoice(invoice_number="SR-1029"))

    assert store.next_invoice_number() == "33801"
    assert store.get(store.save(make_invoice())).invoice_number == "33801"


def test_low_numbers_do_not_rewind_sequence(store):
    store.save(make_invoice(invoice_number="120"))
    assert store.next_invoice_number() == str(DEFAULT_INVOICE_START + 1)


def test_empty_store_numbering(store):
    assert store.next_invoice_number() == "33758"


def test_save_with_existing_id_replaces(store):
    invoice_id = store.save(make_invoice())
    original = store.get(invoice_id)

    store.save(original.model_copy(update={"customer_name": "Jane Smith"}))

    assert len(store.list_all()) == 1
    updated = store.get(invoice_id)
    assert updated.customer_name == "Jane Smith"
    assert updated.invoice_number == original.invoice_number
    assert updated.created_at == original.created_at


def test_delete(store):
    invoice_id = store.save(make_invoice())

    assert store.delete(invoice_id) is True
    assert store.get(invoice_id) is None
    assert store.delete(invoice_id) is False


def test_get_missing(store):
    assert store.get("does-not-exist") is None


def test_list_all(store):
    ids = {store.save(make_invoice(customer_name=name)) for name in ("Jane Doe", "Robert Smith")}
    assert {invoice.id for invoice in store.list_all()} == ids


def test_sqlite_persists_across_instances(db_path):
    invoice_id = SQLiteInvoiceStore(db_path).save(make_invoice())

    reopened = SQLiteInvoiceStore(db_path)
    assert reopened.get(invoice_id).customer_name == "Jane Doe"


def test_sqlite_row_columns(db_path):
    invoice_id = SQLiteInvoiceStore(db_path).save(make_invoice(invoice_number="33900"))

    conn = sqlite3.connect(db_path)
    cursor = conn.cursor()
    cursor.execute("SELECT invoice_number, customer_name, invoice_data FROM invoices WHERE id = ?", (invoice_id,))
    row = cursor.fetchone()
    conn.close()

    assert row[0] == "33900"
    assert row[1] == "Jane Doe"
    assert '"repair_description":"Setup"' in row[2]


def test_sqlite_lists_newest_first(db_path):
    store = SQLiteInvoiceStore(db_path)
    store.save(make_invoice(customer_name="First Customer", created_at="2024-01-01T00:00:00+00:00"))
    store.save(make_invoice(customer_name="Second Customer", created_at="2024-02-01T00:00:00+00:00"))

    assert [i.customer_name for i in store.list_all()] == ["Second Customer", "First Customer"]
