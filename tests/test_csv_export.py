import csv
import io
from src.models.invoice import Instrument, RepairInvoice, RepairMaterial
from src.services.csv_export import CSV_HEADERS, export_invoices_csv, invoice_to_row
from src.services.pricing import InvoicePricing


def make_invoice(**overrides):
    data = dict(
        invoice_number="33758",
        date_received="2024-03-01",
        date="2024-03-08",
        customer_name="Robert Smith",
        customer_phone="(610) 555-9876",
        customer_email="rsmith@comcast.net",
        customer_address="12 Maple Avenue\nRidley Park, PA 19078",
        instruments=[Instrument(type="Guitar", description="Fernandes Ravelle")],
        repair_description="Fret level",
        materials=[
            RepairMaterial(description="Guitar strings", quantity=3, unit_cost=8.50),
            RepairMaterial(description="Setup", quantity=1, unit_cost=45.00),
        ],
        delivery_fee=11.9,
        notes="Call before delivery",
    )
    data.update(overrides)
    return RepairInvoice(**data)


def read_rows(text):
    return list(csv.reader(io.StringIO(text)))


def test_row_matches_headers():
    row = invoice_to_row(make_invoice(), InvoicePricing())
    assert len(row) == len(CSV_HEADERS)
    record = dict(zip(CSV_HEADERS, row))

    assert record["Invoice Number"] == "33758"
    assert record["Customer Address"] == "12 Maple Avenue Ridley Park, PA 19078"
    assert record["Instruments"] == "Guitar (Instrument Model: Fernandes Ravelle)"
    assert record["Service or Material"] == "Guitar strings ($8.5); Setup ($45)"
    assert record["Services Total"] == "70.50"
    assert record["Delivery Fee"] == "11.90"
    assert record["Tax"] == "4.94"
    assert record["Total (Your Charge)"] == "87.34"
    assert record["Georges Music Repair"] == "No"
    assert record["Georges Total"] == "115.08"


def test_georges_invoice_row():
    row = invoice_to_row(make_invoice(is_georges_music=True), InvoicePricing())
    record = dict(zip(CSV_HEADERS, row))

    assert record["Georges Music Repair"] == "Yes"
    assert record["Delivery Fee"] == "0.00"
    assert record["Total (Your Charge)"] == "74.73"


def test_instrument_without_description():
    row = invoice_to_row(make_invoice(instruments=[Instrument(type="Violin")]), InvoicePricing())
    assert dict(zip(CSV_HEADERS, row))["Instruments"] == "Violin"


def test_export_quotes_every_field():
    text = export_invoices_csv([make_invoice(), make_invoice(invoice_number="33759", date=None)])
    lines = text.splitlines()

    assert lines[0].startswith('"Invoice Number","Date Received"')
    rows = read_rows(text)
    assert rows[0] == CSV_HEADERS
    assert [r[0] for r in rows[1:]] == ["33758", "33759"]
    assert rows[2][2] == ""


def test_export_with_no_invoices_is_header_only():
    assert read_rows(export_invoices_csv([])) == [CSV_HEADERS]
