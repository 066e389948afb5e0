"""
End-to-end tests for extract_invoice_data on both ticket layouts.
"""

import pytest
from src.services.invoice_types import FormatTag, InstrumentEntry, MaterialLine
from src.services.ticket_parser import extract_invoice_data


class TestLegacyRepairForm:

    def test_all_fields(self, legacy_ticket_text):
        result = extract_invoice_data(legacy_ticket_text)

        assert result.format_tag == FormatTag.LEGACY_REPAIR_FORM
        assert result.invoice_number == "33740"
        assert result.date_received == "2024-03-05"
        assert result.customer_name == "Jane Doe"
        assert result.customer_email == "jane.doe@gmail.com"
        assert result.customer_phone == "(610) 555-1234"
        assert result.customer_address == "45 Oak Lane, Media, PA"
        assert result.in_service_area is True
        assert result.repair_description == "Full setup and restring on acoustic guitar"
        assert result.instruments == [
            InstrumentEntry(type="Guitar", description="Full setup and restring on acoustic guitar")
        ]
        assert result.materials == [
            MaterialLine(description="Guitar strings", quantity=3, unit_cost=8.50),
            MaterialLine(description="Setup", quantity=3, unit_cost=45.00),
        ]

    def test_labor_is_left_for_the_form(self, legacy_ticket_text):
        result = extract_invoice_data(legacy_ticket_text)
        assert result.labor_hours is None
        assert result.hourly_rate is None

    def test_diagnostic_log(self, legacy_ticket_text):
        log = extract_invoice_data(legacy_ticket_text).diagnostic_log

        assert log[0].startswith("zones: ")
        assert log[1] == "format: legacy_repair_form"
        assert "invoice_number: matched by invoice_number_label -> '33740'" in log
        assert "date_received: matched by date_label -> '2024-03-05'" in log
        assert "address: in service area = True" in log
        assert any("overridden" in entry for entry in log)
        assert log[-1] == "materials: 2 row(s) accepted"


class TestServiceTicket:

    def test_all_fields(self, service_ticket_text):
        result = extract_invoice_data(service_ticket_text)

        assert result.format_tag == FormatTag.SERVICE_TICKET
        assert result.invoice_number is None
        assert result.date_received == "2024-03-01"
        assert result.customer_name == "Robert Smith"
        assert result.customer_email == "rsmith@comcast.net"
        assert result.customer_phone == "(610) 555-9876"
        assert result.customer_address == "12 Maple Avenue, Ridley Park, PA 19078"
        assert result.in_service_area is True
        assert result.repair_description == "Buzzing on the low E string needs fret level"
        assert result.instruments == [
            InstrumentEntry(type="Guitar", description="Fernandes Ravelle electric (Serial: RV12345)")
        ]
        assert result.materials == []

    def test_missing_fields_are_logged(self, service_ticket_text):
        log = extract_invoice_data(service_ticket_text).diagnostic_log
        assert "invoice_number: not found" in log
        assert "customer_name: matched by name_after_customer_marker -> 'Robert Smith'" in log


class TestExtractionBehaviour:

    def test_same_input_same_output(self, service_ticket_text):
        first = extract_invoice_data(service_ticket_text)
        second = extract_invoice_data(service_ticket_text)
        assert first == second

    def test_results_independent_of_previous_calls(self, legacy_ticket_text, service_ticket_text):
        before = extract_invoice_data(service_ticket_text)
        extract_invoice_data(legacy_ticket_text)
        assert extract_invoice_data(service_ticket_text) == before

    @pytest.mark.parametrize("text", ["", None])
    def test_empty_input(self, text):
        result = extract_invoice_data(text)

        assert result.format_tag == FormatTag.SERVICE_TICKET
        assert result.customer_name is None
        assert result.invoice_number is None
        assert result.instruments == []
        assert result.materials == []
        assert result.in_service_area is None

    def test_text_without_markers_or_labels(self):
        result = extract_invoice_data("@@@@\n----\n12345\n$\n")

        for field in (
            "customer_name",
            "customer_phone",
            "customer_email",
            "customer_address",
            "date_received",
            "invoice_number",
            "repair_description",
        ):
            assert getattr(result, field) is None
        assert result.instruments == []
        assert result.materials == []
        assert "customer_name: not found" in result.diagnostic_log

    @pytest.mark.parametrize(
        "text",
        [
            "Invoice Number:\nDate: 99/99/99\nAttention:\n$ $ $",
            "Trouble Reported\nCUSTOMER INFORMATION",
            "Item Description:\nSerial #\n\x00\x01�",
            "Description Quantity Unit Price Cost\nx $0.00 $0.00\nStrings $1,2,3.00 $",
        ],
    )
    def test_malformed_text_never_raises(self, text):
        result = extract_invoice_data(text)
        assert result.format_tag in (FormatTag.LEGACY_REPAIR_FORM, FormatTag.SERVICE_TICKET)
        assert all(m.quantity > 0 and m.unit_cost > 0 for m in result.materials)

    def test_out_of_area_address_is_kept(self):
        result = extract_invoice_data("Address: 1 Broad St, Philadelphia, PA 19107")
        assert result.customer_address == "1 Broad St, Philadelphia, PA 19107"
        assert result.in_service_area is False
