"""
Pytest configuration and shared ticket samples.

Registers the integration marker / --run-integration option and provides
OCR transcripts of the two paper ticket layouts.
"""

import pytest


LEGACY_REPAIR_FORM_TEXT = """Delco Music Co
Invoice Number: 33740
Date: 3/5/24
Attention: Jane Doe
Email: jane.doe@gmail.com
Number: 6105551234
Address: 45 Oak Lane, Media
Service: Full setup and restring on acoustic guitar
Description Quantity Unit Price Cost
Guitar strings 3 $8.50 $25.50
Setup 2 $45.00 $135.00
Subtotal $160.50
"""

SERVICE_TICKET_TEXT = """GEORGE'S MUSIC
707 Baltimore Pike
Springfield, PA 19064
springfield@georgesmusic.com
Service Ticket
03/01/2024
Service Location: Springfield
Item Description: Fernandez Ravelle electric
Serial # RV12345
Trouble Reported
Buzzing on the low E string
needs fret level
-----
Special Instructions: call when ready
CUSTOMER INFORMATION
Robert Smith
12 Maple Avenue
Ridley Park
PA 19078
Phone-Primary: 610-555-9876
Email: rsmith@comcast.net
Signature
"""


@pytest.fixture
def legacy_ticket_text():
    return LEGACY_REPAIR_FORM_TEXT


@pytest.fixture
def service_ticket_text():
    return SERVICE_TICKET_TEXT


def pytest_addoption(parser):
    """Add custom command-line options"""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run integration tests against real Azure resources"
    )


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test requiring real Azure resources"
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --run-integration is specified"""
    if config.getoption("--run-integration"):
        return

    skip_integration = pytest.mark.skip(reason="need --run-integration option to run")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)
