"""
Tests for ticket OCR: the Azure Document Intelligence path (SDK mocked) and
the plain-text fallback used when OCR is not configured.
"""

import pytest
from unittest.mock import Mock, patch
from src.core.config import settings
from src.services.form_recognizer import OcrUnavailableError, read_ticket_text


@pytest.fixture
def azure_di_disabled():
    original_endpoint = settings.az_di_endpoint
    original_key = settings.az_di_api_key
    settings.az_di_endpoint = None
    settings.az_di_api_key = None
    try:
        yield
    finally:
        settings.az_di_endpoint = original_endpoint
        settings.az_di_api_key = original_key


@pytest.fixture
def azure_di_enabled():
    original_endpoint = settings.az_di_endpoint
    original_key = settings.az_di_api_key
    settings.az_di_endpoint = "https://example.cognitiveservices.azure.com/"
    settings.az_di_api_key = "test-key"
    try:
        yield
    finally:
        settings.az_di_endpoint = original_endpoint
        settings.az_di_api_key = original_key


def test_text_upload_without_ocr(azure_di_disabled, service_ticket_text):
    assert read_ticket_text(service_ticket_text.encode("utf-8"), "text/plain") == service_ticket_text


@pytest.mark.parametrize("content", [b"", b"   \n\t"])
def test_blank_upload_raises(azure_di_disabled, content):
    with pytest.raises(OcrUnavailableError):
        read_ticket_text(content)


def test_azure_di_read_model(azure_di_enabled):
    mock_client = Mock()
    mock_client.begin_analyze_document.return_value.result.return_value = Mock(content="Trouble Reported\nbuzz")

    with patch("src.services.form_recognizer.DocumentIntelligenceClient", return_value=mock_client):
        text = read_ticket_text(b"\xff\xd8jpeg", "image/jpeg")

    assert text == "Trouble Reported\nbuzz"
    args, kwargs = mock_client.begin_analyze_document.call_args
    assert args[0] == settings.az_di_model
    assert kwargs["body"] == b"\xff\xd8jpeg"
    assert kwargs["content_type"] == "image/jpeg"


def test_azure_di_default_content_type(azure_di_enabled):
    mock_client = Mock()
    mock_client.begin_analyze_document.return_value.result.return_value = Mock(content="text")

    with patch("src.services.form_recognizer.DocumentIntelligenceClient", return_value=mock_client):
        read_ticket_text(b"bytes")

    assert mock_client.begin_analyze_document.call_args.kwargs["content_type"] == "application/octet-stream"


def test_azure_di_failure_is_wrapped(azure_di_enabled):
    mock_client = Mock()
    mock_client.begin_analyze_document.side_effect = RuntimeError("service unavailable")

    with patch("src.services.form_recognizer.DocumentIntelligenceClient", return_value=mock_client):
        with pytest.raises(OcrUnavailableError, match="service unavailable"):
            read_ticket_text(b"bytes", "image/png")


def test_azure_di_no_text(azure_di_enabled):
    mock_client = Mock()
    mock_client.begin_analyze_document.return_value.result.return_value = Mock(content="")

    with patch("src.services.form_recognizer.DocumentIntelligenceClient", return_value=mock_client):
        with pytest.raises(OcrUnavailableError, match="no text"):
            read_ticket_text(b"bytes", "image/png")
