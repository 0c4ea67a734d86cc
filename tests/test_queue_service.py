"""Tests for QueueService request normalization."""

import json

import pytest

from pollqueue.api.services.queue_service import QueueService, extract_content
from pollqueue.core.config.models import QueueConfig
from pollqueue.core.queue.registry import QueueRegistry


@pytest.fixture
def service():
    """Create a QueueService with default settings."""
    return QueueService(QueueRegistry(), QueueConfig())


class TestExtractContent:
    """Tests for turning POST bodies into payloads."""

    def test_object_with_content(self):
        """The content field of a JSON object is used."""
        body = json.dumps({"content": "Order #1"}).encode()
        assert extract_content(body, "application/json") == "Order #1"

    def test_content_may_be_structured(self):
        """A structured content value is passed through unchanged."""
        body = json.dumps({"content": {"sku": "A-1"}}).encode()
        assert extract_content(body, "application/json") == {"sku": "A-1"}

    def test_empty_content_falls_back_to_body(self):
        """An empty content field falls back to serializing the whole object."""
        body = json.dumps({"content": "", "note": "x"}).encode()
        assert extract_content(body, "application/json") == '{"content":"","note":"x"}'

    def test_json_string(self):
        """A JSON string body is used as-is."""
        assert extract_content(b'"hello"', "application/json; charset=utf-8") == "hello"

    def test_json_array_is_serialized(self):
        """Non-object JSON values are stored as compact JSON text."""
        assert extract_content(b"[1, 2, 3]", "application/json") == "[1,2,3]"

    def test_empty_json_body(self):
        """An empty JSON body is treated as an empty object."""
        assert extract_content(b"", "application/json") == "{}"

    def test_vendor_json_media_type(self):
        """+json media types are parsed as JSON."""
        assert extract_content(b'{"content": "x"}', "application/vnd.api+json") == "x"

    def test_plain_text(self):
        """Text bodies are decoded as UTF-8."""
        assert extract_content("café".encode(), "text/plain") == "café"

    def test_missing_content_type(self):
        """Bodies without a Content-Type are taken as text."""
        assert extract_content(b'{"content": "x"}', None) == '{"content": "x"}'

    def test_invalid_json_raises(self):
        """Malformed JSON raises ValueError."""
        with pytest.raises(ValueError, match="Invalid JSON"):
            extract_content(b"{oops", "application/json")


class TestParseTimeout:
    """Tests for timeout query parameter normalization."""

    def test_missing_uses_default(self, service):
        """No timeout parameter means the configured default."""
        assert service.parse_timeout(None) == 10000

    def test_blank_uses_default(self, service):
        """An empty timeout parameter means the configured default."""
        assert service.parse_timeout("") == 10000

    def test_numeric(self, service):
        """Integer milliseconds are used as given."""
        assert service.parse_timeout("2500") == 2500

    def test_non_numeric_uses_default(self, service, caplog):
        """Garbage falls back to the default and is logged."""
        assert service.parse_timeout("soon") == 10000
        assert "non-numeric timeout" in caplog.text

    def test_leading_integer_is_used(self, service):
        """Trailing junk after the digits is ignored."""
        assert service.parse_timeout("1.5") == 1
        assert service.parse_timeout("5000ms") == 5000
        assert service.parse_timeout(" 250 ") == 250

    def test_negative_clamps_to_zero(self, service):
        """Negative values become zero."""
        assert service.parse_timeout("-10") == 0

    def test_max_timeout_cap(self):
        """Values above max_timeout_ms are clamped."""
        service = QueueService(QueueRegistry(), QueueConfig(max_timeout_ms=30000))
        assert service.parse_timeout("60000") == 30000
        assert service.parse_timeout("100") == 100

    def test_custom_default(self):
        """The default comes from configuration."""
        service = QueueService(QueueRegistry(), QueueConfig(default_timeout_ms=500))
        assert service.parse_timeout(None) == 500


class TestServiceOperations:
    """Tests for submit/receive through the service."""

    async def test_submit_and_receive(self, service):
        """A submitted body can be received back."""
        message_id = service.submit("orders", b'{"content": "Order #1"}', "application/json")

        message = await service.receive("orders", "0")

        assert message.id == message_id
        assert message.content == "Order #1"

    async def test_receive_zero_timeout_empty(self, service):
        """An empty queue with timeout 0 yields None."""
        assert await service.receive("orders", "0") is None
