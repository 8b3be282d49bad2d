"""Unit tests for logging processors."""

import pytest

from utils import clear_correlation_id, redact_sensitive, set_correlation_id
from utils.logging import REDACTED, _add_process_context, _line_renderer


class TestRedactSensitive:
    """Test cases for credential and payload masking."""

    def test_masks_credentials_and_images(self) -> None:
        event = {
            "event": "Submitting prediction",
            "Authorization": "Bearer r8_secret",
            "replicate_api_token": "r8_secret",
            "image": "data:image/png;base64,AAAA",
            "model": "google/nano-banana-pro",
        }

        result = redact_sensitive(None, "info", event)

        assert result["Authorization"] == REDACTED
        assert result["replicate_api_token"] == REDACTED
        assert result["image"] == REDACTED
        assert result["model"] == "google/nano-banana-pro"
        assert result["event"] == "Submitting prediction"

    def test_prompt_logged_by_length_only(self) -> None:
        result = redact_sensitive(None, "info", {"event": "x", "prompt": "a red bicycle"})

        assert "prompt" not in result
        assert result["prompt_length"] == 13

    def test_masks_nested_payloads(self) -> None:
        """Provider bodies echoed into logs keep their shape but lose the image."""
        event = {
            "event": "Provider rejected request",
            "details": {"input": {"image_input": ["data:..."], "output_format": "jpg"}, "status": 422},
        }

        result = redact_sensitive(None, "error", event)

        assert result["details"] == {
            "input": {"image_input": REDACTED, "output_format": "jpg"},
            "status": 422,
        }

    @pytest.mark.parametrize("value", ["plain text", 502, None, ["a", "b"]])
    def test_non_mapping_values_untouched(self, value) -> None:
        assert redact_sensitive(None, "info", {"event": "x", "details": value})["details"] == value


class TestProcessContext:
    """Test cases for process and correlation context."""

    def test_adds_bound_correlation_id(self) -> None:
        set_correlation_id("corr-123")
        try:
            result = _add_process_context(None, "info", {"event": "x"})
        finally:
            clear_correlation_id()

        assert result["correlation_id"] == "corr-123"
        assert "pid" in result
        assert "hostname" in result

    def test_explicit_correlation_id_wins(self) -> None:
        set_correlation_id("corr-123")
        try:
            result = _add_process_context(None, "info", {"event": "x", "correlation_id": "other"})
        finally:
            clear_correlation_id()

        assert result["correlation_id"] == "other"


class TestLineRenderer:
    """Test cases for the non-JSON renderer."""

    def test_renders_context_as_sorted_json(self) -> None:
        line = _line_renderer(None, "info", {
            "timestamp": "2026-01-01T00:00:00Z",
            "level": "warning",
            "event": "Request body too large",
            "logger": "middleware.body_limit",
            "max_body_bytes": 1024,
            "body_bytes": 2048,
        })

        assert line == (
            '2026-01-01T00:00:00Z [warning]: Request body too large '
            '{"body_bytes":2048,"max_body_bytes":1024}'
        )

    def test_renders_bare_event(self) -> None:
        line = _line_renderer(None, "info", {"timestamp": "t", "level": "info", "event": "Started"})

        assert line == "t [info]: Started"
