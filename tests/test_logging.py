"""Tests for structured logging helpers."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1] / "backend" / "src"))

from accountsync.utils.logging import (  # noqa: E402
    StructuredLogFormatter,
    clear_request_context,
    hash_for_correlation,
    mask_email,
    request_id_from,
    set_request_context,
)


class TestMasking:
    """Tests for PII masking helpers."""

    @pytest.mark.parametrize(
        "email,expected",
        [
            ("john.doe@example.com", "jo***@***.com"),
            ("a@b.co", "a***@***.co"),
            ("not-an-email", "***"),
            ("", "***"),
        ],
    )
    def test_mask_email(self, email: str, expected: str) -> None:
        assert mask_email(email) == expected

    def test_hash_ignores_case_and_whitespace(self) -> None:
        assert hash_for_correlation(" Ada@Example.com ") == hash_for_correlation("ada@example.com")
        assert len(hash_for_correlation("ada@example.com")) == 12


class TestStructuredLogFormatter:
    """Tests for the JSON log formatter."""

    def _record(self, level: int = logging.INFO, **extra) -> logging.LogRecord:
        record = logging.LogRecord("accountsync.test", level, __file__, 10, "User created", None, None)
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_extra_fields_and_context(self) -> None:
        set_request_context(req_id="req-1", fn_name="createUser")
        try:
            output = json.loads(
                StructuredLogFormatter().format(self._record(identity_id="user-1"))
            )
        finally:
            clear_request_context()

        assert output["message"] == "User created"
        assert output["request_id"] == "req-1"
        assert output["function"] == "createUser"
        assert output["extra"] == {"identity_id": "user-1"}
        assert "source" not in output

    def test_warning_includes_source(self) -> None:
        output = json.loads(StructuredLogFormatter().format(self._record(logging.WARNING)))

        assert output["level"] == "WARNING"
        assert output["source"]["line"] == 10


class TestRequestIdFrom:
    """Tests for request id resolution."""

    def test_api_gateway_request_id(self) -> None:
        assert request_id_from({"requestContext": {"requestId": "req-1"}}) == "req-1"

    def test_falls_back_to_lambda_context(self) -> None:
        class Context:
            aws_request_id = "aws-1"

        assert request_id_from({}, Context()) == "aws-1"

    def test_falls_back_to_event_id(self) -> None:
        assert request_id_from({"id": "evt-1"}) == "evt-1"
