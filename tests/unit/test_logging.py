"""
Tests for the logging utility module.
"""

import asyncio
import json
import logging
import sys
import tempfile
import uuid
from datetime import UTC, datetime
from pathlib import Path

import pytest

from elastinest.transport import ApiCallDetails, Node, RequestData, RequestConfiguration
from elastinest.transport.audit import Audit, AuditEvent
from elastinest.utils.logging import (
    JSONFormatter,
    clear_correlation_id,
    configure_logging,
    correlation_processor,
    get_correlation_id,
    get_logger,
    log_api_call,
    log_audit_event,
    set_correlation_id,
)


@pytest.fixture(autouse=True)
def no_correlation_id():
    clear_correlation_id()
    yield
    clear_correlation_id()


def _record(msg: str = "Test message", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test.logger",
        level=logging.INFO,
        pathname="/test/path.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestCorrelationID:
    """Tests for the context local correlation id."""

    def test_correlation_id_lifecycle(self):
        """Test setting and clearing correlation ID."""
        assert get_correlation_id() is None

        correlation_id = set_correlation_id("test-123")
        assert correlation_id == "test-123"
        assert get_correlation_id() == "test-123"

        clear_correlation_id()
        assert get_correlation_id() is None

    def test_auto_generated_correlation_id(self):
        """Test auto-generation of correlation ID."""
        correlation_id = set_correlation_id()
        uuid.UUID(correlation_id)

    @pytest.mark.asyncio
    async def test_isolated_between_tasks(self):
        """Each asyncio task sees its own correlation id."""

        async def worker(name: str) -> str | None:
            set_correlation_id(name)
            await asyncio.sleep(0)
            return get_correlation_id()

        results = await asyncio.gather(worker("a"), worker("b"))
        assert results == ["a", "b"]
        assert get_correlation_id() is None

    def test_structlog_processor(self):
        """The processor adds the id only when one is set."""
        assert correlation_processor(None, "info", {"event": "x"}) == {"event": "x"}

        set_correlation_id("abc")
        assert correlation_processor(None, "info", {"event": "x"}) == {"event": "x", "correlation_id": "abc"}


class TestJSONFormatter:
    """Tests for JSON formatter."""

    def test_basic_formatting(self):
        """Test basic JSON log formatting."""
        log_data = json.loads(JSONFormatter().format(_record()))

        assert log_data["level"] == "INFO"
        assert log_data["logger"] == "test.logger"
        assert log_data["message"] == "Test message"
        assert log_data["line"] == 42
        assert "timestamp" in log_data
        assert "correlation_id" not in log_data

    def test_formatting_with_correlation_id(self):
        """Test JSON formatting with correlation ID."""
        set_correlation_id("test-correlation-123")
        log_data = json.loads(JSONFormatter().format(_record()))
        assert log_data["correlation_id"] == "test-correlation-123"

    def test_extra_fields(self):
        """Fields passed as extra end up in the JSON document."""
        log_data = json.loads(JSONFormatter().format(_record(status=503, uri="http://localhost:9200/")))
        assert log_data["status"] == 503
        assert log_data["uri"] == "http://localhost:9200/"

    def test_exception_formatting(self):
        """Exceptions are rendered as text."""
        try:
            raise ValueError("boom")
        except ValueError:
            record = _record()
            record.exc_info = sys.exc_info()

        log_data = json.loads(JSONFormatter().format(record))
        assert "ValueError: boom" in log_data["exception"]


class TestConfigureLogging:
    """Tests for logging configuration."""

    def teardown_method(self):
        configure_logging(log_level="WARNING", enable_json_logging=False)

    def test_log_level(self):
        configure_logging(log_level="DEBUG")
        assert logging.getLogger().level == logging.DEBUG

    def test_verbose(self):
        configure_logging(verbose=True)
        assert logging.getLogger().level == logging.DEBUG

    def test_level_from_environment(self, monkeypatch):
        monkeypatch.setenv("ELASTINEST_LOG_LEVEL", "error")
        configure_logging()
        assert logging.getLogger().level == logging.ERROR

    def test_file_logging(self):
        """Records are written as JSON lines to the log file."""
        with tempfile.TemporaryDirectory() as temp_dir:
            log_file = Path(temp_dir) / "elastinest.log"
            configure_logging(log_level="INFO", log_file=str(log_file), enable_console=False)

            get_logger("elastinest.test").info("written to file", extra={"index": "project"})
            for handler in logging.getLogger().handlers:
                handler.flush()
                handler.close()

            entry = json.loads(log_file.read_text().splitlines()[-1])
            assert entry["message"] == "written to file"
            assert entry["index"] == "project"

    def test_quiets_transport_loggers(self):
        configure_logging(log_level="DEBUG")
        assert logging.getLogger("elastic_transport").level == logging.WARNING
        assert logging.getLogger("aiohttp").level == logging.WARNING


class TestApiCallLogging:
    """Tests for the per call and per audit log records."""

    def test_successful_call(self, connection_settings, caplog):
        caplog.set_level(logging.DEBUG, logger="elastinest.api")
        request_data = RequestData("GET", "/_search", None, connection_settings)
        log_api_call(ApiCallDetails.from_request(request_data, status_code=200, response_body=b"{}"))

        record = caplog.records[-1]
        assert record.name == "elastinest.api"
        assert record.levelno == logging.DEBUG
        assert record.status == 200
        assert record.success is True
        assert record.event_type == "api_call"

    def test_failed_call(self, connection_settings, caplog):
        caplog.set_level(logging.DEBUG, logger="elastinest.api")
        request_data = RequestData("GET", "/_search", None, connection_settings)
        details = ApiCallDetails.from_request(request_data, exception=ConnectionRefusedError("refused"))
        log_api_call(details)

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert record.success is False
        assert record.error == "refused"

    def test_audit_event(self, caplog):
        caplog.set_level(logging.DEBUG, logger="elastinest.audit")
        audit = Audit(
            event=AuditEvent.PING_FAILURE,
            started=datetime.now(UTC),
            node=Node("localhost:9201"),
            exception=TimeoutError("ping timed out"),
        )
        log_audit_event(audit)

        record = caplog.records[-1]
        assert record.name == "elastinest.audit"
        assert record.getMessage() == "Pipeline PingFailure"
        assert record.node == "http://localhost:9201"
        assert record.error == "ping timed out"


class TestOpaqueId:
    """The correlation id travels to Elasticsearch as X-Opaque-Id."""

    def test_header_from_correlation_id(self, connection_settings):
        set_correlation_id("trace-1")
        request_data = RequestData("GET", "/", None, connection_settings)
        assert request_data.headers["X-Opaque-Id"] == "trace-1"

    def test_no_header_without_id(self, connection_settings):
        request_data = RequestData("GET", "/", None, connection_settings)
        assert "X-Opaque-Id" not in request_data.headers

    def test_request_configuration_wins(self, connection_settings):
        set_correlation_id("trace-1")
        request_data = RequestData(
            "GET", "/", None, connection_settings, RequestConfiguration(opaque_id="explicit")
        )
        assert request_data.headers["X-Opaque-Id"] == "explicit"
