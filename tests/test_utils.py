"""Tests for configuration, logging and file helpers."""

import json
import logging

import pytest

from jpdata.config import Settings, get_settings
from jpdata.utils.file_io import read_json, write_json
from jpdata.utils.logging_config import JsonFormatter, get_logger, setup_logging
from jpdata.utils.pipeline_logger import PipelineLogContext, PipelineLogger, timed_operation


class TestSettings:
    """Tests for environment configuration."""

    def test_defaults(self, monkeypatch):
        """Test defaults with no environment set."""
        for name in ("JPDATA_DATASET_ROOT", "JPDATA_LOG_LEVEL", "JPDATA_LOG_JSON",
                     "JPDATA_STRICT_REFERENCES"):
            monkeypatch.delenv(name, raising=False)

        assert get_settings() == Settings()

    def test_from_environment(self, monkeypatch):
        """Test every variable is read."""
        monkeypatch.setenv("JPDATA_DATASET_ROOT", "/data/jp")
        monkeypatch.setenv("JPDATA_LOG_LEVEL", "debug")
        monkeypatch.setenv("JPDATA_LOG_JSON", "yes")
        monkeypatch.setenv("JPDATA_STRICT_REFERENCES", "0")

        settings = get_settings()

        assert settings.dataset_root == "/data/jp"
        assert settings.log_level == "DEBUG"
        assert settings.log_json is True
        assert settings.strict_references is False

    def test_blank_flag_uses_default(self, monkeypatch):
        """Test a blank flag keeps its default."""
        monkeypatch.setenv("JPDATA_STRICT_REFERENCES", "  ")
        assert get_settings().strict_references is True


class TestFileIO:
    """Tests for JSON file helpers."""

    def test_write_then_read(self, tmp_path):
        """Test non-ASCII text is written as UTF-8, not escaped."""
        path = tmp_path / "nested" / "doc.json"
        metadata = write_json({"prompt": "か"}, path)

        assert metadata["file_path"] == str(path)
        assert metadata["file_size_bytes"] == path.stat().st_size
        assert "か" in path.read_text(encoding="utf-8")
        assert read_json(path) == {"prompt": "か"}

    def test_read_invalid_json(self, tmp_path):
        """Test malformed JSON raises JSONDecodeError."""
        path = tmp_path / "bad.json"
        path.write_text("[1,", encoding="utf-8")

        with pytest.raises(json.JSONDecodeError):
            read_json(path)


class TestLogging:
    """Tests for log formatting."""

    def test_json_formatter_includes_extra(self):
        """Test structured extras appear in JSON output."""
        record = logging.makeLogRecord({
            "name": "jpdata.test",
            "levelno": logging.INFO,
            "levelname": "INFO",
            "msg": "Migrated %d tests",
            "args": (2,),
            "batch_id": "b1",
        })
        entry = json.loads(JsonFormatter().format(record))

        assert entry["message"] == "Migrated 2 tests"
        assert entry["level"] == "INFO"
        assert entry["logger"] == "jpdata.test"
        assert entry["batch_id"] == "b1"
        assert "msg" not in entry

    def test_setup_logging_replaces_handlers(self):
        """Test setup installs exactly one handler."""
        root = setup_logging(level="debug", json_format=True)
        try:
            assert root.level == logging.DEBUG
            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, JsonFormatter)
        finally:
            setup_logging(level="WARNING")

    def test_get_logger_namespace(self):
        """Test loggers are namespaced under jpdata."""
        assert get_logger("datasets").name == "jpdata.datasets"


class TestPipelineLogger:
    """Tests for structured step logging."""

    def test_context_drops_none(self):
        """Test unset context fields are omitted."""
        data = PipelineLogContext(source="codex", batch_id="b1", step="validate").to_dict()

        assert data["source"] == "codex"
        assert "duration_ms" not in data
        assert "error" not in data
        assert "timestamp" in data

    def test_error_entry(self, caplog):
        """Test an error entry carries the message and duration."""
        plog = PipelineLogger("gemini", "b2")
        with caplog.at_level(logging.INFO):
            plog.start("migrate")
            plog.error("migrate", ValueError("boom"))

        started, failed = caplog.records
        assert started.status == "started"
        assert failed.levelno == logging.ERROR
        assert failed.error == "boom"
        assert failed.duration_ms >= 0
        assert json.loads(failed.getMessage())["batch_id"] == "b2"

    def test_timed_operation(self, caplog):
        """Test the timer is filled in on exit and logged at DEBUG."""
        logger = logging.getLogger("jpdata.test")
        with caplog.at_level(logging.DEBUG):
            with timed_operation("migrate_legacy", logger) as timer:
                assert timer.duration_ms == 0.0

        assert timer.duration_ms >= 0
        entry = caplog.records[-1]
        assert entry.operation == "migrate_legacy"
        assert entry.duration_ms == timer.duration_ms

    def test_timed_operation_records_time_on_error(self):
        """Test the duration is recorded even when the block raises."""
        with pytest.raises(ValueError):
            with timed_operation("noop") as timer:
                raise ValueError("boom")
        assert timer.duration_ms >= 0
