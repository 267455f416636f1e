import json
import logging
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from unittest.mock import patch

import pytest
import structlog
from pydantic import ValidationError

from pinoy_mahjong.shared.logging import _serialize_enums, bind_game_context, setup_logging
from pinoy_mahjong.shared.settings import EngineSettings


@pytest.fixture(autouse=True)
def _cleanup_root_logger():
    """Close and remove all handlers from the root logger after each test."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        handler.close()
        root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture(autouse=True)
def _allow_file_logging(monkeypatch):
    """Disable the _is_test guard and the test env so logging tests see real defaults."""
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("LOG_FORMAT", raising=False)
    with patch("pinoy_mahjong.shared.logging._is_test", return_value=False):
        yield


def _settings(log_dir: Path | None = None) -> EngineSettings:
    return EngineSettings(log_dir=str(log_dir) if log_dir is not None else None)


class TestSetupLogging:
    def test_configures_stdout_handler(self):
        setup_logging()
        root = logging.getLogger()

        assert root.level == logging.INFO
        assert len(root.handlers) == 1

        handler = root.handlers[0]
        assert isinstance(handler, logging.StreamHandler)
        assert isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter)

    def test_configures_file_handler_in_log_dir(self, tmp_path):
        log_dir = tmp_path / "games"
        setup_logging(_settings(log_dir))
        root = logging.getLogger()

        assert len(root.handlers) == 2
        file_handler = root.handlers[1]
        assert isinstance(file_handler, logging.FileHandler)
        assert Path(file_handler.baseFilename).parent == log_dir

    def test_log_file_has_datetime_in_name(self, tmp_path):
        fixed_time = datetime(2025, 3, 15, 10, 30, 45, tzinfo=UTC)
        with patch("pinoy_mahjong.shared.logging.datetime") as mock_dt:
            mock_dt.now.return_value = fixed_time
            log_path = setup_logging(_settings(tmp_path / "games"))

        assert log_path is not None
        assert log_path.name == "2025-03-15_10-30-45.log"

    def test_returns_none_without_log_dir(self):
        assert setup_logging() is None

    def test_no_file_under_pytest(self, tmp_path):
        with patch("pinoy_mahjong.shared.logging._is_test", return_value=True):
            assert setup_logging(_settings(tmp_path / "games")) is None
        assert not (tmp_path / "games").exists()

    def test_writes_to_nested_directory(self, tmp_path):
        log_dir = tmp_path / "nested" / "dir"
        log_path = setup_logging(_settings(log_dir))

        structlog.get_logger("test.nested").info("nested log")

        assert log_dir.exists()
        assert log_path is not None
        assert "nested log" in log_path.read_text()

    def test_clears_existing_handlers_on_repeated_calls(self):
        setup_logging()
        setup_logging()
        assert len(logging.getLogger().handlers) == 1

    def test_explicit_level_wins(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "error")
        setup_logging(level=logging.DEBUG)
        assert logging.getLogger().level == logging.DEBUG

    def test_log_level_from_env(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        setup_logging()
        assert logging.getLogger().level == logging.DEBUG

    def test_invalid_log_level_raises(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "bogus")
        with pytest.raises(ValidationError, match="(?i)log_level"):
            setup_logging()

    def test_invalid_log_format_raises(self, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "xml")
        with pytest.raises(ValidationError, match="(?i)log_format"):
            setup_logging()

    def test_json_mode_produces_valid_json(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "JSON")
        log_path = setup_logging(_settings(tmp_path / "games"))

        bind_game_context("game-json", seat=2)
        structlog.get_logger("test.json").info("json test event", phase=_Phase.DRAW)

        assert log_path is not None
        parsed = json.loads(log_path.read_text().strip().splitlines()[0])
        assert parsed["event"] == "json test event"
        assert parsed["game_id"] == "game-json"
        assert parsed["seat"] == 2
        assert parsed["phase"] == "draw"

    def test_console_mode_produces_readable_output(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "console")
        log_path = setup_logging(_settings(tmp_path / "games"))

        structlog.get_logger("test.console").info("console test event")

        assert log_path is not None
        assert "console test event" in log_path.read_text()


class _Phase(Enum):
    DRAW = "draw"
    DISCARD = "discard"


class TestSerializeEnums:
    def test_replaces_enum_with_value(self):
        result = _serialize_enums(None, "", {"phase": _Phase.DRAW, "msg": "hello"})
        assert result == {"phase": "draw", "msg": "hello"}

    def test_replaces_enums_inside_lists(self):
        result = _serialize_enums(None, "", {"actions": [_Phase.DRAW, _Phase.DISCARD, 3]})
        assert result["actions"] == ["draw", "discard", 3]

    def test_replaces_enum_inside_dict_value(self):
        result = _serialize_enums(None, "", {"data": {"phase": _Phase.DISCARD, "count": 3}})
        assert result["data"] == {"phase": "discard", "count": 3}

    def test_leaves_non_enum_values_unchanged(self):
        event_dict = {"count": 42, "name": "test"}
        assert _serialize_enums(None, "", event_dict) == {"count": 42, "name": "test"}
