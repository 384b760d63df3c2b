"""Tests for structured logging configuration."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
import structlog

from guildhall.core.logging import bind_context, clear_context, configure_logging, get_logger


if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture(autouse=True)
def reset_structlog() -> Generator[None, None, None]:
    yield
    clear_context()
    structlog.reset_defaults()
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_json_output_goes_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(level="INFO", json_format=True)

        get_logger("guildhall.test").info("Character created", character_id=7)

        captured = capsys.readouterr()
        assert captured.out == ""
        entry = json.loads(captured.err.strip().splitlines()[-1])
        assert entry["event"] == "Character created"
        assert entry["character_id"] == 7
        assert entry["app"] == "guildhall"
        assert entry["level"] == "info"

    def test_level_filters(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(level="WARNING", json_format=True)

        get_logger().info("hidden")
        get_logger().warning("shown")

        err = capsys.readouterr().err
        assert "hidden" not in err
        assert "shown" in err

    def test_bound_context(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(level="DEBUG", json_format=True)

        bind_context(menu_option=15)
        get_logger().info("with context")
        clear_context()
        get_logger().info("without context")

        lines = [json.loads(line) for line in capsys.readouterr().err.strip().splitlines()]
        assert lines[0]["menu_option"] == 15
        assert "menu_option" not in lines[1]

    def test_log_file_receives_events(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        log_file = tmp_path / "guildhall.log"

        configure_logging(level="INFO", json_format=True, log_file=str(log_file))
        get_logger("guildhall.test").info("Guild created", guild_id=3, guild_name="Ørder of Ash")
        get_logger("guildhall.test").debug("below level")

        entries = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
        assert [e["event"] for e in entries] == ["Guild created"]
        assert entries[0]["guild_id"] == 3
        assert entries[0]["guild_name"] == "Ørder of Ash"
        assert entries[0]["app"] == "guildhall"
        assert "Guild created" in capsys.readouterr().err

    def test_log_file_plain_format(self, tmp_path: Path) -> None:
        log_file = tmp_path / "guildhall.log"

        configure_logging(level="WARNING", log_file=str(log_file))
        get_logger("guildhall.test").warning("Rollback failed", error="locked")

        content = log_file.read_text(encoding="utf-8")
        assert "Rollback failed" in content
        assert "error=locked" in content
        assert "\x1b[" not in content
