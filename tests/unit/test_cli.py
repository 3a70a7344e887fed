"""Unit tests for orrery.cli module.

These tests verify CLI orchestration behaviour, not engine internals.
"""

import functools
import json
import logging
from datetime import UTC, datetime

import pytest
import requests

from orrery import cli
from orrery.cli import main
from orrery.engine.session import Session


@pytest.fixture(autouse=True)
def restore_orrery_logger():
    """main() installs handlers bound to capsys streams; drop them afterwards."""
    logger = logging.getLogger("orrery")
    handlers, level = list(logger.handlers), logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)


@pytest.fixture
def early_february(monkeypatch):
    """Pin the countdown wall clock before the bundled sample approaches."""
    millis = datetime(2026, 2, 1, tzinfo=UTC).timestamp() * 1000
    monkeypatch.setattr(cli, "Session", functools.partial(Session, now_millis=lambda: millis))


# ---------------------------------------------------------------------
# Argument and config handling
# ---------------------------------------------------------------------

def test_main_returns_1_when_config_not_found(capsys):
    result = main(["--config", "does_not_exist.yaml"])
    assert result == 1
    err = capsys.readouterr().err
    assert "Config file not found" in err


def test_main_returns_2_when_config_invalid(tmp_path, capsys):
    config = tmp_path / "orrery.yaml"
    config.write_text("speed_table: []")

    result = main(["--config", str(config)])

    assert result == 2
    assert "Failed to load config" in capsys.readouterr().err


def test_main_returns_2_for_unknown_log_level(capsys):
    assert main(["--log-level", "chatty"]) == 2
    assert "Unknown log level" in capsys.readouterr().err


# ---------------------------------------------------------------------
# Simulation runs
# ---------------------------------------------------------------------

def test_main_default_run_is_live(capsys):
    result = main([])

    assert result == 0
    out = capsys.readouterr().out
    assert "[LIVE]" in out
    assert "speed +1d" in out
    assert "playing" in out


def test_main_jump_to_date(capsys):
    result = main(["--jump-jd", "2451545.0"])

    assert result == 0
    out = capsys.readouterr().out
    assert "2000 Jan 01 12:00 UTC" in out
    assert "[LIVE]" not in out


def test_main_ticks_frames(capsys):
    # 60 frames of one real second at "1h" is 60 simulated hours
    result = main(["--jump-jd", "2451545.0", "--speed", "2", "--frames", "60", "--delta", "1"])

    assert result == 0
    assert "2000 Jan 04 00:00 UTC" in capsys.readouterr().out


def test_main_reverse(capsys):
    result = main(["--jump-jd", "2451545.0", "--reverse", "--frames", "1", "--delta", "1"])

    assert result == 0
    out = capsys.readouterr().out
    assert "1999 Dec 31 12:00 UTC" in out
    assert "speed -1d" in out


def test_main_speed_is_clamped(capsys):
    assert main(["--speed", "42"]) == 0
    assert "speed +1y" in capsys.readouterr().out


def test_main_select_focuses(capsys):
    assert main(["--select", "earth"]) == 0
    assert "focus: earth  selected: earth" in capsys.readouterr().out


def test_main_returns_3_when_run_fails(capsys):
    result = main(["--frames", "-1"])
    assert result == 3
    assert "Simulation failed" in capsys.readouterr().err


# ---------------------------------------------------------------------
# Close approaches
# ---------------------------------------------------------------------

def test_main_offline_approaches(early_february, capsys):
    result = main(["--approaches", "--offline"])

    assert result == 0
    captured = capsys.readouterr()
    for name in ("2026 BX4", "2026 AJ17", "2026 CU", "2026 BE7", "2026 BQ8"):
        assert name in captured.out
    assert "[WARNING]" not in captured.err
    assert "> 2026 BX4" in captured.out
    assert "PASSED" not in captured.out


def test_main_offline_approaches_all_passed(monkeypatch, capsys):
    millis = datetime(2027, 1, 1, tzinfo=UTC).timestamp() * 1000
    monkeypatch.setattr(cli, "Session", functools.partial(Session, now_millis=lambda: millis))

    assert main(["--approaches", "--offline"]) == 0

    out = capsys.readouterr().out
    assert "No upcoming close approaches" in out
    assert "2026 BX4" not in out


def test_main_feed_failure_is_not_fatal(early_february, monkeypatch, capsys):
    def fail(self, url, **kwargs):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(requests.Session, "get", fail)

    result = main(["--approaches"])

    assert result == 0
    captured = capsys.readouterr()
    assert "2026 BX4" in captured.out
    assert "sample data" in captured.err


# ---------------------------------------------------------------------
# JSON output
# ---------------------------------------------------------------------

def test_main_json_output(early_february, tmp_path, capsys):
    out_file = tmp_path / "out" / "state.json"

    result = main([
        "--jump-jd", "2451545.0",
        "--select", "mars",
        "--approaches", "--offline",
        "--output", "json",
        "--json-file", str(out_file),
    ])

    assert result == 0
    assert "State dumped to" in capsys.readouterr().out
    data = json.loads(out_file.read_text(encoding="utf-8"))
    assert data["date"] == "2000 Jan 01 12:00 UTC"
    assert data["selected_body"] == "mars"
    assert data["camera_transitioning"] is True
    assert data["is_live"] is False
    assert data["scrubber_position"] == 0.0
    assert len(data["approaches"]) == 5
    assert data["approaches"][0]["asteroid_id"] == "asteroid-2026-bx4"
    assert data["current_approach"] == "asteroid-2026-bx4"
