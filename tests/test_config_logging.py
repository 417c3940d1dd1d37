"""Tests for configuration validation and log formatting."""

import pytest

from geocoin.config import Config
from geocoin import GameSession
from geocoin.logging_utils import (
    LOG_TAG_ERROR,
    LOG_TAG_PLAYER,
    LOG_TAG_WORLD,
    Color,
    colored,
    log_error,
    log_player,
    log_world,
)


def test_default_config_is_valid():
    Config.validate()
    assert "Tile Width" in Config.display()


@pytest.mark.parametrize(
    "attribute, value",
    [
        ("TILE_DEGREES", 0.0),
        ("NEIGHBORHOOD_SIZE", -1),
        ("CACHE_SPAWN_PROBABILITY", 1.5),
        ("MAX_COINS_PER_CACHE", 0),
        ("START_LAT", 123.0),
    ],
)
def test_invalid_config_rejected(monkeypatch, attribute, value):
    monkeypatch.setattr(Config, attribute, value)
    with pytest.raises(ValueError):
        Config.validate()


def test_colored_respects_no_color(monkeypatch):
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.setenv("GEOCOIN_NO_COLOR", "1")
    assert colored("hello", Color.RED) == "hello"

    monkeypatch.delenv("GEOCOIN_NO_COLOR")
    assert colored("hello", Color.RED, bold=True) == (
        f"{Color.BOLD.value}{Color.RED.value}hello{Color.RESET.value}"
    )


def test_log_error_prints_tag(monkeypatch, capsys):
    monkeypatch.setenv("GEOCOIN_NO_COLOR", "1")
    log_error("storage offline")
    assert capsys.readouterr().out == f"{LOG_TAG_ERROR} storage offline\n"


def test_loggers_prefix_scope_after_indent(monkeypatch, capsys):
    monkeypatch.setenv("GEOCOIN_NO_COLOR", "1")
    log_world("  Generated cache 0,0 with 3 coins")
    log_player("Coin 0:0#1 from cache 0,0", scope="Collect")
    log_error("disk full", scope="Storage")

    assert capsys.readouterr().out.splitlines() == [
        f"  {LOG_TAG_WORLD} [World] Generated cache 0,0 with 3 coins",
        f"{LOG_TAG_PLAYER} [Collect] Coin 0:0#1 from cache 0,0",
        f"{LOG_TAG_ERROR} [Storage] disk full",
    ]


def test_standard_no_color_variable_is_honoured(monkeypatch):
    monkeypatch.delenv("GEOCOIN_NO_COLOR", raising=False)
    monkeypatch.setenv("NO_COLOR", "1")
    assert colored("hello", Color.GREEN) == "hello"


@pytest.mark.parametrize("configured", [True, False])
def test_session_verbosity_follows_config(monkeypatch, configured):
    monkeypatch.setattr(Config, "VERBOSE", configured)
    monkeypatch.setenv("GEOCOIN_VERBOSE", "false" if configured else "true")

    assert GameSession().verbose is configured
    assert GameSession(verbose=not configured).verbose is (not configured)
