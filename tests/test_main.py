"""Tests for the entry point wiring."""
from __future__ import annotations

import pytest

from miffy_runner import main
from miffy_runner.config.settings import Settings


def test_logging_is_configured_before_settings_load(monkeypatch):
    calls = []
    monkeypatch.setenv("MIFFY_DEBUG", "true")
    monkeypatch.delenv("MIFFY_CONFIG", raising=False)
    monkeypatch.setattr(main, "setup_logging", lambda debug=False: calls.append(("logging", debug)))
    monkeypatch.setattr(
        main, "load_settings", lambda path=None: calls.append(("settings", path)) or Settings(debug=False)
    )
    monkeypatch.setattr(main, "run_simulator", lambda settings: calls.append(("run", None)))

    main.main()

    assert calls == [("logging", True), ("settings", None), ("run", None)]


@pytest.mark.parametrize("raw, expected", [("1", True), ("TRUE", True), (" on ", True), ("0", False), ("", False)])
def test_env_flag(monkeypatch, raw, expected):
    monkeypatch.setenv("MIFFY_TEST_FLAG", raw)
    assert main._env_flag("MIFFY_TEST_FLAG") is expected
