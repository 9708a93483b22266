import json
import logging

import pytest

from stepchecker import config


def test_defaults_when_nothing_configured(monkeypatch) -> None:
    monkeypatch.delenv(config.ENV_VAR, raising=False)
    settings = config.load_settings()
    assert settings == config.DEFAULT_SETTINGS
    assert settings is not config.DEFAULT_SETTINGS


def test_load_settings_from_file(tmp_path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"max_depth": 10, "unknown": True}), encoding="utf-8")
    settings = config.load_settings(str(path))
    assert settings["max_depth"] == 10
    assert settings["numeric_tolerance"] == 0.0
    assert "unknown" not in settings


def test_load_settings_from_environment(tmp_path, monkeypatch) -> None:
    path = tmp_path / "env.json"
    path.write_text(json.dumps({"numeric_tolerance": 0.01, "log_level": "debug"}), encoding="utf-8")
    monkeypatch.setenv(config.ENV_VAR, str(path))
    settings = config.load_settings()
    assert settings["numeric_tolerance"] == 0.01
    assert settings["log_level"] == "DEBUG"


def test_corrupt_file_falls_back_to_defaults(tmp_path, caplog) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="stepchecker.config"):
        settings = config.load_settings(str(path))
    assert settings == config.DEFAULT_SETTINGS
    assert "Could not read settings" in caplog.text


def test_missing_file_falls_back_to_defaults(tmp_path) -> None:
    assert config.load_settings(str(tmp_path / "nope.json")) == config.DEFAULT_SETTINGS


@pytest.mark.parametrize(
    "overrides",
    [
        {"max_depth": 0},
        {"max_depth": "deep"},
        {"max_depth": True},
        {"max_factor_value": 0},
        {"max_factor_value": 1.5},
        {"numeric_tolerance": -1},
        {"numeric_tolerance": "small"},
        {"log_level": "LOUD"},
    ],
)
def test_invalid_values_raise(overrides) -> None:
    with pytest.raises(ValueError):
        config.merge_settings(overrides)


def test_configure_logging_sets_package_level() -> None:
    logger = logging.getLogger("stepchecker")
    previous = logger.level
    try:
        config.configure_logging(config.merge_settings({"log_level": "debug"}))
        assert logger.level == logging.DEBUG
    finally:
        logger.setLevel(previous)
