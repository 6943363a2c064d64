"""Unit tests for config.py"""

import pytest
from pydantic import ValidationError

from mdcrdt.config import load_config


@pytest.fixture(autouse=True)
def chdir_tmp(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)


def test_load_config_defaults(monkeypatch):
    """Settings defaults apply when no config.yaml, env var, or override exists."""
    monkeypatch.delenv("MDCRDT_PARSER_CONFIG", raising=False)
    settings = load_config()
    assert settings.parser_config == "gfm-like"
    assert settings.allow_html is False
    assert settings.shared_root == "default"


def test_load_config_reads_config_yaml(tmp_path):
    (tmp_path / "config.yaml").write_text("parser_config: commonmark\nallow_html: true\n")
    settings = load_config()
    assert settings.parser_config == "commonmark"
    assert settings.allow_html is True


def test_load_config_env_overrides_config_yaml(tmp_path, monkeypatch):
    """MDCRDT_SHARED_ROOT takes precedence over config.yaml."""
    (tmp_path / "config.yaml").write_text("shared_root: from-yaml\n")
    monkeypatch.setenv("MDCRDT_SHARED_ROOT", "from-env")
    assert load_config().shared_root == "from-env"


def test_load_config_cli_overrides_env(monkeypatch):
    """A non-None CLI override beats the env var."""
    monkeypatch.setenv("MDCRDT_PARSER_CONFIG", "zero")
    settings = load_config(overrides={"parser_config": "commonmark"})
    assert settings.parser_config == "commonmark"


def test_load_config_none_override_ignored(monkeypatch):
    monkeypatch.setenv("MDCRDT_PARSER_CONFIG", "zero")
    assert load_config(overrides={"parser_config": None}).parser_config == "zero"


def test_load_config_env_bool(monkeypatch):
    """MDCRDT_ALLOW_HTML is coerced to bool."""
    monkeypatch.setenv("MDCRDT_ALLOW_HTML", "true")
    assert load_config().allow_html is True


def test_load_config_invalid_yaml(tmp_path):
    (tmp_path / "config.yaml").write_text("key: [unclosed\n")
    with pytest.raises(ValueError, match="Invalid config.yaml"):
        load_config()


def test_load_config_non_mapping_yaml(tmp_path):
    (tmp_path / "config.yaml").write_text("- a\n- b\n")
    with pytest.raises(ValueError, match="expected a mapping"):
        load_config()


def test_load_config_rejects_bad_log_level():
    with pytest.raises(ValidationError):
        load_config(overrides={"log_level": "LOUD"})
