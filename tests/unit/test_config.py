"""Unit tests for config.py"""

import pytest

from chatsaver.config import load_config


@pytest.fixture(autouse=True)
def clean_env(tmp_path, monkeypatch):
    """Run each test from an empty directory with no CHATSAVER_* variables set."""
    monkeypatch.chdir(tmp_path)
    for name in ("DB_URL", "LOG_LEVEL", "OUTPUT_DIR", "EXPORT_FORMAT", "INCLUDE_HTML"):
        monkeypatch.delenv(f"CHATSAVER_{name}", raising=False)


def test_load_config_defaults():
    """Settings defaults apply when no config.yaml, env var or override exists."""
    settings = load_config()
    assert settings.db_url == "sqlite:///chatsaver.db"
    assert settings.export_format == "md"
    assert settings.output_dir == "exports"
    assert settings.include_html is True


def test_load_config_uses_env_db_url(monkeypatch):
    """CHATSAVER_DB_URL env var is picked up by load_config."""
    monkeypatch.setenv("CHATSAVER_DB_URL", "sqlite:///env.db")
    assert load_config().db_url == "sqlite:///env.db"


def test_load_config_reads_config_yaml(tmp_path):
    (tmp_path / "config.yaml").write_text("output_dir: out\nexport_format: html\n")
    settings = load_config()
    assert settings.output_dir == "out"
    assert settings.export_format == "html"


def test_load_config_env_overrides_config_yaml(tmp_path, monkeypatch):
    """CHATSAVER_DB_URL takes precedence over config.yaml db_url."""
    (tmp_path / "config.yaml").write_text("db_url: 'sqlite:///project.db'\n")
    monkeypatch.setenv("CHATSAVER_DB_URL", "sqlite:///override.db")
    assert load_config().db_url == "sqlite:///override.db"


def test_load_config_cli_overrides_env(monkeypatch):
    """A non-None CLI override beats the env var; None overrides are ignored."""
    monkeypatch.setenv("CHATSAVER_DB_URL", "sqlite:///env.db")
    settings = load_config(overrides={"db_url": "sqlite:///cli.db", "output_dir": None})
    assert settings.db_url == "sqlite:///cli.db"
    assert settings.output_dir == "exports"


def test_load_config_env_include_html_coerced(monkeypatch):
    monkeypatch.setenv("CHATSAVER_INCLUDE_HTML", "false")
    assert load_config().include_html is False


def test_load_config_invalid_yaml(tmp_path):
    """load_config raises ValueError when config.yaml contains invalid YAML."""
    (tmp_path / "config.yaml").write_text("key: [unclosed\n")
    with pytest.raises(ValueError, match="Invalid config.yaml"):
        load_config()


def test_load_config_rejects_unknown_export_format():
    with pytest.raises(ValueError):
        load_config(overrides={"export_format": "pdf"})


def test_load_config_rejects_unknown_log_level(monkeypatch):
    monkeypatch.setenv("CHATSAVER_LOG_LEVEL", "LOUD")
    with pytest.raises(ValueError):
        load_config()
