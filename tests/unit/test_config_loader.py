from __future__ import annotations
import pytest
from pathlib import Path
from carrier_viewer.config.loader import DEFAULT_SPREADSHEET_ID, ConfigError, ViewerConfig, load_config
from carrier_viewer.services.engine import DEFAULT_NOMINAL_COUNT
from carrier_viewer.services.fetcher import DEFAULT_BASE_URL


def test_load_config_success(write_config: Path):
    cfg = load_config(write_config)
    assert cfg.spreadsheet_id == "test-sheet-id"
    assert cfg.base_url == "https://sheets.example.test/d"
    assert cfg.page_size == 5
    assert cfg.nominal_count == 500
    assert cfg.timeout_seconds is None


def test_load_config_missing_file_uses_defaults(temp_workdir: Path):
    cfg = load_config(temp_workdir / "config" / "not_exists.yml")
    assert cfg == ViewerConfig()
    assert cfg.spreadsheet_id == DEFAULT_SPREADSHEET_ID


def test_load_config_missing_file_required(temp_workdir: Path):
    with pytest.raises(ConfigError) as e:
        load_config(temp_workdir / "config" / "not_exists.yml", required=True)
    assert "config file not found" in str(e.value)


def test_load_config_only_required_key(write_config: Path):
    write_config.write_text("spreadsheet_id: abc\n", encoding="utf-8")
    cfg = load_config(write_config)
    assert cfg == ViewerConfig(spreadsheet_id="abc")


def test_load_config_missing_required(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace("spreadsheet_id: test-sheet-id\n", "")
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "config validation failed" in str(e.value) and "required property" in str(e.value)


def test_load_config_invalid_page_size(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace("page_size: 5", "page_size: 0")
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "config validation failed" in str(e.value)


def test_load_config_extra_field(write_config: Path):
    text = write_config.read_text(encoding="utf-8") + "\nextra_field: not_allowed\n"
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "config validation failed" in str(e.value)


def test_load_config_invalid_yaml(write_config: Path):
    write_config.write_text("spreadsheet_id: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "invalid yaml" in str(e.value)


def test_env_overrides_file_values(write_config: Path, monkeypatch):
    monkeypatch.setenv("CARRIER_VIEWER_SPREADSHEET_ID", "from-env")
    monkeypatch.setenv("CARRIER_VIEWER_BASE_URL", "https://env.example.test/d")
    cfg = load_config(write_config)
    assert cfg.spreadsheet_id == "from-env"
    assert cfg.base_url == "https://env.example.test/d"
    assert cfg.page_size == 5


def test_env_overrides_defaults_without_file(temp_workdir: Path, monkeypatch):
    monkeypatch.setenv("CARRIER_VIEWER_SPREADSHEET_ID", "from-env")
    assert load_config(temp_workdir / "nope.yml").spreadsheet_id == "from-env"


def test_env_base_url_is_validated(write_config: Path, monkeypatch):
    monkeypatch.setenv("CARRIER_VIEWER_BASE_URL", "ftp://env.example.test/d")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "config validation failed" in str(e.value)


def test_env_base_url_is_validated_without_file(temp_workdir: Path, monkeypatch):
    monkeypatch.setenv("CARRIER_VIEWER_BASE_URL", "sheets.example.test/d")
    with pytest.raises(ConfigError):
        load_config(temp_workdir / "nope.yml")


def test_defaults_are_shared_with_engine_and_fetcher():
    cfg = ViewerConfig()
    assert cfg.base_url == DEFAULT_BASE_URL
    assert cfg.nominal_count == DEFAULT_NOMINAL_COUNT
