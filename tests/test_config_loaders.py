# tsmscan Configuration Tests
"""
Tests du système de configuration tsmscan
Couvre chargement TOML, validation, overrides et valeurs par défaut
"""

import os
import tempfile

import pytest

from tsmscan.configuration import (
    DEFAULT_SETTINGS,
    ConfigurationError,
    PathValidationError,
    Settings,
    TOMLConfigLoader,
    load_config_dict,
    load_settings,
    print_config,
    validate_data_root,
)
from tsmscan.inventory.detector import ShardFormatDetector

# === MINIMAL VALID CONFIG FOR TESTS ===
MINIMAL_VALID_CONFIG = """
[paths]
data_root = "/var/lib/influxdb/data"

[detector]
open_timeout_sec = 2.5
meta_bucket = "meta"

[report]
exclude_format = "bz1"
databases = ["telegraf", "_internal"]

[logging]
level = "debug"
"""

INVALID_TOML_SYNTAX = """
[paths]
data_root = "./data
"""  # Missing closing quote


def _write_config(content):
    with tempfile.NamedTemporaryFile(mode="w", suffix=".toml", delete=False) as f:
        f.write(content)
        f.flush()
    return f.name


# ===== A. TESTS FICHIERS & TOML =====


class TestConfigFiles:
    def test_config_file_not_found(self):
        with pytest.raises(ConfigurationError, match="Configuration file not found"):
            load_config_dict("nonexistent_file.toml")

    def test_invalid_toml_syntax(self):
        path = _write_config(INVALID_TOML_SYNTAX)
        try:
            with pytest.raises(ConfigurationError, match="Invalid TOML syntax"):
                load_config_dict(path)
        finally:
            os.unlink(path)

    def test_empty_config_file(self):
        path = _write_config("")
        try:
            assert load_config_dict(path) == {}
            assert TOMLConfigLoader(path).create_settings() == DEFAULT_SETTINGS
        finally:
            os.unlink(path)

    def test_valid_config_loading(self):
        path = _write_config(MINIMAL_VALID_CONFIG)
        try:
            settings = TOMLConfigLoader(path).load_config()
        finally:
            os.unlink(path)

        assert settings.DATA_ROOT == "/var/lib/influxdb/data"
        assert settings.OPEN_TIMEOUT_SEC == 2.5
        assert settings.LOCK_POLL_INTERVAL_SEC == DEFAULT_SETTINGS.LOCK_POLL_INTERVAL_SEC
        assert settings.EXCLUDE_FORMAT == "bz1"
        assert settings.DATABASES == ("telegraf", "_internal")
        assert settings.LOG_LEVEL == "DEBUG"

    def test_error_message_mentions_file(self):
        err = ConfigurationError("cfg.toml", "Invalid configuration", details="boom")
        assert str(err) == "Configuration error (file: cfg.toml): Invalid configuration\nboom"


# ===== B. VALIDATION =====


class TestValidation:
    @pytest.mark.parametrize(
        "data,fragment",
        [
            ({"paths": {"data_root": ""}}, "paths.data_root"),
            ({"detector": {"open_timeout_sec": 0}}, "detector.open_timeout_sec"),
            ({"detector": {"open_timeout_sec": "1s"}}, "detector.open_timeout_sec"),
            ({"detector": {"lock_poll_interval_sec": -1}}, "detector.lock_poll_interval_sec"),
            ({"detector": {"meta_bucket": ""}}, "detector.meta_bucket"),
            ({"report": {"exclude_format": "tsm2"}}, "report.exclude_format"),
            ({"report": {"databases": "telegraf"}}, "report.databases"),
            ({"logging": {"level": "LOUD"}}, "logging.level"),
        ],
    )
    def test_invalid_values(self, data, fragment):
        loader = TOMLConfigLoader.from_dict(data)
        errors = loader.validate_config()
        assert any(fragment in err for err in errors)
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            loader.create_settings()

    def test_valid_values(self):
        loader = TOMLConfigLoader.from_dict(
            {"detector": {"open_timeout_sec": 1}, "report": {"exclude_format": "TSM1"}}
        )
        assert loader.validate_config() == []

    def test_empty_exclude_means_no_filter(self):
        settings = TOMLConfigLoader.from_dict({"report": {"exclude_format": ""}}).create_settings()
        assert settings.EXCLUDE_FORMAT is None


# ===== C. OVERRIDES & CHARGEMENT =====


class TestLoadSettings:
    def test_overrides_win(self):
        loader = TOMLConfigLoader.from_dict({"paths": {"data_root": "/a"}})
        settings = loader.create_settings(data_root="/b", log_level="error", open_timeout=3)
        assert settings.DATA_ROOT == "/b"
        assert settings.LOG_LEVEL == "ERROR"
        assert settings.OPEN_TIMEOUT_SEC == 3.0

    def test_defaults_without_config_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(TOMLConfigLoader, "search_paths", classmethod(lambda cls: [tmp_path / "tsmscan.toml"]))
        assert load_settings() == DEFAULT_SETTINGS
        assert load_settings(data_root="/x").DATA_ROOT == "/x"

    def test_config_found_in_cwd(self, tmp_path, monkeypatch):
        (tmp_path / "tsmscan.toml").write_text('[paths]\ndata_root = "/srv/data"\n')
        monkeypatch.chdir(tmp_path)
        assert load_settings().DATA_ROOT == "/srv/data"

    def test_explicit_missing_config(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Configuration file not found"):
            load_settings(tmp_path / "missing.toml")

    def test_invalid_config_in_cwd_is_reported(self, tmp_path, monkeypatch):
        (tmp_path / "tsmscan.toml").write_text(INVALID_TOML_SYNTAX)
        monkeypatch.chdir(tmp_path)
        with pytest.raises(ConfigurationError, match="Invalid TOML syntax"):
            load_settings()

    def test_settings_feed_detector(self):
        settings = Settings(OPEN_TIMEOUT_SEC=0.3, META_BUCKET="engine", LEGACY_FORMAT_VALUE="v0")
        detector = ShardFormatDetector.from_settings(settings)
        assert detector.open_timeout == 0.3
        assert detector.meta_bucket == "engine"
        assert detector.legacy_value == b"v0"


class TestDataRootValidation:
    def test_existing_directory(self, tmp_path):
        assert validate_data_root(Settings(DATA_ROOT=str(tmp_path))) == tmp_path

    def test_not_a_directory(self, tmp_path):
        with pytest.raises(PathValidationError):
            validate_data_root(Settings(DATA_ROOT=str(tmp_path / "absent")))


def test_print_config(capsys):
    print_config(Settings(DATABASES=("telegraf",)))
    out = capsys.readouterr().out
    assert "tsmscan Configuration" in out
    assert "Databases: telegraf" in out
    assert "Exclude Format: tsm1" in out
