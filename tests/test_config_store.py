"""Tests for ConfigStore."""

import json

import pytest

from headerscope.config_store import CONFIG_ENV_VAR, CONFIG_FILE, ConfigStore, ScanConfig
from headerscope.errors import ConfigError, InvalidSchemaVersionError


class TestConfigStore:
    """Tests for ConfigStore class."""

    def test_missing_file_gives_defaults(self, temp_dir):
        store = ConfigStore(temp_dir)

        assert not store.exists()
        config = store.load()
        assert config.min_coverage == 80.0
        assert ".hpp" in config.header_extensions
        assert config.max_listed == 200
        assert config.max_scopes_shown == 5

    def test_roundtrip_preserves_data(self, temp_dir):
        store = ConfigStore(temp_dir)
        config = ScanConfig(min_coverage=95.5, header_extensions=[".h"], max_listed=10)
        store.save(config)

        assert store.exists()
        assert store.load() == config

    def test_save_writes_schema_version(self, temp_dir):
        store = ConfigStore(temp_dir)
        store.save(ScanConfig())

        data = json.loads((temp_dir / CONFIG_FILE).read_text())
        assert data["schema_version"] == 1

    def test_partial_file_uses_defaults(self, temp_dir):
        (temp_dir / CONFIG_FILE).write_text('{"min_coverage": 50}')

        config = ConfigStore(temp_dir).load()
        assert config.min_coverage == 50.0
        assert config.excluded_top_level == ScanConfig().excluded_top_level

    def test_invalid_json_raises(self, temp_dir):
        (temp_dir / CONFIG_FILE).write_text("{not json")

        with pytest.raises(ConfigError):
            ConfigStore(temp_dir).load()

    def test_non_object_raises(self, temp_dir):
        (temp_dir / CONFIG_FILE).write_text("[1, 2]")

        with pytest.raises(ConfigError):
            ConfigStore(temp_dir).load()

    def test_bad_value_raises(self, temp_dir):
        (temp_dir / CONFIG_FILE).write_text('{"min_coverage": "lots"}')

        with pytest.raises(ConfigError):
            ConfigStore(temp_dir).load()

    def test_unsupported_schema_version_raises(self, temp_dir):
        (temp_dir / CONFIG_FILE).write_text('{"schema_version": 2}')

        with pytest.raises(InvalidSchemaVersionError):
            ConfigStore(temp_dir).load()

    def test_env_var_overrides_location(self, temp_dir, monkeypatch):
        custom = temp_dir / "elsewhere.json"
        custom.write_text('{"min_coverage": 42}')
        monkeypatch.setenv(CONFIG_ENV_VAR, str(custom))

        store = ConfigStore(temp_dir)
        assert store.config_path == custom
        assert store.load().min_coverage == 42.0
