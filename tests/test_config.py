# Marketsync Config Tests
# Tests for configuration loading and validation

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from marketsync.config.defaults import DEFAULT_CONFIG, generate_default_config
from marketsync.config.loader import (
    CONFIG_ENV_VAR,
    ensure_config_exists,
    get_config_path,
    load_config,
    load_or_default,
    save_config,
    validate_config_file,
)
from marketsync.config.schema import MarketsyncConfig, RemoteConfig


class TestMarketsyncConfig:
    """Tests for MarketsyncConfig schema."""

    def test_defaults(self):
        """Test configuration with every section omitted."""
        config = MarketsyncConfig()

        assert config.remote.base_url == "https://marketplace.secondlife.com/api/1/"
        assert config.importer.auto_trigger_import is False
        assert config.importer.poll_interval == 1.0
        assert config.output.colored is True

    def test_full_config(self, sample_config: dict):
        """Test full configuration loading."""
        config = MarketsyncConfig.model_validate(sample_config)

        assert config.remote.import_url == "https://market.example.com/api/1/viewer/agent/"
        assert config.importer.auto_trigger_import is True
        assert config.importer.poll_interval == 2.5
        assert config.output.colored is False

    def test_url_gets_trailing_slash(self):
        """Test base URLs are normalized to a single trailing slash."""
        remote = RemoteConfig(base_url="https://m.example.com/api/1//", import_url="http://m.example.com/v")

        assert remote.base_url == "https://m.example.com/api/1/"
        assert remote.import_url == "http://m.example.com/v/"

    def test_url_requires_http(self):
        """Test non-http URLs are rejected."""
        with pytest.raises(ValidationError):
            RemoteConfig(base_url="ftp://m.example.com/")

    @pytest.mark.parametrize("value", [0, -1.5])
    def test_positive_poll_interval(self, value: float):
        """Test the poll interval must be positive."""
        with pytest.raises(ValidationError):
            MarketsyncConfig.model_validate({"importer": {"poll_interval": value}})


class TestConfigLoader:
    """Tests for config loading and saving."""

    def test_load_config(self, config_file: Path):
        """Test loading configuration from file."""
        config = load_config(config_file)

        assert config.remote.base_url == "https://market.example.com/api/1/agent/"
        assert config.importer.poll_interval == 2.5

    def test_load_default_location(self, config_file: Path):
        """Test loading from the default path under HOME."""
        assert get_config_path() == config_file
        assert load_config().importer.poll_interval == 2.5

    def test_env_override(self, temp_dir: Path, monkeypatch: pytest.MonkeyPatch):
        """Test MARKETSYNC_CONFIG overrides the location."""
        custom = temp_dir / "custom.yaml"
        monkeypatch.setenv(CONFIG_ENV_VAR, str(custom))

        assert get_config_path() == custom

    def test_load_missing_config(self, temp_dir: Path):
        """Test loading missing configuration."""
        with pytest.raises(FileNotFoundError, match="marketsync config init"):
            load_config(temp_dir / "nonexistent.yaml")

    def test_partial_file_merged_with_defaults(self, temp_dir: Path):
        """Test missing keys fall back to the defaults."""
        config_path = temp_dir / "partial.yaml"
        config_path.write_text("importer:\n  poll_interval: 3\n", encoding="utf-8")

        config = load_config(config_path)

        assert config.importer.poll_interval == 3
        assert config.importer.auto_trigger_import is False
        assert config.remote.import_url == DEFAULT_CONFIG["remote"]["import_url"]

    def test_empty_file(self, temp_dir: Path):
        """Test an empty file yields the defaults."""
        config_path = temp_dir / "empty.yaml"
        config_path.write_text("", encoding="utf-8")

        assert load_config(config_path) == MarketsyncConfig()

    def test_load_or_default(self, temp_dir: Path):
        """Test defaults when no file exists."""
        assert load_or_default(temp_dir / "missing.yaml") == MarketsyncConfig()

    def test_save_config(self, temp_dir: Path, sample_config: dict):
        """Test saving configuration."""
        config = MarketsyncConfig.model_validate(sample_config)
        config_path = temp_dir / "nested" / "config.yaml"

        save_config(config, config_path)

        with open(config_path, encoding="utf-8") as f:
            saved = yaml.safe_load(f)

        assert saved["importer"]["poll_interval"] == 2.5
        assert load_config(config_path) == config

    def test_ensure_config_exists(self, temp_dir: Path):
        """Test the default file is created once."""
        config_path = temp_dir / "config.yaml"

        path, created = ensure_config_exists(config_path)
        assert created is True
        assert path.exists()

        config_path.write_text("output:\n  verbose: true\n", encoding="utf-8")
        _, created = ensure_config_exists(config_path)
        assert created is False
        assert "verbose: true" in config_path.read_text(encoding="utf-8")

        _, created = ensure_config_exists(config_path, force=True)
        assert created is True
        assert "verbose: false" in config_path.read_text(encoding="utf-8")


class TestValidateConfigFile:
    """Tests for validate_config_file."""

    def test_valid_config(self, config_file: Path):
        """Test validating a valid configuration."""
        is_valid, errors = validate_config_file(config_file)
        assert is_valid is True
        assert errors == []

    def test_missing_file(self, temp_dir: Path):
        is_valid, errors = validate_config_file(temp_dir / "missing.yaml")
        assert is_valid is False
        assert "not found" in errors[0]

    def test_invalid_yaml(self, temp_dir: Path):
        """Test validating invalid YAML."""
        bad_file = temp_dir / "bad.yaml"
        bad_file.write_text("{ invalid yaml [", encoding="utf-8")

        is_valid, errors = validate_config_file(bad_file)
        assert is_valid is False
        assert errors[0].startswith("Invalid YAML syntax")

    def test_empty_file(self, temp_dir: Path):
        empty = temp_dir / "empty.yaml"
        empty.write_text("", encoding="utf-8")

        is_valid, errors = validate_config_file(empty)
        assert is_valid is False
        assert errors == ["Configuration file is empty"]

    def test_root_must_be_mapping(self, temp_dir: Path):
        listed = temp_dir / "list.yaml"
        listed.write_text("- remote\n", encoding="utf-8")

        is_valid, errors = validate_config_file(listed)
        assert is_valid is False
        assert errors == ["Configuration root must be a mapping"]

    def test_unknown_section_and_bad_value(self, temp_dir: Path):
        """Test every problem is reported with its location."""
        bad_file = temp_dir / "bad.yaml"
        bad_file.write_text("listings: {}\nimporter:\n  poll_interval: -1\n", encoding="utf-8")

        is_valid, errors = validate_config_file(bad_file)
        assert is_valid is False
        assert "Unknown section 'listings'" in errors
        assert any(error.startswith("importer -> poll_interval:") for error in errors)


class TestDefaults:
    """Tests for default configuration."""

    def test_default_config_structure(self):
        """Test default config has every section."""
        assert set(DEFAULT_CONFIG) == {"remote", "importer", "output"}

    def test_defaults_match_schema(self):
        """Test the default dict validates to the schema defaults."""
        assert MarketsyncConfig.model_validate(DEFAULT_CONFIG) == MarketsyncConfig()

    def test_generate_default_config(self):
        """Test YAML generation."""
        yaml_str = generate_default_config()

        assert yaml_str.startswith("# marketsync configuration")
        assert "# Bulk inventory import job" in yaml_str

        # Should be valid YAML
        parsed = yaml.safe_load(yaml_str)
        assert parsed == DEFAULT_CONFIG
