"""Tests for the configuration system and config table reads."""

import os
import tempfile
from pathlib import Path

import pytest
from pydantic import ValidationError

from feature_registry.config import (
    DEFAULT_FEATURE_CONFIG,
    ConfigTable,
    FeatureConfigEntry,
    LoggingConfig,
    default_table,
    get_disabled_features,
    get_enabled_features,
    get_feature_config,
    is_feature_enabled,
    load_config,
    load_feature_table,
)


def _write_yaml(directory: Path, name: str, content: str) -> Path:
    path = directory / name
    path.write_text(content, encoding="utf-8")
    return path


class TestConfigTable:
    """Tests for ConfigTable reads."""

    def test_enabled_flag(self, sample_table: ConfigTable) -> None:
        """Test that entries report their enabled flag."""
        assert sample_table.is_feature_enabled("chat-widget")
        assert not sample_table.is_feature_enabled("referral-program")

    def test_absent_id_is_disabled(self, sample_table: ConfigTable) -> None:
        """Test closed-by-default behavior for ids without an entry."""
        assert not sample_table.is_feature_enabled("no-such-feature")
        assert sample_table.get_entry("no-such-feature") is None

    def test_feature_config(self, sample_table: ConfigTable) -> None:
        """Test config payload lookup."""
        assert sample_table.get_feature_config("chat-widget") == {
            "position": "bottom-right"
        }
        assert sample_table.get_feature_config("voice-assistant") is None
        assert sample_table.get_feature_config("no-such-feature") is None

    def test_listings_preserve_table_order(self, sample_table: ConfigTable) -> None:
        """Test that enabled/disabled listings follow table order."""
        assert sample_table.get_enabled_features() == ["property-search", "chat-widget"]
        assert sample_table.get_disabled_features() == [
            "referral-program",
            "voice-assistant",
        ]

    def test_container_protocol(self, sample_table: ConfigTable) -> None:
        """Test membership, length and iteration."""
        assert "chat-widget" in sample_table
        assert "no-such-feature" not in sample_table
        assert len(sample_table) == 4
        assert list(sample_table)[0] == "property-search"

    def test_feature_config_is_a_copy(self, sample_table: ConfigTable) -> None:
        """Test that mutating a returned payload leaves the table unchanged."""
        payload = sample_table.get_feature_config("chat-widget")
        payload["position"] = "top-left"
        payload["extra"] = True

        assert sample_table.get_feature_config("chat-widget") == {
            "position": "bottom-right"
        }

    def test_entry_requires_enabled(self) -> None:
        """Test that an entry without 'enabled' is rejected."""
        with pytest.raises(ValidationError):
            FeatureConfigEntry.model_validate({"config": {}})


class TestDefaultTable:
    """Tests for the packaged default table and module-level reads."""

    def test_default_table_matches_source(self) -> None:
        """Test that the default table contains every declared entry."""
        table = default_table()
        assert list(table) == list(DEFAULT_FEATURE_CONFIG)

    def test_module_functions_read_defaults(self) -> None:
        """Test module-level reads against the packaged table."""
        assert is_feature_enabled("chat-widget")
        assert not is_feature_enabled("referral-program")
        assert not is_feature_enabled("not-in-table")
        assert get_feature_config("property-compare") == {"max_properties": 4}

    def test_module_functions_accept_table(self, sample_table: ConfigTable) -> None:
        """Test that an explicit table overrides the defaults."""
        assert get_enabled_features(sample_table) == ["property-search", "chat-widget"]
        assert get_disabled_features(sample_table) == [
            "referral-program",
            "voice-assistant",
        ]
        assert not is_feature_enabled("reviews", sample_table)

    def test_default_listings_are_disjoint(self) -> None:
        """Test that no id is both enabled and disabled."""
        enabled = set(get_enabled_features())
        disabled = set(get_disabled_features())
        assert not enabled & disabled
        assert enabled | disabled == set(DEFAULT_FEATURE_CONFIG)


class TestLoggingConfig:
    """Tests for LoggingConfig."""

    def test_level_is_normalized(self) -> None:
        """Test that level names are upper-cased."""
        assert LoggingConfig(level="debug").level == "DEBUG"

    def test_invalid_level(self) -> None:
        """Test that unknown level names are rejected."""
        with pytest.raises(ValueError, match="level must be one of"):
            LoggingConfig(level="verbose")

    def test_json_alias(self) -> None:
        """Test that 'json' populates json_output."""
        assert LoggingConfig(json=True).json_output
        assert LoggingConfig(json_output=True).json_output


class TestLoadFeatureTable:
    """Tests for building a table from raw YAML data."""

    def test_short_form_entries(self) -> None:
        """Test that bare booleans are accepted as entries."""
        table = load_feature_table({"reviews": True, "analytics": False})
        assert table.is_feature_enabled("reviews")
        assert not table.is_feature_enabled("analytics")

    def test_string_flags_are_coerced(self) -> None:
        """Test that interpolated string flags become booleans."""
        table = load_feature_table({"reviews": {"enabled": "false"}, "chat": "true"})
        assert not table.is_feature_enabled("reviews")
        assert table.is_feature_enabled("chat")

    def test_non_mapping_rejected(self) -> None:
        """Test that a list is not a valid features section."""
        with pytest.raises(ValueError, match="must be a mapping"):
            load_feature_table(["reviews"])  # type: ignore[arg-type]

    def test_empty_entry_rejected(self) -> None:
        """Test that an entry with no content is rejected."""
        with pytest.raises(ValueError, match="empty entry"):
            load_feature_table({"reviews": None})


class TestLoadConfig:
    """Tests for YAML config loading."""

    def test_load_minimal_config(self) -> None:
        """Test loading a config with only a features section."""
        config_content = """
features:
  chat-widget:
    enabled: true
    config:
      position: bottom-right
  referral-program:
    enabled: false
"""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write_yaml(Path(tmpdir), "features.yaml", config_content)
            config = load_config(path)

        assert config.table.get_enabled_features() == ["chat-widget"]
        assert config.table.get_feature_config("chat-widget") == {
            "position": "bottom-right"
        }
        assert config.modules == []
        assert config.logging.level == "INFO"

    def test_modules_and_logging(self) -> None:
        """Test the modules and logging sections."""
        config_content = """
logging:
  level: debug
  json: true
modules:
  - myapp.features.search
  - myapp.features.chat
features: {}
"""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write_yaml(Path(tmpdir), "features.yaml", config_content)
            config = load_config(path)

        assert config.modules == ["myapp.features.search", "myapp.features.chat"]
        assert config.logging.level == "DEBUG"
        assert config.logging.json_output
        assert len(config.table) == 0

    def test_env_var_interpolation(self) -> None:
        """Test environment variable interpolation with defaults."""
        os.environ["TEST_CHAT_ENABLED"] = "false"

        config_content = """
features:
  chat-widget:
    enabled: "${TEST_CHAT_ENABLED:true}"
  reviews:
    enabled: "${TEST_REVIEWS_UNSET:true}"
"""
        try:
            with tempfile.TemporaryDirectory() as tmpdir:
                path = _write_yaml(Path(tmpdir), "features.yaml", config_content)
                config = load_config(path)
            assert not config.table.is_feature_enabled("chat-widget")
            assert config.table.is_feature_enabled("reviews")
        finally:
            del os.environ["TEST_CHAT_ENABLED"]

    def test_base_yaml_inheritance(self) -> None:
        """Test that base.yaml next to the config is merged underneath."""
        base_content = """
modules:
  - myapp.features.search
features:
  property-search:
    enabled: true
  chat-widget:
    enabled: true
    config:
      position: bottom-right
"""
        main_content = """
features:
  chat-widget:
    enabled: false
"""
        with tempfile.TemporaryDirectory() as tmpdir:
            _write_yaml(Path(tmpdir), "base.yaml", base_content)
            path = _write_yaml(Path(tmpdir), "production.yaml", main_content)
            config = load_config(path)

        assert config.modules == ["myapp.features.search"]
        assert config.table.is_feature_enabled("property-search")
        assert not config.table.is_feature_enabled("chat-widget")
        # Deep merge keeps the base settings of the overridden entry
        assert config.table.get_feature_config("chat-widget") == {
            "position": "bottom-right"
        }

    def test_explicit_base_path(self) -> None:
        """Test inheritance from an explicitly named base file."""
        with tempfile.TemporaryDirectory() as tmpdir:
            base = _write_yaml(Path(tmpdir), "shared.yaml", "features:\n  reviews: true\n")
            path = _write_yaml(Path(tmpdir), "site.yaml", "features:\n  analytics: false\n")
            config = load_config(path, base_path=base)

        assert list(config.table) == ["reviews", "analytics"]

    def test_empty_file(self) -> None:
        """Test that an empty YAML file yields an empty config."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write_yaml(Path(tmpdir), "features.yaml", "")
            config = load_config(path)

        assert len(config.table) == 0
        assert config.modules == []

    def test_invalid_modules(self) -> None:
        """Test that modules must be a list."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write_yaml(Path(tmpdir), "features.yaml", "modules: myapp.chat\n")
            with pytest.raises(ValueError, match="'modules' must be a list"):
                load_config(path)

    def test_invalid_flag(self) -> None:
        """Test that a non-boolean flag is rejected."""
        config_content = """
features:
  chat-widget:
    enabled: sometimes
"""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write_yaml(Path(tmpdir), "features.yaml", config_content)
            with pytest.raises(ValidationError):
                load_config(path)

    @pytest.mark.parametrize("section", ["[]", "false", '""', "chat-widget"])
    def test_non_mapping_features_section(self, section: str) -> None:
        """Test that a features section that is not a mapping is rejected."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write_yaml(Path(tmpdir), "features.yaml", f"features: {section}\n")
            with pytest.raises(ValueError, match="must be a mapping"):
                load_config(path)

    def test_empty_features_section(self) -> None:
        """Test that a bare 'features:' key yields an empty table."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write_yaml(Path(tmpdir), "features.yaml", "features:\n")
            config = load_config(path)

        assert len(config.table) == 0

    def test_non_mapping_logging_section(self) -> None:
        """Test that a scalar logging section is a ValueError."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write_yaml(Path(tmpdir), "features.yaml", "logging: DEBUG\n")
            with pytest.raises(ValueError, match="'logging' must be a mapping"):
                load_config(path)

    def test_malformed_yaml(self) -> None:
        """Test that YAML syntax errors surface as ValueError."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write_yaml(Path(tmpdir), "features.yaml", "features: [chat\n")
            with pytest.raises(ValueError, match="Invalid YAML"):
                load_config(path)
