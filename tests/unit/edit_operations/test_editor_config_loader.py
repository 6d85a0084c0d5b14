"""Unit tests for edit_operations.config_loader module."""

from datetime import timedelta

import pytest
import yaml

from src.edit_operations.config_loader import ConfigLoader
from src.edit_operations.errors import ConfigError
from src.edit_operations.models import EditorConfig


class TestLoad:
    """Test cases for ConfigLoader.load."""

    def test_load_full_config(self, tmp_path):
        config_path = tmp_path / "editor.yaml"
        config_path.write_text(
            "staging_dir: /var/tmp/staged\n"
            "staging_max_age_hours: 6\n"
            "inline_size_limit_bytes: 2048\n"
            "default_page_size: 10\n"
            "request_timeout: 15\n"
        )

        config = ConfigLoader.load(str(config_path))

        assert config.staging_dir == "/var/tmp/staged"
        assert config.staging_max_age == timedelta(hours=6)
        assert config.inline_size_limit_bytes == 2048
        assert config.default_page_size == 10
        assert config.request_timeout == 15

    def test_missing_fields_use_defaults(self, tmp_path):
        config_path = tmp_path / "editor.yaml"
        config_path.write_text("default_page_size: 3\n")

        config = ConfigLoader.load(str(config_path))

        assert config.default_page_size == 3
        assert config.staging_dir == "tmp/elementor-data"
        assert config.staging_max_age_hours == 24
        assert config.inline_size_limit_bytes == 100000
        assert config.request_timeout == 60

    def test_empty_file_is_all_defaults(self, tmp_path):
        config_path = tmp_path / "editor.yaml"
        config_path.write_text("")
        assert ConfigLoader.load(str(config_path)) == EditorConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            ConfigLoader.load(str(tmp_path / "missing.yaml"))

    def test_invalid_yaml(self, tmp_path):
        config_path = tmp_path / "editor.yaml"
        config_path.write_text("staging_dir: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML syntax"):
            ConfigLoader.load(str(config_path))

    def test_not_a_mapping(self, tmp_path):
        config_path = tmp_path / "editor.yaml"
        config_path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="YAML dictionary"):
            ConfigLoader.load(str(config_path))

    @pytest.mark.parametrize("field,value", [
        ("default_page_size", 0),
        ("inline_size_limit_bytes", -1),
        ("staging_max_age_hours", 0),
        ("request_timeout", "soon"),
        ("request_timeout", True),
        ("staging_dir", ""),
    ])
    def test_invalid_field_values(self, tmp_path, field, value):
        config_path = tmp_path / "editor.yaml"
        config_path.write_text(yaml.safe_dump({field: value}))

        with pytest.raises(ConfigError) as exc_info:
            ConfigLoader.load(str(config_path))
        assert exc_info.value.config_field == field

    def test_unknown_field(self, tmp_path):
        config_path = tmp_path / "editor.yaml"
        config_path.write_text("page_limit: 100\n")
        with pytest.raises(ConfigError, match="Unknown fields: page_limit"):
            ConfigLoader.load(str(config_path))


class TestLoadOrDefault:
    """Test cases for ConfigLoader.load_or_default."""

    def test_absent_file_gives_defaults(self, tmp_path):
        assert ConfigLoader.load_or_default(str(tmp_path / "none.yaml")) == EditorConfig()

    def test_invalid_file_still_raises(self, tmp_path):
        config_path = tmp_path / "editor.yaml"
        config_path.write_text("default_page_size: 0\n")
        with pytest.raises(ConfigError):
            ConfigLoader.load_or_default(str(config_path))


class TestSave:
    """Test cases for ConfigLoader.save."""

    def test_save_then_load(self, tmp_path):
        config_path = tmp_path / "nested" / "editor.yaml"
        config = EditorConfig(staging_dir="staged", default_page_size=7)

        ConfigLoader.save(str(config_path), config)

        assert config_path.is_file()
        assert ConfigLoader.load(str(config_path)) == config
