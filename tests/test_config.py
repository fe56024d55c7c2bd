"""
Tests for configuration loading and validation.
"""

from pathlib import Path

import pytest

from sieve.config import load_config


class TestLoadConfig:
    """Tests for load_config function."""

    def test_load_valid_config(self, tmp_path: Path) -> None:
        """Test loading a valid configuration file."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("""
workers: 4
filters:
  - type: "contains"
    config:
      field: ["%{fruit}"]
      value_path: "/etc/sieve/fruits"
      refresh_interval: 30
      add_tag: ["fruits"]
logging:
  level: "DEBUG"
""")

        config = load_config(config_file)

        assert config.workers == 4
        assert len(config.filters) == 1
        assert config.filters[0].type == "contains"
        assert config.filters[0].config["field"] == ["%{fruit}"]
        assert config.filters[0].config["refresh_interval"] == 30
        assert config.logging.level == "DEBUG"
        assert config.logging.file is None

    def test_defaults(self, tmp_path: Path) -> None:
        """Test default workers and logging."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("""
filters:
  - type: "contains"
""")

        config = load_config(config_file)

        assert config.workers == 1
        assert config.filters[0].config == {}
        assert config.logging.level == "INFO"

    def test_load_missing_file(self) -> None:
        """Test that loading a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config("/nonexistent/config.yaml")

    def test_load_invalid_yaml(self, tmp_path: Path) -> None:
        """Test that invalid YAML raises an error."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("invalid: yaml: content: [")

        with pytest.raises(Exception):  # yaml.YAMLError
            load_config(config_file)

    def test_load_no_filters(self, tmp_path: Path) -> None:
        """Test that config with no filters is invalid."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("filters: []\n")

        with pytest.raises(ValueError, match="validation error"):
            load_config(config_file)

    def test_load_zero_workers(self, tmp_path: Path) -> None:
        """Test that workers must be at least one."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("""
workers: 0
filters:
  - type: "contains"
""")

        with pytest.raises(ValueError, match="validation error"):
            load_config(config_file)

    def test_load_empty_file(self, tmp_path: Path) -> None:
        """Test that an empty file is invalid."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("")

        with pytest.raises(ValueError, match="validation error"):
            load_config(config_file)
