"""Tests for stopboard.config."""

import pytest

from stopboard.config import LayoutConfig, SectionConfig, load_config, validate_layout
from stopboard.errors import ConfigError
from stopboard.models import RenderTarget


class TestConfigDefaults:
    """Tests that Config loads sensible defaults when no YAML file or CLI args are given."""

    def test_default_layout(self):
        """Verify the default 800x600 layout with empty panels."""
        config = load_config(yaml_path="/nonexistent.yaml", cli_args=[])
        assert config.layout.width == 800
        assert config.layout.height == 600
        assert config.layout.left.sections == []
        assert config.layout.right.sections == []

    def test_default_target(self):
        """Verify that boards are not rotated by default."""
        config = load_config(yaml_path="/nonexistent.yaml", cli_args=[])
        assert config.target is RenderTarget.OTHER

    def test_default_cli_flags(self):
        """Verify that all CLI-only flags default to None/False."""
        config = load_config(yaml_path="/nonexistent.yaml", cli_args=[])
        assert config.stops is None
        assert config.stops_url is None
        assert config.output is None
        assert config.preview is False
        assert config.debug is False


class TestYAMLOverlay:
    """Tests that YAML config values override hardcoded defaults."""

    def test_yaml_overrides_size(self, sample_config_yaml):
        """Verify that YAML sets the canvas size."""
        config = load_config(yaml_path=sample_config_yaml, cli_args=[])
        assert config.layout.width == 1024
        assert config.layout.height == 758

    def test_yaml_sections_in_order(self, sample_config_yaml):
        """Verify that panel sections keep their YAML order."""
        config = load_config(yaml_path=sample_config_yaml, cli_args=[])
        assert config.layout.left.sections == [
            SectionConfig(agency="SF", direction="IB"),
            SectionConfig(agency="SF", direction="OB"),
        ]
        assert config.layout.right.sections == [
            SectionConfig(agency="BA", direction="North"),
        ]

    def test_yaml_target_and_stops(self, sample_config_yaml):
        """Verify that target and stop data path come from YAML."""
        config = load_config(yaml_path=sample_config_yaml, cli_args=[])
        assert config.target is RenderTarget.KINDLE
        assert config.stops == "/srv/stops.json"

    def test_bare_section_list(self, tmp_path):
        """Verify that a panel may be given as a bare list of sections."""
        path = tmp_path / "config.yaml"
        path.write_text("layout:\n  left:\n    - {agency: A, direction: D}\n")
        config = load_config(yaml_path=str(path), cli_args=[])
        assert config.layout.left.sections == [SectionConfig(agency="A", direction="D")]

    def test_empty_yaml_uses_defaults(self, tmp_path):
        """Verify that an empty YAML file leaves the defaults alone."""
        path = tmp_path / "config.yaml"
        path.write_text("")
        config = load_config(yaml_path=str(path), cli_args=[])
        assert config.layout.width == 800

    def test_missing_yaml_uses_defaults(self):
        """Verify that a nonexistent YAML path silently falls back to defaults."""
        config = load_config(yaml_path="/does/not/exist.yaml", cli_args=[])
        assert config.layout.height == 600

    def test_section_without_direction_rejected(self, tmp_path):
        """Verify that a section missing its direction raises ConfigError."""
        path = tmp_path / "config.yaml"
        path.write_text("layout:\n  right:\n    sections:\n      - agency: A\n")
        with pytest.raises(ConfigError):
            load_config(yaml_path=str(path), cli_args=[])

    def test_unknown_target_rejected(self, tmp_path):
        """Verify that an unknown render target raises ConfigError."""
        path = tmp_path / "config.yaml"
        path.write_text("target: kobo\n")
        with pytest.raises(ConfigError):
            load_config(yaml_path=str(path), cli_args=[])

    def test_malformed_yaml_rejected(self, tmp_path):
        """Verify that a YAML syntax error raises ConfigError."""
        path = tmp_path / "config.yaml"
        path.write_text("layout: [unclosed\n")
        with pytest.raises(ConfigError):
            load_config(yaml_path=str(path), cli_args=[])

    @pytest.mark.parametrize("content", ["layout: 5\n", "- layout\n"])
    def test_non_mapping_rejected(self, tmp_path, content):
        """Verify that a scalar layout or a list document raises ConfigError."""
        path = tmp_path / "config.yaml"
        path.write_text(content)
        with pytest.raises(ConfigError):
            load_config(yaml_path=str(path), cli_args=[])

    def test_relative_stops_resolved_against_config_dir(self, tmp_path):
        """Verify that a relative stops path points next to the config file."""
        path = tmp_path / "config.yaml"
        path.write_text("stops: stops.example.yaml\n")
        config = load_config(yaml_path=str(path), cli_args=[])
        assert config.stops == str(tmp_path / "stops.example.yaml")

    def test_zero_width_rejected(self, tmp_path):
        """Verify that a non-positive width raises ConfigError."""
        path = tmp_path / "config.yaml"
        path.write_text("layout:\n  width: 0\n")
        with pytest.raises(ConfigError):
            load_config(yaml_path=str(path), cli_args=[])


class TestCLIOverlay:
    """Tests that CLI arguments take precedence over defaults and YAML values."""

    def test_kindle_flag(self):
        """Verify that --kindle selects the Kindle render target."""
        config = load_config(yaml_path="/nonexistent.yaml", cli_args=["--kindle"])
        assert config.target is RenderTarget.KINDLE

    def test_stops_overrides_yaml(self, sample_config_yaml):
        """Verify that --stops replaces the YAML stop data path."""
        config = load_config(
            yaml_path=sample_config_yaml,
            cli_args=["--stops", "other.json"],
        )
        assert config.stops == "other.json"

    def test_stops_url(self):
        """Verify that --stops-url is stored on the config."""
        config = load_config(
            yaml_path="/nonexistent.yaml",
            cli_args=["--stops-url", "http://localhost:8080/stops"],
        )
        assert config.stops_url == "http://localhost:8080/stops"

    def test_output_preview_debug(self):
        """Verify the CLI-only output, preview and debug flags."""
        config = load_config(
            yaml_path="/nonexistent.yaml",
            cli_args=["--output", "board.png", "--preview", "--debug"],
        )
        assert config.output == "board.png"
        assert config.preview is True
        assert config.debug is True

    def test_config_flag_selects_yaml(self, sample_config_yaml):
        """Verify that --config is used when no yaml_path is passed."""
        config = load_config(cli_args=["--config", sample_config_yaml])
        assert config.layout.width == 1024


class TestValidateLayout:
    """Tests for validate_layout()."""

    def test_valid(self):
        """Verify that the default layout passes."""
        validate_layout(LayoutConfig())

    @pytest.mark.parametrize("width,height", [(-1, 600), (800, 0), ("800", 600), (True, 600)])
    def test_invalid(self, width, height):
        """Verify that non-positive or non-integer sizes are rejected."""
        with pytest.raises(ConfigError):
            validate_layout(LayoutConfig(width=width, height=height))
