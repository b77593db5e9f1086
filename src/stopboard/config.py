"""Configuration loading: defaults → YAML overlay → argparse overlay."""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from stopboard.errors import ConfigError
from stopboard.models import RenderTarget


@dataclass
class SectionConfig:
    """One (agency, direction) slot on the board.

    Attributes:
        agency: Agency identifier as it appears in the stop data
            (e.g. "SF" for Muni).
        direction: Direction identifier within that agency (e.g. "IB").
            The pair is not required to exist in the data; missing pairs
            are skipped with a warning at render time.
    """

    agency: str
    direction: str


@dataclass
class PanelConfig:
    """One column of the board. Sections stack top to bottom in list order."""

    sections: list[SectionConfig] = field(default_factory=list)


@dataclass
class LayoutConfig:
    """Canvas size and the two board columns.

    Attributes:
        width: Canvas width in pixels before any Kindle rotation. The left
            panel spans [0, width // 2], the right panel the rest.
        height: Canvas height in pixels before any Kindle rotation. Also the
            length of the right panel's divider line.
        left: Sections drawn in the left column.
        right: Sections drawn in the right column.
    """

    # Landscape board, rotated onto a 600x800 portrait Kindle panel
    width: int = 800
    height: int = 600
    left: PanelConfig = field(default_factory=PanelConfig)
    right: PanelConfig = field(default_factory=PanelConfig)


@dataclass
class Config:
    """Top-level application configuration.

    Assembled from three layers with increasing priority:
      1. Hardcoded defaults (dataclass field values)
      2. YAML file overlay (config.yaml or --config path)
      3. CLI argument overlay (--kindle, --stops, etc.)

    Attributes:
        layout: Canvas size and panel sections.
        target: Display class the board is rendered for.
        stops: Path to a local stop-data document (JSON or YAML).
        stops_url: URL serving a stop-data JSON document. Takes precedence
            over ``stops`` when both are set.
        output: CLI-only: write the PNG here instead of stdout.
        preview: CLI-only: show the PNG in a pygame window.
        debug: CLI-only: if True, enable debug-level logging.
    """

    layout: LayoutConfig = field(default_factory=LayoutConfig)
    target: RenderTarget = RenderTarget.OTHER
    stops: str | None = None
    stops_url: str | None = None
    # CLI-only flags (not persisted in YAML)
    output: str | None = None
    preview: bool = False
    debug: bool = False


def _parse_sections(panel: str, raw: object) -> list[SectionConfig]:
    """Parse a panel's section list, accepting ``{sections: [...]}`` or a bare list."""
    if isinstance(raw, dict):
        raw = raw.get("sections", [])
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ConfigError(f"layout.{panel} must be a list of sections")
    sections = []
    for i, s in enumerate(raw):
        if not isinstance(s, dict) or "agency" not in s or "direction" not in s:
            raise ConfigError(
                f"layout.{panel} section {i} needs 'agency' and 'direction'"
            )
        sections.append(SectionConfig(agency=str(s["agency"]), direction=str(s["direction"])))
    return sections


def _apply_yaml(config: Config, yaml_path: str) -> None:
    """Overlay YAML config values onto the Config object."""
    if not os.path.exists(yaml_path):
        return

    with open(yaml_path, "r") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"could not parse config file {yaml_path}") from e

    if not data:
        return
    if not isinstance(data, dict):
        raise ConfigError(f"config file {yaml_path} must be a mapping")

    if "layout" in data:
        lay = data["layout"] or {}
        if not isinstance(lay, dict):
            raise ConfigError("layout must be a mapping")
        for key in ("width", "height"):
            if key in lay:
                setattr(config.layout, key, lay[key])
        for panel in ("left", "right"):
            if panel in lay:
                getattr(config.layout, panel).sections = _parse_sections(panel, lay[panel])

    if "target" in data:
        try:
            config.target = RenderTarget.parse(data["target"])
        except ValueError as e:
            raise ConfigError(str(e)) from e

    if "stops" in data:
        # Relative stop data paths are relative to the config file, so the
        # shipped config works from any working directory.
        stops = data["stops"]
        if stops:
            stops = os.path.join(os.path.dirname(os.path.abspath(yaml_path)), str(stops))
        config.stops = stops

    if "stops_url" in data:
        config.stops_url = data["stops_url"]


def _build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser.

    All arguments are optional overlays on top of YAML config.
    """
    parser = argparse.ArgumentParser(
        prog="stopboard",
        description="Transit departure board renderer",
    )
    parser.add_argument(
        "--config",
        type=str,
        help="Path to YAML config file",
    )
    parser.add_argument(
        "--stops",
        type=str,
        help="Path to a stop data document (JSON or YAML)",
    )
    parser.add_argument(
        "--stops-url",
        type=str,
        help="URL serving a stop data JSON document",
    )
    parser.add_argument(
        "--kindle",
        action="store_true",
        default=None,
        help="Rotate the board for a portrait Kindle display",
    )
    parser.add_argument(
        "--output",
        type=str,
        help="Write the PNG to this path instead of stdout",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        default=False,
        help="Show the rendered board in a window",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Enable debug logging",
    )
    return parser


def _apply_args(config: Config, args: argparse.Namespace) -> None:
    """Overlay CLI arguments onto the Config object."""
    if args.stops:
        config.stops = args.stops

    if args.stops_url:
        config.stops_url = args.stops_url

    if args.kindle is True:
        config.target = RenderTarget.KINDLE

    config.output = args.output
    config.preview = args.preview
    config.debug = args.debug


def validate_layout(layout: LayoutConfig) -> None:
    """Reject layouts the renderer cannot allocate a canvas for."""
    for key in ("width", "height"):
        value = getattr(layout, key)
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ConfigError(f"layout.{key} must be a positive integer, got {value!r}")


def load_config(
    yaml_path: str | None = None,
    cli_args: list[str] | None = None,
) -> Config:
    """Load config: defaults → YAML overlay → argparse overlay.

    Args:
        yaml_path: Path to YAML config file. Defaults to config.yaml in project root.
        cli_args: CLI arguments list. None means use sys.argv.

    Raises:
        ConfigError: if the merged layout is invalid.
    """
    config = Config()

    parser = _build_parser()
    args = parser.parse_args(cli_args if cli_args is not None else None)

    # Default YAML path: config.yaml in project root (three levels up from
    # this file). CLI --config overrides.
    if yaml_path is None:
        if args.config:
            yaml_path = args.config
        else:
            yaml_path = os.path.join(
                Path(__file__).resolve().parent.parent.parent, "config.yaml"
            )

    _apply_yaml(config, yaml_path)
    _apply_args(config, args)
    validate_layout(config.layout)

    return config
