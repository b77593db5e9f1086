"""Shared fixtures with sample stop data and layouts."""

import pytest

from stopboard.config import LayoutConfig, PanelConfig, SectionConfig
from stopboard.models import parse_stop_data
from stopboard.text import CONTENT_SIZE, load_font


@pytest.fixture
def sample_stop_data_raw():
    """Two agencies with two directions each, as a raw document."""
    return {
        "SF": {
            "IB": [
                {"line": "N", "destination": "Caltrain / Ballpark", "upcoming": [3, 11]},
                {"line": "L", "destination": "Embarcadero", "upcoming": [7]},
            ],
            "OB": [
                {"line": "N", "destination": "Ocean Beach", "upcoming": [1, 14, 22]},
            ],
        },
        "BA": {
            "North": [
                {"line": "RED", "destination": "Richmond", "upcoming": [4, 19]},
            ],
        },
    }


@pytest.fixture
def stop_data(sample_stop_data_raw):
    """Parsed StopData for the sample document."""
    return parse_stop_data(sample_stop_data_raw)


@pytest.fixture
def layout():
    """An 800x600 board with two sections left and one right."""
    return LayoutConfig(
        width=800,
        height=600,
        left=PanelConfig(sections=[
            SectionConfig(agency="SF", direction="IB"),
            SectionConfig(agency="SF", direction="OB"),
        ]),
        right=PanelConfig(sections=[
            SectionConfig(agency="BA", direction="North"),
        ]),
    )


@pytest.fixture
def content_font():
    """The bold board font."""
    return load_font(bold=True, size=CONTENT_SIZE)


@pytest.fixture
def sample_config_yaml(tmp_path):
    """Create a temporary YAML config file."""
    yaml_content = """layout:
  width: 1024
  height: 758
  left:
    sections:
      - agency: SF
        direction: IB
      - agency: SF
        direction: OB
  right:
    sections:
      - agency: BA
        direction: North

target: kindle
stops: /srv/stops.json
"""
    config_file = tmp_path / "config.yaml"
    config_file.write_text(yaml_content)
    return str(config_file)
