"""Pytest fixtures and configuration."""

import sys
from pathlib import Path

import pytest

# Add shortcodes directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "shortcodes"))

import render_session  # noqa: E402
import site_config  # noqa: E402


TRAJECTORY_YAML = """\
- id: phd
  order: 2
  label: PhD & Postdoc
  place: University of Somewhere
  period: 2019 – 2023
  heading: Doctoral research
  summary: Worked on <models> of "things".
  bullets:
    - First paper
    - ""
    - Second paper
- id: ""
  order: 1
  label: Bachelor
  place: ""
  period: autumn term
- order: 1
  label: Apprenticeship
  heading: Early days
"""

RESEARCH_YAML = """\
topics:
  - title: Coastal dynamics
    indicator_label: Coasts
    highlight: Funded by the sea
    figure: img/coast.png
    figure_alt: Waves on a beach
    body:
      - Studying **waves** and *tides*.
      - ""
      - "- one\\n- two"
    buttons:
      - label: Paper
        href: https://example.org/paper?a=1&b=2
      - label: Missing href
      - label: Code
        href: https://example.org/code
        classes: btn btn-primary
  - body: Not a list
  - title: Urban <heat>
"""


@pytest.fixture(autouse=True)
def fresh_default_session(monkeypatch):
    """Each test starts with an unused process-wide render session."""
    monkeypatch.setattr(render_session, "DEFAULT_SESSION", render_session.RenderSession())


@pytest.fixture
def site_dir(tmp_path, monkeypatch):
    """A site root with contents/data/*.yml, used as the working directory."""
    data_dir = tmp_path / "contents" / "data"
    data_dir.mkdir(parents=True)
    (data_dir / "trajectory.yml").write_text(TRAJECTORY_YAML, encoding="utf-8")
    (data_dir / "research.yml").write_text(RESEARCH_YAML, encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(site_config, "CONTENTS_DIR", "contents")
    return tmp_path


@pytest.fixture
def empty_dir(tmp_path, monkeypatch):
    """A working directory with no data files at all."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(site_config, "CONTENTS_DIR", "contents")
    return tmp_path
