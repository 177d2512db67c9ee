"""Shortcode configuration: loaded from environment variables."""

import os

from dotenv import find_dotenv, load_dotenv

# The site's .env is looked up from the build's working directory
load_dotenv(find_dotenv(usecwd=True))

# Relative data paths are retried under this directory
CONTENTS_DIR = os.environ.get("SHORTCODES_CONTENTS_DIR", "contents")

# Default data files per shortcode
TRAJECTORY_DATA_PATH = os.environ.get("TRAJECTORY_DATA_PATH", "data/trajectory.yml")
RESEARCH_DATA_PATH = os.environ.get("RESEARCH_DATA_PATH", "data/research.yml")

# Research card call-to-action styling
RESEARCH_BUTTON_CLASSES = os.environ.get("RESEARCH_BUTTON_CLASSES", "btn btn-outline-primary")
