"""Data file loading for the shortcodes.

Resolves a data path against a short list of candidates, reads the first
one that opens, and parses it as YAML (bare, or wrapped in ``---``
front-matter fences).

Failures never raise: every problem is logged once with the component tag
and the caller gets zero records, so a page build keeps going when a data
file is missing or broken.
"""
from __future__ import annotations

import logging
import re
from pathlib import Path, PureWindowsPath
from typing import Any, Optional

import yaml

import site_config

logger = logging.getLogger(__name__)

UNPARSABLE = object()

FRONT_MATTER = re.compile(r'^---[ \t]*\n(.*?)\n(?:---|\.\.\.)[ \t]*\n?', re.DOTALL)


def is_absolute(path: str) -> bool:
    """POSIX absolute, or Windows drive-letter absolute (``C:\\`` / ``C:/``)."""
    return path.startswith("/") or PureWindowsPath(path).is_absolute()


def candidate_paths(path: str, contents_dir: str | None = None) -> list[str]:
    """Literal path first, then the same path under the contents directory."""
    prefix = (contents_dir or site_config.CONTENTS_DIR).rstrip("/\\")
    candidates = [path]
    if prefix and not is_absolute(path) and not path.startswith(prefix + "/"):
        candidates.append(f"{prefix}/{path}")
    return candidates


def open_with_fallbacks(path: str, component: str) -> Optional[tuple[str, str]]:
    """Read the first candidate that opens.

    Returns (text, candidate), or None after logging one warning.
    """
    candidates = candidate_paths(path)
    for candidate in candidates:
        try:
            return Path(candidate).read_text(encoding="utf-8"), candidate
        except (OSError, UnicodeDecodeError, ValueError):
            continue
    logger.warning("[%s] unable to open any of: %s", component, ", ".join(candidates))
    return None


def parse_document(text: str, source: str, component: str) -> Any:
    """Parse YAML, unwrapping front-matter fences when present.

    Returns the parsed document, or UNPARSABLE after logging a warning.
    """
    match = FRONT_MATTER.match(text)
    body = match.group(1) if match else text
    try:
        return yaml.safe_load(body)
    except (yaml.YAMLError, ValueError) as e:
        logger.warning("[%s] unable to parse YAML at %s: %s", component, source, e)
        return UNPARSABLE


def load_records(path: str, key: str, component: str) -> list[tuple[int, dict]]:
    """Load raw records as (1-based position, mapping) pairs.

    The record list is either the whole document or the value stored under
    ``key`` in a mapping document. Items that are not mappings are skipped
    with a warning; the positions of the others are preserved.
    """
    opened = open_with_fallbacks(path, component)
    if opened is None:
        return []
    text, resolved = opened

    doc = parse_document(text, resolved, component)
    if doc is UNPARSABLE:
        return []

    records = doc.get(key) if isinstance(doc, dict) else doc
    if not isinstance(records, list):
        logger.warning("[%s] no entries found in %s", component, resolved)
        return []

    result = []
    for position, raw in enumerate(records, start=1):
        if not isinstance(raw, dict):
            logger.warning("[%s] skipping entry %d in %s: not a mapping", component, position, resolved)
            continue
        result.append((position, raw))
    return result
