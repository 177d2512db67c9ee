#!/usr/bin/env python3
"""
Expand ``{{< name key="value" >}}`` shortcodes in site pages.

Each page gets its own RenderSession, so a page embedding several steppers
or carousels carries their behavior blocks once. Missing or broken data
files only produce warnings; the shortcode renders nothing and the page
still builds.

Usage:
    python shortcodes/shortcode_filter.py contents/about.md
    python shortcodes/shortcode_filter.py contents/*.md --output-dir _site
    python shortcodes/shortcode_filter.py about.md --contents-dir site/contents
"""
from __future__ import annotations

import argparse
import logging
import re
import sys
from pathlib import Path

import site_config
from render_session import RenderSession
from research_cards import research_cards
from trajectory_stepper import trajectory_stepper

logger = logging.getLogger(__name__)

SHORTCODES = {
    "trajectory-stepper": trajectory_stepper,
    "research-cards": research_cards,
}

SHORTCODE_PATTERN = re.compile(r'\{\{<\s*([A-Za-z][\w-]*)((?:\s+[^\s>]+?=(?:"[^"]*"|\'[^\']*\'|[^\s"\'>]+))*)\s*>\}\}')
KWARG_PATTERN = re.compile(r'([\w-]+)=(?:"([^"]*)"|\'([^\']*)\'|([^\s"\'>]+))')


def parse_kwargs(text: str) -> dict[str, str]:
    """Parse ``key="v"``, ``key='v'`` and ``key=v`` pairs."""
    kwargs = {}
    for m in KWARG_PATTERN.finditer(text or ""):
        value = next((g for g in m.groups()[1:] if g is not None), "")
        kwargs[m.group(1)] = value
    return kwargs


def expand_shortcodes(text: str, session: RenderSession | None = None) -> str:
    """Replace every known shortcode in ``text`` with its rendered blocks."""
    session = session or RenderSession()

    def _replace(m: re.Match) -> str:
        name = m.group(1)
        handler = SHORTCODES.get(name)
        if handler is None:
            logger.warning("Unknown shortcode '%s' left as-is", name)
            return m.group(0)
        kwargs = parse_kwargs(m.group(2))
        return "\n".join(handler(path=kwargs.get("path"), session=session))

    return SHORTCODE_PATTERN.sub(_replace, text)


def render_page(source: Path) -> str:
    """Expand one page with a fresh session."""
    return expand_shortcodes(source.read_text(encoding="utf-8"), RenderSession())


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Expand site shortcodes into HTML")
    parser.add_argument("pages", nargs="+", help="Page files to expand")
    parser.add_argument("--output-dir", default=None,
                        help="Write expanded pages here (default: print to stdout)")
    parser.add_argument("--contents-dir", default=None,
                        help=f"Fallback directory for data files (default: {site_config.CONTENTS_DIR})")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.contents_dir:
        site_config.CONTENTS_DIR = args.contents_dir

    output_dir = Path(args.output_dir) if args.output_dir else None
    if output_dir:
        output_dir.mkdir(parents=True, exist_ok=True)

    failures = 0
    for page in args.pages:
        source = Path(page)
        try:
            expanded = render_page(source)
        except (OSError, UnicodeDecodeError) as e:
            print(f"ERROR: cannot read {source}: {e}", file=sys.stderr)
            failures += 1
            continue
        if output_dir:
            out_path = output_dir / source.name
            out_path.write_text(expanded, encoding="utf-8")
            print(f"Expanded {source} -> {out_path}")
        else:
            sys.stdout.write(expanded)

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
