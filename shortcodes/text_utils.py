"""Text helpers shared by the shortcodes.

Escaping, slugs, lenient coercion of loosely-typed YAML values, and a
markdown-lite converter for research card paragraphs.

Every helper that returns display text returns it escaped exactly once.
Renderers interpolate these values as-is and never escape again.
"""
from __future__ import annotations

import datetime
import html
import math
import re

SLUG_SEPARATOR = re.compile(r"[^a-z0-9]+")
YEAR_PATTERN = re.compile(r"\d{4}")
ORDERED_ITEM = re.compile(r"^\d+[.)]\s+")
HEADING = re.compile(r"^(#{1,6})\s+(.*?)\s*#*$")


def esc(text) -> str:
    """HTML-escape a string (& < > " ')."""
    if text is None:
        return ""
    return html.escape(str(text), quote=True).replace("&#x27;", "&#39;")


def slugify(text: str, fallback: str) -> str:
    """Lower-case, collapse non-alphanumeric runs to one hyphen, trim hyphens.

    Returns ``fallback`` when nothing alphanumeric survives.
    """
    slug = SLUG_SEPARATOR.sub("-", (text or "").lower()).strip("-")
    return slug or fallback


def stringify(value) -> str:
    """Flatten a scalar YAML value to text. Collections and None become ""."""
    if value is None or isinstance(value, (list, tuple, dict)):
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat()
    return str(value)


def sanitize_text(value) -> str | None:
    """Escaped text, or None when the value is missing or blank."""
    text = stringify(value)
    if not text.strip():
        return None
    return esc(text)


def parse_order(value, fallback):
    """Parse a sort key leniently; anything unparsable yields ``fallback``."""
    if isinstance(value, bool) or value is None:
        return fallback
    if isinstance(value, (int, float)):
        number = value
    else:
        try:
            number = float(stringify(value).strip())
        except ValueError:
            return fallback
    if isinstance(number, float):
        if math.isnan(number) or math.isinf(number):
            return fallback
        if number.is_integer():
            return int(number)
    return number


def as_list(value) -> list:
    """Only real YAML sequences are iterated for list fields."""
    return value if isinstance(value, list) else []


def extract_start_year(text) -> str:
    """First run of four digits in ``text``, or ""."""
    match = YEAR_PATTERN.search(stringify(text))
    return match.group(0) if match else ""


# ── Markdown-lite ────────────────────────────────────────────


def _format_inline(text: str) -> str:
    text = re.sub(r'\*\*(.+?)\*\*', r'<strong>\1</strong>', text)
    text = re.sub(r'\*(.+?)\*', r'<em>\1</em>', text)
    text = re.sub(r'\[(.+?)\]\((.+?)\)', r'<a href="\2">\1</a>', text)
    return text


def md_inline(text: str) -> str:
    """Escape ``text`` once, then apply code, bold, italic and link formatting."""
    parts = re.split(r'(`[^`]+`)', esc(text))
    out = []
    for part in parts:
        if len(part) > 1 and part.startswith('`') and part.endswith('`'):
            out.append(f'<code>{part[1:-1]}</code>')
        else:
            out.append(_format_inline(part))
    return ''.join(out)


def markdown_to_html(text) -> str:
    """Convert a markdown-lite snippet into HTML blocks.

    Consecutive plain lines form one paragraph; blank lines separate blocks.
    Supports ``#`` headings, ``-``/``*`` bullets and ``1.`` ordered lists.
    """
    source = stringify(text)
    if not source.strip():
        return ''

    result = []
    paragraph = []
    list_type = None  # 'ul' or 'ol'

    def flush_paragraph():
        if paragraph:
            result.append(f"<p>{md_inline(' '.join(paragraph))}</p>")
            paragraph.clear()

    def close_list():
        nonlocal list_type
        if list_type:
            result.append(f'</{list_type}>')
            list_type = None

    for line in source.split('\n'):
        stripped = line.strip()
        heading = HEADING.match(stripped)
        if stripped.startswith(('- ', '* ')) or ORDERED_ITEM.match(stripped):
            wanted = 'ol' if ORDERED_ITEM.match(stripped) else 'ul'
            flush_paragraph()
            if list_type != wanted:
                close_list()
                result.append(f'<{wanted}>')
                list_type = wanted
            item = ORDERED_ITEM.sub('', stripped) if wanted == 'ol' else stripped[2:]
            result.append(f'<li>{md_inline(item.strip())}</li>')
        elif heading:
            flush_paragraph()
            close_list()
            level = len(heading.group(1))
            result.append(f'<h{level}>{md_inline(heading.group(2))}</h{level}>')
        elif not stripped:
            flush_paragraph()
            close_list()
        else:
            close_list()
            paragraph.append(stripped)

    flush_paragraph()
    close_list()
    return '\n'.join(result).rstrip()
