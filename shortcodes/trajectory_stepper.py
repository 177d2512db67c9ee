"""
Trajectory stepper shortcode: career timeline as an accessible tab stepper.

Reads timeline entries from a YAML list (default ``data/trajectory.yml``),
normalizes each one into a TimelineEntry, sorts by ``order`` then label,
and renders a tablist of step buttons over a progress track, plus one
panel per step. The first step is active.

The stepper behavior (click + arrow/Home/End keys, progress fill) ships as
one <style>/<script> block appended after the first stepper of a page.

Usage:
    {{< trajectory-stepper >}}
    {{< trajectory-stepper path="data/trajectory.yml" >}}
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Optional

import site_config
from active_index import ActiveIndex
from content_loader import load_records
from render_session import RenderSession, default_session
from text_utils import (
    as_list,
    extract_start_year,
    parse_order,
    sanitize_text,
    slugify,
    stringify,
)

logger = logging.getLogger(__name__)

COMPONENT = "trajectory-stepper"
DATA_KEY = "trajectory"
TABLIST_LABEL = "Academic and professional journey"


@dataclass
class TimelineEntry:
    """One normalized timeline step. Text fields are already escaped."""
    id: str
    order: float
    label: Optional[str] = None
    place: Optional[str] = None
    period: Optional[str] = None
    start_year: str = ""
    heading: Optional[str] = None
    summary: Optional[str] = None
    bullets: list[str] = field(default_factory=list)

    @property
    def tab_id(self) -> str:
        return f"trajectory-tab-{self.id}"

    @property
    def panel_id(self) -> str:
        return f"trajectory-{self.id}"


def to_entry(raw: dict, position: int) -> TimelineEntry:
    """Map a raw YAML mapping onto a TimelineEntry (position is 1-based)."""
    fallback_id = f"step-{position}"
    period_text = stringify(raw.get("period"))
    bullets = [sanitize_text(b) for b in as_list(raw.get("bullets"))]
    return TimelineEntry(
        id=slugify(stringify(raw.get("id")), fallback_id),
        order=parse_order(raw.get("order"), position),
        label=sanitize_text(raw.get("label")),
        place=sanitize_text(raw.get("place")),
        period=sanitize_text(period_text),
        start_year=extract_start_year(period_text),
        heading=sanitize_text(raw.get("heading")),
        summary=sanitize_text(raw.get("summary")),
        bullets=[b for b in bullets if b],
    )


def sort_entries(entries: list[TimelineEntry]) -> list[TimelineEntry]:
    """Ascending order; equal orders fall back to the (escaped) label."""
    return sorted(entries, key=lambda e: (e.order, e.label or ""))


def unique_ids(entries: list[TimelineEntry], source: str = "") -> list[TimelineEntry]:
    """Suffix repeated ids (``-2``, ``-3``, ...) so every tab and panel id is distinct.

    The first entry in source order keeps its id.
    """
    seen = set()
    result = []
    for entry in entries:
        new_id = entry.id
        n = 2
        while new_id in seen:
            new_id = f"{entry.id}-{n}"
            n += 1
        if new_id != entry.id:
            logger.warning("[%s] duplicate id '%s' in %s renamed to '%s'",
                           COMPONENT, entry.id, source, new_id)
            entry = replace(entry, id=new_id)
        seen.add(new_id)
        result.append(entry)
    return result


def read_entries(path: str) -> list[TimelineEntry]:
    """Load, normalize and sort the entries stored at ``path``."""
    entries = [to_entry(raw, position)
               for position, raw in load_records(path, DATA_KEY, COMPONENT)]
    return sort_entries(unique_ids(entries, path))


# ── Rendering ────────────────────────────────────────────────


def _render_nodes(entries: list[TimelineEntry], state: ActiveIndex) -> list[str]:
    lines = []
    for idx, entry in enumerate(entries):
        node_classes = "stepper-node is-active is-complete" if state.is_active(idx) else "stepper-node"
        year = entry.start_year or "&nbsp;"
        lines.append(f'      <span class="{node_classes}" data-step-index="{idx}">')
        lines.append(f'        <span class="stepper-node-year">{year}</span>')
        lines.append('        <span class="stepper-node-dot"></span>')
        lines.append('      </span>')
    return lines


def _render_buttons(entries: list[TimelineEntry], state: ActiveIndex) -> list[str]:
    lines = []
    for idx, entry in enumerate(entries):
        active = state.is_active(idx)
        btn_classes = "stepper-btn is-active" if active else "stepper-btn"
        lines.append(
            f'    <button id="{entry.tab_id}" class="{btn_classes}" role="tab" type="button" '
            f'data-step-index="{idx}" data-target="{entry.panel_id}" aria-controls="{entry.panel_id}" '
            f'aria-selected="{"true" if active else "false"}" tabindex="{"0" if active else "-1"}">'
        )
        lines.append(f'      <span class="stepper-sequence">{idx + 1:02d}</span>')
        lines.append('      <span class="stepper-copy">')
        if entry.label:
            lines.append(f'        <strong>{entry.label}</strong>')
        if entry.place:
            lines.append(f'        <small>{entry.place}</small>')
        lines.append('      </span>')
        lines.append('    </button>')
    return lines


def _render_panels(entries: list[TimelineEntry], state: ActiveIndex) -> list[str]:
    lines = []
    for idx, entry in enumerate(entries):
        active = state.is_active(idx)
        panel_classes = "stepper-panel is-active" if active else "stepper-panel"
        lines.append(
            f'    <section id="{entry.panel_id}" class="{panel_classes}" role="tabpanel" '
            f'aria-labelledby="{entry.tab_id}" aria-hidden="{"false" if active else "true"}">'
        )
        if entry.period or entry.heading:
            lines.append('      <div class="stepper-panel-heading">')
            if entry.period:
                lines.append(f'        <p class="stepper-panel-period">{entry.period}</p>')
            if entry.heading:
                lines.append(f'        <h3>{entry.heading}</h3>')
            lines.append('      </div>')
        if entry.summary:
            lines.append(f'      <p>{entry.summary}</p>')
        if entry.bullets:
            lines.append('      <ul class="stepper-panel-list">')
            lines.extend(f'        <li>{bullet}</li>' for bullet in entry.bullets)
            lines.append('      </ul>')
        lines.append('    </section>')
    return lines


def render_stepper(entries: list[TimelineEntry]) -> str:
    """Render sorted entries as one stepper fragment. Empty input renders ""."""
    if not entries:
        return ""
    state = ActiveIndex(len(entries))
    html = [
        '<div class="trajectory-stepper" data-stepper>',
        '  <div class="stepper-track" aria-hidden="true">',
        f'    <div class="stepper-track-fill" style="--step-progress: {state.progress():g}%"></div>',
        '    <div class="stepper-nodes">',
        *_render_nodes(entries, state),
        '    </div>',
        '  </div>',
        f'  <div class="stepper-buttons" role="tablist" aria-label="{TABLIST_LABEL}">',
        *_render_buttons(entries, state),
        '  </div>',
        '  <div class="stepper-panels">',
        *_render_panels(entries, state),
        '  </div>',
        '</div>',
    ]
    return "\n".join(html)


def build_stepper_assets() -> str:
    """Return the stepper <style> + <script> block (page-independent)."""
    return '''<style>
.trajectory-stepper{position:relative;width:100%}
.stepper-track{position:relative;margin:0 0 1.25rem}
.stepper-track-fill{position:absolute;left:0;top:1.9rem;height:3px;width:var(--step-progress,0%);background:#338c73;transition:width 240ms ease}
.stepper-nodes{display:flex;justify-content:space-between}
.stepper-node{display:flex;flex-direction:column;align-items:center;gap:.35rem;color:#5e6a76;font-size:.85rem}
.stepper-node-dot{width:.85rem;height:.85rem;border-radius:50%;border:2px solid #5e6a76;background:#fff}
.stepper-node.is-complete .stepper-node-dot{border-color:#338c73;background:#338c73}
.stepper-node.is-active .stepper-node-year{color:#338c73;font-weight:700}
.stepper-buttons{display:flex;flex-wrap:wrap;gap:.5rem;margin-bottom:1rem}
.stepper-btn{display:inline-flex;align-items:center;gap:.6rem;border:1px solid #d5dbe0;background:transparent;border-radius:.75rem;padding:.45rem .8rem;cursor:pointer;text-align:left}
.stepper-btn.is-active{border-color:#338c73;color:#338c73}
.stepper-btn:focus-visible{outline:2px solid rgba(51,140,115,.45);outline-offset:3px}
.stepper-sequence{font-weight:700;opacity:.6}
.stepper-copy{display:flex;flex-direction:column}
.stepper-panel{display:none}
.stepper-panel.is-active{display:block}
@media(prefers-reduced-motion:reduce){.stepper-track-fill{transition:none}}
</style>
<script type="module">
const initTrajectoryStepper = () => {
  const steppers = document.querySelectorAll('[data-stepper]');
  steppers.forEach((stepper) => {
    const buttons = stepper.querySelectorAll('.stepper-btn');
    const panels = stepper.querySelectorAll('.stepper-panel');
    const trackFill = stepper.querySelector('.stepper-track-fill');
    const nodes = stepper.querySelectorAll('.stepper-node');

    const setActive = (index) => {
      buttons.forEach((btn, idx) => {
        const isActive = idx === index;
        btn.classList.toggle('is-active', isActive);
        btn.setAttribute('aria-selected', String(isActive));
        btn.setAttribute('tabindex', isActive ? '0' : '-1');
      });

      panels.forEach((panel, idx) => {
        const isActive = idx === index;
        panel.classList.toggle('is-active', isActive);
        panel.setAttribute('aria-hidden', String(!isActive));
      });

      nodes.forEach((node, idx) => {
        node.classList.toggle('is-active', idx === index);
        node.classList.toggle('is-complete', idx <= index);
      });

      if (trackFill) {
        const progress = buttons.length > 1 ? (index / (buttons.length - 1)) * 100 : 100;
        trackFill.style.setProperty('--step-progress', `${progress}%`);
      }
    };

    buttons.forEach((button, index) => {
      button.addEventListener('click', () => setActive(index));
      button.addEventListener('keydown', (event) => {
        if (!['ArrowLeft', 'ArrowRight', 'Home', 'End'].includes(event.key)) return;
        event.preventDefault();
        const lastIndex = buttons.length - 1;
        let nextIndex = index;
        if (event.key === 'ArrowLeft') nextIndex = Math.max(0, index - 1);
        if (event.key === 'ArrowRight') nextIndex = Math.min(lastIndex, index + 1);
        if (event.key === 'Home') nextIndex = 0;
        if (event.key === 'End') nextIndex = lastIndex;
        buttons[nextIndex].focus();
        setActive(nextIndex);
      });
    });

    setActive(0);
  });
};

if (document.readyState !== 'loading') {
  initTrajectoryStepper();
} else {
  document.addEventListener('DOMContentLoaded', initTrajectoryStepper);
}
</script>'''


def trajectory_stepper(path: str | None = None, session: RenderSession | None = None) -> list[str]:
    """Shortcode entry point: HTML blocks for one stepper, or [] when no data.

    The behavior block follows the stepper the first time ``session`` sees it.
    Without a session the process-wide default session is used.
    """
    if session is None:
        session = default_session()
    path = stringify(path).strip() or site_config.TRAJECTORY_DATA_PATH
    entries = read_entries(path)
    if not entries:
        return []
    blocks = [render_stepper(entries)]
    if session.claim(COMPONENT):
        blocks.append(build_stepper_assets())
    return blocks
