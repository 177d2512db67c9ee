"""
Research cards shortcode: research topics as a wrapping card carousel.

Reads topics from a YAML list (default ``data/research.yml``) and renders
one card per topic in source order: optional figure, title, markdown-lite
body paragraphs, highlight line and call-to-action buttons. Each card names
its neighbors in previous/next controls (wrapping at the ends), and an
indicator tablist lets readers jump straight to a topic.

The carousel style + behavior block is emitted once per page, ahead of the
first carousel.

Usage:
    {{< research-cards >}}
    {{< research-cards path="data/research.yml" >}}
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

import site_config
from active_index import ActiveIndex
from content_loader import load_records
from render_session import RenderSession, default_session
from text_utils import as_list, markdown_to_html, sanitize_text, stringify

logger = logging.getLogger(__name__)

COMPONENT = "research-cards"
DATA_KEY = "topics"
CAROUSEL_PREFIX = "research-carousel"
CAROUSEL_LABEL = "Research focus carousel"


@dataclass
class TopicButton:
    label: str
    href: str
    classes: str


@dataclass
class ResearchTopic:
    """One normalized research card. Text fields are already escaped."""
    title: str
    indicator_label: str
    figure_alt: str
    highlight: Optional[str] = None
    figure: Optional[str] = None
    body: list[str] = field(default_factory=list)
    buttons: list[TopicButton] = field(default_factory=list)


def to_buttons(value) -> list[TopicButton]:
    """Keep only buttons that have both a label and an href."""
    buttons = []
    for raw in as_list(value):
        if not isinstance(raw, dict):
            continue
        label = sanitize_text(raw.get("label"))
        href = sanitize_text(raw.get("href"))
        if label and href:
            classes = sanitize_text(raw.get("classes")) or site_config.RESEARCH_BUTTON_CLASSES
            buttons.append(TopicButton(label=label, href=href, classes=classes))
    return buttons


def to_body(value) -> list[str]:
    """Render each non-blank paragraph through the markdown-lite converter."""
    body = []
    for paragraph in as_list(value):
        html = markdown_to_html(paragraph)
        if html:
            body.append(html)
    return body


def to_topic(raw: dict, position: int) -> ResearchTopic:
    """Map a raw YAML mapping onto a ResearchTopic (position is 1-based)."""
    title = sanitize_text(raw.get("title")) or f"Topic {position:02d}"
    return ResearchTopic(
        title=title,
        indicator_label=sanitize_text(raw.get("indicator_label")) or title,
        highlight=sanitize_text(raw.get("highlight")),
        figure=sanitize_text(raw.get("figure")),
        figure_alt=sanitize_text(raw.get("figure_alt")) or title,
        body=to_body(raw.get("body")),
        buttons=to_buttons(raw.get("buttons")),
    )


def read_topics(path: str) -> list[ResearchTopic]:
    """Load and normalize the topics stored at ``path`` (source order)."""
    return [to_topic(raw, position)
            for position, raw in load_records(path, DATA_KEY, COMPONENT)]


# ── Rendering ────────────────────────────────────────────────


def _slide_id(carousel_id: str, idx: int) -> str:
    return f"{carousel_id}-slide-{idx}"


def _render_indicators(topics: list[ResearchTopic], carousel_id: str, state: ActiveIndex) -> list[str]:
    lines = [f'  <div class="research-indicators" role="tablist" aria-label="{CAROUSEL_LABEL}">']
    for idx, topic in enumerate(topics):
        active = state.is_active(idx)
        classes = "research-indicator active" if active else "research-indicator"
        slide_id = _slide_id(carousel_id, idx)
        lines.append(
            f'    <button class="{classes}" type="button" role="tab" data-target="#{carousel_id}" '
            f'data-slide-to="{idx}" aria-controls="{slide_id}" '
            f'aria-selected="{"true" if active else "false"}" tabindex="{"0" if active else "-1"}">'
            f'{topic.indicator_label}</button>'
        )
    lines.append('  </div>')
    return lines


def _render_card(topic: ResearchTopic, prev_title: str, next_title: str, carousel_id: str) -> list[str]:
    lines = [
        '      <div class="research-card card shadow-sm border-0">',
        '        <div class="card-body">',
        '          <div class="card-nav-hints d-flex justify-content-between align-items-center mb-3">',
        f'            <button class="card-nav-control card-nav-prev" type="button" data-target="#{carousel_id}" data-slide="prev" aria-label="Previous research topic">',
        f'              <i class="bi bi-arrow-left-short" aria-hidden="true"></i> {prev_title}',
        '            </button>',
        f'            <button class="card-nav-control card-nav-next" type="button" data-target="#{carousel_id}" data-slide="next" aria-label="Next research topic">',
        f'              {next_title} <i class="bi bi-arrow-right-short" aria-hidden="true"></i>',
        '            </button>',
        '          </div>',
        '          <div class="research-card-payload">',
    ]
    if topic.figure:
        lines.append('            <div class="research-card-figure">')
        lines.append(f'              <img src="{topic.figure}" alt="{topic.figure_alt}" loading="lazy" decoding="async" />')
        lines.append('            </div>')
    lines.append('            <div class="research-card-copy">')
    lines.append(f'              <h3 class="h4">{topic.title}</h3>')
    lines.extend(f'              {paragraph}' for paragraph in topic.body)
    if topic.highlight:
        lines.append(f'              <div class="border-top pt-3 mt-4 small text-muted">{topic.highlight}</div>')
    if topic.buttons:
        lines.append('              <div class="d-flex flex-wrap gap-2 mt-4">')
        lines.extend(
            f'                <a class="{button.classes}" href="{button.href}">{button.label}</a>'
            for button in topic.buttons
        )
        lines.append('              </div>')
    lines.extend([
        '            </div>',
        '          </div>',
        '        </div>',
        '      </div>',
    ])
    return lines


def render_cards(topics: list[ResearchTopic], carousel_id: str) -> str:
    """Render topics as one carousel fragment. Empty input renders ""."""
    if not topics:
        return ""
    state = ActiveIndex(len(topics), wrap=True)
    html = [
        '<div class="research-carousel-shell">',
        f'  <div id="{carousel_id}" class="carousel carousel-dark slide" data-research-carousel aria-label="{CAROUSEL_LABEL}">',
        '  <div class="carousel-inner">',
    ]
    for idx, topic in enumerate(topics):
        active = state.is_active(idx)
        prev_idx, next_idx = state.neighbors(idx)
        item_class = "carousel-item active" if active else "carousel-item"
        html.append(
            f'    <div id="{_slide_id(carousel_id, idx)}" class="{item_class}" role="tabpanel" '
            f'data-slide-index="{idx}" aria-hidden="{"false" if active else "true"}">'
        )
        html.extend(_render_card(topic, topics[prev_idx].title, topics[next_idx].title, carousel_id))
        html.append('    </div>')
    html.append('  </div>')
    html.extend(_render_indicators(topics, carousel_id, state))
    html.append('  </div>')
    html.append('</div>')
    return "\n".join(html)


def build_carousel_assets() -> str:
    """Return the carousel <style> + <script> block (page-independent)."""
    return '''<style>
.research-carousel-shell {
  position: relative;
  width: 100%;
  padding: 0;
  margin: 0;
}

.research-carousel-shell .carousel,
.research-carousel-shell .carousel-inner,
.research-carousel-shell .carousel-item,
.research-card.card {
  width: 100%;
}

.research-carousel-shell .carousel-item {
  display: none;
}

.research-carousel-shell .carousel-item.active {
  display: block;
}

.research-card.card {
  border-radius: 1.25rem;
}

.card-nav-control {
  display: inline-flex;
  align-items: center;
  gap: 0.45rem;
  font-size: 0.92rem;
  letter-spacing: 0.02em;
  border: none;
  background: transparent;
  color: #5e6a76;
  padding: 0.2rem 0.55rem;
  cursor: pointer;
  font-weight: 600;
  transition: color 180ms ease, transform 180ms ease;
}

.card-nav-control:hover {
  color: #338c73;
  transform: translateY(-1px);
}

.card-nav-control:focus-visible,
.research-indicator:focus-visible {
  outline: 2px solid rgba(51, 140, 115, 0.45);
  outline-offset: 3px;
}

.card-nav-control .bi {
  font-size: 1.35rem;
  line-height: 1;
}

.research-card .card-nav-hints {
  font-size: 0.92rem;
  letter-spacing: 0.01em;
  margin-bottom: 1.15rem;
}

.research-card-payload {
  display: flex;
  gap: 1.75rem;
  align-items: center;
  flex-wrap: nowrap;
}

.research-card-figure {
  flex: 0 0 240px;
  max-width: 320px;
}

.research-card-figure img {
  width: 100%;
  height: auto;
  border-radius: 1rem;
}

.research-card-copy {
  flex: 1 1 320px;
}

.research-indicators {
  display: flex;
  flex-wrap: wrap;
  justify-content: center;
  gap: 0.5rem;
  margin-top: 1rem;
}

.research-indicator {
  border: 1px solid #d5dbe0;
  border-radius: 999px;
  background: transparent;
  color: #5e6a76;
  font-size: 0.85rem;
  padding: 0.25rem 0.8rem;
  cursor: pointer;
}

.research-indicator.active {
  border-color: #338c73;
  color: #338c73;
  font-weight: 600;
}

@media (max-width: 768px) {
  .card-nav-hints {
    flex-direction: column;
    gap: 0.4rem;
  }
  .research-card-payload {
    flex-direction: column;
    align-items: stretch;
  }
  .research-card-figure {
    flex: 0 0 auto;
    width: 100%;
    max-width: none;
  }
}

@media (prefers-reduced-motion: reduce) {
  .card-nav-control {
    transition: none;
  }
}
</style>
<script>
(function(){
  var init=function(){
    document.querySelectorAll('[data-research-carousel]').forEach(function(carousel){
      var items=carousel.querySelectorAll('.carousel-item');
      var indicators=carousel.querySelectorAll('.research-indicator');
      var count=items.length;
      if(!count)return;
      var current=0;
      var setActive=function(index){
        current=((index%count)+count)%count;
        items.forEach(function(item,idx){
          var isActive=idx===current;
          item.classList.toggle('active',isActive);
          item.setAttribute('aria-hidden',String(!isActive));
        });
        indicators.forEach(function(dot,idx){
          var isActive=idx===current;
          dot.classList.toggle('active',isActive);
          dot.setAttribute('aria-selected',String(isActive));
          dot.setAttribute('tabindex',isActive?'0':'-1');
        });
      };
      carousel.querySelectorAll('.card-nav-prev').forEach(function(btn){
        btn.addEventListener('click',function(){setActive(current-1)});
      });
      carousel.querySelectorAll('.card-nav-next').forEach(function(btn){
        btn.addEventListener('click',function(){setActive(current+1)});
      });
      indicators.forEach(function(dot,idx){
        dot.addEventListener('click',function(){setActive(idx)});
        dot.addEventListener('keydown',function(event){
          var target=null;
          if(event.key==='ArrowLeft')target=current-1;
          if(event.key==='ArrowRight')target=current+1;
          if(event.key==='Home')target=0;
          if(event.key==='End')target=count-1;
          if(target===null)return;
          event.preventDefault();
          setActive(target);
          indicators[current].focus();
        });
      });
      setActive(0);
    });
  };
  if(document.readyState!=='loading'){init()}else{document.addEventListener('DOMContentLoaded',init)}
})();
</script>'''


def research_cards(path: str | None = None, session: RenderSession | None = None) -> list[str]:
    """Shortcode entry point: HTML blocks for one carousel, or [] when no data.

    The style/behavior block precedes the carousel the first time
    ``session`` sees it.
    Without a session the process-wide default session is used.
    """
    if session is None:
        session = default_session()
    path = stringify(path).strip() or site_config.RESEARCH_DATA_PATH
    topics = read_topics(path)
    if not topics:
        return []
    carousel_id = session.next_id(CAROUSEL_PREFIX)
    logger.debug("Rendering %d research topics as %s", len(topics), carousel_id)
    blocks = []
    if session.claim(COMPONENT):
        blocks.append(build_carousel_assets())
    blocks.append(render_cards(topics, carousel_id))
    return blocks
