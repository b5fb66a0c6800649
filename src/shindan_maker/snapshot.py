# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Standalone HTML snapshot of a shindan result.

Pipeline:
  1. Locate ``#title_and_result`` in the submission response
  2. De-animate effect wrappers that have a ``<noscript>`` fallback
  3. Serialize the container into the page template
  4. For chart results, append the page script that references the id
"""

from __future__ import annotations

import logging
import re

import lxml.html

from shindan_maker.assets import SnapshotAssets
from shindan_maker.errors import ScriptNotFound
from shindan_maker.extract import first_match, outer_html, parse_document, tag_name
from shindan_maker.selectors import SELECTORS

logger = logging.getLogger(__name__)

CHART_MARKER = "chart.js"

CONTENT_PLACEHOLDER = "<!-- TITLE_AND_RESULT -->"
SCRIPTS_PLACEHOLDER = "<!-- SCRIPTS -->"

HTML_TEMPLATE = (
    '<!DOCTYPE html><html lang="zh" style="height:100%"><head>'
    "<style>{{APP_CSS}}</style>"
    '<meta http-equiv="Content-Type" content="text/html;charset=utf-8">'
    '<meta name="viewport" content="width=device-width,initial-scale=1.0,minimum-scale=1.0">'
    '<base href="{{BASE_URL}}"><title>ShindanMaker</title></head>'
    '<body class="" style="position:relative;min-height:100%;top:0">'
    f'<div id="main-container"><div id="main">{CONTENT_PLACEHOLDER}</div></div>'
    "</body><script>{{SHINDAN_JS}}</script>"
    f"{SCRIPTS_PLACEHOLDER}</html>"
)

_PLACEHOLDER_RE = re.compile(r"\{\{(APP_CSS|BASE_URL|SHINDAN_JS)\}\}|<!-- (TITLE_AND_RESULT|SCRIPTS) -->")


def render_template(values: dict[str, str]) -> str:
    """Single-pass placeholder substitution; inserted text is never re-scanned."""
    return _PLACEHOLDER_RE.sub(lambda m: values[m.group(1) or m.group(2)], HTML_TEMPLATE)


def _next_sibling_element(el: lxml.html.HtmlElement) -> lxml.html.HtmlElement | None:
    sibling = el.getnext()
    while sibling is not None and not tag_name(sibling):
        sibling = sibling.getnext()
    return sibling


def remove_effects(container: lxml.html.HtmlElement) -> int:
    """Drop animated effect wrappers and unwrap their ``<noscript>`` fallbacks.

    Text following a removed wrapper is kept. Returns the number of pairs handled.
    """
    pairs = []
    for query in SELECTORS.effects:
        for effect in query(container):
            fallback = _next_sibling_element(effect)
            if fallback is not None and tag_name(fallback) == "noscript":
                pairs.append((effect, fallback))
    for effect, fallback in pairs:
        effect.drop_tree()
        fallback.drop_tag()
    return len(pairs)


def find_page_script(doc: lxml.html.HtmlElement, shindan_id: str) -> str:
    """Serialized markup of the first ``<script>`` mentioning *shindan_id*."""
    for script in SELECTORS.script(doc):
        markup = outer_html(script)
        if shindan_id in markup:
            return markup
    raise ScriptNotFound(shindan_id)


def build_snapshot(shindan_id: str, response_text: str, base_url: str, assets: SnapshotAssets) -> str:
    """Build a self-contained HTML document from a submission response.

    Raises:
        ParseError: body is not an HTML document.
        ElementNotFound: no ``#title_and_result`` container.
        ScriptNotFound: chart result without a script referencing the id.
    """
    doc = parse_document(response_text)
    container = first_match(SELECTORS.title_and_result, doc, "title_and_result")

    removed = remove_effects(container)
    if removed:
        logger.debug("Removed %d effect wrappers", removed)

    scripts = ""
    if CHART_MARKER in response_text:
        page_script = find_page_script(doc, shindan_id)
        scripts = "\n".join(
            [
                f"<script>{assets.app_js}</script>",
                f"<script>{assets.chart_js}</script>",
                page_script,
            ]
        )

    return render_template(
        {
            "APP_CSS": assets.app_css,
            "BASE_URL": base_url,
            "SHINDAN_JS": assets.shindan_js,
            "TITLE_AND_RESULT": outer_html(container),
            "SCRIPTS": scripts,
        }
    )
