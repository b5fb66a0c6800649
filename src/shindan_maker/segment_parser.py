# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Result page → Segments.

Two encodings of the same result exist in the wild:
  1. Structured payload: ``data-blocks`` JSON array on ``#shindanResult``
  2. Mixed-content DOM: text, ``<br>``, ``<img>`` and styling wrappers

Strategies run in that order; the first that yields at least one segment
wins. Both linearize to the same reading-order text. Malformed blocks or
elements are skipped; only a missing container is fatal.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import lxml.html

from shindan_maker import ImageSegment, Segments, TextSegment
from shindan_maker.extract import first_match, parse_document, tag_name
from shindan_maker.selectors import SELECTORS

logger = logging.getLogger(__name__)

BLOCKS_ATTR = "data-blocks"

# First present key wins
_IMAGE_KEYS = ("source", "src", "url", "file")

_NBSP_MARKERS = ("\xa0", "&nbsp;")


def find_result_container(doc: lxml.html.HtmlElement) -> lxml.html.HtmlElement:
    return first_match(SELECTORS.shindan_result, doc, "shindanResult")


# --- Strategy A: structured payload ---


def _block_segment(block: Any) -> TextSegment | ImageSegment | None:
    if not isinstance(block, dict):
        return None
    block_type = block.get("type")
    if block_type == "text":
        content = block.get("content")
        return TextSegment(content) if isinstance(content, str) else None
    if block_type == "user_input":
        value = block.get("value")
        return TextSegment(value) if isinstance(value, str) else None
    if block_type == "image":
        for key in _IMAGE_KEYS:
            if key in block:
                src = block[key]
                return ImageSegment(src) if isinstance(src, str) else None
        return None
    return None  # unknown block kinds are dropped


def parse_blocks(container: lxml.html.HtmlElement) -> Segments:
    """Segments from the ``data-blocks`` attribute; empty when absent or unusable."""
    raw = container.get(BLOCKS_ATTR)
    if not raw:
        return Segments()
    try:
        blocks = json.loads(raw)
    except json.JSONDecodeError:
        logger.debug("Unparseable %s payload, ignoring", BLOCKS_ATTR)
        return Segments()
    if not isinstance(blocks, list):
        return Segments()
    segments = Segments()
    for block in blocks:
        seg = _block_segment(block)
        if seg is not None:
            segments.append(seg)
    return segments


# --- Strategy B: DOM walk ---


def _normalize_text(text: str) -> str:
    for marker in _NBSP_MARKERS:
        text = text.replace(marker, " ")
    return text


def _child_nodes(el: lxml.html.HtmlElement) -> list:
    """Direct child nodes in document order: leading text, then each child and its tail."""
    nodes: list = []
    if el.text:
        nodes.append(el.text)
    for child in el:
        nodes.append(child)
        if child.tail:
            nodes.append(child.tail)
    return nodes


def walk_dom(container: lxml.html.HtmlElement) -> Segments:
    """Depth-first walk of the container subtree with an explicit stack.

    Wrapper elements are transparent: only their descendants emit segments.
    """
    segments = Segments()
    stack = list(reversed(_child_nodes(container)))
    while stack:
        node = stack.pop()
        if isinstance(node, str):
            text = _normalize_text(node)
            if text:
                segments.append(TextSegment(text))
            continue
        tag = tag_name(node)
        if not tag:
            continue  # comment / processing instruction
        if tag == "br":
            segments.append(TextSegment("\n"))
        elif tag == "img":
            src = node.get("data-src")
            if src is None:
                src = node.get("src")
            if src is not None:
                segments.append(ImageSegment(src))
        else:
            stack.extend(reversed(_child_nodes(node)))
    return segments


_STRATEGIES = (
    ("blocks", parse_blocks),
    ("dom", walk_dom),
)


def parse_container(container: lxml.html.HtmlElement) -> Segments:
    """Run the strategies in priority order, returning the first non-empty result."""
    segments = Segments()
    for name, strategy in _STRATEGIES:
        segments = strategy(container)
        if segments:
            logger.debug("Parsed %d segments with %s strategy", len(segments), name)
            return segments
    return segments


def parse_segments(response_text: str) -> Segments:
    """Parse a submission response into Segments.

    Raises:
        ParseError: body is not an HTML document.
        ElementNotFound: no ``#shindanResult`` container.
    """
    doc = parse_document(response_text)
    return parse_container(find_result_container(doc))
