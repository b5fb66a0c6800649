# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""HTML parsing and title/description extraction.

Works on either the initial shindan page or the submission result page.
"""

from __future__ import annotations

import lxml.html
from lxml import etree

from shindan_maker.errors import ElementNotFound, ParseError
from shindan_maker.selectors import SELECTORS

TITLE_ATTR = "data-shindan_title"


def parse_document(text: str) -> lxml.html.HtmlElement:
    """Parse a full HTML response into an lxml document root."""
    try:
        return lxml.html.document_fromstring(text)
    except (etree.LxmlError, ValueError) as e:
        raise ParseError(f"Failed to parse HTML document: {e}") from e


def first_match(query: etree.XPath, node: etree._Element, name: str) -> lxml.html.HtmlElement:
    """Return the first element matched by *query*, or raise ElementNotFound(name)."""
    matches = query(node)
    if not matches:
        raise ElementNotFound(name)
    return matches[0]


def tag_name(el: etree._Element) -> str:
    """Lower-cased tag, or "" for comments and processing instructions."""
    return el.tag.lower() if isinstance(el.tag, str) else ""


def outer_html(el: etree._Element) -> str:
    """Serialize an element without its tail text."""
    return etree.tostring(el, encoding="unicode", method="html", with_tail=False)


def extract_title(doc: lxml.html.HtmlElement) -> str:
    """Title from the ``data-shindan_title`` attribute of ``#shindanTitle``."""
    el = first_match(SELECTORS.shindan_title, doc, "title")
    title = el.get(TITLE_ATTR)
    if title is None:
        raise ElementNotFound("title", detail=f"missing {TITLE_ATTR} attribute")
    return title


def extract_description(doc: lxml.html.HtmlElement) -> str:
    """Flatten ``#shindanDescriptionDisplay`` into text.

    Text nodes are kept as-is, ``<br>`` becomes a newline and any other
    element contributes only its leading text (one level of unwrap).
    """
    container = first_match(SELECTORS.shindan_description, doc, "description")
    pieces: list[str] = []
    if container.text:
        pieces.append(container.text)
    for child in container:
        tag = tag_name(child)
        if tag == "br":
            pieces.append("\n")
        elif tag and child.text:
            pieces.append(child.text)
        if child.tail:
            pieces.append(child.tail)
    return "".join(pieces)
