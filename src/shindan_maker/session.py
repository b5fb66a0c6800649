# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Two-request submission protocol.

1. GET the shindan page: read the ``_session`` cookie and the hidden form
   tokens (``_token``, ``randname``, ``type``, layout-dependent
   ``shindan_token``) plus any page-defined ``parts[n]`` inputs.
2. POST the url-encoded form back to the same URL with that cookie.

A SessionContext lives for exactly one submission and is never reused.
"""

from __future__ import annotations

import logging
from urllib.parse import urlencode

import httpx
import lxml.html

from shindan_maker import SessionContext
from shindan_maker.errors import NetworkError, SessionCookieNotFound, TokenNotFound
from shindan_maker.extract import parse_document
from shindan_maker.selectors import SELECTORS

logger = logging.getLogger(__name__)

SESSION_COOKIE = "_session"
REQUIRED_TOKENS = ("_token", "randname", "type")
# Only some page layouts carry it; required when the input exists.
LAYOUT_TOKEN = "shindan_token"
NAME_FIELD = "user_input_value_1"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


async def send_request(http: httpx.AsyncClient, method: str, url: str, **kwargs) -> httpx.Response:
    try:
        response = await http.request(method, url, **kwargs)
    except httpx.RequestError as e:
        # RequestError also covers redirect loops and undecodable bodies
        raise NetworkError(f"{method} {url} failed: {e}") from e
    logger.debug("%s %s -> %d", method, url, response.status_code)
    return response


def extract_session_cookie(response: httpx.Response) -> str:
    value = response.cookies.get(SESSION_COOKIE)
    if value is None:
        raise SessionCookieNotFound(SESSION_COOKIE)
    return value


def _input_value(doc: lxml.html.HtmlElement, name: str) -> str | None:
    matches = SELECTORS.input_by_name(doc, name=name)
    if not matches:
        return None
    return matches[0].get("value")


def extract_form_fields(doc: lxml.html.HtmlElement) -> tuple[tuple[tuple[str, str], ...], tuple[str, ...]]:
    """Hidden token fields and ``parts[n]`` input names, both in submit order.

    Raises:
        TokenNotFound: a required token input or its value is missing.
    """
    tokens: list[tuple[str, str]] = []
    for field in REQUIRED_TOKENS:
        value = _input_value(doc, field)
        if value is None:
            raise TokenNotFound(field)
        tokens.append((field, value))

    if SELECTORS.input_by_name(doc, name=LAYOUT_TOKEN):
        value = _input_value(doc, LAYOUT_TOKEN)
        if value is None:
            raise TokenNotFound(LAYOUT_TOKEN)
        tokens.append((LAYOUT_TOKEN, value))

    parts = tuple(el.get("name") for el in SELECTORS.input_parts(doc))
    return tuple(tokens), parts


async def negotiate_session(http: httpx.AsyncClient, url: str) -> tuple[SessionContext, lxml.html.HtmlElement]:
    """GET *url* and capture everything the follow-up POST needs.

    Returns:
        (SessionContext, parsed initial document)

    Raises:
        NetworkError, SessionCookieNotFound, TokenNotFound, ParseError
    """
    response = await send_request(http, "GET", url)
    session_cookie = extract_session_cookie(response)
    doc = parse_document(response.text)
    tokens, parts = extract_form_fields(doc)
    context = SessionContext(token_fields=tokens, session_cookie=session_cookie, parts_fields=parts)
    return context, doc


def build_form_body(context: SessionContext, display_name: str) -> list[tuple[str, str]]:
    """Ordered form pairs: tokens, the name field, then every ``parts[n]`` input."""
    pairs = list(context.token_fields)
    pairs.append((NAME_FIELD, display_name))
    pairs.extend((part, display_name) for part in context.parts_fields)
    return pairs


def submission_headers(context: SessionContext) -> dict[str, str]:
    return {
        "Content-Type": FORM_CONTENT_TYPE,
        "Cookie": f"{SESSION_COOKIE}={context.session_cookie};",
    }


async def submit_form(http: httpx.AsyncClient, url: str, context: SessionContext, display_name: str) -> str:
    """POST the form and return the raw result page. No retry."""
    body = urlencode(build_form_body(context, display_name))
    response = await send_request(http, "POST", url, content=body, headers=submission_headers(context))
    return response.text
