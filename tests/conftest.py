# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Shared test configuration and fixtures."""

try:
    import shindan_maker  # noqa: F401
except ImportError:
    raise ImportError("shindan_maker is not installed. Run: pip install -e '.[dev]'") from None

import os
from urllib.parse import parse_qsl

import httpx
import pytest

from tests._pages import initial_page, result_page


def pytest_collection_modifyitems(config, items):
    """Skip live-marked tests unless SHINDAN_LIVE=1."""
    if os.environ.get("SHINDAN_LIVE", "").strip() == "1":
        return
    skip_marker = pytest.mark.skip(reason="set SHINDAN_LIVE=1 to hit the real site")
    for item in items:
        if "live" in item.keywords:
            item.add_marker(skip_marker)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep SHINDAN_* overrides from the developer's shell out of unit tests."""
    for name in ("SHINDAN_TIMEOUT", "SHINDAN_USER_AGENT", "SHINDAN_ASSETS_DIR", "SHINDAN_DOMAIN"):
        monkeypatch.delenv(name, raising=False)


class FakeSite:
    """In-memory ShindanMaker behind ``httpx.MockTransport``.

    Each GET issues a fresh ``_session`` cookie. POSTs are recorded with
    their parsed form pairs and answered with ``result_html`` (a callable
    receiving the form pairs, or a string).
    """

    def __init__(self, page_html: str | None = None, result_html=None, *, set_cookie: bool = True) -> None:
        self.page_html = page_html if page_html is not None else initial_page()
        self.result_html = result_html if result_html is not None else result_page("Hello<br>World")
        self.set_cookie = set_cookie
        self.gets: list[httpx.Request] = []
        self.posts: list[tuple[httpx.Request, list[tuple[str, str]]]] = []
        self._issued = 0

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            self.gets.append(request)
            self._issued += 1
            headers = []
            if self.set_cookie:
                headers.append(("set-cookie", f"_session=sess{self._issued}; path=/; httponly"))
            return httpx.Response(200, headers=headers, text=self.page_html)
        form = parse_qsl(request.content.decode(), keep_blank_values=True)
        self.posts.append((request, form))
        body = self.result_html(form) if callable(self.result_html) else self.result_html
        return httpx.Response(200, text=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def fake_site() -> FakeSite:
    return FakeSite()
