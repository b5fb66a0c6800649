# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""End-to-end tests for ShindanClient against an in-memory site (httpx.MockTransport)."""

from __future__ import annotations

import asyncio
import html as _html

import httpx
import pytest

from shindan_maker import HtmlResult, ImageSegment, SegmentsResult, SubmissionRequest, TextSegment, TitleDescription
from shindan_maker.assets import SnapshotAssets
from shindan_maker.client import ShindanClient
from shindan_maker.config import ClientConfig
from shindan_maker.domain import ShindanDomain
from shindan_maker.errors import (
    ElementNotFound,
    InvalidDomainError,
    NetworkError,
    ScriptNotFound,
    SessionCookieNotFound,
    TokenNotFound,
)
from tests._pages import initial_page, result_page

ASSETS = SnapshotAssets(app_css="CSS", shindan_js="JS")


def _client(site, domain: str = "en", **kwargs) -> ShindanClient:
    return ShindanClient(domain, config=ClientConfig(), transport=site.transport, assets=ASSETS, **kwargs)


def _echo_result(form: list[tuple[str, str]]) -> str:
    """Result page that greets the submitted name, like the real site does."""
    name = dict(form)["user_input_value_1"]
    return result_page(f"{_html.escape(name)} is<br><b>level 99</b>")


# ── Construction ────────────────────────────────────────────────────


class TestConstruction:
    def test_domain_tag(self):
        assert ShindanClient("JP", config=ClientConfig()).domain is ShindanDomain.JP

    def test_invalid_domain(self):
        with pytest.raises(InvalidDomainError):
            ShindanClient("xx", config=ClientConfig())

    def test_config_from_env(self, monkeypatch):
        monkeypatch.setenv("SHINDAN_TIMEOUT", "9")
        assert ShindanClient().config.timeout == 9.0

    def test_assets_loaded_lazily(self, tmp_path):
        (tmp_path / "app.js").write_text("APP", encoding="utf-8")
        client = ShindanClient(config=ClientConfig(assets_dir=str(tmp_path)))
        assert client.assets.app_js == "APP"
        assert client.assets is client.assets


# ── Title / description ─────────────────────────────────────────────


class TestTitle:
    async def test_get_title(self, fake_site):
        assert await _client(fake_site).get_title("1222992") == "Fantasy Stats"
        assert str(fake_site.gets[0].url) == "https://en.shindanmaker.com/1222992"
        assert fake_site.posts == []

    async def test_user_agent_sent(self, fake_site):
        config = ClientConfig(user_agent="ua-test")
        await ShindanClient(config=config, transport=fake_site.transport).get_title("1")
        assert fake_site.gets[0].headers["user-agent"] == "ua-test"

    async def test_get_description(self, fake_site):
        assert await _client(fake_site).get_description("1") == "Find out\nyour stats"

    async def test_title_with_description(self, fake_site):
        result = await _client(fake_site).get_title_with_description("1")
        assert result == TitleDescription(title="Fantasy Stats", description="Find out\nyour stats")
        assert len(fake_site.gets) == 1

    async def test_title_needs_no_cookie(self, fake_site):
        fake_site.set_cookie = False
        assert await _client(fake_site).get_title("1") == "Fantasy Stats"

    async def test_missing_title(self, fake_site):
        fake_site.page_html = initial_page(title=None)
        with pytest.raises(ElementNotFound):
            await _client(fake_site).get_title("1")


# ── Segments ────────────────────────────────────────────────────────


class TestSegments:
    async def test_get_segments(self, fake_site):
        fake_site.result_html = _echo_result
        segments = await _client(fake_site).get_segments("1222992", "test_user")
        assert segments == [TextSegment("test_user is"), TextSegment("\n"), TextSegment("level 99")]
        assert str(segments) == "test_user is\nlevel 99"

    async def test_protocol(self, fake_site):
        fake_site.page_html = initial_page(parts=("parts[0]", "parts[1]"), shindan_token="st")
        await _client(fake_site).get_segments("1222992", "test_user")

        assert len(fake_site.gets) == 1
        request, form = fake_site.posts[0]
        assert str(request.url) == "https://en.shindanmaker.com/1222992"
        assert request.headers["cookie"] == "_session=sess1;"
        assert request.headers["content-type"] == "application/x-www-form-urlencoded"
        assert form == [
            ("_token", "tok123"),
            ("randname", "rand456"),
            ("type", "name"),
            ("shindan_token", "st"),
            ("user_input_value_1", "test_user"),
            ("parts[0]", "test_user"),
            ("parts[1]", "test_user"),
        ]

    async def test_title_from_initial_page(self, fake_site):
        fake_site.page_html = initial_page(title="From GET")
        fake_site.result_html = result_page('x<img data-src="http://x/i.png">', title="Different")
        result = await _client(fake_site).get_segments_with_title("1", "n")
        assert isinstance(result, SegmentsResult)
        assert result.title == "From GET"
        assert result.segments == [TextSegment("x"), ImageSegment("http://x/i.png")]

    async def test_submit_returns_raw_page(self, fake_site):
        fake_site.result_html = "<html><body>raw</body></html>"
        title, text = await _client(fake_site).submit(SubmissionRequest("1", "n"))
        assert title is None
        assert text == "<html><body>raw</body></html>"

    async def test_structured_payload(self, fake_site):
        fake_site.result_html = result_page("ignored", blocks=[{"type": "user_input", "value": "n"}])
        assert await _client(fake_site).get_segments("1", "n") == [TextSegment("n")]

    async def test_missing_cookie_stops_before_post(self, fake_site):
        fake_site.set_cookie = False
        with pytest.raises(SessionCookieNotFound):
            await _client(fake_site).get_segments("1", "n")
        assert fake_site.posts == []

    async def test_missing_token_stops_before_post(self, fake_site):
        fake_site.page_html = initial_page(tokens={"randname": "r", "type": "name"})
        with pytest.raises(TokenNotFound) as exc_info:
            await _client(fake_site).get_segments("1", "n")
        assert exc_info.value.field == "_token"
        assert fake_site.posts == []

    async def test_result_without_container(self, fake_site):
        fake_site.result_html = "<html><body><p>Error</p></body></html>"
        with pytest.raises(ElementNotFound):
            await _client(fake_site).get_segments("1", "n")

    async def test_network_error(self):
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        client = ShindanClient(config=ClientConfig(), transport=httpx.MockTransport(handler))
        with pytest.raises(NetworkError):
            await client.get_segments("1", "n")

    async def test_redirect_loop_is_network_error(self):
        def handler(request):
            return httpx.Response(302, headers={"location": str(request.url)})

        client = ShindanClient(config=ClientConfig(), transport=httpx.MockTransport(handler))
        with pytest.raises(NetworkError):
            await client.get_title("1222992")


# ── Session isolation ───────────────────────────────────────────────


class TestSessionIsolation:
    async def test_each_call_renegotiates(self, fake_site):
        client = _client(fake_site)
        await client.get_segments("1", "a")
        await client.get_segments("1", "b")
        assert len(fake_site.gets) == 2
        cookies = [request.headers["cookie"] for request, _ in fake_site.posts]
        assert cookies == ["_session=sess1;", "_session=sess2;"]

    async def test_concurrent_calls(self, fake_site):
        fake_site.result_html = _echo_result
        client = _client(fake_site)
        names = [f"user{i}" for i in range(8)]
        results = await asyncio.gather(*(client.get_segments("1", name) for name in names))
        for name, segments in zip(names, results, strict=True):
            assert segments[0] == TextSegment(f"{name} is")
        assert len(fake_site.gets) == 8
        assert len({request.headers["cookie"] for request, _ in fake_site.posts}) == 8


# ── HTML snapshot ───────────────────────────────────────────────────


class TestHtml:
    async def test_get_html_str(self, fake_site):
        html = await _client(fake_site).get_html_str("1222992", "test_user")
        assert '<base href="https://en.shindanmaker.com/">' in html
        assert "<style>CSS</style>" in html
        assert '<div id="title_and_result">' in html

    async def test_html_with_title(self, fake_site):
        result = await _client(fake_site, domain="jp").get_html_str_with_title("1", "n")
        assert isinstance(result, HtmlResult)
        assert result.title == "Fantasy Stats"
        assert '<base href="https://shindanmaker.com/">' in result.html

    async def test_chart_without_script(self, fake_site):
        fake_site.result_html = result_page("x", after='<script src="/js/chart.js"></script>')
        with pytest.raises(ScriptNotFound):
            await _client(fake_site).get_html_str("1222992", "n")
