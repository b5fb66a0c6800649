# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""ShindanClient: async façade over the submission protocol and extractors.

Every call opens its own ``httpx.AsyncClient`` (own cookie jar and pool),
negotiates a fresh session and discards everything on return, so calls can
run concurrently on one ShindanClient without coordination.
"""

from __future__ import annotations

import logging

import httpx
import lxml.html

from shindan_maker import HtmlResult, Segments, SegmentsResult, SubmissionRequest, TitleDescription
from shindan_maker.assets import SnapshotAssets, load_assets
from shindan_maker.config import ClientConfig
from shindan_maker.domain import ShindanDomain
from shindan_maker.extract import extract_description, extract_title, parse_document
from shindan_maker.logging_config import shindan_context
from shindan_maker.segment_parser import parse_segments
from shindan_maker.session import negotiate_session, send_request, submit_form
from shindan_maker.snapshot import build_snapshot

logger = logging.getLogger(__name__)


class ShindanClient:
    """Client bound to one regional ShindanMaker site.

    Args:
        domain: Region (``ShindanDomain.EN``) or tag (``"en"``, case-insensitive).
        config: Timeout / user agent / asset overrides. Defaults to ``ClientConfig.from_env()``.
        transport: Optional httpx transport (e.g. ``httpx.MockTransport``). It is
            closed at the end of every call, so it must tolerate reuse after close.
        assets: Snapshot assets; loaded from the bundle and ``config.assets_dir`` when omitted.
    """

    def __init__(
        self,
        domain: ShindanDomain | str = ShindanDomain.EN,
        *,
        config: ClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        assets: SnapshotAssets | None = None,
    ) -> None:
        self.domain = ShindanDomain.parse(domain)
        self.config = config or ClientConfig.from_env()
        self._transport = transport
        self._assets = assets

    @property
    def assets(self) -> SnapshotAssets:
        if self._assets is None:
            self._assets = load_assets(self.config.assets_dir)
        return self._assets

    def _http(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.config.timeout,
            headers={"User-Agent": self.config.user_agent},
            follow_redirects=True,
            transport=self._transport,
        )

    # --- Title / description (GET only) ---

    async def _fetch_document(self, shindan_id: str) -> lxml.html.HtmlElement:
        url = self.domain.page_url(shindan_id)
        with shindan_context(shindan_id, self.domain.name.lower()):
            async with self._http() as http:
                response = await send_request(http, "GET", url)
        return parse_document(response.text)

    async def get_title(self, shindan_id: str) -> str:
        return extract_title(await self._fetch_document(shindan_id))

    async def get_description(self, shindan_id: str) -> str:
        return extract_description(await self._fetch_document(shindan_id))

    async def get_title_with_description(self, shindan_id: str) -> TitleDescription:
        doc = await self._fetch_document(shindan_id)
        return TitleDescription(title=extract_title(doc), description=extract_description(doc))

    # --- Submission ---

    async def submit(self, request: SubmissionRequest, *, with_title: bool = False) -> tuple[str | None, str]:
        """Negotiate a session and submit ``request.display_name``.

        The title, when requested, comes from the initial page since the
        result page may not expose it the same way.

        Returns:
            (title or None, result page text)
        """
        url = self.domain.page_url(request.id)
        with shindan_context(request.id, self.domain.name.lower()):
            async with self._http() as http:
                context, initial_doc = await negotiate_session(http, url)
                title = extract_title(initial_doc) if with_title else None
                response_text = await submit_form(http, url, context, request.display_name)
            logger.debug("Submitted form with %d parts fields", len(context.parts_fields))
        return title, response_text

    async def get_segments(self, shindan_id: str, name: str) -> Segments:
        _, response_text = await self.submit(SubmissionRequest(shindan_id, name))
        return parse_segments(response_text)

    async def get_segments_with_title(self, shindan_id: str, name: str) -> SegmentsResult:
        title, response_text = await self.submit(SubmissionRequest(shindan_id, name), with_title=True)
        return SegmentsResult(segments=parse_segments(response_text), title=title)

    async def get_html_str(self, shindan_id: str, name: str) -> str:
        _, response_text = await self.submit(SubmissionRequest(shindan_id, name))
        return build_snapshot(shindan_id, response_text, self.domain.base_url, self.assets)

    async def get_html_str_with_title(self, shindan_id: str, name: str) -> HtmlResult:
        title, response_text = await self.submit(SubmissionRequest(shindan_id, name), with_title=True)
        html = build_snapshot(shindan_id, response_text, self.domain.base_url, self.assets)
        return HtmlResult(html=html, title=title)
