# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""shindan-maker: async client for ShindanMaker personality quizzes.

Fetches a shindan page, submits its form with a display name and converts
the result into one of:
- title / description strings
- Segments: ordered text/image pieces of the result
- a standalone HTML snapshot for offline rendering
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class SegmentKind(StrEnum):
    """Segment tag, matching the ``type`` key of the dict form."""

    TEXT = "text"
    IMAGE = "image"


@dataclass(frozen=True, slots=True)
class TextSegment:
    """Literal text, including ``"\\n"`` for line breaks."""

    value: str

    @property
    def kind(self) -> SegmentKind:
        return SegmentKind.TEXT

    def as_str(self) -> str:
        return self.value

    def to_dict(self) -> dict[str, Any]:
        return {"type": "text", "data": {"text": self.value}}


@dataclass(frozen=True, slots=True)
class ImageSegment:
    """Image reference; ``url`` is taken verbatim from the page."""

    url: str

    @property
    def kind(self) -> SegmentKind:
        return SegmentKind.IMAGE

    def as_str(self) -> str:
        return self.url

    def to_dict(self) -> dict[str, Any]:
        return {"type": "image", "data": {"file": self.url}}


Segment = TextSegment | ImageSegment


def segment_from_dict(data: dict[str, Any]) -> Segment:
    """Inverse of ``Segment.to_dict()``.

    Raises:
        ValueError: unknown ``type`` or missing payload key.
    """
    kind = data.get("type")
    payload = data.get("data") or {}
    if kind == SegmentKind.TEXT and isinstance(payload.get("text"), str):
        return TextSegment(payload["text"])
    if kind == SegmentKind.IMAGE and isinstance(payload.get("file"), str):
        return ImageSegment(payload["file"])
    raise ValueError(f"Not a segment: {data!r}")


class Segments(list):
    """Ordered result segments in document order.

    ``str()`` gives the linear reading-order text: text values concatenated,
    images replaced by their URL.
    """

    def __init__(self, items: Iterable[Segment] = ()) -> None:
        super().__init__(items)

    def __str__(self) -> str:
        return "".join(seg.as_str() for seg in self)

    def __repr__(self) -> str:
        return f"Segments({list.__repr__(self)})"

    def filter_by_kind(self, kind: SegmentKind | str) -> Segments:
        return Segments(seg for seg in self if seg.kind == kind)

    def texts(self) -> list[str]:
        return [seg.value for seg in self if isinstance(seg, TextSegment)]

    def image_urls(self) -> list[str]:
        return [seg.url for seg in self if isinstance(seg, ImageSegment)]

    def to_json(self, **kwargs: Any) -> str:
        return json.dumps([seg.to_dict() for seg in self], ensure_ascii=False, **kwargs)


@dataclass(frozen=True, slots=True)
class SubmissionRequest:
    """One submission: shindan id plus the name typed into the form."""

    id: str
    display_name: str


@dataclass(frozen=True, slots=True)
class SessionContext:
    """State negotiated by the initial GET, owned by a single submission."""

    token_fields: tuple[tuple[str, str], ...]  # (name, value) in submit order
    session_cookie: str
    parts_fields: tuple[str, ...] = ()  # page-defined parts[n] input names


@dataclass(frozen=True, slots=True)
class TitleDescription:
    title: str
    description: str


@dataclass(frozen=True, slots=True)
class SegmentsResult:
    segments: Segments
    title: str


@dataclass(frozen=True, slots=True)
class HtmlResult:
    html: str
    title: str
