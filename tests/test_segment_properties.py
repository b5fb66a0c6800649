# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Property tests for shindan_maker.segment_parser.

Random segment sequences are rendered both as a ``data-blocks`` payload and
as mixed-content DOM; both strategies must read back the same text.
"""

from __future__ import annotations

import html as _html

import pytest

pytest.importorskip("hypothesis")

from hypothesis import given, settings  # noqa: E402
from hypothesis import strategies as st  # noqa: E402

from shindan_maker import ImageSegment, TextSegment  # noqa: E402
from shindan_maker.segment_parser import parse_blocks, walk_dom  # noqa: E402
from tests._pages import result_container  # noqa: E402

# Non-blank text: libxml2 drops whitespace-only nodes between elements.
_TEXT = st.text(
    alphabet=st.characters(whitelist_categories=("L", "N", "P", "Zs"), blacklist_characters="\xa0"),
    min_size=1,
    max_size=40,
).filter(lambda s: s.strip() and "&nbsp;" not in s)
_URL = st.from_regex(r"https://img\.example\.com/[a-z0-9]{1,12}\.png", fullmatch=True)
_SEGMENT = st.one_of(_TEXT.map(TextSegment), _URL.map(ImageSegment), st.just(TextSegment("\n")))


def _to_dom(segments: list) -> str:
    out = []
    for i, seg in enumerate(segments):
        if isinstance(seg, ImageSegment):
            out.append(f'<img data-src="{seg.url}">')
        elif seg.value == "\n":
            out.append("<br>")
        elif i % 2:
            out.append(f"<span>{_html.escape(seg.value, quote=False)}</span>")
        else:
            out.append(_html.escape(seg.value, quote=False))
    return "".join(out)


def _to_blocks(segments: list) -> list[dict]:
    blocks = []
    for seg in segments:
        if isinstance(seg, ImageSegment):
            blocks.append({"type": "image", "src": seg.url})
        else:
            blocks.append({"type": "text", "content": seg.value})
    return blocks


@given(st.lists(_SEGMENT, min_size=1, max_size=20))
@settings(max_examples=60, deadline=None)
def test_strategy_equivalence(segments):
    container = result_container(_to_dom(segments), blocks=_to_blocks(segments))
    expected = "".join(seg.as_str() for seg in segments)
    assert parse_blocks(container) == segments
    assert str(walk_dom(container)) == expected
    assert str(parse_blocks(container)) == str(walk_dom(container))
