# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Compiled lxml XPath queries for ShindanMaker pages.

Built once at import time and never mutated afterwards. Every query
returns matches in document order.
"""

from __future__ import annotations

from dataclasses import dataclass

from lxml import etree

_HAS_CLASS = "contains(concat(' ', normalize-space(@class), ' '), ' {cls} ')"


def _by_id(element_id: str) -> etree.XPath:
    return etree.XPath(f"//*[@id='{element_id}']")


@dataclass(frozen=True, slots=True)
class Selectors:
    shindan_title: etree.XPath
    shindan_description: etree.XPath
    input_by_name: etree.XPath  # call with name="..."
    input_parts: etree.XPath
    shindan_result: etree.XPath
    title_and_result: etree.XPath
    script: etree.XPath
    effects: tuple[etree.XPath, ...]


SELECTORS = Selectors(
    shindan_title=_by_id("shindanTitle"),
    shindan_description=_by_id("shindanDescriptionDisplay"),
    input_by_name=etree.XPath("//input[@name=$name]"),
    input_parts=etree.XPath("//input[starts-with(@name, 'parts[')]"),
    shindan_result=_by_id("shindanResult"),
    title_and_result=_by_id("title_and_result"),
    script=etree.XPath("//script"),
    effects=tuple(
        etree.XPath(f".//span[{_HAS_CLASS.format(cls='shindanEffects')}][@data-mode='{mode}']")
        for mode in ("ef_typing", "ef_shuffle")
    ),
)
