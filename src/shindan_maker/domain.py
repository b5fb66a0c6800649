# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Regional ShindanMaker endpoints."""

from __future__ import annotations

from enum import StrEnum

from shindan_maker.errors import InvalidDomainError


class ShindanDomain(StrEnum):
    """Region tag. The value is the base URL prefix (``{base_url}{id}``)."""

    JP = "https://shindanmaker.com/"
    EN = "https://en.shindanmaker.com/"
    CN = "https://cn.shindanmaker.com/"
    KR = "https://kr.shindanmaker.com/"
    TH = "https://th.shindanmaker.com/"

    @property
    def base_url(self) -> str:
        return self.value

    def page_url(self, shindan_id: str) -> str:
        return f"{self.value}{shindan_id}"

    @classmethod
    def parse(cls, value: str | ShindanDomain) -> ShindanDomain:
        """Case-insensitive lookup by region tag ("en", "JP", ...)."""
        if isinstance(value, cls):
            return value
        try:
            return cls[str(value).strip().upper()]
        except KeyError:
            raise InvalidDomainError(str(value)) from None
