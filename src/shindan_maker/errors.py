# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""shindan-maker exception hierarchy.

All library errors inherit from ShindanError, allowing callers to catch the
base class for any failure or specific subclasses for targeted handling.
Nothing is retried or recovered internally: an extraction either succeeds
as a whole or raises one of these.
"""

from __future__ import annotations


class ShindanError(Exception):
    """Base exception for all shindan-maker errors."""


class NetworkError(ShindanError):
    """Transport failure or timeout on the GET or the POST."""


class ParseError(ShindanError):
    """Response body could not be parsed as an HTML document."""


class InvalidDomainError(ShindanError, ValueError):
    """Unknown region tag."""

    def __init__(self, value: str) -> None:
        super().__init__(f"Invalid domain: {value!r}")
        self.value = value


class SessionCookieNotFound(ShindanError):
    """The initial response did not set the ``_session`` cookie."""

    def __init__(self, cookie_name: str = "_session") -> None:
        super().__init__(f"Session cookie not found: {cookie_name}")
        self.cookie_name = cookie_name


class TokenNotFound(ShindanError):
    """A required hidden form field is missing from the initial page."""

    def __init__(self, field: str) -> None:
        super().__init__(f"Required form token not found: {field}")
        self.field = field


class ElementNotFound(ShindanError):
    """An expected unique element (or its marker attribute) is absent."""

    def __init__(self, name: str, *, detail: str = "") -> None:
        message = f"Element not found: {name}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
        self.name = name


class ScriptNotFound(ShindanError):
    """A chart result lacks the page script that references its id."""

    def __init__(self, shindan_id: str) -> None:
        super().__init__(f"Failed to find script with id {shindan_id}")
        self.shindan_id = shindan_id
