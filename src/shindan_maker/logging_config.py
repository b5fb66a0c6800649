# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""structlog + stdlib bridge for the CLI. Console: ConsoleRenderer, --json-logs: JSONRenderer.

Leaf module, no shindan_maker imports. Library modules log through stdlib
``logging.getLogger(__name__)`` and never configure handlers themselves;
``shindan_context`` tags every record emitted during one client call with
the shindan id and region, including records from httpx.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager

import structlog

# Chatty at DEBUG; only surfaced when the root level is DEBUG as well.
_NOISY_LOGGERS = ("httpx", "httpcore")


@contextmanager
def shindan_context(shindan_id: str, domain: str) -> Iterator[None]:
    """Bind ``shindan_id`` / ``domain`` to log records for the enclosed call.

    Contextvars are task-local, so concurrent calls keep their own ids.
    """
    with structlog.contextvars.bound_contextvars(shindan_id=shindan_id, domain=domain):
        yield


def _shared_processors() -> list:
    # Applied to structlog loggers and, via foreign_pre_chain, to stdlib records.
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def _stderr_handler(json_output: bool) -> logging.Handler:
    renderer = structlog.processors.JSONRenderer(ensure_ascii=False) if json_output else structlog.dev.ConsoleRenderer()
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
            foreign_pre_chain=_shared_processors(),
        )
    )
    return handler


def configure(*, json_output: bool = False, level: str = "INFO") -> None:
    """Route stdlib and structlog records through one stderr handler.

    Args:
        json_output: True for JSON lines, False for human-readable output.
        level: Root logger level (default INFO). Unknown names fall back to INFO.
    """
    structlog.configure(
        processors=[*_shared_processors(), structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(_stderr_handler(json_output))
    root_level = getattr(logging, level.upper(), logging.INFO)
    root.setLevel(root_level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if root_level <= logging.DEBUG else logging.WARNING)
