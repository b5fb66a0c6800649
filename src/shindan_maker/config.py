# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Client configuration with ``SHINDAN_*`` environment overrides."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 3.0  # seconds, per request
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/140.0.0.0 Safari/537.36 Edg/140.0.0.0"
)


@dataclass(frozen=True, slots=True)
class ClientConfig:
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT
    assets_dir: str | None = None  # overrides for snapshot assets

    @classmethod
    def from_env(cls) -> ClientConfig:
        """Build a config from ``SHINDAN_TIMEOUT``, ``SHINDAN_USER_AGENT``, ``SHINDAN_ASSETS_DIR``."""
        timeout = DEFAULT_TIMEOUT
        env_timeout = os.environ.get("SHINDAN_TIMEOUT", "").strip()
        if env_timeout:
            try:
                timeout = float(env_timeout)
            except ValueError:
                logger.warning("Invalid SHINDAN_TIMEOUT=%r, using %.1fs", env_timeout, DEFAULT_TIMEOUT)
            else:
                if timeout <= 0:
                    logger.warning("Non-positive SHINDAN_TIMEOUT=%r, using %.1fs", env_timeout, DEFAULT_TIMEOUT)
                    timeout = DEFAULT_TIMEOUT

        user_agent = os.environ.get("SHINDAN_USER_AGENT", "").strip() or DEFAULT_USER_AGENT
        assets_dir = os.environ.get("SHINDAN_ASSETS_DIR", "").strip() or None
        return cls(timeout=timeout, user_agent=user_agent, assets_dir=assets_dir)
