# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Static stylesheet/script bodies inlined into HTML snapshots.

The package ships ``static/app.css``. Script bodies (site runtime and chart
library) are not bundled; point ``assets_dir`` at a directory holding
``shindan.js``, ``app.js`` and ``chart.js`` to inline them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from importlib import resources
from pathlib import Path

logger = logging.getLogger(__name__)

_ASSET_FILES = {
    "app_css": "app.css",
    "shindan_js": "shindan.js",
    "app_js": "app.js",
    "chart_js": "chart.js",
}


@dataclass(frozen=True, slots=True)
class SnapshotAssets:
    app_css: str = ""
    shindan_js: str = ""  # baseline script, always inlined
    app_js: str = ""  # chart results only
    chart_js: str = ""  # chart results only


def _bundled(filename: str) -> str:
    ref = resources.files("shindan_maker").joinpath("static", filename)
    if not ref.is_file():
        return ""
    return ref.read_text(encoding="utf-8")


def load_assets(directory: str | Path | None = None) -> SnapshotAssets:
    """Bundled assets, with any file present in *directory* taking precedence."""
    bodies = {field: _bundled(filename) for field, filename in _ASSET_FILES.items()}
    if directory is not None:
        base = Path(directory)
        for field, filename in _ASSET_FILES.items():
            path = base / filename
            if path.is_file():
                bodies[field] = path.read_text(encoding="utf-8")
                logger.debug("Loaded asset override %s", path)
    return SnapshotAssets(**bodies)
