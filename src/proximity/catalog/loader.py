"""
Provider catalog loader.

The catalog is a local JSON array (default: `data/providers.json`) of provider
records carrying flat latitude/longitude fields and/or a GeoJSON `coordinates`
point. We validate it into typed Pydantic models so the ranking code can assume
a consistent shape.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import TypeAdapter

from proximity.core.env import resolve_project_path
from proximity.domain.models import Provider

logger = logging.getLogger(__name__)

_PROVIDERS_ADAPTER = TypeAdapter(list[Provider])


def load_providers(path: str | Path) -> list[Provider]:
    """Load and validate a provider catalog JSON file."""
    resolved = resolve_project_path(path)
    payload = json.loads(resolved.read_text(encoding="utf-8"))
    providers = _PROVIDERS_ADAPTER.validate_python(payload)
    unlocated = sum(1 for p in providers if not p.has_location)
    logger.info("Loaded %d providers from %s (%d without location)", len(providers), resolved, unlocated)
    return providers
