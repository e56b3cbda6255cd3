"""Per-source loggers for collection log lines."""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from typing import Any

from preview_pages.sources.source_models import Source, source_label

COLLECT_LOGGER_NAME = "preview_pages.collect"


class UnitLogAdapter(logging.LoggerAdapter):
    """Prefix every message with the unit label, e.g. ``[PR #12]``."""

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        return f"[{self.extra['unit']}] {msg}", kwargs  # type: ignore[index]


def unit_logger(repo_key: str, source: Source) -> UnitLogAdapter:
    return UnitLogAdapter(
        logging.getLogger(f"{COLLECT_LOGGER_NAME}.{repo_key}"), {"unit": source_label(source)}
    )
