"""Hebrew labels for report categories, ledger lines and maintenance texts.

Labels live in static/translations.json and are read once, on first use.
``t(key, **kwargs)`` resolves a dot-separated key and fills ``{placeholders}``.
A missing key is logged and the key itself is returned, so a report never
fails over a label.

Usage:
    from vaad.services.localizer import t

    t("categories.committee_fees")           # 'דמי ועד'
    t("ledger.fee_payment", name="Dana")     # 'תשלום - Dana'
"""

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

TRANSLATIONS_PATH = Path(__file__).parent.parent / "static" / "translations.json"


@lru_cache(maxsize=1)
def _load_translations() -> dict[str, Any]:
    try:
        with open(TRANSLATIONS_PATH, encoding="utf-8") as f:
            return json.load(f)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.error("Failed to load translations from %s: %s", TRANSLATIONS_PATH, e)
        return {}


def _resolve(key: str) -> str | None:
    node: Any = _load_translations()
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node if isinstance(node, str) else None


def t(key: str, **kwargs: Any) -> str:
    """Label for ``key`` with placeholders filled from ``kwargs``.

    Returns:
        The label, or the key itself if it does not name a string entry
    """
    template = _resolve(key)
    if template is None:
        logger.warning("Translation key not found: %s", key)
        return key
    if not kwargs:
        return template
    try:
        return template.format(**kwargs)
    except KeyError as e:
        logger.warning("Missing placeholder %s for key: %s", e, key)
        return template


__all__ = ["TRANSLATIONS_PATH", "t"]
