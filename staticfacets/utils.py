"""General utility helpers."""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Tuple

logger = logging.getLogger(__name__)


SLUG_PATTERN = re.compile(r"[^a-z0-9]+")


def slugify(value: str) -> str:
    """Return a URL-safe slug for the provided value.

    Unlike page slugs, facet slugs may be empty: an empty or purely
    punctuation value yields ``""`` so callers can discard it.
    """

    value = value.lower().strip()
    value = SLUG_PATTERN.sub("-", value)
    return value.strip("-")


def load_json(path: Path, default: Dict[str, Any] | list | None = None) -> Any:
    """Load a JSON file returning a default value if it does not exist."""

    if not path.exists():
        return default if default is not None else {}
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def dump_json(path: Path, data: Any) -> None:
    """Persist JSON data to disk, ensuring the parent folder exists."""

    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean environment variable."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def env_int(name: str, default: int | None = None) -> int | None:
    """Parse an integer environment variable; blank or ``none`` disables it."""

    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip().lower()
    if candidate in {"", "none", "off"}:
        return None
    try:
        return int(candidate)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r", name, value)
        return default


PRICE_CURRENCY_SYMBOLS: Dict[str, str] = {
    "C$": "CAD",
    "A$": "AUD",
    "£": "GBP",
    "€": "EUR",
    "¥": "JPY",
    "$": "USD",
}


def parse_price_string(price: str | None) -> Tuple[float, str | None] | None:
    """Extract a numeric value and ISO currency code from a price string."""

    if not price:
        return None
    currency = None
    for symbol, code in PRICE_CURRENCY_SYMBOLS.items():
        if symbol in price:
            currency = code
            break
    match = re.search(r"(\d+[\d.,]*)", price)
    if not match:
        return None
    numeric = match.group(1).replace(" ", "")
    if "." in numeric and "," in numeric:
        if numeric.rfind(",") > numeric.rfind("."):
            numeric = numeric.replace(".", "").replace(",", ".")
        else:
            numeric = numeric.replace(",", "")
    elif "," in numeric:
        decimals = numeric.split(",")[-1]
        if len(decimals) in {2, 3}:
            numeric = numeric.replace(",", ".")
        else:
            numeric = numeric.replace(",", "")
    else:
        numeric = numeric.replace(",", "")
    try:
        value = float(numeric)
    except ValueError:
        return None
    return value, currency
