"""JSON-backed item store and collection writer used by the CLI."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List

from .config import DATA_DIR
from .models import Item
from .utils import dump_json, load_json

logger = logging.getLogger(__name__)


class ItemRepository:
    """Serve items from a JSON document by tag.

    The document is either a list of item payloads or ``{"items": [...]}``.
    Categories are ordinary items tagged ``categories`` whose slug names the
    category.
    """

    def __init__(self, data_file: Path | None = None) -> None:
        self.data_file = data_file or DATA_DIR / "items.json"
        self._items: List[Item] | None = None

    def _load_raw_items(self) -> List[Dict[str, Any]]:
        data = load_json(self.data_file, default=[])
        if isinstance(data, dict):
            data = data.get("items", [])
        if not isinstance(data, list):
            logger.warning("Ignoring %s: expected a list of items", self.data_file)
            return []
        return [raw for raw in data if isinstance(raw, dict)]

    def load_items(self) -> List[Item]:
        if self._items is None:
            self._items = [Item.from_dict(raw) for raw in self._load_raw_items()]
            logger.debug("Loaded %s items from %s", len(self._items), self.data_file)
        return list(self._items)

    def save_items(self, items: List[Item]) -> None:
        dump_json(self.data_file, {"items": [item.to_dict() for item in items]})
        self._items = None

    def get_filtered_by_tag(self, tag: str) -> List[Item]:
        return [item for item in self.load_items() if tag in item.tags]


def to_jsonable(value: Any) -> Any:
    """Convert collection results (models, lists, dicts) to JSON data."""

    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, dict):
        return {key: to_jsonable(entry) for key, entry in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(entry) for entry in value]
    return value


def write_collections(output_dir: Path, results: Dict[str, Any]) -> List[Path]:
    """Write each collection to ``<output_dir>/<name>.json``."""

    written: List[Path] = []
    for name, value in results.items():
        path = output_dir / f"{name}.json"
        dump_json(path, to_jsonable(value))
        written.append(path)
    logger.info("Wrote %s collections to %s", len(written), output_dir)
    return written
