"""Command line entrypoints for generating filter collections."""
from __future__ import annotations

import argparse
import json
import logging
import os
from pathlib import Path

from .build import CollectionRegistry, configure_filters
from .categories import items_in_category
from .combinations import generate_combinations
from .config import DATA_DIR, OUTPUT_DIR, FacetSettings
from .repository import ItemRepository, write_collections

LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Static faceted filter generation")
    parser.add_argument(
        "--log-level",
        default=os.getenv("STATICFACETS_LOG_LEVEL", "INFO"),
        help="Logging level (defaults to STATICFACETS_LOG_LEVEL or INFO)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build_command = subparsers.add_parser(
        "build", help="Generate filter pages, attributes and redirects as JSON"
    )
    build_command.add_argument(
        "--items",
        type=Path,
        default=DATA_DIR / "items.json",
        help="JSON file holding the tagged items",
    )
    build_command.add_argument(
        "--output",
        type=Path,
        default=OUTPUT_DIR,
        help="Directory that receives one JSON file per collection",
    )
    build_command.set_defaults(func=handle_build)

    paths_parser = subparsers.add_parser(
        "paths", help="List the filter paths generated for one tag"
    )
    paths_parser.add_argument(
        "--items",
        type=Path,
        default=DATA_DIR / "items.json",
        help="JSON file holding the tagged items",
    )
    paths_parser.add_argument(
        "--tag",
        default="products",
        help="Item tag to generate combinations for",
    )
    paths_parser.add_argument(
        "--category",
        help="Only include items in this category slug",
    )
    paths_parser.add_argument(
        "--json",
        action="store_true",
        help="Output paths and counts as JSON",
    )
    paths_parser.set_defaults(func=handle_paths)

    return parser


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
    )


def _repository(items_file: Path) -> ItemRepository:
    if not items_file.exists():
        LOGGER.error("Items file %s does not exist", items_file)
        raise SystemExit(1)
    return ItemRepository(data_file=items_file)


def handle_build(args: argparse.Namespace) -> None:
    repository = _repository(args.items)
    settings = FacetSettings.from_env()
    registry = CollectionRegistry()
    configure_filters(registry, settings)
    results = registry.build(repository)
    written = write_collections(args.output, results)
    LOGGER.info("Build complete. %s collections written to %s", len(written), args.output)


def handle_paths(args: argparse.Namespace) -> None:
    repository = _repository(args.items)
    settings = FacetSettings.from_env()
    items = repository.get_filtered_by_tag(args.tag)
    if args.category:
        items = items_in_category(items, args.category)
    combos = generate_combinations(items, category_slug=args.category, settings=settings)
    if args.json:
        payload = [{"path": combo.path, "count": combo.count} for combo in combos]
        print(json.dumps(payload, indent=2))
        return
    if not combos:
        print(f"No filter combinations for tag '{args.tag}'.")
        return
    width = max(len(combo.path) for combo in combos)
    for combo in combos:
        print(f"{combo.path.ljust(width)}  {combo.count}")


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    args.func(args)


if __name__ == "__main__":
    main()
