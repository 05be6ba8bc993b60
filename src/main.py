"""
Command-line entry point for the Cake Costing application.

Usage Examples:
    # Create the database and seed labor roles and tier sizes
    python run.py init-db --seed

    # Price a quote payload against the database catalog
    python run.py calculate quote.json

    # Price an order payload against a JSON catalog (no database)
    python run.py calculate order.json --catalog catalog.json --kind order

    # Geometry for a tier size
    python run.py tier-volume 8 --shape round
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from src.models.enums import TierShape
from src.services import catalog_service, costing_service
from src.services.costing import (
    CostingCatalog,
    batter_for_tier,
    buttercream_for_tier,
    get_assembly_minutes,
    tier_surface_area,
    tier_volume_ml,
)
from src.services.database import initialize_app_database
from src.services.exceptions import CatalogEmptyError, ServiceError
from src.utils.config import get_config


def _read_json(path: str) -> dict:
    with open(Path(path), "r", encoding="utf-8") as fh:
        return json.load(fh)


def init_db_cmd(seed: bool = False) -> int:
    """Create tables and optionally seed costing defaults."""
    config = get_config()
    print(f"Initializing database at {config.database_path}...")

    try:
        initialize_app_database()
        if seed:
            counts = catalog_service.seed_costing_defaults()
            print("\nSeed Complete")
            print("-------------")
            print(f"Labor roles created: {counts['roles_created']}")
            print(f"Labor roles updated: {counts['roles_updated']}")
            print(f"Tier sizes created: {counts['tier_sizes_created']}")
            print(f"Tier sizes updated: {counts['tier_sizes_updated']}")
        return 0

    except ServiceError as e:
        print(f"ERROR: {e}")
        return 1


def calculate_cmd(
    payload_file: str, catalog_file: Optional[str] = None, kind: str = "quote"
) -> int:
    """Price a payload file and print the result as JSON."""
    try:
        payload = _read_json(payload_file)
        if catalog_file:
            catalog = CostingCatalog.from_dict(_read_json(catalog_file))
        else:
            initialize_app_database()
            catalog = catalog_service.load_costing_catalog()

        if catalog.is_empty:
            raise CatalogEmptyError()

        result = costing_service.calculate(payload, catalog, kind)
        print(json.dumps(result.to_dict(), indent=2))
        return 0

    except (OSError, json.JSONDecodeError) as e:
        print(f"ERROR: Could not read input: {e}")
        return 1
    except ServiceError as e:
        print(f"ERROR: {e}")
        return 1


def tier_volume_cmd(diameter: float, shape: str = "round", length: Optional[float] = None) -> int:
    """Print volume, assembly time and mass estimates for one tier."""
    tier_shape = TierShape.parse(shape)
    if diameter <= 0:
        print("ERROR: Diameter must be greater than zero")
        return 1

    volume = tier_volume_ml(diameter, tier_shape, length=length)
    area = tier_surface_area(diameter, 4, tier_shape, length)
    batter = batter_for_tier(diameter, tier_shape, length=length)
    buttercream = buttercream_for_tier(diameter, tier_shape, length=length)

    label = f'{diameter:g}" {tier_shape.value}'
    print(f"\nTier: {label}")
    print("-" * (len(label) + 6))
    print(f"Volume: {volume} ml")
    print(f"Assembly: {get_assembly_minutes(diameter)} min")
    print(f"Surface area (4\" high): {area.total_area:.1f} sq in")
    print(f"Batter: {batter.grams} g ({batter.ounces} oz, {batter.layers} layers)")
    print(
        f"Buttercream: {buttercream.total_grams} g "
        f"(internal {buttercream.internal_grams} g, crumb coat {buttercream.crumb_coat_grams} g)"
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Cake order and quote costing",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Create the database and seed defaults:
    python run.py init-db --seed

  Price a quote against the database catalog:
    python run.py calculate quote.json

  Price an order against a JSON catalog:
    python run.py calculate order.json --catalog catalog.json --kind order

  Tier geometry:
    python run.py tier-volume 10 --shape square
""",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    init_parser = subparsers.add_parser("init-db", help="Create database tables")
    init_parser.add_argument(
        "--seed",
        action="store_true",
        help="Seed labor roles and standard tier sizes",
    )

    calc_parser = subparsers.add_parser("calculate", help="Price an order or quote payload")
    calc_parser.add_argument("payload", help="JSON payload file")
    calc_parser.add_argument(
        "--catalog",
        dest="catalog_file",
        help="JSON catalog file (default: load from the database)",
    )
    calc_parser.add_argument(
        "--kind",
        choices=["quote", "order"],
        default="quote",
        help="Pricing path: 'quote' (default) or 'order' (applies price_adjustment)",
    )

    tier_parser = subparsers.add_parser("tier-volume", help="Tier geometry estimates")
    tier_parser.add_argument("diameter", type=float, help="Diameter (or width) in inches")
    tier_parser.add_argument(
        "--shape",
        choices=[shape.value for shape in TierShape],
        default=TierShape.ROUND.value,
        help="Pan shape (default: round)",
    )
    tier_parser.add_argument("--length", type=float, help="Length in inches (rectangle, oval)")

    return parser


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 1

    if args.command == "init-db":
        return init_db_cmd(args.seed)
    elif args.command == "calculate":
        return calculate_cmd(args.payload, args.catalog_file, args.kind)
    elif args.command == "tier-volume":
        return tier_volume_cmd(args.diameter, args.shape, args.length)
    else:
        print(f"Unknown command: {args.command}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
