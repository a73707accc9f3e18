"""
Shopping List CLI Utility

Command-line access to the aggregation core for stored events.
No UI required - designed for scripting and testing use.

Usage Examples:
    # List events that are not finished yet
    python -m src.utils.shopping_list_cli events --open

    # Print what to buy for event 7
    python -m src.utils.shopping_list_cli shopping-list 7

    # Same, in English number format, and write a CSV file
    python -m src.utils.shopping_list_cli shopping-list 7 --locale en --csv einkauf.csv

    # Print aggregated ingredient totals with the products that need them
    python -m src.utils.shopping_list_cli ingredients 7

    # Create the database tables
    python -m src.utils.shopping_list_cli init-db
"""

import argparse
import logging
import sys
from typing import List, Optional

from src.services import event_service
from src.services.database import initialize_app_database
from src.services.exceptions import ServiceError
from src.services.export_service import write_shopping_list_csv
from src.services.ingredient_aggregation_service import aggregate_ingredients_for_event
from src.services.shopping_list_service import get_event_shopping_list
from src.utils.config import get_config
from src.utils.constants import APP_NAME, APP_VERSION
from src.utils.datetime_utils import format_event_date
from src.utils.formatting import format_amount, format_number, format_package_text
from src.utils.slug_utils import name_sort_key


def _event_title(event, locale: str) -> str:
    date_text = format_event_date(event.date, locale)
    return f"{event.name} ({date_text})" if date_text else event.name


def print_events(include_finished: bool, locale: str) -> int:
    """Print stored events, newest first."""
    events = event_service.list_events(include_finished=include_finished)

    if not events:
        print("No events found.")
        return 0

    for event in events:
        status = " [finished]" if event.finished else ""
        print(f"{event.id:>5}  {format_event_date(event.date, locale):<10}  {event.name}{status}")

    return 0


def print_shopping_list(event_id: int, locale: str, csv_path: Optional[str] = None) -> int:
    """Print an event's purchase recommendations."""
    event = event_service.get_event(event_id)
    recommendations = get_event_shopping_list(event_id)

    if not recommendations:
        print(f"Event {event_id} needs no ingredients.")
        return 0

    print(f"Shopping list for {_event_title(event, locale)}:")
    for rec in recommendations:
        total = format_amount(rec.total_amount, rec.unit, locale)
        print(f"  {format_package_text(rec, locale):<30} {rec.display_name} ({total})")

    without_packaging = [rec.display_name for rec in recommendations if not rec.has_packaging]
    if without_packaging:
        print(f"\nNo packaging defined for: {', '.join(without_packaging)}")

    if csv_path:
        write_shopping_list_csv(recommendations, csv_path, locale)
        print(f"\nWritten to {csv_path}")

    return 0


def print_ingredients(event_id: int, locale: str) -> int:
    """Print an event's aggregated ingredient totals with contributions."""
    aggregated = aggregate_ingredients_for_event(event_id)

    if not aggregated:
        print(f"Event {event_id} needs no ingredients.")
        return 0

    lines = sorted(
        aggregated.values(),
        key=lambda line: (name_sort_key(line.ingredient_name), line.ingredient_id),
    )
    for line in lines:
        print(f"{line.ingredient_name}: {format_amount(line.total_amount, line.unit, locale)}")
        for contribution in line.contributions:
            quantity = format_number(contribution.product_quantity, locale)
            print(f"  - {contribution.product_name} x {quantity}")

    return 0


def init_db() -> int:
    """Create the database tables."""
    initialize_app_database()
    print(f"Database ready at {get_config().database_url}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="catering-logistics",
        description="Shopping lists and ingredient totals for catering events",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  List open events:
    catering-logistics events --open

  Print what to buy for an event:
    catering-logistics shopping-list 7

  Write the shopping list to a CSV file:
    catering-logistics shopping-list 7 --csv einkauf.csv

  Print ingredient totals:
    catering-logistics ingredients 7
""",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"{APP_NAME} {APP_VERSION}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show service log messages",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    events_parser = subparsers.add_parser("events", help="List stored events")
    events_parser.add_argument(
        "--open",
        dest="only_open",
        action="store_true",
        help="Hide finished events",
    )
    events_parser.add_argument(
        "--locale",
        choices=["de", "en"],
        help="Date format (default: configured locale)",
    )

    shopping_parser = subparsers.add_parser(
        "shopping-list",
        help="Print purchase recommendations for an event",
    )
    shopping_parser.add_argument("event_id", type=int, help="Event ID")
    shopping_parser.add_argument("--csv", dest="csv_path", help="Also write a CSV file")
    shopping_parser.add_argument(
        "--locale",
        choices=["de", "en"],
        help="Number format (default: configured locale)",
    )

    ingredients_parser = subparsers.add_parser(
        "ingredients",
        help="Print aggregated ingredient totals for an event",
    )
    ingredients_parser.add_argument("event_id", type=int, help="Event ID")
    ingredients_parser.add_argument(
        "--locale",
        choices=["de", "en"],
        help="Number format (default: configured locale)",
    )

    subparsers.add_parser("init-db", help="Create the database tables")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
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
        return init_db()

    initialize_app_database()
    locale = args.locale or get_config().locale

    try:
        if args.command == "events":
            return print_events(not args.only_open, locale)
        elif args.command == "shopping-list":
            return print_shopping_list(args.event_id, locale, args.csv_path)
        elif args.command == "ingredients":
            return print_ingredients(args.event_id, locale)
    except ServiceError as e:
        print(f"ERROR: {e}")
        return 1

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
