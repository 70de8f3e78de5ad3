"""CLI for fare deals, price calendars and live search."""

import argparse
import sys

import pandas as pd

from shamfares.config import load_settings
from shamfares.fares.calendar import tier_calendar
from shamfares.fares.errors import FaresError
from shamfares.fares.models import FareQueryResult, FilterCriteria, SearchParams, SortKey
from shamfares.fares.service import FareService
from shamfares.logging_config import setup_logging


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Fares, deals and price calendars for Damascus/Aleppo routes"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    deals = sub.add_parser("deals", help="Cheapest fare per route")
    deals.add_argument("--airport", "-a", help="Hub airport (default: DEFAULT_AIRPORT)")
    deals.add_argument("--direction", choices=["from", "to"], default="from")
    deals.add_argument("--limit", "-n", type=int, default=6)

    cal = sub.add_parser("calendar", help="Cheapest price per day of a month")
    cal.add_argument("--airport", "-a", help="Hub airport (default: DEFAULT_AIRPORT)")
    cal.add_argument("--month", "-m", required=True, help="Month as YYYY-MM")
    cal.add_argument("--destination", help="Only routes touching this airport")

    search = sub.add_parser("search", help="Live search for one route and date")
    search.add_argument("--from", dest="origin", required=True, help="Departure airport (e.g. DAM)")
    search.add_argument("--to", dest="destination", required=True, help="Arrival airport (e.g. JED)")
    search.add_argument("--date", "-d", required=True, help="Outbound date (YYYY-MM-DD)")
    search.add_argument("--adults", type=int, default=1)
    search.add_argument("--direct", action="store_true", help="Direct flights only")
    search.add_argument("--max-price", type=float)
    search.add_argument("--airline", action="append", default=[], help="Allowed carrier code (repeatable)")
    search.add_argument("--sort", choices=[k.value for k in SortKey], default=SortKey.PRICE.value)
    search.add_argument("--output", "-o", help="Write results to CSV file")

    summary = sub.add_parser("summary", help="Cheapest fare and destination count per airport")
    summary.add_argument("--airports", nargs="+", default=["DAM", "ALP"])
    summary.add_argument("--stats", "-s", action="store_true", help="Include statistics summary")

    return parser.parse_args(argv)


def _parse_month(value: str):
    try:
        year, month = value.split("-")
        return int(year), int(month)
    except ValueError:
        raise FaresError(f"Invalid month format: {value}. Expected YYYY-MM") from None


def _print_frame(df: pd.DataFrame, empty_message: str) -> None:
    if df.empty:
        print(empty_message, file=sys.stderr)
    else:
        print(df.to_string(index=False))


def run_deals(service: FareService, args, default_airport: str) -> None:
    airport = (args.airport or default_airport).upper()
    deals = service.deals(airport, args.direction, limit=args.limit)
    _print_frame(FareQueryResult(records=deals).to_dataframe(), "No priced routes found.")


def run_calendar(service: FareService, args, default_airport: str) -> None:
    airport = (args.airport or default_airport).upper()
    year, month = _parse_month(args.month)
    destination = args.destination.upper() if args.destination else None
    days = service.calendar(airport, year, month, destination)
    tiers = tier_calendar(days)
    df = pd.DataFrame(
        [
            {
                "day": d.day,
                "weekday": d.weekday,
                "price_usd": d.price,
                "tier": tiers[d.day].value if d.day in tiers else "",
            }
            for d in days
        ]
    )
    print(df.to_string(index=False))


def run_search(service: FareService, args) -> None:
    params = SearchParams.from_payload(
        {
            "departure_id": args.origin.upper(),
            "arrival_id": args.destination.upper(),
            "outbound_date": args.date,
            "adults": args.adults,
        }
    )
    criteria = FilterCriteria(
        airlines=frozenset(a.upper() for a in args.airline),
        max_price=args.max_price,
        direct_only=args.direct,
    )
    result = service.search(params, criteria, args.sort)
    if result.errors:
        print(f"Skipped {len(result.errors)} malformed offers.", file=sys.stderr)

    df = result.to_dataframe()
    _print_frame(df, "No flights found.")
    if args.output and not df.empty:
        df.to_csv(args.output, index=False)
        print(f"\nWrote {len(df)} rows to {args.output}", file=sys.stderr)


def run_summary(service: FareService, args) -> None:
    codes = [c.upper() for c in args.airports]
    for code, summary in service.airport_summaries(codes).items():
        price = f"${summary.min_price:g}" if summary.min_price > 0 else "-"
        print(f"{code}: from {price} to {summary.destination_count} destinations")

    if args.stats:
        stats = service.statistics()
        print(f"\nTotal fares: {stats.total_fares} ({stats.priced_fares} priced, {stats.direct_fares} direct)")
        if stats.cheapest_price is not None:
            print(f"Price range: ${stats.cheapest_price:g} - ${stats.dearest_price:g}")
        if stats.by_airline:
            print("\nBy airline:")
            print(stats.airline_dataframe().to_string(index=False))
        if stats.by_weekday:
            print("\nBy weekday:")
            print(stats.weekday_dataframe().to_string(index=False))
        if stats.by_route:
            print("\nBy route:")
            for route_key, count in sorted(stats.by_route.items()):
                print(f"  {route_key}: {count}")
        print()


def main(argv=None):
    args = parse_args(argv)
    settings = load_settings()
    setup_logging(settings.log_level)

    service = FareService.from_settings(settings)
    try:
        if args.command == "deals":
            run_deals(service, args, settings.default_airport)
        elif args.command == "calendar":
            run_calendar(service, args, settings.default_airport)
        elif args.command == "search":
            run_search(service, args)
        else:
            run_summary(service, args)
    except FaresError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
