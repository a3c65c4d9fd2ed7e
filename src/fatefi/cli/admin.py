"""Admin CLI for one-off operations against the configured database.

Usage:
  poetry run fatefi-admin init-db
  poetry run fatefi-admin record-price
  poetry run fatefi-admin resolve-day 2025-03-14
  poetry run fatefi-admin create-draw
  poetry run fatefi-admin draw 2025-03-14
"""
import argparse
import asyncio
import json
import logging
import sys
from datetime import date as date_type

from fatefi.config import settings
from fatefi.db.sessions import engine, init_db
from fatefi.providers import CoinGeckoProvider, MirrorStore
from fatefi.services import (DayResolver, DrawService, MarketClock,
                             PriceTracker, ScoringEngine)
from fatefi.services.tarot import draw_card_for_date


def print_json(data: object) -> None:
    print(json.dumps(data, indent=2, default=str))


def _market_date(value: str) -> str:
    try:
        return date_type.fromisoformat(value).isoformat()
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not a YYYY-MM-DD date: {value!r}") from exc


def _clock() -> MarketClock:
    return MarketClock(settings.market_timezone)


def _mirror() -> MirrorStore:
    return MirrorStore(settings.mirror_database_url, timeout=settings.mirror_timeout_s)


def cmd_init_db(_: argparse.Namespace) -> int:
    init_db(engine)
    print("Tables created")
    return 0


async def _record_price() -> int:
    mirror = _mirror()
    async with CoinGeckoProvider(
        api_key=settings.coingecko_api_key, timeout=settings.price_timeout_s
    ) as provider:
        tracker = PriceTracker(
            provider, _clock(), engine=engine, mirror=mirror, asset=settings.price_asset
        )
        snapshot = await tracker.record_price()
    mirror.close()
    if snapshot is None:
        print("Price fetch failed", file=sys.stderr)
        return 1
    print_json(snapshot.model_dump())
    return 0


def cmd_record_price(_: argparse.Namespace) -> int:
    return asyncio.run(_record_price())


def cmd_resolve_day(args: argparse.Namespace) -> int:
    mirror = _mirror()
    resolver = DayResolver(
        ScoringEngine(
            engine,
            points_correct=settings.points_correct,
            streak_bonus=settings.streak_bonus,
        ),
        engine=engine,
        mirror=mirror,
        volatility_threshold=settings.volatility_threshold,
    )
    try:
        resolved = asyncio.run(resolver.resolve_day(args.date))
    finally:
        mirror.close()
    print(f"{args.date}: {'resolved' if resolved else 'nothing to resolve'}")
    return 0


def cmd_create_draw(args: argparse.Namespace) -> int:
    draw = DrawService(_clock(), engine=engine).ensure_draw(args.date)
    print_json(draw.model_dump())
    return 0


def cmd_draw(args: argparse.Namespace) -> int:
    card, orientation = draw_card_for_date(args.date)
    print(f"{args.date}: {card.name} ({orientation.value})")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="FateFi admin commands.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True, help="Command")

    subparsers.add_parser("init-db", help="Create database tables")
    subparsers.add_parser("record-price", help="Fetch the spot price once and update today")
    p = subparsers.add_parser("resolve-day", help="Resolve a market day and score it")
    p.add_argument("date", type=_market_date, help="Market date (YYYY-MM-DD)")
    p = subparsers.add_parser("create-draw", help="Create the draw for a date if missing")
    p.add_argument(
        "date", nargs="?", type=_market_date, default=None,
        help="Market date (default: today in the market timezone)",
    )
    p = subparsers.add_parser("draw", help="Print the deterministic card for a date")
    p.add_argument("date", type=_market_date, help="Market date (YYYY-MM-DD)")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    handlers = {
        "init-db": cmd_init_db,
        "record-price": cmd_record_price,
        "resolve-day": cmd_resolve_day,
        "create-draw": cmd_create_draw,
        "draw": cmd_draw,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
