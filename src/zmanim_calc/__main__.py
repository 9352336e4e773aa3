"""Command-line entrypoint for zmanim_calc."""

from __future__ import annotations

import argparse
import logging
import os
from collections.abc import Sequence
from datetime import date, datetime

from zmanim_calc.contracts import (
    HorizonConvention,
    InvalidInputError,
    Location,
    MethodSelection,
    NamedZman,
    ShaahZmanisConvention,
)
from zmanim_calc.halacha.derivation import compute_zmanim
from zmanim_calc.halacha.formatting import (
    ZMAN_LABELS,
    describe_relative,
    format_duration,
    format_time,
)
from zmanim_calc.orchestrate.batch import DateRange, compute_range

logger = logging.getLogger(__name__)

_RANGE_COLUMNS = (
    NamedZman.ALOS,
    NamedZman.SUNRISE,
    NamedZman.SOF_ZMAN_SHMA,
    NamedZman.CHATZOS,
    NamedZman.PLAG_HAMINCHA,
    NamedZman.SUNSET,
    NamedZman.TZEIS,
)


def _parse_iso_date(value: str) -> date:
    """Parse ISO calendar date string."""
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid date: {value}") from exc


def _add_location_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--lat", type=float, required=True)
    parser.add_argument("--lon", type=float, required=True)
    parser.add_argument("--elevation", type=float, default=0.0)
    parser.add_argument("--tz", default="UTC")
    parser.add_argument("--name", default="")
    parser.add_argument(
        "--sunrise-method",
        choices=[member.value for member in HorizonConvention],
        default=HorizonConvention.ELEVATION.value,
    )
    parser.add_argument(
        "--sunset-method",
        choices=[member.value for member in HorizonConvention],
        default=HorizonConvention.ELEVATION.value,
    )
    parser.add_argument(
        "--shaah-method",
        choices=[member.value for member in ShaahZmanisConvention],
        default=ShaahZmanisConvention.GRA.value,
    )


def build_parser() -> argparse.ArgumentParser:
    """Create and return the top-level CLI parser."""
    parser = argparse.ArgumentParser(
        prog="zmanim_calc",
        description="Halachic times (zmanim) command-line interface.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 0.1.0",
    )

    subparsers = parser.add_subparsers(dest="command")
    zmanim = subparsers.add_parser("zmanim", help="Print all zmanim for one date.")
    _add_location_arguments(zmanim)
    zmanim.add_argument("--date", type=_parse_iso_date, default=None)

    range_ = subparsers.add_parser("range", help="Print key zmanim for each date of a range.")
    _add_location_arguments(range_)
    range_.add_argument("--start", type=_parse_iso_date, required=True)
    range_.add_argument("--end", type=_parse_iso_date, required=True)

    return parser


def _configure_logging() -> None:
    level_name = os.getenv("ZMANIM_LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO))


def _location_and_methods(
    parser: argparse.ArgumentParser, args: argparse.Namespace
) -> tuple[Location, MethodSelection]:
    try:
        location = Location(
            latitude=args.lat,
            longitude=args.lon,
            elevation_m=args.elevation,
            timezone_id=args.tz,
            display_name=args.name,
        )
        methods = MethodSelection.from_values(
            sunrise=args.sunrise_method,
            sunset=args.sunset_method,
            shaah_zmanis=args.shaah_method,
        )
    except InvalidInputError as exc:
        parser.error(str(exc))
    return location, methods


def _print_day(location: Location, methods: MethodSelection, day: date) -> None:
    result = compute_zmanim(day, location, methods)
    tz = location.tzinfo
    print(f"{location.label} ({location.latitude:.4f}, {location.longitude:.4f}) {day.isoformat()}")
    for kind in NamedZman:
        relative = describe_relative(result, kind)
        line = f"  {ZMAN_LABELS[kind]:<30} {format_time(result.get(kind), tz)}"
        print(f"{line}  {relative}" if relative else line)
    day_minutes = result.day_length.total_seconds() / 60.0 if result.day_length else None
    print(f"  {'Day Length':<30} {format_duration(day_minutes)}")
    print(
        f"  {'Shaah Zmanis':<30} {format_duration(result.shaah_zmanis.minutes)}"
        f" ({result.shaah_zmanis.convention.value}, {result.shaah_zmanis.status.value})"
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI application."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        return 0

    _configure_logging()
    location, methods = _location_and_methods(parser, args)

    if args.command == "zmanim":
        day = args.date or datetime.now(location.tzinfo).date()
        try:
            _print_day(location, methods, day)
        except InvalidInputError as exc:
            parser.error(str(exc))
        return 0

    if args.command == "range":
        try:
            results = compute_range(DateRange(start=args.start, end=args.end), location, methods)
        except ValueError as exc:
            parser.error(str(exc))
        tz = location.tzinfo
        for result in results:
            cells = " ".join(format_time(result.get(kind), tz) for kind in _RANGE_COLUMNS)
            print(f"{result.date.isoformat()} {cells}")
        logger.info("range complete days=%d", len(results))
        return 0

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
