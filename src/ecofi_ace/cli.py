"""Command-line entry point.

Usage:
    ecofi-ace translate BdD_weather.accdb -o weather.aceb
    ecofi-ace dictionary -o ecofi_fields.xlsx [BdD_weather.accdb]
"""

import argparse
import sys
from pathlib import Path

from ecofi_ace import translator
from ecofi_ace.ace.generator import ACEB_SUFFIX, write_file
from ecofi_ace.dictionary import write_dictionary
from ecofi_ace.logging_config import get_logger, setup_logging

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ecofi-ace",
        description="Translate Ecofi weather databases into ACE datasets",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (DEBUG logs every database row)",
    )
    parser.add_argument(
        "--driver",
        default=None,
        help="ODBC driver name (default: Microsoft Access driver on Windows, MDBTools elsewhere)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    translate = subparsers.add_parser("translate", help="Write the weather of a database as ACE")
    translate.add_argument("database", type=Path, help="Ecofi .accdb or .mdb file")
    translate.add_argument(
        "-o", "--output", type=Path, help="Output file (default: database name with .aceb)"
    )
    translate.add_argument(
        "--no-compress",
        action="store_true",
        help="Write plain JSON instead of gzipped .aceb",
    )

    dictionary = subparsers.add_parser("dictionary", help="Write the Ecofi to ACE field dictionary")
    dictionary.add_argument(
        "database", type=Path, nargs="?", help="Optional database to read column types from"
    )
    dictionary.add_argument(
        "-o", "--output", type=Path, default=Path("ecofi_ace_fields.xlsx"), help="Output workbook"
    )
    return parser


def run_translate(args: argparse.Namespace) -> int:
    dataset = translator.read(args.database, driver=args.driver)
    if len(dataset) == 0:
        logger.error("No weather stations found in %s", args.database)
        return 1

    output = args.output or args.database.with_suffix(ACEB_SUFFIX)
    if args.no_compress and output.suffix.lower() == ACEB_SUFFIX:
        output = output.with_suffix(".json")
    write_file(output, dataset)

    days = sum(len(weather.daily_weather) for weather in dataset)
    print(f"Wrote {len(dataset)} stations, {days} daily records to {output}")
    return 0


def run_dictionary(args: argparse.Namespace) -> int:
    output = write_dictionary(args.output, args.database, driver=args.driver)
    print(f"Saved: {output}")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        setup_logging(args.log_level)
    except ValueError:
        print(f"ERROR: Unknown log level: {args.log_level}", file=sys.stderr)
        return 2

    if args.command == "translate":
        return run_translate(args)
    return run_dictionary(args)


if __name__ == "__main__":
    sys.exit(main())
