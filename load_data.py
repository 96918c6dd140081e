# =============================================================================
# load_data.py  —  Rent roll data preparation CLI
# =============================================================================
#
# HOW TO RUN:
#   python load_data.py convert Anonymized_Rent_Roll.csv rent_roll.jsonl
#   python load_data.py load rent_roll.jsonl [--db rent_roll.db]
#
# WHAT HAPPENS:
#   convert  →  reads the property-management CSV export, casts numbers and
#               money, drops preamble/blank/header rows, writes JSONL
#   load     →  upserts every JSONL record into the SQLite store by unit
#               number.  The batch is all-or-nothing: one bad status and
#               nothing is written.
# =============================================================================

import argparse
import logging
import sys

from dotenv import load_dotenv

from core.config import load_settings
from core.errors import IntegrityError
from core.loader import convert_csv
from core.store import RentRollStore


def _convert(args: argparse.Namespace) -> int:
    print("Converting Rent Roll CSV to JSONL...")
    try:
        count = convert_csv(args.input, args.output)
    except OSError as exc:
        print(f"❌ Conversion failed: {exc}", file=sys.stderr)
        return 1
    print(f"✅ Converted {count} rent roll records from CSV to JSONL")
    print(f"📍 Output saved to: {args.output}")
    return 0


def _load(args: argparse.Namespace) -> int:
    db_path = args.db or load_settings().db_path
    with RentRollStore(db_path) as store:
        try:
            count = store.load_jsonl(args.jsonl)
        except IntegrityError as exc:
            print(f"❌ Load failed, nothing was written: {exc.detail}", file=sys.stderr)
            return 1
        except (OSError, ValueError) as exc:
            # Unreadable file or a malformed JSONL line (JSONDecodeError)
            print(f"❌ Load failed, nothing was written: {exc}", file=sys.stderr)
            return 1
        print(f"✅ Inserted {count} records from {args.jsonl} into {db_path}")
        print(f"   Table now holds {store.count()} units")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Prepare and load rent roll data.")
    commands = parser.add_subparsers(dest="command", required=True)

    convert = commands.add_parser("convert", help="Convert a rent roll CSV export to JSONL")
    convert.add_argument("input", help="CSV export, e.g. Anonymized_Rent_Roll.csv")
    convert.add_argument("output", help="JSONL file to write, e.g. rent_roll.jsonl")
    convert.set_defaults(func=_convert)

    load = commands.add_parser("load", help="Upsert a JSONL file into the database")
    load.add_argument("jsonl", help="JSONL file produced by `convert`")
    load.add_argument("--db", help="SQLite file (default: $DB_PATH or ./rent_roll.db)")
    load.set_defaults(func=_load)

    return parser


def main(argv=None) -> int:
    load_dotenv()
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(message)s")
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
