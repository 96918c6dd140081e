# =============================================================================
# core/loader.py  —  Rent roll export → JSONL → UnitRecord
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Handles the two data-preparation steps that sit in front of the store:
#
#     1. convert_csv():  the property-management CSV export → source records
#        (dicts keyed by the export's own column names) → a JSONL file
#     2. read_jsonl() + to_unit_record():  JSONL → validated UnitRecords
#
# SOURCE FORMAT:
#   The export has a 6-line preamble (report title, property, date, ...),
#   then a header row, then one row per unit.  Page breaks repeat the header.
#   Money columns look like "$1,200.00".
#
#   Source field names:  Unit, Name, TYPE, SQ FT, AUTOBILL, DEPOSIT,
#                        MOVED IN, LEASE ENDS, STATUS
#
# Everything here is pure file/data handling, so it works with no database.
# =============================================================================

import csv
import json
import logging
import re
from pathlib import Path
from typing import Any, Iterable, Optional

from core.errors import IntegrityError
from core.models import UnitRecord, UnitStatus

logger = logging.getLogger(__name__)

# Lines of report preamble before the header row.
CSV_PREAMBLE_LINES = 6

_INT_COLUMNS = {"Unit", "SQ FT"}
_MONEY_COLUMNS = {"AUTOBILL", "DEPOSIT"}

_LEADING_INT = re.compile(r"^\s*[+-]?\d+")
_LEADING_FLOAT = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def _parse_int(value: str) -> Optional[int]:
    """Leading-integer parse; blanks, junk and zero become None."""
    match = _LEADING_INT.match(value)
    if not match:
        return None
    return int(match.group()) or None


def _parse_money(value: str) -> Optional[float]:
    """"$1,200.50" → 1200.5; blanks, junk and zero become None."""
    match = _LEADING_FLOAT.match(re.sub(r"[$,]", "", value))
    if not match:
        return None
    return float(match.group()) or None


def _cast_cell(column: str, value: str) -> Any:
    if column in _INT_COLUMNS:
        return _parse_int(value)
    if column in _MONEY_COLUMNS:
        return _parse_money(value)
    return value


# =============================================================================
# CSV → source records
# =============================================================================
def parse_csv(lines: Iterable[str]) -> list[dict[str, Any]]:
    """Parse the rent roll export into source records.

    Rows without a unit number or tenant name are skipped, and so are the
    header rows the export repeats at each page break.  Cells are trimmed;
    columns beyond the header are dropped.
    """
    rows = iter(lines)
    for _ in range(CSV_PREAMBLE_LINES):
        next(rows, None)

    reader = csv.DictReader(rows, skipinitialspace=True)
    if reader.fieldnames is not None:
        reader.fieldnames = [name.strip() for name in reader.fieldnames]

    records = []
    for raw in reader:
        record = {}
        for column, value in raw.items():
            # Unnamed and overflow columns carry nothing useful.
            if not column:
                continue
            record[column] = _cast_cell(column, (value or "").strip())

        # A repeated header row casts "Unit" to None, so it drops out here too.
        if record.get("Unit") and record.get("Name"):
            records.append(record)

    return records


def convert_csv(input_path: str | Path, output_path: str | Path) -> int:
    """Convert a rent roll CSV export into a JSONL file.

    Returns:
        The number of records written.
    """
    with open(input_path, newline="", encoding="utf-8-sig") as handle:
        records = parse_csv(handle)

    write_jsonl(records, output_path)
    logger.info("Converted %d rent roll records to %s", len(records), output_path)
    return len(records)


# =============================================================================
# JSONL
# =============================================================================
def write_jsonl(records: Iterable[dict[str, Any]], path: str | Path) -> None:
    content = "\n".join(json.dumps(record) for record in records)
    Path(path).write_text(content, encoding="utf-8")


def read_jsonl(path: str | Path) -> list[dict[str, Any]]:
    """Read one JSON object per line; blank lines are ignored."""
    content = Path(path).read_text(encoding="utf-8")
    return [json.loads(line) for line in content.strip().splitlines() if line.strip()]


# =============================================================================
# Source record → UnitRecord
# =============================================================================
def _non_negative(record: dict, key: str, unit: Any) -> Any:
    value = record.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        raise IntegrityError(f"Unit {unit}: {key} must be a non-negative number, got {value!r}")
    return value


def to_unit_record(record: dict[str, Any]) -> UnitRecord:
    """Map one source record onto a UnitRecord, validating as we go.

    Raises:
        IntegrityError: missing/invalid unit number, a status outside the four
            known codes, or a negative size/amount.
    """
    unit = record.get("Unit")
    if isinstance(unit, bool) or not isinstance(unit, int):
        raise IntegrityError(f"Record has no valid unit number: {unit!r}")

    status_code = record.get("STATUS")
    try:
        status = UnitStatus(status_code)
    except ValueError:
        raise IntegrityError(
            f"Unit {unit}: invalid status {status_code!r} "
            f"(expected one of {', '.join(UnitStatus.codes())})"
        ) from None

    sq_ft = _non_negative(record, "SQ FT", unit)

    return UnitRecord(
        unit=unit,
        name=record.get("Name") or "",
        type=record.get("TYPE") or "",
        status=status,
        sq_ft=int(sq_ft) if sq_ft is not None else None,
        monthly_rent=_non_negative(record, "AUTOBILL", unit),
        deposit=_non_negative(record, "DEPOSIT", unit),
        moved_in=record.get("MOVED IN") or None,
        lease_ends=record.get("LEASE ENDS") or None,
    )
