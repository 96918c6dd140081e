# =============================================================================
# core/query_builder.py  —  Named operation → parameterized SQL
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Decides the exact query shape for every catalog operation and applies
#   the small amount of domain logic that lives in front of SQL:
#     - status grouping ("vacant" means VU or VR)
#     - unit-type phrase detection ("1-bedroom" → type LIKE '1x1%')
#     - free-text substring search
#
# THE ONE RULE:
#   Anything the caller supplies is a BOUND PARAMETER.  Only fragments the
#   builder itself chooses (table and column names) are part of the SQL text.
#   The raw pass-through query is the single, explicitly labelled exception.
#
# Everything here is pure: no connection, no I/O.
# =============================================================================

from core.models import (
    BySubstring,
    ByPrefix,
    Query,
    TypeIntent,
    UnitStatus,
    VACANT_STATUSES,
)
from core.store import TABLE

_OCCUPIED = UnitStatus.OCCUPIED.value
_NOTICE = UnitStatus.NOTICE_UNKNOWN.value
_VACANT = tuple(status.value for status in VACANT_STATUSES)

# Bedroom phrases and the type-code prefix each one maps to.
_BEDROOM_PHRASES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("1-bedroom", "1 bedroom"), "1x1"),
    (("2-bedroom", "2 bedroom"), "2x2"),
)

SAMPLE_SIZE = 3


def _placeholders(values: tuple) -> str:
    return ", ".join("?" for _ in values)


# =============================================================================
# Unit-type heuristic
# =============================================================================
def classify_unit_type(text: str) -> TypeIntent:
    """Turn a caller's unit-type phrase into a search intent.

    Matching is case-insensitive:
        "1-Bedroom apartments"  → ByPrefix("1x1")
        "2 BEDROOM"             → ByPrefix("2x2")
        "1x1.2"                 → BySubstring("1x1.2")
    """
    lowered = text.lower()
    for phrases, prefix in _BEDROOM_PHRASES:
        if any(phrase in lowered for phrase in phrases):
            return ByPrefix(prefix)
    return BySubstring(text)


def _like_pattern(intent: TypeIntent) -> str:
    if isinstance(intent, ByPrefix):
        return f"{intent.prefix}%"
    return f"%{intent.text}%"


# =============================================================================
# Catalog queries
# =============================================================================
def vacant_units() -> Query:
    return Query(
        f"SELECT unit, name, type, sq_ft, status FROM {TABLE} "
        f"WHERE status IN ({_placeholders(_VACANT)}) ORDER BY unit",
        _VACANT,
    )


def occupancy_stats() -> Query:
    """Four independent counts, each its own scalar sub-query."""
    return Query(
        f"SELECT "
        f"(SELECT COUNT(*) FROM {TABLE}) AS total, "
        f"(SELECT COUNT(*) FROM {TABLE} WHERE status = ?) AS occupied, "
        f"(SELECT COUNT(*) FROM {TABLE} WHERE status IN ({_placeholders(_VACANT)})) AS vacant, "
        f"(SELECT COUNT(*) FROM {TABLE} WHERE status = ?) AS notice",
        (_OCCUPIED, *_VACANT, _NOTICE),
    )


def units_by_type(unit_type: str) -> Query:
    intent = classify_unit_type(unit_type)
    return Query(
        f"SELECT * FROM {TABLE} WHERE type LIKE ? ORDER BY unit",
        (_like_pattern(intent),),
    )


def units_by_tenant(name: str) -> Query:
    return Query(
        f"SELECT * FROM {TABLE} WHERE name LIKE ? ORDER BY unit",
        (f"%{name}%",),
    )


def lease_expirations(year: str) -> Query:
    # Substring match: assumes the year appears verbatim in lease_ends.
    return Query(
        f"SELECT * FROM {TABLE} WHERE lease_ends LIKE ? AND status = ? "
        f"ORDER BY lease_ends",
        (f"%{year}%", _OCCUPIED),
    )


def revenue_analysis() -> Query:
    return Query(
        f"SELECT "
        f"(SELECT SUM(monthly_rent) FROM {TABLE} "
        f"WHERE status = ? AND monthly_rent > 0) AS occupied_revenue, "
        f"(SELECT COUNT(*) FROM {TABLE} "
        f"WHERE status = ? AND monthly_rent > 0) AS occupied_count, "
        f"(SELECT SUM(monthly_rent) FROM {TABLE} "
        f"WHERE monthly_rent > 0) AS potential_revenue, "
        f"(SELECT AVG(monthly_rent) FROM {TABLE} "
        f"WHERE status = ? AND monthly_rent > 0) AS average_rent",
        (_OCCUPIED, _OCCUPIED, _OCCUPIED),
    )


def raw(sql: str) -> Query:
    """Trusted-caller pass-through: the SQL runs verbatim, unparameterized."""
    return Query(sql)


# =============================================================================
# Schema overview queries
# =============================================================================
def status_breakdown() -> Query:
    return Query(f"SELECT status, COUNT(*) AS count FROM {TABLE} GROUP BY status")


def sample_rows(limit: int = SAMPLE_SIZE) -> Query:
    return Query(f"SELECT * FROM {TABLE} LIMIT ?", (limit,))

