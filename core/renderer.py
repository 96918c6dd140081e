# =============================================================================
# core/renderer.py  —  Rows → figures → human-readable digests
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Turns raw rows from the store into the two things every tool call
#   returns:
#     1. a structured payload (the rows as-is, or computed figures)
#     2. a digest: short Markdown an LLM (or a person) can read at a glance
#
# DIGEST LENGTH:
#   Search digests list at most 10 items, then say "Showing first 10 of M".
#   The full payload is still appended as a JSON block, so the headline is
#   short but nothing is dropped.
#
# FORMATTING RULES:
#   - Currency: thousands separators, no forced decimals when whole
#     (1200 → "1,200", 1234.5 → "1,234.5")
#   - Percentages: exactly one decimal place ("33.3")
#   - Money math uses Decimal, so vacancy loss is exactly potential - occupied.
# =============================================================================

import json
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional

from core.models import OccupancyStats, RevenueAnalysis, UnitStatus

SEARCH_DISPLAY_LIMIT = 10

_CENT = Decimal("0.01")
_TENTH = Decimal("0.1")


# =============================================================================
# Number helpers
# =============================================================================
def to_money(value: Optional[Any]) -> Decimal:
    """Aggregate → Decimal currency.  NULL (no matching rows) counts as 0."""
    if value is None:
        return Decimal("0")
    return Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP)


def occupancy_rate(occupied: int, total: int) -> float:
    """occupied / total as a percentage, one decimal place, 0.0 when empty."""
    if not total:
        return 0.0
    rate = Decimal(occupied) * 100 / Decimal(total)
    return float(rate.quantize(_TENTH, rounding=ROUND_HALF_UP))


def format_currency(value: Any) -> str:
    amount = to_money(value)
    if amount == amount.to_integral_value():
        return f"{int(amount):,}"
    return f"{amount:,.2f}".rstrip("0")


def format_percent(value: Any) -> str:
    return f"{Decimal(str(value)).quantize(_TENTH, rounding=ROUND_HALF_UP)}"


def _money(value: Any) -> str:
    return f"${format_currency(value)}" if value is not None else "n/a"


def _status_label(code: Any) -> str:
    try:
        return UnitStatus(code).label
    except ValueError:
        return str(code)


def _sq_ft(value: Any) -> str:
    return f"{value} sq ft" if value is not None else "sq ft n/a"


# =============================================================================
# JSON
# =============================================================================
def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, bytes):
        return value.hex()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def to_jsonable(payload: Any) -> Any:
    """Payload → plain JSON types (Decimal becomes int/float, blobs become hex)."""
    return json.loads(json.dumps(payload, default=_json_default))


def json_block(payload: Any) -> str:
    return f"```json\n{json.dumps(payload, indent=2, default=_json_default)}\n```"


def _truncation_note(shown: int, total: int) -> str:
    if total > shown:
        return f"\n\n*Showing first {shown} of {total} results*"
    return ""


# =============================================================================
# Figures
# =============================================================================
def compute_occupancy(row: dict) -> OccupancyStats:
    total = row.get("total") or 0
    occupied = row.get("occupied") or 0
    rate = occupancy_rate(occupied, total)
    return OccupancyStats(
        total=total,
        occupied=occupied,
        vacant=row.get("vacant") or 0,
        notice=row.get("notice") or 0,
        occupancy_rate=rate,
        vacancy_rate=float(Decimal(100) - Decimal(str(rate))),
    )


def compute_revenue(row: dict) -> RevenueAnalysis:
    occupied = to_money(row.get("occupied_revenue"))
    potential = to_money(row.get("potential_revenue"))
    return RevenueAnalysis(
        occupied_revenue=occupied,
        potential_revenue=potential,
        vacancy_loss=potential - occupied,
        average_rent=to_money(row.get("average_rent")),
        occupied_count=row.get("occupied_count") or 0,
        annual_revenue=occupied * 12,
        annual_potential=potential * 12,
    )


# =============================================================================
# Digests
# =============================================================================
def vacant_units_digest(rows: list[dict]) -> str:
    lines = [
        f"• **Unit {row['unit']}** - {row['type']} ({_sq_ft(row.get('sq_ft'))}) "
        f"- Status: {_status_label(row['status'])}"
        for row in rows
    ]
    return (
        f"**Vacant Units: {len(rows)} units available**\n\n"
        + "\n".join(lines)
        + f"\n\n**Details:**\n{json_block(rows)}"
    )


def occupancy_digest(stats: OccupancyStats) -> str:
    return (
        f"**📊 Occupancy Statistics**\n\n"
        f"**Overall Rate:** {format_percent(stats.occupancy_rate)}% occupied\n\n"
        f"**Breakdown:**\n"
        f"• **Total Units:** {stats.total}\n"
        f"• **Occupied:** {stats.occupied} units\n"
        f"• **Vacant Available:** {stats.vacant} units\n"
        f"• **Notice/Pending:** {stats.notice} units\n\n"
        f"**Vacancy Rate:** {format_percent(stats.vacancy_rate)}%"
    )


def units_by_type_digest(unit_type: str, rows: list[dict]) -> str:
    shown = rows[:SEARCH_DISPLAY_LIMIT]
    lines = [
        f"• **Unit {row['unit']}** - {row['name']} - {row['type']} "
        f"({_sq_ft(row.get('sq_ft'))}) - {_money(row.get('monthly_rent'))}/month "
        f"- {_status_label(row['status'])}"
        for row in shown
    ]
    return (
        f'**Units matching "{unit_type}": {len(rows)} found**\n\n'
        + "\n".join(lines)
        + _truncation_note(len(shown), len(rows))
        + f"\n\n**Full Data:**\n{json_block(rows)}"
    )


def tenant_search_digest(name: str, rows: list[dict]) -> str:
    shown = rows[:SEARCH_DISPLAY_LIMIT]
    lines = [
        f"• **{row['name']}** - Unit {row['unit']} - {row['type']} "
        f"- {_money(row.get('monthly_rent'))}/month"
        for row in shown
    ]
    return (
        f'**Tenants matching "{name}": {len(rows)} found**\n\n'
        + "\n".join(lines)
        + _truncation_note(len(shown), len(rows))
        + f"\n\n**Details:**\n{json_block(rows)}"
    )


def lease_expirations_digest(year: str, rows: list[dict]) -> str:
    lines = [
        f"• **{row['name']}** - Unit {row['unit']} - Expires: {row['lease_ends']} "
        f"- {_money(row.get('monthly_rent'))}/month"
        for row in rows
    ]
    return (
        f"**Leases expiring in {year}: {len(rows)} leases**\n\n"
        + "\n".join(lines)
        + f"\n\n**Details:**\n{json_block(rows)}"
    )


def revenue_digest(revenue: RevenueAnalysis) -> str:
    return (
        f"**💰 Revenue Analysis**\n\n"
        f"**Current Monthly Revenue:** ${format_currency(revenue.occupied_revenue)}\n"
        f"**Potential Monthly Revenue:** ${format_currency(revenue.potential_revenue)}\n"
        f"**Revenue Loss from Vacancy:** ${format_currency(revenue.vacancy_loss)}\n\n"
        f"**Average Rent:** ${revenue.average_rent:,.2f}/month\n"
        f"**Occupied Units Generating Revenue:** {revenue.occupied_count}\n\n"
        f"**Annual Projections:**\n"
        f"• Current Annual Revenue: ${format_currency(revenue.annual_revenue)}\n"
        f"• Potential Annual Revenue: ${format_currency(revenue.annual_potential)}"
    )


def raw_query_digest(sql: str, rows: list[dict]) -> str:
    return (
        f"**SQL Query:** `{sql}`\n\n"
        f"**Results:** {len(rows)} rows returned\n\n"
        f"{json_block(rows)}"
    )


def schema_overview_text(
    total: int,
    occupied: int,
    vacant: int,
    rate: float,
    breakdown: list[dict],
    samples: list[dict],
) -> str:
    status_lines = "\n".join(f"- {row['status']}: {row['count']} units" for row in breakdown)
    legend = "\n".join(f"- '{status.value}' = {status.label}" for status in UnitStatus)
    return f"""# Rent Roll Database Overview

## Quick Stats
- **Total Units:** {total}
- **Occupied:** {occupied} ({format_percent(rate)}%)
- **Vacant:** {vacant}

## Status Codes
{legend}

## Status Breakdown
{status_lines}

## Available Columns
- unit: Unit number
- name: Tenant name
- type: Unit type (1x1.1, 1x1.2, 1x1.3, 2x2.1, etc.)
- sq_ft: Square footage
- monthly_rent: Monthly rent amount
- deposit: Security deposit
- moved_in: Move-in date
- lease_ends: Lease end date
- status: Occupancy status

## Sample Data
{json.dumps(samples, indent=2, default=_json_default)}"""
