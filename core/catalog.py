# =============================================================================
# core/catalog.py  —  Tool Registry & Dispatcher
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Holds the FIXED catalog of operations the service can perform and runs
#   a call through it:
#
#       Received → Validated → Executed → Rendered → Returned
#                ↘ Rejected (unknown name / bad argument, no store access)
#                             ↘ Failed (the store raised QueryError)
#
# HOW THE CATALOG IS SHAPED:
#   Each entry is an Operation: a name, a description, an argument schema
#   (ArgumentSpecs) and a handler `(store, args) -> OperationResult`.  The
#   dispatcher looks the name up, validates against the schema, then calls
#   the handler.  There is no switch on operation name anywhere.
#
# ERROR BOUNDARY:
#   dispatch() NEVER raises a RentRollError.  Every failure comes back as an
#   OperationFailure carrying a stable ErrorKind, so the MCP layer never has
#   to catch anything.
# =============================================================================

import logging
from dataclasses import asdict, dataclass
from typing import Any, Callable, Mapping, Optional

from core import query_builder, renderer
from core.errors import InvalidArgument, RentRollError, UnknownOperation
from core.models import (
    ArgumentSpec,
    CallOutcome,
    OperationFailure,
    OperationResult,
    Query,
    SchemaOverview,
)
from core.store import RentRollStore

logger = logging.getLogger(__name__)

Handler = Callable[[RentRollStore, dict], OperationResult]

_JSON_TYPES = {str: "string", int: "integer", float: "number", bool: "boolean"}


@dataclass(frozen=True)
class Operation:
    name: str
    description: str
    arguments: tuple[ArgumentSpec, ...]
    handler: Handler
    trusted_caller: bool = False    # True only for the raw pass-through

    def input_schema(self) -> dict:
        """The argument schema as a JSON-schema object."""
        return {
            "type": "object",
            "properties": {
                spec.name: {"type": _JSON_TYPES[spec.type], "description": spec.description}
                for spec in self.arguments
            },
            "required": [spec.name for spec in self.arguments if spec.required],
        }


def _run(store: RentRollStore, query: Query) -> list[dict]:
    return store.execute(query.sql, query.params)


# =============================================================================
# Handlers
# =============================================================================
def _vacant_units(store: RentRollStore, args: dict) -> OperationResult:
    rows = _run(store, query_builder.vacant_units())
    return OperationResult("get_vacant_units", rows, renderer.vacant_units_digest(rows))


def _occupancy_stats(store: RentRollStore, args: dict) -> OperationResult:
    row = _run(store, query_builder.occupancy_stats())[0]
    stats = renderer.compute_occupancy(row)
    return OperationResult("get_occupancy_stats", asdict(stats), renderer.occupancy_digest(stats))


def _units_by_type(store: RentRollStore, args: dict) -> OperationResult:
    unit_type = args["unit_type"]
    rows = _run(store, query_builder.units_by_type(unit_type))
    return OperationResult(
        "search_units_by_type", rows, renderer.units_by_type_digest(unit_type, rows)
    )


def _tenant_search(store: RentRollStore, args: dict) -> OperationResult:
    name = args["name"]
    rows = _run(store, query_builder.units_by_tenant(name))
    return OperationResult("search_by_tenant_name", rows, renderer.tenant_search_digest(name, rows))


def _lease_expirations(store: RentRollStore, args: dict) -> OperationResult:
    year = args["year"]
    rows = _run(store, query_builder.lease_expirations(year))
    return OperationResult(
        "get_lease_expirations", rows, renderer.lease_expirations_digest(year, rows)
    )


def _revenue_analysis(store: RentRollStore, args: dict) -> OperationResult:
    row = _run(store, query_builder.revenue_analysis())[0]
    revenue = renderer.compute_revenue(row)
    return OperationResult("get_revenue_analysis", asdict(revenue), renderer.revenue_digest(revenue))


def _custom_sql(store: RentRollStore, args: dict) -> OperationResult:
    sql = args["sql"]
    rows = _run(store, query_builder.raw(sql))
    return OperationResult("custom_sql_query", rows, renderer.raw_query_digest(sql, rows))


# =============================================================================
# The catalog
# =============================================================================
# The description is what an LLM reads to decide WHEN to call an operation,
# so each one says what comes back and when it's the right choice.  The MCP
# server publishes these entries as-is.
# =============================================================================
_OPERATIONS = (
    Operation(
        name="get_vacant_units",
        description=(
            "Get all vacant rental units (status Vacant Unit or Vacant Ready). "
            "Returns every vacant unit with unit, name, type, sq_ft and status, "
            "ordered by unit."
        ),
        arguments=(),
        handler=_vacant_units,
    ),
    Operation(
        name="get_occupancy_stats",
        description=(
            "Get occupancy rate and statistics: total, occupied, vacant and "
            "notice counts plus occupancy and vacancy rates (percent, one "
            "decimal place)."
        ),
        arguments=(),
        handler=_occupancy_stats,
    ),
    Operation(
        name="search_units_by_type",
        description=(
            "Search for units by type (1-bedroom, 2-bedroom, etc.). Bedroom "
            "phrases match every variant of that layout; anything else is a "
            "case-insensitive substring match on the type code. The digest "
            "lists the first 10 matches."
        ),
        arguments=(
            ArgumentSpec(
                "unit_type", str,
                'Unit type: "1-bedroom" or "2-bedroom" or specific like "1x1.1"',
            ),
        ),
        handler=_units_by_type,
    ),
    Operation(
        name="search_by_tenant_name",
        description=(
            "Search for units by tenant name (partial, case-insensitive). "
            "The digest lists the first 10 matches."
        ),
        arguments=(ArgumentSpec("name", str, "Tenant name to search for (partial matches allowed)"),),
        handler=_tenant_search,
    ),
    Operation(
        name="get_lease_expirations",
        description=(
            "Get occupied units whose lease expires in a specific year, "
            "ordered by lease end date."
        ),
        arguments=(ArgumentSpec("year", str, 'Year to check (e.g., "2025")'),),
        handler=_lease_expirations,
    ),
    Operation(
        name="get_revenue_analysis",
        description=(
            "Get rental revenue analysis: current and potential monthly revenue, "
            "loss from vacancy, average rent and annual projections."
        ),
        arguments=(),
        handler=_revenue_analysis,
    ),
    Operation(
        name="custom_sql_query",
        description=(
            "Execute a custom SQL query on the rent roll data. TRUSTED CALLER: "
            "the statement runs verbatim against the rent_roll table (read the "
            "schema://rent_roll resource for its columns). Writes and "
            "transaction statements take effect on the shared connection, so a "
            "BEGIN must be followed by COMMIT or ROLLBACK. Use the dedicated "
            "operations when one fits; a rejected statement returns "
            "error_kind query_error with the engine's message."
        ),
        arguments=(ArgumentSpec("sql", str, "SQL query to execute"),),
        handler=_custom_sql,
        trusted_caller=True,
    ),
)

CATALOG: Mapping[str, Operation] = {op.name: op for op in _OPERATIONS}


def list_operations() -> list[dict]:
    """Every operation with its description and argument schema."""
    return [
        {
            "name": op.name,
            "description": op.description,
            "input_schema": op.input_schema(),
            "trusted_caller": op.trusted_caller,
        }
        for op in CATALOG.values()
    ]


# =============================================================================
# Validation
# =============================================================================
def _matches(value: Any, expected: type) -> bool:
    # bool is an int subclass; never let True pass for an int (or vice versa).
    if isinstance(value, bool):
        return expected is bool
    if expected is float:
        return isinstance(value, (int, float))
    return isinstance(value, expected)


def validate_arguments(operation: Operation, arguments: Optional[Mapping[str, Any]]) -> dict:
    """Check arguments against the operation's schema.

    Returns:
        The validated arguments (only names the schema knows).

    Raises:
        InvalidArgument: naming the first missing or mistyped field.
    """
    arguments = arguments or {}
    validated = {}
    for spec in operation.arguments:
        if spec.name not in arguments or arguments[spec.name] is None:
            if spec.required:
                raise InvalidArgument(spec.name, f"{spec.name} is required")
            continue
        value = arguments[spec.name]
        if not _matches(value, spec.type):
            raise InvalidArgument(
                spec.name,
                f"{spec.name} must be of type {_JSON_TYPES[spec.type]}, "
                f"got {type(value).__name__}",
            )
        validated[spec.name] = value

    extra = set(arguments) - {spec.name for spec in operation.arguments}
    if extra:
        logger.debug("Ignoring unexpected arguments for %s: %s", operation.name, sorted(extra))
    return validated


# =============================================================================
# Dispatch
# =============================================================================
def dispatch(
    store: RentRollStore,
    name: str,
    arguments: Optional[Mapping[str, Any]] = None,
) -> CallOutcome:
    """Run one call through the catalog.

    Args:
        store: The record store to query.
        name: Operation name (must be a CATALOG key).
        arguments: Operation arguments, validated against its schema.

    Returns:
        OperationResult on success, OperationFailure otherwise.  Validation
        failures never touch the store.
    """
    try:
        operation = CATALOG.get(name)
        if operation is None:
            raise UnknownOperation(name)
        args = validate_arguments(operation, arguments)
        return operation.handler(store, args)
    except RentRollError as exc:
        logger.info("%s failed (%s): %s", name, exc.kind.value, exc.detail)
        return OperationFailure(
            operation=name,
            kind=exc.kind,
            detail=exc.detail,
            diagnostic=exc.diagnostic,
        )


# =============================================================================
# Schema overview (the schema://rent_roll resource)
# =============================================================================
def schema_overview(store: RentRollStore) -> SchemaOverview:
    """Aggregate stats, per-status breakdown and the first 3 rows.

    Read-only and idempotent.  Store errors propagate (QueryError).
    """
    counts = _run(store, query_builder.occupancy_stats())[0]
    total, occupied, vacant = counts["total"], counts["occupied"], counts["vacant"]
    rate = renderer.occupancy_rate(occupied, total)
    breakdown = _run(store, query_builder.status_breakdown())
    samples = _run(store, query_builder.sample_rows())

    return SchemaOverview(
        total=total,
        occupied=occupied,
        vacant=vacant,
        occupancy_rate=rate,
        status_breakdown=breakdown,
        sample_rows=samples,
        text=renderer.schema_overview_text(total, occupied, vacant, rate, breakdown, samples),
    )
