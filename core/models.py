# =============================================================================
# core/models.py  —  Data Models (the "nouns" of the rent roll service)
# =============================================================================
#
# These dataclasses define the shape of everything that flows between the
# store, the query builder, the renderer and the dispatcher.  They carry
# almost no behavior.
#
# TWO FAMILIES OF MODELS:
#   1. Domain records:   UnitRecord, UnitStatus
#   2. Call plumbing:    Query, OperationResult, OperationFailure, ...
#
# The MCP layer (tools/) converts the plumbing models into plain dicts with
# dataclasses.asdict(), exactly the way the tools always have.
# =============================================================================

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Union


# -----------------------------------------------------------------------------
# UnitStatus — the four occupancy states a unit can be in
# -----------------------------------------------------------------------------
# The VALUE is the code stored in the database (and in the source export).
# Anything outside these four codes is rejected at load time.
# -----------------------------------------------------------------------------
class UnitStatus(str, Enum):
    OCCUPIED = "O"
    VACANT_UNIT = "VU"
    NOTICE_UNKNOWN = "NU"
    VACANT_READY = "VR"

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]

    @classmethod
    def codes(cls) -> tuple[str, ...]:
        return tuple(status.value for status in cls)


_STATUS_LABELS = {
    UnitStatus.OCCUPIED: "Occupied",
    UnitStatus.VACANT_UNIT: "Vacant Unit",
    UnitStatus.NOTICE_UNKNOWN: "Notice/Unknown",
    UnitStatus.VACANT_READY: "Vacant Ready",
}

# "Vacant and available" means either vacant flavour.
VACANT_STATUSES = (UnitStatus.VACANT_UNIT, UnitStatus.VACANT_READY)


# -----------------------------------------------------------------------------
# UnitRecord — one row of the rent roll
# -----------------------------------------------------------------------------
@dataclass
class UnitRecord:
    """One rental unit, keyed by its unit number.

    created_at / updated_at are NOT here: the store sets them, callers never
    supply them.
    """

    unit: int                               # Natural key, never reused
    name: str                               # Tenant name ("" for vacant units)
    type: str                               # "1x1.1", "2x2.3", ...
    status: UnitStatus
    sq_ft: Optional[int] = None
    monthly_rent: Optional[float] = None    # AUTOBILL in the source export
    deposit: Optional[float] = None
    moved_in: Optional[str] = None          # Stored exactly as supplied
    lease_ends: Optional[str] = None        # Stored exactly as supplied


# -----------------------------------------------------------------------------
# Query — what the query builder hands to the store
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class Query:
    """A SQL string plus its bind parameters, in order."""

    sql: str
    params: tuple = ()


# -----------------------------------------------------------------------------
# Unit-type search intent
# -----------------------------------------------------------------------------
# classify_unit_type() turns free text ("1-bedroom", "2 Bedroom", "1x1.2")
# into one of these two intents.  Keeping the intent separate from the SQL
# lets the heuristic be tested without a database.
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ByPrefix:
    prefix: str        # e.g. "1x1" → type LIKE '1x1%'


@dataclass(frozen=True)
class BySubstring:
    text: str          # e.g. "1x1.2" → type LIKE '%1x1.2%'


TypeIntent = Union[ByPrefix, BySubstring]


# -----------------------------------------------------------------------------
# Aggregate figures
# -----------------------------------------------------------------------------
@dataclass
class OccupancyStats:
    total: int
    occupied: int
    vacant: int                 # Vacant Unit + Vacant Ready
    notice: int                 # Notice/Unknown
    occupancy_rate: float       # Percent, one decimal place
    vacancy_rate: float         # 100 - occupancy_rate, one decimal place


@dataclass
class RevenueAnalysis:
    """Monthly rent figures.  Money is Decimal so loss == potential - occupied
    holds exactly."""

    occupied_revenue: Decimal   # Monthly rent actually coming in
    potential_revenue: Decimal  # Monthly rent if every priced unit were let
    vacancy_loss: Decimal       # potential - occupied
    average_rent: Decimal       # Over occupied units with a positive rent
    occupied_count: int         # Occupied units with a positive rent
    annual_revenue: Decimal
    annual_potential: Decimal


# -----------------------------------------------------------------------------
# ErrorKind — the stable tag every failure carries
# -----------------------------------------------------------------------------
# Callers branch on the kind.  The detail text is for humans only.
# -----------------------------------------------------------------------------
class ErrorKind(str, Enum):
    UNKNOWN_OPERATION = "unknown_operation"
    INVALID_ARGUMENT = "invalid_argument"
    QUERY_ERROR = "query_error"
    INTEGRITY_ERROR = "integrity_error"


# -----------------------------------------------------------------------------
# Call results
# -----------------------------------------------------------------------------
@dataclass
class OperationResult:
    """A successful call: machine payload + human digest."""

    operation: str
    payload: Any                # Rows (list of dicts) or a figures dict
    digest: str


@dataclass
class OperationFailure:
    """A failed call.  `diagnostic` holds the raw engine message, if any."""

    operation: str
    kind: ErrorKind
    detail: str
    diagnostic: Optional[str] = None


CallOutcome = Union[OperationResult, OperationFailure]


# -----------------------------------------------------------------------------
# Argument schema for catalog operations
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ArgumentSpec:
    name: str
    type: type                  # Expected scalar type (str, int, float, bool)
    description: str = ""
    required: bool = True


# -----------------------------------------------------------------------------
# SchemaOverview — the schema://rent_roll resource
# -----------------------------------------------------------------------------
@dataclass
class SchemaOverview:
    total: int
    occupied: int
    vacant: int
    occupancy_rate: float
    status_breakdown: list[dict] = field(default_factory=list)
    sample_rows: list[dict] = field(default_factory=list)
    text: str = ""
