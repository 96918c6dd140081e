# =============================================================================
# core/errors.py  —  Error taxonomy for the rent roll service
# =============================================================================
#
# Every failure the service can report belongs to exactly one of four kinds.
# Each exception carries:
#   - kind:        the stable ErrorKind tag (what callers branch on)
#   - detail:      a human-readable sentence
#   - diagnostic:  the raw engine message, when there is one (opaque text)
#
# The dispatcher (core/catalog.py) catches RentRollError at its boundary and
# turns it into an OperationFailure, so none of these escape a tool call.
# =============================================================================

from typing import Optional

from core.models import ErrorKind


class RentRollError(Exception):
    """Base class for every error the service reports."""

    kind: ErrorKind

    def __init__(self, detail: str, diagnostic: Optional[str] = None):
        super().__init__(detail)
        self.detail = detail
        self.diagnostic = diagnostic


class UnknownOperation(RentRollError):
    """The requested operation name is not in the catalog."""

    kind = ErrorKind.UNKNOWN_OPERATION

    def __init__(self, name: str):
        super().__init__(f"Unknown operation: {name}")
        self.name = name


class InvalidArgument(RentRollError):
    """A required argument is missing or has the wrong scalar type."""

    kind = ErrorKind.INVALID_ARGUMENT

    def __init__(self, field: str, detail: str):
        super().__init__(detail)
        self.field = field


class QueryError(RentRollError):
    """The storage engine rejected a statement."""

    kind = ErrorKind.QUERY_ERROR


class IntegrityError(RentRollError):
    """A bulk load batch contained an invalid record; nothing was written."""

    kind = ErrorKind.INTEGRITY_ERROR
