# =============================================================================
# tools/mcp_server.py  —  FastMCP Tool Server for the rent roll
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Exposes the operation catalog (core/catalog.py) as MCP tools, plus the
#   schema://rent_roll resource.  Each tool is a thin wrapper: it logs the
#   request, hands the call to the dispatcher, and converts the outcome to
#   a dict.  The dispatcher is the only argument validator.
#
# HOW IT WORKS (the flow):
#   1. An MCP client (the ADK agent, or the desktop app) calls a tool by name
#   2. FastMCP routes the call to the CatalogTool of that name (built from
#      the catalog below), or to UnknownToolMiddleware for any other name
#   3. The tool calls dispatch(store, name, args) from core/
#   4. The dispatcher validates, builds the query, runs it, renders it
#   5. The client receives either
#        {"operation", "payload", "digest"}             on success, or
#        {"error_kind", "detail"[, "diagnostic"]}        on failure
#
# TOOL NAMING CONVENTIONS:
#   - get_*     → fixed read-only report (idempotent, safe to retry)
#   - search_*  → query with a caller filter (idempotent, safe to retry)
#   - custom_sql_query → TRUSTED CALLER pass-through.  The SQL runs verbatim.
#
# RUNNING THIS SERVER:
#     a) Standalone:  python -m tools.mcp_server
#     b) Spawned by the ADK agent (agent/rent_roll_agent.py) over stdio
#     c) Spawned by the desktop app (see setup_desktop_config.py)
# =============================================================================

import json
import logging
import signal
import sys
import threading
from dataclasses import asdict
from typing import Any, Optional

from dotenv import load_dotenv
from fastmcp import FastMCP
from fastmcp.server.middleware import Middleware, MiddlewareContext
from fastmcp.tools import Tool, ToolResult

# The tools layer depends on core/ and nothing else.
from core.catalog import CATALOG, dispatch, list_operations, schema_overview
from core.config import load_settings
from core.models import OperationFailure
from core.renderer import to_jsonable
from core.store import RentRollStore

load_dotenv()
settings = load_settings()

# =============================================================================
# Logging Setup
# =============================================================================
# We log to STDERR because stdout IS the MCP transport.  Anything printed to
# stdout would corrupt the JSON-RPC stream.
#
#   - CYAN for incoming requests (tool name + parameters)
#   - GREEN for responses
#   - YELLOW for intermediate status messages
# =============================================================================
_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RESET = "\033[0m"

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s [MCP] %(message)s",
    datefmt="%H:%M:%S",
    stream=sys.stderr,
)


def _log_request(tool_name: str, params: dict) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items())
    logging.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    """Log an intermediate status message in YELLOW."""
    logging.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, result: dict) -> dict:
    """Log a compact one-line summary of the response in GREEN, then return it."""
    if "error_kind" in result:
        summary = f"error_kind={result['error_kind']} detail={result['detail']!r}"
    else:
        payload = result["payload"]
        size = len(payload) if isinstance(payload, list) else 1
        summary = f"{size} item(s): {json.dumps(payload, separators=(',', ':'))[:200]}"
    logging.info(f"{_GREEN}  ← {tool_name} response: {summary}{_RESET}")
    return result


# =============================================================================
# The store
# =============================================================================
# Opened lazily on the first call, closed once on shutdown.  One lock
# serializes every call on the connection (sync resources may run on a
# worker thread).
# =============================================================================
_store: Optional[RentRollStore] = None
_store_lock = threading.Lock()


def get_store() -> RentRollStore:
    global _store
    if _store is None:
        _store = RentRollStore(settings.db_path)
        _log_status(f"Opened rent roll database at {settings.db_path}")
    return _store


def close_store() -> None:
    """Close the store; teardown failures are logged and ignored."""
    global _store
    if _store is None:
        return
    try:
        _store.close()
    except Exception as exc:
        logging.warning(f"Failed to close rent roll database cleanly: {exc}")
    finally:
        _store = None


def _call(tool_name: str, arguments: dict[str, Any]) -> dict:
    """Dispatch one catalog call and shape the outcome for MCP."""
    _log_request(tool_name, arguments)
    with _store_lock:
        outcome = dispatch(get_store(), tool_name, arguments)

    if isinstance(outcome, OperationFailure):
        result = {"error_kind": outcome.kind.value, "detail": outcome.detail}
        if outcome.diagnostic:
            result["diagnostic"] = outcome.diagnostic
        return _log_response(tool_name, result)

    result = to_jsonable(asdict(outcome))
    return _log_response(tool_name, result)


# =============================================================================
# TOOLS
# =============================================================================
# One MCP tool per catalog operation.  Name, description and input schema
# all come from list_operations(), so tools/list shows exactly what the
# catalog holds.  The raw pass-through is marked as a destructive tool.
# FastMCP does no argument checking of its own for these tools: a missing
# or mistyped argument reaches the dispatcher and comes back as error_kind
# "invalid_argument".
# =============================================================================
class CatalogTool(Tool):
    """A catalog operation published as an MCP tool."""

    @classmethod
    def from_listing(cls, entry: dict) -> "CatalogTool":
        trusted = entry["trusted_caller"]
        return cls(
            name=entry["name"],
            description=entry["description"],
            parameters=entry["input_schema"],
            annotations={"readOnlyHint": not trusted, "destructiveHint": trusted},
        )

    async def run(self, arguments: dict[str, Any]) -> ToolResult:
        return ToolResult(structured_content=_call(self.name, arguments))


class UnknownToolMiddleware(Middleware):
    """Answers calls to names outside the catalog with error_kind
    "unknown_operation" instead of FastMCP's plain-text "Unknown tool"."""

    async def on_call_tool(self, context: MiddlewareContext, call_next):
        name = context.message.name
        if name in CATALOG:
            return await call_next(context)
        return ToolResult(structured_content=_call(name, context.message.arguments or {}))


# =============================================================================
# Create the FastMCP server instance
# =============================================================================
mcp = FastMCP("rent-roll-mcp", middleware=[UnknownToolMiddleware()])

for _entry in list_operations():
    mcp.add_tool(CatalogTool.from_listing(_entry))


# =============================================================================
# RESOURCE: schema://rent_roll
# =============================================================================
# Clients read this once to learn the table's shape, its status codes and a
# few sample rows before writing their own SQL for custom_sql_query.
# =============================================================================
@mcp.resource(
    "schema://rent_roll",
    name="Database Schema",
    description="Complete schema and sample data from rent_roll database",
    mime_type="text/plain",
)
def rent_roll_schema() -> str:
    """Schema overview: quick stats, status codes, columns, sample data."""
    _log_request("schema://rent_roll", {})
    with _store_lock:
        overview = schema_overview(get_store())
    _log_status(f"Overview: {overview.total} units, {overview.occupancy_rate}% occupied")
    return overview.text


# =============================================================================
# Server entry point
# =============================================================================
def _handle_sigterm(signum, frame) -> None:
    raise SystemExit(0)


def main() -> None:
    signal.signal(signal.SIGTERM, _handle_sigterm)
    try:
        mcp.run()
    except KeyboardInterrupt:
        pass
    finally:
        close_store()


if __name__ == "__main__":
    main()
