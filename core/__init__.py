# =============================================================================
# core/__init__.py
# =============================================================================
# This package contains ALL business logic for the rent roll service:
# the record store, the query builder, the renderer and the operation
# catalog/dispatcher, plus the data-preparation helpers (loader,
# desktop_config).
#
# CRITICAL ARCHITECTURAL RULE:
#   Nothing in this package imports Google ADK, FastMCP, or any LLM client.
#   Every module here is plain Python on top of the standard library's
#   sqlite3, so it can be tested with an in-memory database and no network.
#
# The conversational agent (agent/) is optional: core/ works the same with
# it entirely absent.
# =============================================================================
