# =============================================================================
# agent/__init__.py
# =============================================================================
# This package contains the Google ADK agent that lets someone ask the rent
# roll questions in plain English.
#
# ARCHITECTURAL ROLE:
#   The agent is the conversational relay in front of the MCP server:
#     1. Receives a question ("which leases end next year?")
#     2. Picks a tool (or writes SQL for custom_sql_query)
#     3. Restates the tool result in prose
#
# WHAT THE AGENT IS NOT:
#   - It is NOT the query logic (that's in core/)
#   - It is NOT the tool implementations (that's in tools/)
#   - It is NOT required: core/ and tools/ run without it
# =============================================================================
