# =============================================================================
# tools/__init__.py
# =============================================================================
# This package contains the FastMCP server that exposes the rent roll.
#
# ARCHITECTURAL ROLE:
#   tools/ is the translation layer between MCP clients and core/.  The
#   server here:
#     1. Registers one MCP tool per catalog operation (core/catalog.py)
#     2. Hands every call to the dispatcher
#     3. Converts results to plain dicts for JSON
#     4. Publishes the schema://rent_roll resource
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT build SQL or format figures (that's core/)
#   - They do NOT validate arguments themselves (the dispatcher does)
#   - They do NOT know about Google ADK (any MCP client can connect)
# =============================================================================
