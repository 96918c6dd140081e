# =============================================================================
# agent/rent_roll_agent.py  —  Google ADK Agent Configuration
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Creates the ADK agent that turns a user's free-text question into tool
#   calls against the rent roll MCP server, then restates the results.
#
# ARCHITECTURE:
#
#   ┌──────────────────────────────────────────────────────────────┐
#   │                      Google ADK Agent                        │
#   │   system prompt  ──▶  LLM (via LiteLlm)  ──▶  MCPToolset     │
#   └──────────────────────────────────────────────────────────────┘
#                                                     │ stdio
#                                                     ▼
#                                       ┌──────────────────────────┐
#                                       │  FastMCP server          │
#                                       │  (tools/mcp_server.py)   │
#                                       └──────────────────────────┘
#                                                     │
#                                                     ▼
#                                       ┌──────────────────────────┐
#                                       │  core/ catalog + SQLite  │
#                                       └──────────────────────────┘
#
# The agent holds no business logic and never touches the database
# directly.  Everything it knows comes back through MCP tool results.
#
# MODEL:
#   Any LiteLlm model string works; the default routes GPT-4o through
#   OpenRouter.  Override it with RENT_ROLL_MODEL.
# =============================================================================

import os
import sys
from typing import Optional

from google.adk.agents import Agent
from google.adk.models.lite_llm import LiteLlm
from google.adk.tools.mcp_tool import MCPToolset, StdioConnectionParams
from mcp import StdioServerParameters

from agent.prompt import get_rent_roll_prompt
from core.config import Settings, load_settings


def create_agent(settings: Optional[Settings] = None) -> Agent:
    """Create and configure the rent roll assistant.

    The MCP server is started as a subprocess with the same interpreter, run
    from the project root so `core` and `tools` are importable, and with
    DB_PATH passed through so both sides open the same database.

    Returns:
        A configured Google ADK Agent instance.
    """
    settings = settings or load_settings()
    project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

    mcp_tools = MCPToolset(
        connection_params=StdioConnectionParams(
            server_params=StdioServerParameters(
                command=sys.executable,
                args=["-m", "tools.mcp_server"],
                cwd=project_root,
                env={**os.environ, "DB_PATH": os.path.abspath(settings.db_path)},
            ),
        ),
    )

    return Agent(
        name="rent_roll_assistant",
        model=LiteLlm(model=settings.model),
        instruction=get_rent_roll_prompt(),
        tools=[mcp_tools],
    )
