# =============================================================================
# core/config.py  —  Environment-driven settings
# =============================================================================
#
# All runtime knobs come from environment variables.  The entry points
# (main.py, load_data.py, setup_desktop_config.py, tools/mcp_server.py) call
# load_dotenv() first, so a local .env file works too.
#
#   DB_PATH           SQLite file holding the rent_roll table
#   RENT_ROLL_MODEL   LiteLlm model string for the conversational agent
#   LOG_LEVEL         Logging level for the MCP server
#   OPENAI_API_KEY    Copied into the desktop-app MCP config
# =============================================================================

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_DB_PATH = "./rent_roll.db"
DEFAULT_MODEL = "openrouter/openai/gpt-4o"


@dataclass(frozen=True)
class Settings:
    db_path: str = DEFAULT_DB_PATH
    model: str = DEFAULT_MODEL
    log_level: str = "INFO"
    openai_api_key: Optional[str] = None


def load_settings() -> Settings:
    """Read settings from the environment, falling back to defaults."""
    return Settings(
        db_path=os.environ.get("DB_PATH", DEFAULT_DB_PATH),
        model=os.environ.get("RENT_ROLL_MODEL", DEFAULT_MODEL),
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        openai_api_key=os.environ.get("OPENAI_API_KEY") or None,
    )
