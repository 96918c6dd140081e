# =============================================================================
# core/desktop_config.py  —  Desktop-app MCP configuration
# =============================================================================
#
# The desktop chat app discovers MCP servers through a JSON file whose
# location depends on the OS.  This module knows where that file lives and
# how to merge our server entry into it WITHOUT touching any other server
# the user has configured.
#
# The file-writing CLI lives in setup_desktop_config.py; everything here is
# pure except read_config()/write_config().
# =============================================================================

import json
import os
import platform
import sys
from pathlib import Path
from typing import Optional

SERVER_NAME = "rent-roll"
CONFIG_FILENAME = "claude_desktop_config.json"
API_KEY_PLACEHOLDER = "your-openai-api-key-here"


def config_path(system: Optional[str] = None, home: Optional[Path] = None) -> Path:
    """Where the desktop app keeps its config on this OS."""
    system = system or platform.system()
    home = home or Path.home()
    if system == "Darwin":
        return home / "Library" / "Application Support" / "Claude" / CONFIG_FILENAME
    if system == "Windows":
        return home / "AppData" / "Roaming" / "Claude" / CONFIG_FILENAME
    return home / ".config" / "Claude" / CONFIG_FILENAME


def server_entry(project_path: Path, db_path: Path, api_key: Optional[str]) -> dict:
    """The mcpServers entry that launches tools/mcp_server.py for this project."""
    return {
        "command": sys.executable,
        "args": ["-m", "tools.mcp_server"],
        "cwd": str(project_path),
        "env": {
            "OPENAI_API_KEY": api_key or API_KEY_PLACEHOLDER,
            "DB_PATH": str(db_path),
        },
    }


def merge_config(existing: dict, entry: dict, name: str = SERVER_NAME) -> dict:
    """Return a copy of `existing` with our server added (or replaced)."""
    servers = dict(existing.get("mcpServers") or {})
    servers[name] = entry
    return {**existing, "mcpServers": servers}


def read_config(path: Path) -> dict:
    if not path.exists():
        return {}
    return json.loads(path.read_text(encoding="utf-8"))


def write_config(path: Path, config: dict) -> None:
    os.makedirs(path.parent, exist_ok=True)
    path.write_text(json.dumps(config, indent=2), encoding="utf-8")
