# =============================================================================
# setup_desktop_config.py  —  Register the MCP server with the desktop app
# =============================================================================
#
# HOW TO RUN:
#   python setup_desktop_config.py
#
# WHAT HAPPENS:
#   Adds (or refreshes) a "rent-roll" entry under mcpServers in the desktop
#   app's claude_desktop_config.json.  Other servers in that file are left
#   untouched.  If the file can't be written, the entry is printed so you
#   can paste it in by hand.
# =============================================================================

import json
import sys
from pathlib import Path

from dotenv import load_dotenv

from core.config import load_settings
from core.desktop_config import (
    SERVER_NAME,
    config_path,
    merge_config,
    read_config,
    server_entry,
    write_config,
)


def main() -> int:
    load_dotenv()
    settings = load_settings()
    project_path = Path.cwd()
    entry = server_entry(project_path, project_path / "rent_roll.db", settings.openai_api_key)
    path = config_path()

    try:
        config = merge_config(read_config(path), entry)
        write_config(path, config)
    except (OSError, json.JSONDecodeError) as exc:
        print(f"❌ Error setting up desktop config: {exc}", file=sys.stderr)
        print("")
        print("💡 Manual setup:")
        print(f"Create this file: {path}")
        print("With this content:")
        print(json.dumps({"mcpServers": {SERVER_NAME: entry}}, indent=2))
        return 1

    key_status = "✅ Found" if settings.openai_api_key else "❌ NOT SET"
    print("✅ Desktop app configuration updated!")
    print(f"📍 Config file: {path}")
    print(f"🏠 Project path: {project_path}")
    print(f"🔑 OpenAI API Key: {key_status}")
    print("")
    print("📝 Next steps:")
    if settings.openai_api_key:
        print("1. ✅ OpenAI API key is configured")
    else:
        print("1. ⚠️  Set OPENAI_API_KEY in your .env file")
    print("2. Make sure the database exists: python load_data.py load rent_roll.jsonl")
    print("3. Restart the desktop app")
    print("4. Ask it about vacant units, lease expirations or revenue!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
