import sys
from pathlib import Path

import pytest

from core.desktop_config import (
    API_KEY_PLACEHOLDER,
    SERVER_NAME,
    config_path,
    merge_config,
    read_config,
    server_entry,
    write_config,
)


@pytest.mark.parametrize("system, parts", [
    ("Darwin", ("Library", "Application Support", "Claude")),
    ("Windows", ("AppData", "Roaming", "Claude")),
    ("Linux", (".config", "Claude")),
])
def test_config_path_per_os(tmp_path, system, parts):
    path = config_path(system=system, home=tmp_path)
    assert path == tmp_path.joinpath(*parts, "claude_desktop_config.json")


def test_server_entry_launches_mcp_server():
    entry = server_entry(Path("/srv/rent-roll"), Path("/srv/rent-roll/rent_roll.db"), "sk-test")
    assert entry["command"] == sys.executable
    assert entry["args"] == ["-m", "tools.mcp_server"]
    assert entry["cwd"] == str(Path("/srv/rent-roll"))
    assert entry["env"] == {
        "OPENAI_API_KEY": "sk-test",
        "DB_PATH": str(Path("/srv/rent-roll/rent_roll.db")),
    }


def test_server_entry_without_key_uses_placeholder():
    entry = server_entry(Path("."), Path("rent_roll.db"), None)
    assert entry["env"]["OPENAI_API_KEY"] == API_KEY_PLACEHOLDER


def test_merge_keeps_other_servers():
    existing = {
        "globalShortcut": "Ctrl+Space",
        "mcpServers": {"filesystem": {"command": "npx"}},
    }
    merged = merge_config(existing, {"command": "python"})

    assert merged["globalShortcut"] == "Ctrl+Space"
    assert merged["mcpServers"] == {
        "filesystem": {"command": "npx"},
        SERVER_NAME: {"command": "python"},
    }
    # The input is left untouched
    assert SERVER_NAME not in existing["mcpServers"]


def test_merge_replaces_previous_entry():
    existing = {"mcpServers": {SERVER_NAME: {"command": "old"}}}
    assert merge_config(existing, {"command": "new"})["mcpServers"] == {
        SERVER_NAME: {"command": "new"},
    }


def test_merge_into_empty_config():
    assert merge_config({}, {"command": "python"}) == {
        "mcpServers": {SERVER_NAME: {"command": "python"}},
    }


def test_write_then_read(tmp_path):
    path = tmp_path / "Claude" / "claude_desktop_config.json"
    config = {"mcpServers": {SERVER_NAME: {"command": "python"}}}
    write_config(path, config)
    assert read_config(path) == config


def test_read_missing_config(tmp_path):
    assert read_config(tmp_path / "absent.json") == {}
