from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Protocol

from adapters.nerdgraph.accounts import accounts_from_payload
from adapters.nerdgraph.monitors import monitors_from_entities
from common.rules_engine.models import Account, Monitor


class ScriptSource(Protocol):
    def list_accounts(self) -> list[Account]:
        """Return the accounts the caller can review."""
        ...

    def list_monitors(self, *, account_id: int) -> list[Monitor]:
        """Return every scripted monitor in the account, in listing order."""
        ...

    def fetch_script(self, *, account_id: int, monitor_guid: str) -> str | None:
        """Return the monitor's script text, or None when it has none. May raise on transport errors."""
        ...


def get_script_source(name: str) -> ScriptSource:
    """Resolve a script source implementation by name (fixtures|live)."""
    source = (name or "").strip().lower()
    if source in ("fixtures", ""):
        return FixturesScriptSource()
    if source == "live":
        from .live_nerdgraph import LiveNerdGraphSource

        return LiveNerdGraphSource()
    raise ValueError(f"Unknown data source '{name}' (expected 'fixtures' or 'live').")


class FixturesScriptSource:
    """
    Reads a recorded account from disk:

        <root>/accounts.json                      NerdGraph `actor.accounts` list
        <root>/<account_id>/monitors.json         entitySearch entities list
        <root>/<account_id>/scripts/<guid>.js     script text per monitor
    """

    def __init__(self, *, fixtures_root: Path | None = None) -> None:
        self._fixtures_root = fixtures_root or _default_fixtures_root()

    def list_accounts(self) -> list[Account]:
        path = self._fixtures_root / "accounts.json"
        if not path.exists():
            return []
        return accounts_from_payload(json.loads(path.read_text(encoding="utf-8")))

    def list_monitors(self, *, account_id: int) -> list[Monitor]:
        path = self._fixtures_root / str(account_id) / "monitors.json"
        if not path.exists():
            return []
        return monitors_from_entities(json.loads(path.read_text(encoding="utf-8")))

    def fetch_script(self, *, account_id: int, monitor_guid: str) -> str | None:
        path = self._fixtures_root / str(account_id) / "scripts" / f"{monitor_guid}.js"
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")


def _default_fixtures_root() -> Path:
    override = os.getenv("MIGRATION_FIXTURES_DIR", "").strip()
    if override:
        return Path(override).expanduser()
    return Path(__file__).resolve().parents[1] / "tests" / "pipelines" / "fixtures"
