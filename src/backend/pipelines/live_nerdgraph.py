from __future__ import annotations

from adapters.nerdgraph.accounts import accounts_from_payload
from adapters.nerdgraph.monitors import monitors_from_entities
from common.rules_engine.models import Account, Monitor
from connectors.nerdgraph.accounts import fetch_accounts
from connectors.nerdgraph.config import NerdGraphConfig, get_nerdgraph_config
from connectors.nerdgraph.monitors import fetch_monitor_entities_all
from connectors.nerdgraph.scripts import fetch_monitor_script


class LiveNerdGraphSource:
    def __init__(self, *, config: NerdGraphConfig | None = None) -> None:
        self._config = config or get_nerdgraph_config()

    @property
    def config(self) -> NerdGraphConfig:
        return self._config

    def list_accounts(self) -> list[Account]:
        return accounts_from_payload(fetch_accounts(self._config))

    def list_monitors(self, *, account_id: int) -> list[Monitor]:
        return monitors_from_entities(fetch_monitor_entities_all(self._config, account_id))

    def fetch_script(self, *, account_id: int, monitor_guid: str) -> str | None:
        return fetch_monitor_script(self._config, account_id, monitor_guid)
