from __future__ import annotations

from typing import Any

from .client import nerdgraph_query
from .config import NerdGraphConfig

ACCOUNTS_QUERY = """
{
  actor {
    accounts {
      id
      name
    }
  }
}
"""


def fetch_accounts(config: NerdGraphConfig) -> list[dict[str, Any]]:
    """
    Fetch the accounts visible to the API key.
    """
    data = nerdgraph_query(config, ACCOUNTS_QUERY)
    accounts = (data.get("actor") or {}).get("accounts")
    if not isinstance(accounts, list):
        return []
    return [a for a in accounts if isinstance(a, dict)]
