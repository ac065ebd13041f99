from __future__ import annotations

from typing import Any

from .client import nerdgraph_query
from .config import NerdGraphConfig

MONITOR_SEARCH_QUERY = """
query($query: String!, $cursor: String) {
  actor {
    entitySearch(query: $query) {
      results(cursor: $cursor) {
        nextCursor
        entities {
          guid
          name
          tags { key values }
          account { name id }
          ... on SyntheticMonitorEntityOutline {
            monitorType
          }
        }
      }
    }
  }
}
"""


def monitor_search_query(account_id: int | str) -> str:
    return f"domain = 'SYNTH' AND type = 'MONITOR' AND accountId = {int(account_id)}"


def fetch_monitor_entities_page(
    config: NerdGraphConfig,
    account_id: int | str,
    *,
    cursor: str | None = None,
) -> tuple[list[dict[str, Any]], str | None]:
    """
    Fetch one page of synthetic monitor entities; returns (entities, next_cursor).
    """
    data = nerdgraph_query(
        config,
        MONITOR_SEARCH_QUERY,
        variables={"query": monitor_search_query(account_id), "cursor": cursor},
    )
    results = ((data.get("actor") or {}).get("entitySearch") or {}).get("results")
    if not isinstance(results, dict):
        return [], None
    entities = results.get("entities")
    if not isinstance(entities, list):
        entities = []
    next_cursor = results.get("nextCursor")
    return [e for e in entities if isinstance(e, dict)], (next_cursor or None)


def fetch_monitor_entities_all(config: NerdGraphConfig, account_id: int | str) -> list[dict[str, Any]]:
    """
    Fetch every synthetic monitor entity for an account, following cursors.

    Pages are requested one after another; the next request needs the previous
    page's cursor.
    """
    all_entities: list[dict[str, Any]] = []
    cursor: str | None = None
    while True:
        entities, cursor = fetch_monitor_entities_page(config, account_id, cursor=cursor)
        all_entities.extend(entities)
        if not cursor:
            break
    return all_entities
