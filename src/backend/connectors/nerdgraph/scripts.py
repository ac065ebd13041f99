from __future__ import annotations

from .client import nerdgraph_query
from .config import NerdGraphConfig

SCRIPT_QUERY = """
query($accountId: Int!, $guid: EntityGuid!) {
  actor {
    account(id: $accountId) {
      synthetics {
        script(monitorGuid: $guid) {
          text
        }
      }
    }
  }
}
"""


def fetch_monitor_script(config: NerdGraphConfig, account_id: int | str, monitor_guid: str) -> str | None:
    """
    Fetch a scripted monitor's source text. Returns None when NerdGraph has no script.
    """
    data = nerdgraph_query(
        config,
        SCRIPT_QUERY,
        variables={"accountId": int(account_id), "guid": monitor_guid},
    )
    account = (data.get("actor") or {}).get("account") or {}
    script = (account.get("synthetics") or {}).get("script") or {}
    text = script.get("text")
    return text if isinstance(text, str) else None
