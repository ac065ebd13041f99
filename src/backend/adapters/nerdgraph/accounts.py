from __future__ import annotations

from typing import Any, Iterable

from common.rules_engine.models import Account


def accounts_from_payload(accounts: Iterable[Any]) -> list[Account]:
    out: list[Account] = []
    for acct in accounts:
        if not isinstance(acct, dict) or acct.get("id") is None:
            continue
        out.append(Account(id=int(acct["id"]), name=str(acct.get("name") or "")))
    return out
