from __future__ import annotations

import json
import logging
import time
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from .config import NerdGraphConfig

logger = logging.getLogger(__name__)

RETRYABLE_STATUSES = (429, 500, 502, 503, 504)


class NerdGraphHttpError(RuntimeError):
    def __init__(self, status: int, message: str, body: str | None = None):
        super().__init__(f"NerdGraph HTTP {status}: {message}")
        self.status = status
        self.body = body


class NerdGraphQueryError(RuntimeError):
    def __init__(self, errors: list[dict[str, Any]]):
        messages = "; ".join(str(err.get("message", err)) for err in errors) or "unknown error"
        super().__init__(f"NerdGraph query failed: {messages}")
        self.errors = errors


def nerdgraph_query(
    config: NerdGraphConfig,
    query: str,
    *,
    variables: dict[str, Any] | None = None,
    timeout_seconds: int = 30,
    max_retries: int = 3,
) -> dict[str, Any]:
    """
    POST a GraphQL query (or mutation) to NerdGraph and return its `data` object.

    Retries transient HTTP failures with exponential backoff. A response that carries
    GraphQL `errors` and no `data` raises NerdGraphQueryError; partial data with
    errors is returned as-is.
    """
    body = json.dumps({"query": query, "variables": variables or {}}).encode("utf-8")

    retries = 0
    backoff = 0.5

    while True:
        req = Request(config.endpoint, data=body, method="POST")
        req.add_header("Accept", "application/json")
        req.add_header("Content-Type", "application/json")
        req.add_header("API-Key", config.api_key)

        try:
            with urlopen(req, timeout=timeout_seconds) as resp:
                raw = resp.read().decode("utf-8")
                payload = json.loads(raw)
        except HTTPError as exc:
            err_body = exc.read().decode("utf-8") if exc.fp else None
            status = exc.code

            if status in RETRYABLE_STATUSES and retries < max_retries:
                logger.warning("NerdGraph HTTP %s, retrying in %.1fs", status, backoff)
                time.sleep(backoff)
                retries += 1
                backoff *= 2
                continue

            raise NerdGraphHttpError(status, exc.reason, err_body) from exc
        except URLError as exc:
            if retries < max_retries:
                logger.warning("NerdGraph unreachable (%s), retrying in %.1fs", exc.reason, backoff)
                time.sleep(backoff)
                retries += 1
                backoff *= 2
                continue
            raise NerdGraphHttpError(0, str(exc)) from exc

        return _unwrap(payload)


def _unwrap(payload: Any) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise NerdGraphQueryError([{"message": "Response is not a JSON object."}])
    data = payload.get("data")
    errors = payload.get("errors") or []
    if errors and not data:
        raise NerdGraphQueryError([e if isinstance(e, dict) else {"message": str(e)} for e in errors])
    if errors:
        logger.warning("NerdGraph returned partial data with %d error(s)", len(errors))
    return data if isinstance(data, dict) else {}
