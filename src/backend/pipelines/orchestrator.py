from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, Iterable

from common.rules_engine.config import RulesConfig
from common.rules_engine.models import Verdict
from common.rules_engine.runner import RulesRunner

from .data_source import ScriptSource
from .result_store import ResultStore
from .snapshots import COLLECTION_ID, DOCUMENT_ID, DocumentStore

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


async def assess_monitors(
    source: ScriptSource,
    results: ResultStore,
    *,
    account_id: int,
    monitor_guids: Iterable[str],
    document_store: DocumentStore | None = None,
    config: RulesConfig | None = None,
    clock: Callable[[], datetime] | None = None,
) -> ResultStore:
    """
    Fetch and assess every selected monitor concurrently, then persist the store once.

    Each monitor's script fetch runs in a worker thread; the verdict is written to
    `results` back on the event loop once that monitor's fetch and assessment are
    both done. A failed fetch records an ERROR verdict for that monitor only. The
    batch returns after every monitor has settled. A failed persist is logged and
    leaves `results` as assessed.
    """
    runner = RulesRunner(config=config)
    now = clock or _utcnow
    guids = list(dict.fromkeys(monitor_guids))

    async def _assess_one(guid: str) -> None:
        try:
            text = await asyncio.to_thread(source.fetch_script, account_id=account_id, monitor_guid=guid)
        except Exception as exc:
            logger.warning("Script fetch failed for monitor %s: %s", guid, exc)
            verdict = Verdict.api_error()
        else:
            verdict = runner.assess(text)
        results.set(guid, verdict.model_copy(update={"timestamp": now()}))

    logger.info("Assessing %d monitor(s) in account %s", len(guids), account_id)
    outcomes = await asyncio.gather(*(_assess_one(guid) for guid in guids), return_exceptions=True)
    for guid, outcome in zip(guids, outcomes):
        if isinstance(outcome, BaseException):
            logger.error("Assessment failed for monitor %s; no verdict recorded: %r", guid, outcome)

    if document_store is not None:
        await persist_results(document_store, results, account_id=account_id)
    return results


async def persist_results(document_store: DocumentStore, results: ResultStore, *, account_id: int) -> None:
    try:
        await asyncio.to_thread(
            document_store.write_document,
            account_id=account_id,
            collection=COLLECTION_ID,
            document_id=DOCUMENT_ID,
            document=results.to_document(),
        )
    except Exception:
        logger.exception("Failed to persist migration results for account %s", account_id)
