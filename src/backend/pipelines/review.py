from __future__ import annotations

import asyncio
import logging
from typing import Iterable

from common.rules_engine.config import RulesConfig
from common.rules_engine.models import Monitor

from .data_source import ScriptSource
from .export import export_filename, format_results_csv
from .orchestrator import assess_monitors
from .result_store import ResultStore
from .snapshots import COLLECTION_ID, DOCUMENT_ID, DocumentStore

logger = logging.getLogger(__name__)


class MigrationReview:
    """
    Review state for one active account: its scripted monitors and their verdicts.

    A host UI (or the CLI/API) owns an instance and passes selections in; nothing
    here is global. Loading another account replaces monitors and results.
    """

    def __init__(
        self,
        source: ScriptSource,
        *,
        document_store: DocumentStore | None = None,
        config: RulesConfig | None = None,
    ) -> None:
        self._source = source
        self._document_store = document_store
        self._config = config or RulesConfig()
        self.account_id: int | None = None
        self.monitors: list[Monitor] = []
        self.results = ResultStore()

    async def load_account(self, account_id: int) -> list[Monitor]:
        """
        Switch to `account_id`: list its monitors and seed results from the stored snapshot.

        The listing and the snapshot read run concurrently. A failed listing leaves the
        account with no monitors; a failed snapshot read leaves it with no results.
        """
        self.account_id = account_id
        self.monitors = []
        self.results = ResultStore()

        listing, snapshot = await asyncio.gather(
            asyncio.to_thread(self._source.list_monitors, account_id=account_id),
            self._read_snapshot(account_id),
            return_exceptions=True,
        )
        if isinstance(listing, BaseException):
            logger.error("Failed to list monitors for account %s: %s", account_id, listing)
            listing = []
        if isinstance(snapshot, BaseException):
            logger.error("Failed to read stored results for account %s: %s", account_id, snapshot)
            snapshot = None

        # A slower load for a previous account must not overwrite a newer selection.
        if self.account_id != account_id:
            return self.monitors

        self.monitors = list(listing)
        self.results = ResultStore.from_document(snapshot)
        logger.info(
            "Loaded %d scripted monitor(s) and %d stored verdict(s) for account %s",
            len(self.monitors),
            len(self.results),
            account_id,
        )
        return self.monitors

    async def analyze(self, monitor_guids: Iterable[str]) -> ResultStore:
        if self.account_id is None:
            raise ValueError("No account loaded; call load_account() first.")

        requested = list(dict.fromkeys(monitor_guids))
        known = {mon.guid for mon in self.monitors}
        selected = [guid for guid in requested if guid in known]
        ignored = [guid for guid in requested if guid not in known]
        if ignored:
            logger.warning("Ignoring %d monitor guid(s) not in account %s", len(ignored), self.account_id)
        if not selected:
            return self.results

        return await assess_monitors(
            self._source,
            self.results,
            account_id=self.account_id,
            monitor_guids=selected,
            document_store=self._document_store,
            config=self._config,
        )

    def export_csv(self) -> str:
        return format_results_csv(self.monitors, self.results)

    def export_filename(self) -> str:
        if self.account_id is None:
            raise ValueError("No account loaded; call load_account() first.")
        return export_filename(self.account_id)

    async def _read_snapshot(self, account_id: int) -> dict | None:
        if self._document_store is None:
            return None
        return await asyncio.to_thread(
            self._document_store.read_document,
            account_id=account_id,
            collection=COLLECTION_ID,
            document_id=DOCUMENT_ID,
        )
