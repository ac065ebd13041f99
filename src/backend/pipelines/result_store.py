from __future__ import annotations

import logging
from typing import Any, Iterator, Mapping

from pydantic import ValidationError

from common.rules_engine.models import Verdict, VerdictStatus, status_for_issues

logger = logging.getLogger(__name__)


class ResultStore:
    """
    Monitor guid -> Verdict for one account.

    Entries are only added or overwritten, never removed; switching accounts
    builds a new store. The persisted document is the same JSON object the
    dashboard widget stores: `{guid: {status, issues, timestamp?}}`.
    """

    def __init__(self, verdicts: Mapping[str, Verdict] | None = None) -> None:
        self._verdicts: dict[str, Verdict] = dict(verdicts or {})

    @classmethod
    def from_document(cls, document: Mapping[str, Any] | None) -> "ResultStore":
        store = cls()
        for guid, raw in (document or {}).items():
            try:
                verdict = Verdict.model_validate(raw)
            except ValidationError as exc:
                logger.warning("Skipping unreadable stored verdict for %s: %s", guid, exc)
                continue
            store.set(str(guid), _consistent(str(guid), verdict))
        return store

    def to_document(self) -> dict[str, Any]:
        # Issues are stored in their rendered "SEVERITY: message" form, which the widget displays as-is.
        document: dict[str, Any] = {}
        for guid, verdict in self._verdicts.items():
            entry: dict[str, Any] = {"status": verdict.status.value, "issues": verdict.issue_texts()}
            if verdict.timestamp is not None:
                entry["timestamp"] = verdict.timestamp.isoformat()
            document[guid] = entry
        return document

    def set(self, guid: str, verdict: Verdict) -> None:
        self._verdicts[guid] = verdict

    def get(self, guid: str) -> Verdict | None:
        return self._verdicts.get(guid)

    def items(self):
        return self._verdicts.items()

    def __contains__(self, guid: object) -> bool:
        return guid in self._verdicts

    def __getitem__(self, guid: str) -> Verdict:
        return self._verdicts[guid]

    def __iter__(self) -> Iterator[str]:
        return iter(self._verdicts)

    def __len__(self) -> int:
        return len(self._verdicts)


def _consistent(guid: str, verdict: Verdict) -> Verdict:
    # ERROR and UNKNOWN are not derived from issue severities.
    if verdict.status in (VerdictStatus.ERROR, VerdictStatus.UNKNOWN):
        return verdict
    derived = status_for_issues(verdict.issues)
    if derived == verdict.status:
        return verdict
    logger.warning(
        "Stored verdict for %s has status %s but its issues imply %s; using %s",
        guid,
        verdict.status.value,
        derived.value,
        derived.value,
    )
    return verdict.model_copy(update={"status": derived})
