import asyncio
import threading
from unittest.mock import patch

from common.rules_engine.config import RulesConfig
from common.rules_engine.models import Verdict, VerdictStatus
from pipelines.orchestrator import assess_monitors
from pipelines.result_store import ResultStore
from pipelines.snapshots import COLLECTION_ID, DOCUMENT_ID


SCRIPTS = {
    "A": "const r = require('request');",
    "B": "const P = require('bluebird');",
    "C": "await $http.get('https://example.com');",
}


def test_one_failed_fetch_becomes_error_and_batch_persists_once(make_source, make_document_store, fixed_clock):
    source = make_source(scripts=SCRIPTS, failing={"C"})
    store = make_document_store()
    results = ResultStore()

    asyncio.run(
        assess_monitors(
            source,
            results,
            account_id=1,
            monitor_guids=["A", "B", "C"],
            document_store=store,
            clock=fixed_clock,
        )
    )

    assert len(results) == 3
    assert results["A"].status == VerdictStatus.FAIL
    assert results["B"].status == VerdictStatus.WARN
    assert results["C"].status == VerdictStatus.ERROR
    assert results["C"].issue_texts() == ["API Error"]
    assert all(results[g].timestamp == fixed_clock() for g in "ABC")

    assert len(store.writes) == 1
    account_id, collection, document_id, document = store.writes[0]
    assert (account_id, collection, document_id) == (1, COLLECTION_ID, DOCUMENT_ID)
    assert set(document) == {"A", "B", "C"}
    assert document["C"] == {"status": "ERROR", "issues": ["API Error"], "timestamp": "2025-06-01T12:00:00+00:00"}


def test_rerun_overwrites_selected_and_keeps_others(make_source, fixed_clock):
    earlier = Verdict(status=VerdictStatus.PASS)
    results = ResultStore({"A": earlier, "Z": earlier})
    source = make_source(scripts=SCRIPTS)

    asyncio.run(assess_monitors(source, results, account_id=1, monitor_guids=["A"], clock=fixed_clock))

    assert results["A"].status == VerdictStatus.FAIL
    assert results["Z"] is earlier


def test_duplicate_guids_are_fetched_once(make_source):
    source = make_source(scripts=SCRIPTS)
    results = ResultStore()
    asyncio.run(assess_monitors(source, results, account_id=1, monitor_guids=["A", "A", "B"]))
    assert sorted(source.fetched) == ["A", "B"]
    assert len(results) == 2


def test_persist_failure_keeps_in_memory_results(make_source, make_document_store):
    source = make_source(scripts=SCRIPTS)
    store = make_document_store(write_error=RuntimeError("storage down"))
    results = ResultStore()

    returned = asyncio.run(
        assess_monitors(source, results, account_id=1, monitor_guids=["A", "B"], document_store=store)
    )

    assert returned is results
    assert len(results) == 2
    assert len(store.writes) == 1


def test_missing_script_uses_configured_policy(make_source):
    source = make_source(scripts={})
    results = ResultStore()
    asyncio.run(
        assess_monitors(
            source,
            results,
            account_id=1,
            monitor_guids=["X"],
            config=RulesConfig(missing_script_policy="WARN"),
        )
    )
    assert results["X"].status == VerdictStatus.WARN


def test_all_fetches_failing_still_completes(make_source, make_document_store):
    source = make_source(scripts=SCRIPTS, failing={"A", "B", "C"})
    store = make_document_store()
    results = ResultStore()
    asyncio.run(
        assess_monitors(source, results, account_id=1, monitor_guids=["A", "B", "C"], document_store=store)
    )
    assert {v.status for _, v in results.items()} == {VerdictStatus.ERROR}
    assert len(store.writes) == 1


class BarrierScriptSource:
    """Each fetch waits until every guid in the batch is being fetched at once."""

    def __init__(self, inner, *, parties):
        self.inner = inner
        self.barrier = threading.Barrier(parties, timeout=5)

    def fetch_script(self, *, account_id, monitor_guid):
        self.barrier.wait()
        return self.inner.fetch_script(account_id=account_id, monitor_guid=monitor_guid)


class SlowScriptSource:
    def __init__(self, inner, *, slow, release):
        self.inner = inner
        self.slow = slow
        self.release = release

    def fetch_script(self, *, account_id, monitor_guid):
        if monitor_guid == self.slow:
            self.release.wait(timeout=5)
        return self.inner.fetch_script(account_id=account_id, monitor_guid=monitor_guid)


def test_fetches_run_concurrently(make_source):
    source = BarrierScriptSource(make_source(scripts=SCRIPTS), parties=3)
    results = ResultStore()
    asyncio.run(assess_monitors(source, results, account_id=1, monitor_guids=["A", "B", "C"]))

    assert results["A"].status == VerdictStatus.FAIL
    assert results["B"].status == VerdictStatus.WARN
    assert results["C"].status == VerdictStatus.PASS
    assert not source.barrier.broken


def test_slow_fetch_does_not_hold_back_other_verdicts(make_source):
    release = threading.Event()
    source = SlowScriptSource(make_source(scripts=SCRIPTS), slow="A", release=release)
    results = ResultStore()

    async def scenario():
        batch = asyncio.create_task(
            assess_monitors(source, results, account_id=1, monitor_guids=["A", "B", "C"])
        )
        for _ in range(500):
            if "B" in results and "C" in results:
                break
            await asyncio.sleep(0.01)
        recorded_before_release = set(results)
        release.set()
        await batch
        return recorded_before_release

    recorded_before_release = asyncio.run(scenario())

    assert recorded_before_release == {"B", "C"}
    assert results["A"].status == VerdictStatus.FAIL


def test_rule_engine_failure_is_not_reported_as_api_error(make_source, caplog):
    source = make_source(scripts=SCRIPTS)
    results = ResultStore()
    with patch("pipelines.orchestrator.RulesRunner.assess", side_effect=RuntimeError("rule exploded")):
        asyncio.run(assess_monitors(source, results, account_id=1, monitor_guids=["A"]))

    assert "A" not in results
    assert "Assessment failed for monitor A" in caplog.text
    assert "rule exploded" in caplog.text


def test_clock_failure_is_logged(make_source, caplog):
    def broken_clock():
        raise RuntimeError("clock unavailable")

    source = make_source(scripts=SCRIPTS)
    results = ResultStore()
    asyncio.run(assess_monitors(source, results, account_id=1, monitor_guids=["A", "B"], clock=broken_clock))

    assert len(results) == 0
    assert "Assessment failed for monitor A" in caplog.text
    assert "Assessment failed for monitor B" in caplog.text
