from __future__ import annotations

import csv
import io
import json
from datetime import datetime
from pathlib import Path
from typing import Callable, Sequence

from adapters.nerdgraph.runtime import runtime_text
from common.rules_engine.models import Monitor, VerdictStatus

from .result_store import ResultStore

CSV_HEADERS = ["Monitor Name", "Type", "Runtime", "Status", "Issues", "GUID"]
PENDING_STATUS = "PENDING"
ISSUE_DELIMITER = "; "


def export_filename(account_id: int | str) -> str:
    return f"migration_analysis_{account_id}.csv"


def format_results_csv(
    monitors: Sequence[Monitor],
    results: ResultStore,
    *,
    runtime_for: Callable[[Monitor], str] | None = None,
) -> str:
    """
    Render monitors and their verdicts as CSV, one row per monitor in the given order.

    Monitors without a verdict are reported as PENDING with no issues. Fields are
    quoted by the csv module, so csv.reader recovers names and issues exactly.
    """
    describe_runtime = runtime_for or runtime_text
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for mon in monitors:
        verdict = results.get(mon.guid)
        status = verdict.status.value if verdict else PENDING_STATUS
        issues = ISSUE_DELIMITER.join(verdict.issue_texts()) if verdict else ""
        writer.writerow(
            [
                mon.name,
                mon.type_label,
                describe_runtime(mon),
                status,
                issues,
                mon.guid,
            ]
        )
    return buffer.getvalue()


def write_results_csv(
    out_path: Path,
    monitors: Sequence[Monitor],
    results: ResultStore,
    *,
    runtime_for: Callable[[Monitor], str] | None = None,
) -> None:
    out_path.write_text(format_results_csv(monitors, results, runtime_for=runtime_for), encoding="utf-8")


def status_totals(monitors: Sequence[Monitor], results: ResultStore) -> dict[str, int]:
    totals: dict[str, int] = {}
    for mon in monitors:
        verdict = results.get(mon.guid)
        key = verdict.status.value if verdict else PENDING_STATUS
        totals[key] = totals.get(key, 0) + 1
    return totals


def write_results_json(
    out_path: Path,
    *,
    account_id: int,
    monitors: Sequence[Monitor],
    results: ResultStore,
    generated_at: datetime,
) -> None:
    payload = {
        "account_id": account_id,
        "generated_at": generated_at.isoformat(),
        "totals": status_totals(monitors, results),
        "monitors": [
            {
                "guid": mon.guid,
                "name": mon.name,
                "type": mon.type_label,
                "runtime": runtime_text(mon),
                "verdict": results[mon.guid].model_dump(mode="json") if mon.guid in results else None,
            }
            for mon in monitors
        ],
    }
    out_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")


def write_results_markdown(
    out_path: Path,
    *,
    account_id: int,
    monitors: Sequence[Monitor],
    results: ResultStore,
    generated_at: datetime,
) -> None:
    lines = [
        f"# Synthetics Migration Review {account_id}",
        "",
        f"Generated at: {generated_at.isoformat()}",
        "",
        "## Totals",
    ]
    for status, count in status_totals(monitors, results).items():
        lines.append(f"- {status}: {count}")
    lines.append("")
    lines.append("## Monitors")
    for mon in monitors:
        verdict = results.get(mon.guid)
        status = verdict.status.value if verdict else PENDING_STATUS
        lines.append("")
        lines.append(f"### {mon.name} ({status})")
        lines.append(f"- Type: {mon.type_label}")
        lines.append(f"- Runtime: {runtime_text(mon)}")
        lines.append(f"- GUID: {mon.guid}")
        if verdict and verdict.issues:
            lines.append("- Issues:")
            for issue in verdict.issues:
                lines.append(f"  - {issue}")
        elif verdict and verdict.status == VerdictStatus.PASS:
            lines.append("- No compatibility issues found.")
    out_path.write_text("\n".join(lines), encoding="utf-8")
