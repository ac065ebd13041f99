from __future__ import annotations

import argparse
import asyncio
import os
import sys
from datetime import datetime, timezone
from pathlib import Path


def _ensure_backend_on_path() -> None:
    backend_dir = Path(__file__).resolve().parents[1]
    if str(backend_dir) not in sys.path:
        sys.path.insert(0, str(backend_dir))


async def run_migration_review(
    *,
    data_source: str,
    account_id: int,
    monitor_guids: list[str] | None,
    fixtures_dir: Path | None = None,
    missing_script_policy: str | None = None,
):
    """Load an account, assess the selected (default: all) scripted monitors, return the review."""
    _ensure_backend_on_path()
    from common.rules_engine.config import RulesConfig
    from pipelines.data_source import FixturesScriptSource, get_script_source
    from pipelines.review import MigrationReview
    from pipelines.snapshots import default_document_store

    if fixtures_dir is not None and data_source != "live":
        source = FixturesScriptSource(fixtures_root=fixtures_dir)
    else:
        source = get_script_source(data_source)

    config = RulesConfig()
    if missing_script_policy:
        config = RulesConfig(missing_script_policy=missing_script_policy.upper())

    review = MigrationReview(
        source,
        document_store=default_document_store(data_source),
        config=config,
    )
    await review.load_account(account_id)
    guids = monitor_guids or [mon.guid for mon in review.monitors]
    await review.analyze(guids)
    return review


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Assess scripted synthetic monitors for runtime upgrade compatibility and write CSV/JSON/MD outputs."
    )
    parser.add_argument(
        "--account-id",
        type=int,
        required=True,
        help="New Relic account id to review.",
    )
    parser.add_argument(
        "--monitor",
        action="append",
        dest="monitors",
        default=None,
        help="Monitor guid to assess (repeatable). Defaults to every scripted monitor in the account.",
    )
    parser.add_argument(
        "--fixtures-dir",
        default=None,
        help="Fixtures root for the fixtures data source (accounts.json, <account_id>/monitors.json, scripts/).",
    )
    parser.add_argument(
        "--output-dir",
        default=".",
        help="Output directory for review files (default: current directory).",
    )
    parser.add_argument(
        "--missing-script-policy",
        choices=("unknown", "warn"),
        default=None,
        help="Verdict for monitors whose script is empty or unavailable (default: unknown).",
    )
    args = parser.parse_args()

    _ensure_backend_on_path()
    from common.logging import setup_logging
    from pipelines.export import write_results_csv, write_results_json, write_results_markdown

    setup_logging()
    data_source = os.getenv("DATA_SOURCE", "fixtures").strip().lower()
    fixtures_dir = Path(args.fixtures_dir).resolve() if args.fixtures_dir else None
    output_dir = Path(args.output_dir).resolve()
    output_dir.mkdir(parents=True, exist_ok=True)

    review = asyncio.run(
        run_migration_review(
            data_source=data_source,
            account_id=args.account_id,
            monitor_guids=args.monitors,
            fixtures_dir=fixtures_dir,
            missing_script_policy=args.missing_script_policy,
        )
    )

    generated_at = datetime.now(timezone.utc)
    out_csv = output_dir / review.export_filename()
    out_json = out_csv.with_suffix(".json")
    out_md = out_csv.with_suffix(".md")

    write_results_csv(out_csv, review.monitors, review.results)
    write_results_json(
        out_json,
        account_id=args.account_id,
        monitors=review.monitors,
        results=review.results,
        generated_at=generated_at,
    )
    write_results_markdown(
        out_md,
        account_id=args.account_id,
        monitors=review.monitors,
        results=review.results,
        generated_at=generated_at,
    )

    print(f"Wrote {out_csv}")
    print(f"Wrote {out_json}")
    print(f"Wrote {out_md}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
