from __future__ import annotations

import os
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel, Field

from adapters.nerdgraph.runtime import runtime_info
from common.rules_engine.config import RulesConfig
from connectors.nerdgraph.client import NerdGraphHttpError, NerdGraphQueryError
from pipelines.data_source import ScriptSource, get_script_source
from pipelines.review import MigrationReview
from pipelines.snapshots import DocumentStore, default_document_store


router = APIRouter(prefix="/migration", tags=["migration"])


class AnalyzeRequest(BaseModel):
    monitor_guids: list[str] = Field(default_factory=list)


def _data_source_name() -> str:
    return os.getenv("DATA_SOURCE", "fixtures").strip().lower()


def get_source() -> ScriptSource:
    try:
        return get_script_source(_data_source_name())
    except ValueError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc


def get_document_store() -> DocumentStore:
    try:
        return default_document_store(_data_source_name())
    except (ValueError, RuntimeError) as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc


def get_rules_config() -> RulesConfig:
    return RulesConfig()


async def _load_review(
    account_id: int,
    source: ScriptSource,
    document_store: DocumentStore,
    config: RulesConfig,
) -> MigrationReview:
    review = MigrationReview(source, document_store=document_store, config=config)
    await review.load_account(account_id)
    return review


def _monitor_row(review: MigrationReview, index: int) -> dict[str, Any]:
    mon = review.monitors[index]
    runtime = runtime_info(mon)
    verdict = review.results.get(mon.guid)
    return {
        "guid": mon.guid,
        "name": mon.name,
        "type": mon.type_label,
        "runtime": runtime.text,
        "runtime_is_legacy": runtime.is_legacy,
        "verdict": verdict.model_dump(mode="json") if verdict else None,
    }


@router.get("/accounts")
def list_accounts(source: ScriptSource = Depends(get_source)):
    try:
        accounts = source.list_accounts()
    except (NerdGraphHttpError, NerdGraphQueryError) as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return [acct.model_dump() for acct in accounts]


@router.get("/accounts/{account_id}/monitors")
async def list_monitors(
    account_id: int,
    source: ScriptSource = Depends(get_source),
    document_store: DocumentStore = Depends(get_document_store),
    config: RulesConfig = Depends(get_rules_config),
):
    review = await _load_review(account_id, source, document_store, config)
    return [_monitor_row(review, idx) for idx in range(len(review.monitors))]


@router.post("/accounts/{account_id}/analyze")
async def analyze_monitors(
    account_id: int,
    body: AnalyzeRequest,
    source: ScriptSource = Depends(get_source),
    document_store: DocumentStore = Depends(get_document_store),
    config: RulesConfig = Depends(get_rules_config),
):
    if not body.monitor_guids:
        raise HTTPException(status_code=400, detail="Select at least one monitor to analyze.")
    review = await _load_review(account_id, source, document_store, config)
    await review.analyze(body.monitor_guids)
    listed = {mon.guid for mon in review.monitors}
    return {
        guid: review.results[guid].model_dump(mode="json")
        for guid in dict.fromkeys(body.monitor_guids)
        if guid in listed and guid in review.results
    }


@router.get("/accounts/{account_id}/export")
async def export_results(
    account_id: int,
    source: ScriptSource = Depends(get_source),
    document_store: DocumentStore = Depends(get_document_store),
    config: RulesConfig = Depends(get_rules_config),
):
    review = await _load_review(account_id, source, document_store, config)
    return Response(
        content=review.export_csv(),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{review.export_filename()}"'},
    )
