from __future__ import annotations

from typing import Any, Iterable

from common.rules_engine.models import SCRIPTED_MONITOR_TYPES, Monitor


class NerdGraphAdapterError(ValueError):
    pass


def monitors_from_entities(entities: Iterable[Any]) -> list[Monitor]:
    """
    Build scripted monitors from entitySearch entity outlines.

    Only SCRIPT_BROWSER and SCRIPT_API monitors are kept; other monitor types
    (pings, step monitors, cert checks) have no script to assess. Entities are
    deduplicated by guid keeping the first occurrence, so listing order is stable
    across overlapping pages.
    """
    out: list[Monitor] = []
    seen: set[str] = set()
    for entity in entities:
        if not isinstance(entity, dict):
            continue
        if entity.get("monitorType") not in SCRIPTED_MONITOR_TYPES:
            continue
        guid = entity.get("guid")
        if not isinstance(guid, str) or not guid.strip() or guid in seen:
            continue
        seen.add(guid)
        out.append(monitor_from_entity(entity))
    return out


def monitor_from_entity(entity: dict[str, Any]) -> Monitor:
    guid = entity.get("guid")
    if not isinstance(guid, str) or not guid.strip():
        raise NerdGraphAdapterError("Monitor entity is missing a guid.")

    account = entity.get("account") if isinstance(entity.get("account"), dict) else {}
    account_id = account.get("id")
    return Monitor(
        guid=guid,
        name=str(entity.get("name") or ""),
        monitor_type=str(entity.get("monitorType") or ""),
        tags=tags_from_payload(entity.get("tags")),
        account_id=int(account_id) if account_id is not None else None,
        account_name=str(account.get("name") or ""),
    )


def tags_from_payload(tags: Any) -> dict[str, list[str]]:
    """
    Convert NerdGraph `[{key, values}]` tags into a key -> values mapping.
    """
    out: dict[str, list[str]] = {}
    if not isinstance(tags, list):
        return out
    for tag in tags:
        if not isinstance(tag, dict):
            continue
        key = tag.get("key")
        if not isinstance(key, str) or not key:
            continue
        values = tag.get("values")
        if isinstance(values, list):
            out[key] = [str(v) for v in values if v is not None]
        else:
            out[key] = []
    return out
