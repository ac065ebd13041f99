from __future__ import annotations

from dataclasses import dataclass

from common.rules_engine.models import Monitor

RUNTIME_TYPE_TAG = "runtimeType"
RUNTIME_VERSION_TAG = "runtimeTypeVersion"

RUNTIME_LABELS = (
    ("CHROME_BROWSER", "Chrome"),
    ("NODE_API", "Node"),
)


@dataclass(frozen=True)
class RuntimeInfo:
    text: str = "-"
    is_legacy: bool = False


def runtime_info(monitor: Monitor) -> RuntimeInfo:
    """
    Describe the monitor's runtime from its `runtimeType` / `runtimeTypeVersion` tags.

    Chrome 100 and Chrome 7x, and Node 10 / Node 16 runtimes are the legacy runtimes
    scheduled for removal.
    """
    runtime_type = monitor.tag_value(RUNTIME_TYPE_TAG)
    version = monitor.tag_value(RUNTIME_VERSION_TAG)
    if not runtime_type:
        return RuntimeInfo()

    is_legacy = False
    if "CHROME" in runtime_type and (version == "100" or version.startswith("7")):
        is_legacy = True
    if "NODE" in runtime_type and (version.startswith("16") or version.startswith("10")):
        is_legacy = True

    text = f"{runtime_type} {version}"
    for raw, label in RUNTIME_LABELS:
        text = text.replace(raw, label)
    return RuntimeInfo(text=text, is_legacy=is_legacy)


def runtime_text(monitor: Monitor) -> str:
    return runtime_info(monitor).text
