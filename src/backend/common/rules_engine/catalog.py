from __future__ import annotations

import argparse
import json
from typing import Any, List

from pydantic import BaseModel

from .registry import registry

# Ensure built-in rules are imported/registered when generating a catalog.
from . import rules as _builtin_rules  # noqa: F401


class RuleCatalogEntry(BaseModel):
    order: int
    rule_id: str
    rule_title: str
    severity: str
    message: str

    module: str
    class_name: str


def build_catalog() -> List[RuleCatalogEntry]:
    """Describe every registered rule, in detection order."""
    entries: List[RuleCatalogEntry] = []
    for order, rule_id in enumerate(registry.ids(), start=1):
        rule_cls = registry.get(rule_id)
        severity = getattr(rule_cls, "severity", None)
        entries.append(
            RuleCatalogEntry(
                order=order,
                rule_id=rule_id,
                rule_title=getattr(rule_cls, "rule_title", ""),
                severity=getattr(severity, "value", str(severity or "")),
                message=getattr(rule_cls, "message", ""),
                module=getattr(rule_cls, "__module__", ""),
                class_name=getattr(rule_cls, "__name__", ""),
            )
        )
    return entries


def _dump_json(catalog: list[dict[str, Any]]) -> str:
    return json.dumps(catalog, indent=2, sort_keys=True)


def _dump_yaml(catalog: list[dict[str, Any]]) -> str:
    try:
        import yaml  # type: ignore
    except ModuleNotFoundError as exc:
        raise SystemExit(
            "PyYAML is required for YAML output. Install the project dependencies (e.g., `pip install -e .`)."
        ) from exc

    return yaml.safe_dump(catalog, sort_keys=False)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Generate a script rules catalog from the registry.")
    parser.add_argument(
        "--format",
        choices=("yaml", "json"),
        default="yaml",
        help="Output format (default: yaml).",
    )
    args = parser.parse_args(argv)

    catalog = [e.model_dump() for e in build_catalog()]
    if args.format == "json":
        print(_dump_json(catalog))
    else:
        print(_dump_yaml(catalog))


if __name__ == "__main__":
    main()
