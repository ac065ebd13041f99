from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from .models import MissingScriptPolicy


class RulesConfig(BaseModel):
    """Rule engine configuration shared by every assessment in a run."""

    # Which verdict an absent or empty script produces. The two historical call sites disagreed
    # (UNKNOWN vs WARN); UNKNOWN is the default, WARN is available per deployment.
    missing_script_policy: MissingScriptPolicy = MissingScriptPolicy.UNKNOWN
    # Rule ids to skip entirely (e.g. while a false positive is investigated).
    disabled_rules: List[str] = Field(default_factory=list)

    def is_enabled(self, rule_id: str) -> bool:
        return rule_id not in self.disabled_rules
