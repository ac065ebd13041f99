from __future__ import annotations

from ..models import Severity
from ..registry import register_rule
from ..rule import ModuleImportRule


@register_rule
class NODE_LEGACY_UNIREST(ModuleImportRule):
    rule_id = "NODE-LEGACY-UNIREST"
    rule_title = "Script uses the 'unirest' HTTP client"
    severity = Severity.CRITICAL
    message = "Uses 'unirest' (Likely incompatible with Node 18+ SSL logic)."
    module = "unirest"
