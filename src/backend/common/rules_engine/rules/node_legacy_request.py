from __future__ import annotations

from ..models import Severity
from ..registry import register_rule
from ..rule import ModuleImportRule


@register_rule
class NODE_LEGACY_REQUEST(ModuleImportRule):
    rule_id = "NODE-LEGACY-REQUEST"
    rule_title = "Script uses the removed 'request' HTTP client"
    severity = Severity.CRITICAL
    message = "Uses 'request' module (Removed in Node 16+). Migrate to 'got' or '$http'."
    module = "request"
