from __future__ import annotations

from ..models import Severity
from ..registry import register_rule
from ..rule import ModuleImportRule


@register_rule
class NODE_LEGACY_BLUEBIRD(ModuleImportRule):
    rule_id = "NODE-LEGACY-BLUEBIRD"
    rule_title = "Script uses the 'bluebird' promise library"
    severity = Severity.WARNING
    message = "Uses 'bluebird'. Native Promises are preferred in Node 22."
    module = "bluebird"
