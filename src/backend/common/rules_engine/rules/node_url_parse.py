from __future__ import annotations

from ..models import Severity
from ..registry import register_rule
from ..rule import Rule


@register_rule
class NODE_URL_PARSE(Rule):
    rule_id = "NODE-URL-PARSE"
    rule_title = "Script calls the deprecated url.parse()"
    severity = Severity.WARNING
    message = "'url.parse' is deprecated. Use the new 'URL()' constructor."

    def matches(self, text: str) -> bool:
        return "url.parse(" in text
