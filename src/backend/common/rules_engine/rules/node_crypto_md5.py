from __future__ import annotations

from ..models import Severity
from ..registry import register_rule
from ..rule import Rule


@register_rule
class NODE_CRYPTO_MD5(Rule):
    rule_id = "NODE-CRYPTO-MD5"
    rule_title = "Script builds MD5 hashes"
    severity = Severity.WARNING
    message = "MD5 hashing changes in Node 17+. Ensure you aren't using legacy crypto providers."

    def matches(self, text: str) -> bool:
        # Both markers anywhere in the script; they need not be on the same call.
        return "createHash" in text and "md5" in text
