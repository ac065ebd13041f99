from __future__ import annotations

from ..models import Severity
from ..registry import register_rule
from ..rule import Rule

DRIVER_MARKERS = ("$browser", "$driver")
ASYNC_MARKERS = ("async function", "await ")


@register_rule
class SELENIUM_LEGACY_CONTROL_FLOW(Rule):
    """
    Selenium 4 dropped the promise manager, so driver calls must be awaited.

    A script that touches `$browser`/`$driver` without any async/await marker is
    assumed to rely on the legacy control flow. The check is lexical: a marker
    inside a comment or string literal still counts.
    """

    rule_id = "SELENIUM-LEGACY-CONTROL-FLOW"
    rule_title = "Browser script relies on the Selenium promise manager"
    severity = Severity.CRITICAL
    message = (
        "Legacy Control Flow detected. Selenium 4 requires 'async/await' for all driver interactions."
    )

    def matches(self, text: str) -> bool:
        uses_driver = any(marker in text for marker in DRIVER_MARKERS)
        uses_async = any(marker in text for marker in ASYNC_MARKERS)
        return uses_driver and not uses_async
