from __future__ import annotations

from typing import Iterable, Optional

from .config import RulesConfig
from .models import (
    EMPTY_SCRIPT_MESSAGE,
    MISSING_SCRIPT_MESSAGE,
    Issue,
    MissingScriptPolicy,
    Verdict,
    VerdictStatus,
)
from .registry import registry
from .rule import Rule


class RulesRunner:
    def __init__(self, rules: Optional[Iterable[Rule]] = None, *, config: Optional[RulesConfig] = None):
        self._rules = list(rules) if rules is not None else registry.create_all()
        self._config = config or RulesConfig()

    @property
    def rules(self) -> list[Rule]:
        return list(self._rules)

    def assess(self, script_text: Optional[str]) -> Verdict:
        """
        Assess one script's text against every enabled rule.

        Rules are evaluated independently and in table order, so a script can
        collect several issues. The result carries no timestamp; callers stamp
        the capture time when they store it.
        """
        if not script_text:
            return _missing_script_verdict(self._config.missing_script_policy)

        issues: list[Issue] = []
        for rule in self._rules:
            if not self._config.is_enabled(rule.rule_id):
                continue
            issue = rule.evaluate(script_text)
            if issue is not None:
                issues.append(issue)
        return Verdict.from_issues(issues)


def assess_script(
    script_text: Optional[str],
    *,
    config: Optional[RulesConfig] = None,
    rules: Optional[Iterable[Rule]] = None,
) -> Verdict:
    return RulesRunner(rules, config=config).assess(script_text)


def _missing_script_verdict(policy: MissingScriptPolicy) -> Verdict:
    if policy == MissingScriptPolicy.WARN:
        return Verdict(status=VerdictStatus.WARN, issues=[Issue(message=EMPTY_SCRIPT_MESSAGE)])
    return Verdict(status=VerdictStatus.UNKNOWN, issues=[Issue(message=MISSING_SCRIPT_MESSAGE)])
