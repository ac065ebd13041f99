from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Optional

from .models import Issue, Severity


class Rule(ABC):
    rule_id: str
    rule_title: str
    severity: Severity
    message: str

    def __init__(self):
        if not getattr(self, "rule_id", None):
            raise ValueError("Rule must define rule_id")

    @abstractmethod
    def matches(self, text: str) -> bool:  # pragma: no cover
        raise NotImplementedError

    def evaluate(self, text: str) -> Optional[Issue]:
        if not self.matches(text):
            return None
        return Issue(severity=self.severity, message=self.message)


def module_import_pattern(module: str) -> re.Pattern[str]:
    """
    Match a CommonJS ``require`` or ES module import of ``module``.

    Accepts any quote style and whitespace inside the call:
    - require('name'), require ( "name" ), require(`name`)
    - import x from 'name', import 'name'
    """
    name = re.escape(module)
    quoted = rf"['\"`]{name}['\"`]"
    return re.compile(
        rf"require\s*\(\s*{quoted}\s*\)"
        rf"|\bfrom\s+{quoted}"
        rf"|\bimport\s+{quoted}"
    )


class ModuleImportRule(Rule):
    """Flags scripts that load a given npm module."""

    module: str

    def __init__(self):
        super().__init__()
        self._pattern = module_import_pattern(self.module)

    def matches(self, text: str) -> bool:
        return self._pattern.search(text) is not None
