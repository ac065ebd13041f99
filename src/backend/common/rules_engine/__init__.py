"""Script compatibility rules engine for synthetic monitor runtime upgrades.

This package intentionally contains only domain logic:
- Rule inputs are raw script text + rule configuration.
- No NerdGraph, storage, or network calls live here.
"""

from .config import RulesConfig
from .models import (
    Issue,
    MissingScriptPolicy,
    Monitor,
    Severity,
    Verdict,
    VerdictStatus,
)
from .runner import RulesRunner, assess_script

# Import built-in rules so they self-register with the global registry.
from . import rules as _builtin_rules  # noqa: F401
