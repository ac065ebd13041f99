from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class VerdictStatus(str, Enum):
    PASS = "PASS"
    WARN = "WARN"
    FAIL = "FAIL"
    ERROR = "ERROR"
    UNKNOWN = "UNKNOWN"


class Severity(str, Enum):
    CRITICAL = "CRITICAL"
    WARNING = "WARNING"


class MissingScriptPolicy(str, Enum):
    UNKNOWN = "UNKNOWN"
    WARN = "WARN"


MONITOR_TYPE_BROWSER = "SCRIPT_BROWSER"
MONITOR_TYPE_API = "SCRIPT_API"
SCRIPTED_MONITOR_TYPES = (MONITOR_TYPE_BROWSER, MONITOR_TYPE_API)

MISSING_SCRIPT_MESSAGE = "Could not retrieve script content"
EMPTY_SCRIPT_MESSAGE = "Script content empty or inaccessible"
API_ERROR_MESSAGE = "API Error"


class Issue(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Synthetic notes (missing script, API error) have no severity.
    severity: Optional[Severity] = None
    message: str

    @classmethod
    def parse(cls, text: str) -> "Issue":
        """Parse the rendered ``"SEVERITY: message"`` form stored by older snapshots."""
        head, sep, tail = text.partition(":")
        if sep and head.strip() in Severity.__members__:
            return cls(severity=Severity(head.strip()), message=tail.strip())
        return cls(message=text)

    def __str__(self) -> str:
        if self.severity is None:
            return self.message
        return f"{self.severity.value}: {self.message}"


class Verdict(BaseModel):
    status: VerdictStatus
    issues: List[Issue] = Field(default_factory=list)
    timestamp: Optional[datetime] = None

    @field_validator("issues", mode="before")
    @classmethod
    def _coerce_issue_strings(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return value
        return [Issue.parse(item) if isinstance(item, str) else item for item in value]

    @classmethod
    def from_issues(cls, issues: List[Issue]) -> "Verdict":
        return cls(status=status_for_issues(issues), issues=list(issues))

    @classmethod
    def api_error(cls) -> "Verdict":
        return cls(status=VerdictStatus.ERROR, issues=[Issue(message=API_ERROR_MESSAGE)])

    def issue_texts(self) -> List[str]:
        return [str(issue) for issue in self.issues]


def status_for_issues(issues: List[Issue]) -> VerdictStatus:
    if any(issue.severity == Severity.CRITICAL for issue in issues):
        return VerdictStatus.FAIL
    if issues:
        return VerdictStatus.WARN
    return VerdictStatus.PASS


class Account(BaseModel):
    id: int
    name: str = ""


class Monitor(BaseModel):
    guid: str
    name: str
    monitor_type: str
    tags: Dict[str, List[str]] = Field(default_factory=dict)
    account_id: Optional[int] = None
    account_name: str = ""

    def tag_value(self, key: str) -> str:
        values = self.tags.get(key) or []
        return values[0] if values else ""

    @property
    def type_label(self) -> str:
        return "Browser" if self.monitor_type == MONITOR_TYPE_BROWSER else "API"
