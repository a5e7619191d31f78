from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, List, Optional, Tuple

RULE_FAILURE_ID = "engine.rule-failure"
DEAD_SUPPRESSION_ID = "engine.dead-suppression"
RESERVED_RULE_IDS = frozenset({RULE_FAILURE_ID, DEAD_SUPPRESSION_ID})


class Severity(str, Enum):
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"

    @property
    def rank(self) -> int:
        return {"ERROR": 3, "WARNING": 2, "INFO": 1}[self.value]


@dataclass(frozen=True)
class Finding:
    """A single rule violation at a 1-based line and column"""

    rule_id: str
    severity: Severity
    line: int
    column: int
    message: str
    end_column: Optional[int] = None

    @property
    def sort_key(self) -> Tuple[int, int, str]:
        return (self.line, self.column, self.rule_id)


def sort_findings(findings: Iterable[Finding]) -> List[Finding]:
    """Deterministic report order: line, column, rule identifier."""
    return sorted(findings, key=lambda f: (*f.sort_key, f.message))


class SuppressionScope(str, Enum):
    SAME_LINE = "same-line"
    NEXT_LINE = "next-line"


@dataclass(frozen=True)
class SuppressionDirective:
    """An inline annotation disabling findings on one line"""

    line: int
    scope: SuppressionScope
    rule_ids: FrozenSet[str] = frozenset()
    column: int = 1

    @property
    def target_line(self) -> int:
        return self.line + 1 if self.scope is SuppressionScope.NEXT_LINE else self.line

    def matches(self, finding: Finding) -> bool:
        if finding.line != self.target_line:
            return False
        return not self.rule_ids or finding.rule_id in self.rule_ids


@dataclass
class FileReport:
    """Outcome of linting one file in a batch"""

    path: str
    findings: List[Finding] = field(default_factory=list)
    cancelled: bool = False
    error: Optional[str] = None
