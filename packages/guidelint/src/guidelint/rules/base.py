from abc import ABC, abstractmethod
from typing import FrozenSet, Iterator, Optional, Protocol

from guidelint_syntax.node_types import SourceFile, Token

from ..models import Finding, Severity


class Rule(Protocol):
    """The single capability the engine relies on"""

    @property
    def rule_id(self) -> str: ...

    @property
    def severity(self) -> Severity: ...

    def evaluate(self, source: SourceFile) -> Iterator[Finding]: ...


class BaseRule(ABC):
    """Abstract base class for the built-in rules.

    Subclasses keep only construction-time parameters; `check` must be a
    pure function of the SourceFile so that rules can run in any order or
    in parallel.
    """

    # None means every language profile
    languages: Optional[FrozenSet[str]] = None

    @property
    @abstractmethod
    def rule_id(self) -> str:
        """Unique dotted identifier (e.g., 'naming.function-casing')."""
        pass

    @property
    @abstractmethod
    def severity(self) -> Severity:
        """Default severity for this rule."""
        pass

    @property
    def name(self) -> str:
        return self.rule_id.rsplit(".", 1)[-1]

    @property
    def description(self) -> str:
        """First line of the class docstring."""
        doc = (type(self).__doc__ or "").strip()
        return doc.splitlines()[0] if doc else ""

    def applies_to(self, source: SourceFile) -> bool:
        return self.languages is None or source.language in self.languages

    def evaluate(self, source: SourceFile) -> Iterator[Finding]:
        if not self.applies_to(source):
            return iter(())
        return self.check(source)

    @abstractmethod
    def check(self, source: SourceFile) -> Iterator[Finding]:
        """Yield the findings for one file."""
        pass

    # Helpers for consistent finding creation
    def _create_finding(
        self,
        line: int,
        column: int,
        message: str,
        end_column: Optional[int] = None,
    ) -> Finding:
        return Finding(
            rule_id=self.rule_id,
            severity=self.severity,
            line=line,
            column=column,
            message=message,
            end_column=end_column,
        )

    def _finding_at(self, token: Token, message: str) -> Finding:
        end = token.end_column if token.end_line == token.line else None
        return self._create_finding(token.line, token.column, message, end_column=end)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.rule_id}>"
