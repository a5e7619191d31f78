from guidelint.models import Finding

from .models import LintIssue


def finding_to_lint_issue(finding: Finding, path: str) -> LintIssue:
    """Convert an internal dataclass finding to the external pydantic issue"""
    return LintIssue(
        path=path,
        line=finding.line,
        column=finding.column,
        rule_id=finding.rule_id,
        severity=finding.severity,
        message=finding.message,
    )
