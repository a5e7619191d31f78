"""Inline suppression comments.

Syntax, inside any comment of the linted file:

    <marker>                       suppress every rule on this line
    <marker>: rule.a, rule.b       suppress the listed rules on this line
    <marker>-next-line             suppress every rule on the following line
    <marker>-next-line: rule.a     suppress the listed rules on the following line

The default marker is `nolint`.
"""

import re
from collections import defaultdict
from typing import Collection, Dict, Iterable, List, Pattern

from guidelint_syntax.node_types import SourceFile

from .config import DEFAULT_MARKER
from .models import (
    DEAD_SUPPRESSION_ID,
    RESERVED_RULE_IDS,
    Finding,
    Severity,
    SuppressionDirective,
    SuppressionScope,
    sort_findings,
)

_NEXT_LINE_SUFFIX = "-next-line"
_RULE_LIST = r"[\w.\-]+(?:\s*,\s*[\w.\-]+)*"


def _directive_pattern(marker: str) -> Pattern[str]:
    return re.compile(
        rf"(?<![\w.\-]){re.escape(marker)}(?P<next>{_NEXT_LINE_SUFFIX})?(?![\w\-])"
        rf"(?:\s*:\s*(?P<rules>{_RULE_LIST}))?"
    )


def parse_directives(source: SourceFile, marker: str = DEFAULT_MARKER) -> List[SuppressionDirective]:
    """Collect one directive per comment token carrying the marker."""
    pattern = _directive_pattern(marker)
    directives = []
    for comment in source.comments():
        match = pattern.search(comment.text)
        if match is None:
            continue
        before = comment.text[: match.start()]
        newlines = before.count("\n")
        line = comment.line + newlines
        column = (len(before) - before.rfind("\n")) if newlines else comment.column + len(before)
        rules = match.group("rules")
        rule_ids = frozenset(r.strip() for r in rules.split(",")) if rules else frozenset()
        scope = SuppressionScope.NEXT_LINE if match.group("next") else SuppressionScope.SAME_LINE
        directives.append(SuppressionDirective(line=line, scope=scope, rule_ids=rule_ids, column=column))
    return directives


def resolve(
    findings: Iterable[Finding],
    directives: Iterable[SuppressionDirective],
    known_rule_ids: Collection[str],
) -> List[Finding]:
    """Drop suppressed findings and flag directives naming unknown rules.

    A directive applies to its own line (same-line scope) or to the line
    after it (next-line scope), for every rule when it lists none.
    Each listed identifier that is not a known rule yields one INFO
    finding at the directive, so stale annotations stay visible.
    """
    directives = list(directives)
    by_line: Dict[int, List[SuppressionDirective]] = defaultdict(list)
    for directive in directives:
        by_line[directive.target_line].append(directive)

    kept = [f for f in findings if not any(d.matches(f) for d in by_line.get(f.line, ()))]

    known = set(known_rule_ids) | RESERVED_RULE_IDS
    for directive in directives:
        for rule_id in sorted(directive.rule_ids - known):
            kept.append(
                Finding(
                    rule_id=DEAD_SUPPRESSION_ID,
                    severity=Severity.INFO,
                    line=directive.line,
                    column=directive.column,
                    message=f"Suppression refers to unknown rule '{rule_id}'",
                )
            )
    return sort_findings(kept)
