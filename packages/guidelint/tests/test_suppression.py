from guidelint.engine import collect_findings, evaluate
from guidelint.models import DEAD_SUPPRESSION_ID, Severity, SuppressionScope
from guidelint.rules import BaseRule, QuoteStyleRule
from guidelint.suppression import parse_directives, resolve
from guidelint_syntax import tokenize


class LineFlagRule(BaseRule):
    """Test rule flagging every non-blank line at column 1"""

    def __init__(self, rule_id):
        self._rule_id = rule_id

    @property
    def rule_id(self):
        return self._rule_id

    @property
    def severity(self):
        return Severity.WARNING

    def check(self, source):
        for line in source.lines:
            if not line.is_blank:
                yield self._create_finding(line.number, 1, "flagged")


FUNCTION_CASING = LineFlagRule("naming.function-casing")


def lines_of(findings, rule_id="naming.function-casing"):
    return [f.line for f in findings if f.rule_id == rule_id]


def test_rule_filtered_same_line():
    baseline = evaluate(tokenize("let s:x = 'y'\n"), [FUNCTION_CASING, QuoteStyleRule()])
    assert [(f.rule_id, f.column) for f in baseline] == [
        ("naming.function-casing", 1),
        ("lexical.quote-style", 11),
    ]

    source = tokenize("let s:x = 'y'  // nolint: naming.function-casing\n")
    findings = evaluate(source, [FUNCTION_CASING, QuoteStyleRule()])

    assert [(f.rule_id, f.column) for f in findings] == [("lexical.quote-style", 11)]


def test_bare_marker_suppresses_every_rule():
    source = tokenize("let s:x = 'y'  // nolint\n")

    assert evaluate(source, [FUNCTION_CASING, QuoteStyleRule()]) == []


def test_next_line():
    source = tokenize("// nolint-next-line\nfoo\nbar\n")

    assert lines_of(evaluate(source, [FUNCTION_CASING])) == [1, 3]


def test_next_line_with_rule_list():
    source = tokenize("// nolint-next-line: naming.variable-casing, naming.function-casing\nfoo\n")
    findings = evaluate(source, [FUNCTION_CASING, LineFlagRule("naming.variable-casing")])

    assert [(f.line, f.rule_id) for f in findings] == [
        (1, "naming.function-casing"),
        (1, "naming.variable-casing"),
    ]


def test_dead_suppression():
    source = tokenize("foo // nolint: nonexistent.rule\n")
    findings = evaluate(source, [FUNCTION_CASING])

    assert lines_of(findings) == [1]
    dead = [f for f in findings if f.rule_id == DEAD_SUPPRESSION_ID]
    assert len(dead) == 1
    assert dead[0].severity is Severity.INFO
    assert (dead[0].line, dead[0].column) == (1, 8)
    assert dead[0].message == "Suppression refers to unknown rule 'nonexistent.rule'"


def test_known_but_inactive_rule_is_not_dead():
    source = tokenize("foo // nolint: naming.variable-casing\n")
    findings = evaluate(
        source,
        [FUNCTION_CASING],
        known_rule_ids=["naming.function-casing", "naming.variable-casing"],
    )

    assert [f.rule_id for f in findings] == ["naming.function-casing"]


def test_marker_inside_strings_is_ignored():
    source = tokenize('foo = "nolint"\n')

    assert parse_directives(source) == []


def test_marker_must_be_a_whole_word():
    source = tokenize("// nolinter\n// see foo-nolint\n")

    assert parse_directives(source) == []


def test_custom_marker():
    source = tokenize("foo # lint-ok\n")
    directives = parse_directives(source, marker="lint-ok")

    assert len(directives) == 1
    assert directives[0].scope is SuppressionScope.SAME_LINE
    assert evaluate(source, [FUNCTION_CASING], marker="lint-ok") == []


def test_vim_comment_directive():
    source = tokenize("\" nolint-next-line: naming.scope-prefix\nlet count = 0\n", language="vim")
    [directive] = parse_directives(source)

    assert directive.scope is SuppressionScope.NEXT_LINE
    assert directive.target_line == 2
    assert directive.rule_ids == frozenset({"naming.scope-prefix"})


def test_directive_inside_block_comment():
    source = tokenize("/* first\n   nolint-next-line */\nfoo\n")
    [directive] = parse_directives(source)

    assert (directive.line, directive.column, directive.target_line) == (2, 4, 3)


def test_resolve_is_repeatable():
    source = tokenize("a // nolint: naming.function-casing, bogus.rule\nb\n")
    findings = collect_findings(source, [FUNCTION_CASING])
    directives = parse_directives(source)

    first = resolve(findings, directives, ["naming.function-casing"])
    second = resolve(findings, directives, ["naming.function-casing"])

    assert first == second
    assert [f.rule_id for f in first] == [DEAD_SUPPRESSION_ID, "naming.function-casing"]


def test_vim_trailing_comment_after_endif():
    source = tokenize('if 1\nendif " nolint\n', language="vim")

    assert lines_of(evaluate(source, [FUNCTION_CASING])) == [1]


def test_vim_fold_markers_are_not_strings():
    source = tokenize('function! s:Foo() abort " {{{\n  return 1\nendfunction " }}}\n', language="vim")

    assert evaluate(source, [QuoteStyleRule()]) == []
