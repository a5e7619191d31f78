from guidelint.models import Severity
from guidelint.rules import (
    IndentWidthRule,
    LineLengthRule,
    QuoteStyleRule,
    TabIndentRule,
    TrailingWhitespaceRule,
)
from guidelint_syntax import tokenize


def run(rule, text, language="generic"):
    return list(rule.evaluate(tokenize(text, language=language)))


def test_trailing_whitespace_points_at_first_blank():
    findings = run(TrailingWhitespaceRule(), "foo  \nbar\n")

    assert len(findings) == 1
    f = findings[0]
    assert (f.line, f.column, f.end_column) == (1, 4, 6)
    assert f.rule_id == "layout.trailing-whitespace"
    assert f.severity is Severity.WARNING


def test_trailing_whitespace_inside_block_comment():
    findings = run(TrailingWhitespaceRule(), "/* a \n b */\n")

    assert [(f.line, f.column) for f in findings] == [(1, 5)]


class TestLineLength:
    def test_boundary(self):
        rule = LineLengthRule()

        assert run(rule, "a" * 80 + "\n") == []
        findings = run(rule, "a" * 81 + "\n")
        assert len(findings) == 1
        assert findings[0].column == 81
        assert findings[0].message == "Line is 81 columns long (limit 80)"

    def test_objc_budget_is_100(self):
        rule = LineLengthRule()

        assert run(rule, "x" * 100 + "\n", language="objc") == []
        assert len(run(rule, "x" * 101 + "\n", language="objc")) == 1

    def test_override(self):
        assert len(run(LineLengthRule(max_length=10), "a" * 11)) == 1

    def test_tabs_are_expanded(self):
        findings = run(LineLengthRule(), "\t" + "a" * 73)

        assert len(findings) == 1
        assert findings[0].column == 74

    def test_lone_url_comment_is_exempt(self):
        url = "https://example.com/" + "a" * 100
        assert run(LineLengthRule(), f"// {url}\n") == []
        assert run(LineLengthRule(), f'" {url}\n', language="vim") == []


def test_tab_indent():
    findings = run(TabIndentRule(), "\tfoo\n  bar\n  \tbaz\n")

    assert [(f.line, f.column) for f in findings] == [(1, 1), (3, 3)]


class TestIndentWidth:
    def test_odd_indent(self):
        findings = run(IndentWidthRule(), "int f() {\n   x = 1;\n  y = 2;\n}\n")

        assert [f.line for f in findings] == [2]
        assert findings[0].severity is Severity.INFO

    def test_aligned_arguments_are_exempt(self):
        assert run(IndentWidthRule(), "foo(a,\n    b,\n   c);\n") == []

    def test_vim_continuation_is_exempt(self):
        assert run(IndentWidthRule(), "let s:x = 1\n     \\ + 2\n", language="vim") == []

    def test_block_comment_body_is_exempt(self):
        assert run(IndentWidthRule(), "/*\n * text\n */\n") == []


class TestQuoteStyle:
    def test_vim_prefers_single_quotes(self):
        findings = run(QuoteStyleRule(), 'let s:a = "hi"\n', language="vim")

        assert len(findings) == 1
        assert findings[0].column == 11
        assert findings[0].message == "String uses double quotes; prefer single quotes"

    def test_vim_exemptions(self):
        assert run(QuoteStyleRule(), "echo \"it's\"\n", language="vim") == []
        assert run(QuoteStyleRule(), 'echo "a\\n"\n', language="vim") == []

    def test_generic_prefers_double_quotes(self):
        findings = run(QuoteStyleRule(), "x = 'y'\n")

        assert [f.message for f in findings] == ["String uses single quotes; prefer double quotes"]

    def test_objc_has_no_preference(self):
        assert run(QuoteStyleRule(), "char c = 'a'; NSString *s = @\"b\";\n", language="objc") == []

    def test_configured_style(self):
        assert len(run(QuoteStyleRule(quote_style="single"), 'x = "y"\n')) == 1
