import pytest
from guidelint.rules import (
    BracePlacementRule,
    DocCommentRule,
    ExceptionFlowRule,
    FragileConstructRule,
    FunctionAbortRule,
)
from guidelint_syntax import tokenize


def run(rule, text, language="generic"):
    return list(rule.evaluate(tokenize(text, language=language)))


class TestBracePlacement:
    def test_brace_on_own_line(self):
        findings = run(BracePlacementRule(), "if (x)\n{\n  y();\n}\n")

        assert [(f.line, f.column) for f in findings] == [(2, 1)]

    def test_initializer_list_is_allowed(self):
        assert run(BracePlacementRule(), "int a[] =\n{1, 2};\n") == []

    def test_objc_method_body_may_open_on_next_line(self):
        assert run(BracePlacementRule(), "- (void)foo\n{\n}\n", language="objc") == []

    def test_not_run_for_vim(self):
        assert run(BracePlacementRule(), "let s:d = {\n}\n", language="vim") == []


VIM_BODY = "  let l:a = 1\n" * 5


class TestDocComment:
    def test_vim_public_function(self):
        text = "function! Public() abort\n" + VIM_BODY + "endfunction\n"
        findings = run(DocCommentRule(), text, language="vim")

        assert len(findings) == 1
        assert (findings[0].line, findings[0].column) == (1, 11)
        assert findings[0].message == "Public function 'Public' has no documentation comment"

    def test_vim_documented_private_or_short(self):
        documented = '" Does a thing.\nfunction! Public() abort\n' + VIM_BODY + "endfunction\n"
        private = "function! s:Private() abort\n" + VIM_BODY + "endfunction\n"
        short = "function! Short() abort\n  return 1\nendfunction\n"
        sid = "function! <SID>Helper() abort\n" + VIM_BODY + "endfunction\n"

        for text in (documented, private, short, sid):
            assert run(DocCommentRule(), text, language="vim") == []

    def test_c_function(self):
        text = "int Compute(void) {\n" + "  a();\n" * 5 + "}\n"
        findings = run(DocCommentRule(), text)

        assert [(f.line, f.column, f.message) for f in findings] == [
            (1, 1, "Public function 'Compute' has no documentation comment")
        ]

    @pytest.mark.parametrize(
        "text",
        [
            "// Computes.\nint Compute(void) {\n" + "  a();\n" * 5 + "}\n",
            "static int Compute(void) {\n" + "  a();\n" * 5 + "}\n",
        ],
    )
    def test_c_function_exemptions(self, text):
        assert run(DocCommentRule(), text) == []

    def test_min_lines_is_configurable(self):
        text = "int Compute(void) {\n" + "  a();\n" * 5 + "}\n"
        assert run(DocCommentRule(min_lines=10), text) == []


class TestFunctionAbort:
    def test_missing_abort(self):
        findings = run(FunctionAbortRule(), "function! s:Foo()\nendfunction\n", language="vim")

        assert [(f.line, f.column) for f in findings] == [(1, 11)]

    def test_sid_function(self):
        text = "function! <SID>Helper()\n  let count = 0\nendfunction\n"
        findings = run(FunctionAbortRule(), text, language="vim")

        assert [(f.line, f.column, f.message) for f in findings] == [
            (1, 11, "Function '<SID>Helper' should be declared with 'abort'")
        ]
        assert run(FunctionAbortRule(), "function! <sid>Helper() abort\nendfunction\n", language="vim") == []

    def test_abort_present_or_vim9(self):
        assert run(FunctionAbortRule(), "function! s:Foo() abort\nendfunction\n", language="vim") == []
        assert run(FunctionAbortRule(), "def Foo()\nenddef\n", language="vim") == []


class TestFragileConstruct:
    @pytest.mark.parametrize(
        "text",
        [
            "normal gg\n",
            "silent normal gg\n",
            'execute "normal gg"\n',
            "if a =~ 'x'\nendif\n",
            "if a == 'x'\nendif\n",
        ],
    )
    def test_reported(self, text):
        assert len(run(FragileConstructRule(), text, language="vim")) == 1

    @pytest.mark.parametrize(
        "text",
        [
            "normal! gg\n",
            "silent! normal! gg\n",
            'execute "normal! gg"\n',
            "if a =~# 'x'\nendif\n",
            "if a ==? 'x'\nendif\n",
            "if a == 1\nendif\n",
        ],
    )
    def test_allowed(self, text):
        assert run(FragileConstructRule(), text, language="vim") == []


class TestExceptionFlow:
    def test_throw_in_loop(self):
        text = "for (int i = 0; i < 3; i++) {\n  @throw ex;\n}\n"
        findings = run(ExceptionFlowRule(), text, language="objc")

        assert [(f.line, f.message) for f in findings] == [
            (2, "Exception thrown inside a loop is used for control flow")
        ]

    def test_throw_in_try(self):
        text = "@try {\n  @throw ex;\n} @catch (NSException *e) {\n}\n"
        findings = run(ExceptionFlowRule(), text, language="objc")

        assert [f.message for f in findings] == ["Exception thrown inside @try is used for control flow"]

    def test_nsexception_raise_in_loop(self):
        text = 'while (x) {\n  [NSException raise:@"E" format:@"m"];\n}\n'
        findings = run(ExceptionFlowRule(), text, language="objc")

        assert [(f.line, f.column) for f in findings] == [(2, 16)]

    def test_plain_throw_is_fine(self):
        text = "- (void)fail {\n  @throw ex;\n}\n"
        assert run(ExceptionFlowRule(), text, language="objc") == []
