from typing import Iterator, List, Optional

from guidelint_syntax.ast_walker import ASTWalker
from guidelint_syntax.c_patterns import CPatterns
from guidelint_syntax.node_types import SourceFile, Token, TokenKind
from guidelint_syntax.parser import CFamilyParser

from ..models import Finding, Severity
from .base import BaseRule
from .scanning import is_command_position, iter_vim_functions

_STATEMENT_BOUNDARY = (";", "{", "}")


class BracePlacementRule(BaseRule):
    """Opening braces go at the end of the line that opens the block.

    Reported: a `{` that starts its own line after a `)`, an identifier or
    a keyword (`else`, `do`, `struct Foo`). Allowed: braces after `=` or
    `,` (initializer lists), free-standing blocks, and Objective-C method
    bodies, where the brace may sit on the line after the signature.
    """

    languages = frozenset({"objc", "generic"})

    @property
    def rule_id(self) -> str:
        return "structure.brace-placement"

    @property
    def severity(self) -> Severity:
        return Severity.INFO

    def check(self, source: SourceFile) -> Iterator[Finding]:
        tokens = source.significant_tokens()
        for idx, token in enumerate(tokens):
            if token.text != "{" or token.kind is not TokenKind.PUNCTUATION or idx == 0:
                continue
            prev = tokens[idx - 1]
            if prev.line == token.line:
                continue
            if not (prev.text == ")" or prev.kind in (TokenKind.IDENTIFIER, TokenKind.KEYWORD)):
                continue
            if prev.text == "return" or self._follows_method_signature(tokens, idx):
                continue
            yield self._finding_at(token, "Opening brace should be on the same line as its statement")

    @staticmethod
    def _follows_method_signature(tokens: List[Token], idx: int) -> bool:
        j = idx - 1
        while j > 0 and tokens[j - 1].text not in _STATEMENT_BOUNDARY:
            j -= 1
        first = tokens[j]
        starts_line = j == 0 or tokens[j - 1].line != first.line
        return first.text in ("-", "+") and starts_line


class DocCommentRule(BaseRule):
    """Public, non-trivial functions are introduced by a comment.

    A function is non-trivial when its body spans at least `min_lines`
    lines. Vim script: functions without the `s:` prefix (or `<SID>`) are
    public; the comment must be on the line directly above the definition.
    C-like sources: non-static function definitions, found with tree-sitter;
    Objective-C methods are documented in their @interface and are not
    checked here.
    """

    def __init__(self, min_lines: int = 5):
        self._min_lines = min_lines

    @property
    def rule_id(self) -> str:
        return "structure.doc-comment"

    @property
    def severity(self) -> Severity:
        return Severity.INFO

    def check(self, source: SourceFile) -> Iterator[Finding]:
        if source.language == "vim":
            yield from self._check_vim(source)
        else:
            yield from self._check_c_like(source)

    def _check_vim(self, source: SourceFile) -> Iterator[Finding]:
        comment_lines = {t.line for t in source.comments()}
        for func in iter_vim_functions(source):
            name = func.name.text
            if name.startswith(("s:", "<SID>", "<sid>")) or func.end_line is None:
                continue
            if func.end_line - func.keyword.line - 1 < self._min_lines:
                continue
            if func.keyword.line - 1 in comment_lines:
                continue
            yield self._finding_at(func.name, f"Public function '{name}' has no documentation comment")

    def _check_c_like(self, source: SourceFile) -> Iterator[Finding]:
        result = CFamilyParser().parse_string(source.text)
        functions = ASTWalker.find_all_by_type(result.tree.root_node, "function_definition")
        for node in functions:
            if CPatterns.is_static(node, result.source):
                continue
            if CPatterns.body_line_count(node) < self._min_lines:
                continue
            if CPatterns.has_leading_comment(node):
                continue
            name = CPatterns.get_function_name(node, result.source) or "<anonymous>"
            line, column = ASTWalker.get_position(node, result.source)
            yield self._create_finding(line, column, f"Public function '{name}' has no documentation comment")


class FunctionAbortRule(BaseRule):
    """Legacy vim functions are declared with `abort`.

    Without it a failing command inside the function does not stop it.
    Vim9 `def` functions always abort and are not checked.
    """

    languages = frozenset({"vim"})

    @property
    def rule_id(self) -> str:
        return "structure.function-abort"

    @property
    def severity(self) -> Severity:
        return Severity.WARNING

    def check(self, source: SourceFile) -> Iterator[Finding]:
        for func in iter_vim_functions(source):
            if func.keyword.text == "def":
                continue
            header = [t for t in source.tokens_on_line(func.keyword.line) if t.offset > func.name.offset]
            if any(t.text == "abort" for t in header):
                continue
            yield self._finding_at(func.name, f"Function '{func.name.text}' should be declared with 'abort'")


class FragileConstructRule(BaseRule):
    """Vim constructs whose behaviour depends on user settings.

    * `normal` without `!` runs the user's mappings. Recognized as a
      command (optionally after `silent`) and as the start of a string
      passed to `execute`.
    * `==` and `!=` follow 'ignorecase' when comparing strings; only
      comparisons with a string literal operand are reported, since
      numeric comparisons are unaffected. `=~` and `!~` always match
      strings and are always reported without `#` or `?`.
    """

    languages = frozenset({"vim"})
    _NORMAL = ("normal", "norm")
    _EXECUTE = ("execute", "exe", "exec")

    @property
    def rule_id(self) -> str:
        return "structure.fragile-construct"

    @property
    def severity(self) -> Severity:
        return Severity.WARNING

    def check(self, source: SourceFile) -> Iterator[Finding]:
        tokens = source.significant_tokens()
        for idx, token in enumerate(tokens):
            if token.text in self._NORMAL and self._is_command(tokens, idx):
                nxt = tokens[idx + 1] if idx + 1 < len(tokens) else None
                if not (nxt and nxt.text == "!" and nxt.offset == token.end_offset):
                    yield self._finding_at(token, "Use 'normal!' so user mappings do not apply")
            elif token.text in self._EXECUTE and self._is_command(tokens, idx):
                arg = tokens[idx + 1] if idx + 1 < len(tokens) else None
                if arg is not None and arg.kind is TokenKind.STRING and self._is_bare_normal(arg.text):
                    yield self._finding_at(arg, "Use 'normal!' so user mappings do not apply")
            elif token.kind is TokenKind.OPERATOR and token.text in ("=~", "!~"):
                yield self._finding_at(token, f"Use '{token.text}#' or '{token.text}?' instead of '{token.text}'")
            elif token.kind is TokenKind.OPERATOR and token.text in ("==", "!="):
                if self._has_string_operand(tokens, idx):
                    yield self._finding_at(
                        token, f"Use '{token.text}#' or '{token.text}?' to compare strings"
                    )

    @staticmethod
    def _is_command(tokens: List[Token], idx: int) -> bool:
        if is_command_position(tokens, idx):
            return True
        prev = tokens[idx - 1]
        if prev.text == "!" and idx >= 2:
            prev = tokens[idx - 2]
        return prev.text == "silent" and prev.line == tokens[idx].line

    @staticmethod
    def _is_bare_normal(literal: str) -> bool:
        word = literal.strip("'\"").split(" ", 1)[0]
        return word in ("normal", "norm")

    @staticmethod
    def _has_string_operand(tokens: List[Token], idx: int) -> bool:
        neighbours = [tokens[i] for i in (idx - 1, idx + 1) if 0 <= i < len(tokens)]
        return any(t.kind is TokenKind.STRING for t in neighbours)


class ExceptionFlowRule(BaseRule):
    """Exceptions are not used for control flow in Objective-C.

    Reported: `@throw` (or `[NSException raise:...]`) directly inside a
    loop body or inside an `@try` block that would catch it. Bodies must
    be braced to be recognized; single-statement loops are not tracked.
    """

    languages = frozenset({"objc"})

    @property
    def rule_id(self) -> str:
        return "structure.exception-flow"

    @property
    def severity(self) -> Severity:
        return Severity.WARNING

    def check(self, source: SourceFile) -> Iterator[Finding]:
        tokens = source.significant_tokens()
        blocks: List[Optional[str]] = []
        pending: Optional[str] = None
        parens = 0
        for idx, token in enumerate(tokens):
            text = token.text
            if token.kind is TokenKind.PUNCTUATION and text in ("(", ")"):
                parens = parens + 1 if text == "(" else max(parens - 1, 0)
            elif token.kind is TokenKind.KEYWORD and text in ("for", "while", "do"):
                # `} while (x);` closes a do-loop, it does not open a block
                if not (text == "while" and idx > 0 and tokens[idx - 1].text == "}"):
                    pending = "loop"
            elif text == "@try":
                pending = "try"
            elif text == "{" and token.kind is TokenKind.PUNCTUATION:
                blocks.append(pending)
                pending = None
            elif text == "}" and token.kind is TokenKind.PUNCTUATION:
                if blocks:
                    blocks.pop()
            elif text == ";" and parens == 0:
                pending = None
            elif self._is_throw(tokens, idx):
                if "try" in blocks:
                    yield self._finding_at(token, "Exception thrown inside @try is used for control flow")
                elif "loop" in blocks:
                    yield self._finding_at(token, "Exception thrown inside a loop is used for control flow")

    @staticmethod
    def _is_throw(tokens: List[Token], idx: int) -> bool:
        token = tokens[idx]
        if token.text == "@throw":
            return True
        return (
            token.kind is TokenKind.IDENTIFIER
            and token.text.startswith("raise")
            and idx > 0
            and tokens[idx - 1].text == "NSException"
        )
