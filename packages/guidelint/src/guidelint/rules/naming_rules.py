from typing import Iterator, List

from guidelint_syntax.ast_walker import ASTWalker
from guidelint_syntax.c_patterns import MACRO_NODE_TYPES, CPatterns
from guidelint_syntax.node_types import SourceFile, Token, TokenKind
from guidelint_syntax.parser import CFamilyParser

from ..models import Finding, Severity
from .base import BaseRule
from .scanning import (
    K_CONSTANT,
    LOWER_CAMEL,
    SNAKE_CASE,
    UPPER_CAMEL,
    UPPER_SNAKE,
    brace_depths,
    is_informal,
    iter_c_declarations,
    iter_vim_assignments,
    iter_vim_functions,
    split_vim_scope,
    strip_underscores,
)

_C_NON_FUNCTION_PREFIX = frozenset({"return", "typedef", "sizeof", "if", "while", "for", "switch", "new"})


def _is_acronym_start(name: str) -> bool:
    # URLForKey, HTTPHeaders: a run of two or more capitals
    return len(name) > 1 and name[:2].isupper()


class FunctionCasingRule(BaseRule):
    """Function names follow the casing convention of their language.

    Vim script: global and script-local functions are UpperCamelCase after
    the scope prefix; autoload functions (`plugin#module#name`) and
    dictionary functions (`s:obj.method`) are not checked.
    Objective-C: C functions are UpperCamelCase (`main` is exempt), methods
    are lowerCamelCase, allowing a leading acronym such as `URLForKey`.
    Generic: any consistent style (UpperCamel, lowerCamel or snake_case).
    Only top-level definitions are recognized in C-like sources.
    """

    @property
    def rule_id(self) -> str:
        return "naming.function-casing"

    @property
    def severity(self) -> Severity:
        return Severity.WARNING

    def check(self, source: SourceFile) -> Iterator[Finding]:
        if source.language == "vim":
            yield from self._check_vim(source)
        else:
            yield from self._check_c_like(source)

    def _check_vim(self, source: SourceFile) -> Iterator[Finding]:
        for func in iter_vim_functions(source):
            name = func.name.text
            if "#" in name or func.is_dict_member or name.startswith("<"):
                continue
            _, rest = split_vim_scope(name)
            if not UPPER_CAMEL.match(rest):
                yield self._finding_at(func.name, f"Function '{name}' should be UpperCamelCase")

    def _check_c_like(self, source: SourceFile) -> Iterator[Finding]:
        tokens = source.significant_tokens()
        depths = brace_depths(tokens)
        for idx, token in enumerate(tokens):
            if depths[idx] != 0:
                continue
            if source.language == "objc" and token.text in ("-", "+") and self._starts_line(tokens, idx):
                method = self._method_name(tokens, idx)
                if method is not None and not self._is_method_case(strip_underscores(method.text)):
                    yield self._finding_at(method, f"Method '{method.text}' should be lowerCamelCase")
                continue
            if not self._is_c_function_name(tokens, idx):
                continue
            name = token.text
            if name == "main" or name.startswith("__") or UPPER_SNAKE.match(name):
                continue
            if source.language == "objc":
                if not UPPER_CAMEL.match(name):
                    yield self._finding_at(token, f"Function '{name}' should be UpperCamelCase")
            elif not (UPPER_CAMEL.match(name) or LOWER_CAMEL.match(name) or SNAKE_CASE.match(name)):
                yield self._finding_at(token, f"Function '{name}' mixes naming styles")

    @staticmethod
    def _is_method_case(name: str) -> bool:
        return name[:1].islower() or _is_acronym_start(name)

    @staticmethod
    def _starts_line(tokens: List[Token], idx: int) -> bool:
        return idx == 0 or tokens[idx - 1].line != tokens[idx].line

    @staticmethod
    def _method_name(tokens: List[Token], idx: int):
        """`- (void)name...` -> the `name` token."""
        j = idx + 1
        if j < len(tokens) and tokens[j].text == "(":
            depth = 0
            while j < len(tokens):
                if tokens[j].text == "(":
                    depth += 1
                elif tokens[j].text == ")":
                    depth -= 1
                    if depth == 0:
                        break
                j += 1
            j += 1
        if j < len(tokens) and tokens[j].kind is TokenKind.IDENTIFIER:
            return tokens[j]
        return None

    @staticmethod
    def _is_c_function_name(tokens: List[Token], idx: int) -> bool:
        token = tokens[idx]
        if token.kind is not TokenKind.IDENTIFIER or idx == 0 or idx + 1 >= len(tokens):
            return False
        if tokens[idx + 1].text != "(":
            return False
        prev = tokens[idx - 1]
        if prev.text in _C_NON_FUNCTION_PREFIX:
            return False
        return prev.kind in (TokenKind.IDENTIFIER, TokenKind.KEYWORD) or prev.text == "*"


class VariableCasingRule(BaseRule):
    """Variable names follow the casing convention of their language.

    Vim script: snake_case after the scope prefix. Objective-C:
    lowerCamelCase. Generic: lowerCamelCase or snake_case. Leading and
    trailing underscores are ignored.

    Single-letter names are informal and reported, except the loop counters
    i, j, k, n and `_`.

    Skipped: file-scope `const` declarations (naming.constant-casing owns
    them), names in the `kConstant` form, and global or script-local vim
    names written in UPPER_SNAKE_CASE, which mark constants.
    """

    @property
    def rule_id(self) -> str:
        return "naming.variable-casing"

    @property
    def severity(self) -> Severity:
        return Severity.WARNING

    def check(self, source: SourceFile) -> Iterator[Finding]:
        if source.language == "vim":
            yield from self._check_vim(source)
        else:
            yield from self._check_c_like(source)

    def _check_vim(self, source: SourceFile) -> Iterator[Finding]:
        for _, target, _ in iter_vim_assignments(source):
            scope, rest = split_vim_scope(target.text)
            if scope in ("a", "v") or not rest or "#" in rest:
                continue
            if scope in ("g", "s") and UPPER_SNAKE.match(rest):
                continue
            finding = self._judge(target, rest, (SNAKE_CASE,), "snake_case")
            if finding is not None:
                yield finding

    def _check_c_like(self, source: SourceFile) -> Iterator[Finding]:
        if source.language == "objc":
            patterns, style = (LOWER_CAMEL,), "lowerCamelCase"
        else:
            patterns, style = (LOWER_CAMEL, SNAKE_CASE), "lowerCamelCase or snake_case"
        for decl in iter_c_declarations(source):
            name = decl.name.text
            if decl.is_const and decl.depth == 0 and not decl.is_parameter:
                continue
            if K_CONSTANT.match(name):
                continue
            finding = self._judge(decl.name, name, patterns, style)
            if finding is not None:
                yield finding

    def _judge(self, token: Token, name: str, patterns, style: str):
        bare = strip_underscores(name)
        if is_informal(bare):
            return self._finding_at(token, f"Variable name '{token.text}' is too short to be descriptive")
        if not any(p.match(bare) for p in patterns):
            return self._finding_at(token, f"Variable '{token.text}' should be {style}")
        return None


class ConstantCasingRule(BaseRule):
    """File-scope constants are named kUpperCamelCase or UPPER_SNAKE_CASE.

    Only `const` declarations outside any braces are checked; local
    constants are ordinary variables for naming purposes.
    """

    languages = frozenset({"objc", "generic"})

    @property
    def rule_id(self) -> str:
        return "naming.constant-casing"

    @property
    def severity(self) -> Severity:
        return Severity.WARNING

    def check(self, source: SourceFile) -> Iterator[Finding]:
        for decl in iter_c_declarations(source):
            if not decl.is_const or decl.depth != 0 or decl.is_parameter:
                continue
            name = decl.name.text
            if K_CONSTANT.match(name) or UPPER_SNAKE.match(name):
                continue
            yield self._finding_at(decl.name, f"Constant '{name}' should be kUpperCamelCase or UPPER_SNAKE_CASE")


class TypeCasingRule(BaseRule):
    """Type names (classes, protocols, structs, enums, typedefs) are UpperCamelCase.

    Objective-C class prefixes such as `GTM` fit the pattern. Forward
    declarations (`@class`) and `@protocol(Name)` expressions are skipped.
    C struct, enum and union names are only checked where they are defined
    or forward declared, not where a variable or parameter uses them.
    """

    languages = frozenset({"objc", "generic"})
    _INTRODUCERS = frozenset({"@interface", "@implementation", "@protocol", "class", "struct", "enum", "union"})
    # What may follow a C type name when it is being defined or declared
    _DECLARATION_FOLLOWERS = frozenset({"{", ";", ":", "extends", "implements"})

    @property
    def rule_id(self) -> str:
        return "naming.type-casing"

    @property
    def severity(self) -> Severity:
        return Severity.WARNING

    def check(self, source: SourceFile) -> Iterator[Finding]:
        tokens = source.significant_tokens()
        seen = set()
        for idx, token in enumerate(tokens):
            if token.kind is not TokenKind.KEYWORD or idx + 1 >= len(tokens):
                continue
            if token.text in self._INTRODUCERS:
                name = tokens[idx + 1]
                if name.kind is not TokenKind.IDENTIFIER or not self._declares(tokens, idx):
                    continue
                candidate = name
            elif token.text == "typedef":
                candidate = self._typedef_name(tokens, idx)
                if candidate is None:
                    continue
            else:
                continue
            if candidate.offset in seen or UPPER_CAMEL.match(strip_underscores(candidate.text)):
                continue
            seen.add(candidate.offset)
            yield self._finding_at(candidate, f"Type '{candidate.text}' should be UpperCamelCase")

    def _declares(self, tokens: List[Token], idx: int) -> bool:
        """`struct stat *st` uses a type, `struct Point {` or `struct Point;` declares one."""
        if tokens[idx].text.startswith("@"):
            return True
        return idx + 2 < len(tokens) and tokens[idx + 2].text in self._DECLARATION_FOLLOWERS

    @staticmethod
    def _typedef_name(tokens: List[Token], idx: int):
        """The identifier right before the `;` that ends a typedef."""
        depth = 0
        for j in range(idx + 1, len(tokens)):
            text = tokens[j].text
            if text in ("{", "("):
                depth += 1
            elif text in ("}", ")"):
                depth -= 1
            elif text == ";" and depth <= 0:
                prev = tokens[j - 1]
                return prev if prev.kind is TokenKind.IDENTIFIER else None
        return None


class ScopePrefixRule(BaseRule):
    """Script-level vim variables carry an explicit scope prefix.

    Applies to `let` and `for` at script level (outside functions), where a
    bare name silently creates a global. Inside functions a bare name is a
    local and is accepted. Vim9 `var`/`const`/`final` declarations are
    scoped by the language and are not checked.
    """

    languages = frozenset({"vim"})

    @property
    def rule_id(self) -> str:
        return "naming.scope-prefix"

    @property
    def severity(self) -> Severity:
        return Severity.WARNING

    def check(self, source: SourceFile) -> Iterator[Finding]:
        for keyword, target, depth in iter_vim_assignments(source):
            if depth or keyword.text not in ("let", "for"):
                continue
            scope, _ = split_vim_scope(target.text)
            if scope:
                continue
            yield self._finding_at(
                target, f"Script-level variable '{target.text}' needs a scope prefix (g:, s:, ...)"
            )


class MacroCasingRule(BaseRule):
    """Preprocessor macros are named in UPPER_SNAKE_CASE.

    Found with the tree-sitter C grammar, which recognizes `#define` lines
    even inside Objective-C sources it cannot otherwise parse.
    """

    languages = frozenset({"objc", "generic"})

    @property
    def rule_id(self) -> str:
        return "naming.macro-casing"

    @property
    def severity(self) -> Severity:
        return Severity.WARNING

    def check(self, source: SourceFile) -> Iterator[Finding]:
        if "#" not in source.text:
            return
        # Parsers are not shared between threads
        result = CFamilyParser().parse_string(source.text)
        for node in ASTWalker.find_all_by_type(result.tree.root_node, *MACRO_NODE_TYPES):
            name_node = CPatterns.get_macro_name(node)
            if name_node is None:
                continue
            name = ASTWalker.get_text(name_node, result.source)
            if UPPER_SNAKE.match(name.lstrip("_")):
                continue
            line, column = ASTWalker.get_position(name_node, result.source)
            yield self._create_finding(
                line, column, f"Macro '{name}' should be UPPER_SNAKE_CASE", end_column=column + len(name)
            )
