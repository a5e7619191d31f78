"""Token-stream helpers shared by the built-in rules.

None of these parse either language completely; they recognize the few
shapes the style checks need and skip everything else.
"""

import re
from dataclasses import dataclass, replace
from typing import FrozenSet, Iterator, List, Optional, Tuple

from guidelint_syntax.node_types import SourceFile, Token, TokenKind
from guidelint_syntax.profiles import get_profile

UPPER_CAMEL = re.compile(r"^[A-Z][A-Za-z0-9]*$")
LOWER_CAMEL = re.compile(r"^[a-z][A-Za-z0-9]*$")
SNAKE_CASE = re.compile(r"^[a-z][a-z0-9_]*$")
UPPER_SNAKE = re.compile(r"^[A-Z][A-Z0-9_]*$")
K_CONSTANT = re.compile(r"^k[A-Z][A-Za-z0-9]*$")

VIM_SCOPES = "gsbwtlav"
VIM_FUNCTION_START = frozenset({"function", "func", "fun", "fu", "def"})
VIM_FUNCTION_END = frozenset({"endfunction", "endfunc", "endfun", "endfu", "endf", "enddef"})
# Loop counters that may stay single-letter
CONVENTIONAL_SHORT_NAMES = frozenset({"i", "j", "k", "n", "_"})

_C_DECLARATOR_FOLLOW = frozenset({"=", ";", ",", "[", ")", "in"})


def split_vim_scope(name: str) -> Tuple[str, str]:
    """'s:foo' -> ('s', 'foo'); unscoped names return an empty prefix."""
    if len(name) >= 2 and name[1] == ":" and name[0] in VIM_SCOPES:
        return name[0], name[2:]
    return "", name


def strip_underscores(name: str) -> str:
    return name.strip("_") or name


def is_informal(name: str) -> bool:
    return len(name) == 1 and name not in CONVENTIONAL_SHORT_NAMES


def line_starts(source: SourceFile) -> List[Optional[Token]]:
    """First significant token starting on each line, indexed by line - 1."""
    firsts: List[Optional[Token]] = [None] * len(source.lines)
    for token in source.tokens:
        if token.is_significant and firsts[token.line - 1] is None:
            firsts[token.line - 1] = token
    return firsts


def is_command_position(tokens: List[Token], index: int) -> bool:
    """True when tokens[index] is the first thing on its line, after an optional ':' or '|'."""
    token = tokens[index]
    if index == 0 or tokens[index - 1].line != token.line:
        return True
    prev = tokens[index - 1]
    if prev.text == "|":
        return True
    if prev.text == ":":
        return index < 2 or tokens[index - 2].line != token.line or tokens[index - 2].text == "|"
    return False


def brace_depths(tokens: List[Token]) -> List[int]:
    """Brace depth in effect at each token (an opening brace sits at the outer depth)."""
    depths = []
    depth = 0
    for token in tokens:
        if token.text == "}" and token.kind is TokenKind.PUNCTUATION:
            depth = max(depth - 1, 0)
        depths.append(depth)
        if token.text == "{" and token.kind is TokenKind.PUNCTUATION:
            depth += 1
    return depths


@dataclass(frozen=True)
class Declaration:
    """A named variable found in a declaration statement"""

    name: Token
    qualifiers: FrozenSet[str]
    depth: int
    is_parameter: bool = False

    @property
    def is_const(self) -> bool:
        return "const" in self.qualifiers


def iter_c_declarations(source: SourceFile) -> Iterator[Declaration]:
    """Variables declared with a type keyword or an object pointer type.

    Recognized: `int count = 0;`, `unsigned long n;`, `NSString *name = ...;`,
    `var x = 1;`, function parameters `(int count)`. Only the first
    declarator of a comma list is reported.
    """
    profile = get_profile(source.language)
    tokens = source.significant_tokens()
    depths = brace_depths(tokens)
    stmt_start = 0
    parens = 0
    for idx, token in enumerate(tokens):
        if token.kind is TokenKind.PUNCTUATION and token.text in ("(", ")"):
            parens = parens + 1 if token.text == "(" else max(parens - 1, 0)
        if token.text in (";", "{", "}") and token.kind is TokenKind.PUNCTUATION:
            stmt_start = idx + 1
            continue
        if token.kind is not TokenKind.IDENTIFIER or idx == 0 or idx + 1 >= len(tokens):
            continue
        if tokens[idx + 1].text not in _C_DECLARATOR_FOLLOW:
            continue

        j = idx - 1
        pointers = 0
        while j >= 0 and tokens[j].text == "*" and tokens[j].kind is TokenKind.OPERATOR:
            pointers += 1
            j -= 1
        if j < 0:
            continue
        type_token = tokens[j]
        is_keyword_type = type_token.kind is TokenKind.KEYWORD and type_token.text in profile.declaration_keywords
        is_object_type = (
            type_token.kind is TokenKind.IDENTIFIER and pointers > 0 and type_token.text[:1].isupper()
        )
        if not (is_keyword_type or is_object_type):
            continue

        qualifiers = frozenset(t.text for t in tokens[stmt_start:idx] if t.kind is TokenKind.KEYWORD)
        yield Declaration(name=token, qualifiers=qualifiers, depth=depths[idx], is_parameter=parens > 0)


def iter_vim_assignments(source: SourceFile) -> Iterator[Tuple[Token, Token, int]]:
    """(declaring keyword, target name, function depth) for let/const/var/final/for.

    `let [a, b] = ...` yields both names. Options (`&x`), registers (`@x`)
    and environment variables (`$X`) never appear as targets because their
    sigil is tokenized separately.
    """
    tokens = source.significant_tokens()
    depth = 0
    for idx, token in enumerate(tokens):
        if not is_command_position(tokens, idx):
            continue
        text = token.text
        if text in VIM_FUNCTION_START and _function_name(tokens, idx) is not None:
            depth += 1
            continue
        if text in VIM_FUNCTION_END:
            depth = max(depth - 1, 0)
            continue
        if text not in ("let", "const", "var", "final", "for"):
            continue
        if idx + 1 >= len(tokens) or tokens[idx + 1].line != token.line:
            continue
        target = tokens[idx + 1]
        if target.kind is TokenKind.IDENTIFIER:
            yield token, target, depth
        elif target.text == "[":
            for inner in tokens[idx + 2 :]:
                if inner.text == "]" or inner.line != token.line:
                    break
                if inner.kind is TokenKind.IDENTIFIER:
                    yield token, inner, depth


def _function_name(tokens: List[Token], idx: int) -> Optional[Tuple[Token, int]]:
    """Name token and the index after it for `function[!] Name(`.

    A `<SID>Name` prefix is tokenized as `<` `SID` `>` `Name` and comes back
    joined into one identifier. The `function('x')` builtin names nothing.
    """
    line = tokens[idx].line
    j = idx + 1
    if j < len(tokens) and tokens[j].text == "!" and tokens[j].line == line:
        j += 1
    parts = tokens[j : j + 4]
    if (
        len(parts) == 4
        and [t.text for t in parts[:3]] in (["<", "SID", ">"], ["<", "sid", ">"])
        and parts[3].kind is TokenKind.IDENTIFIER
        and all(a.end_offset == b.offset and b.line == line for a, b in zip(parts, parts[1:]))
        and parts[0].line == line
    ):
        text = "".join(t.text for t in parts)
        return replace(parts[3], text=text, column=parts[0].column, offset=parts[0].offset), j + 4
    if j < len(tokens) and tokens[j].kind is TokenKind.IDENTIFIER and tokens[j].line == line:
        return tokens[j], j + 1
    return None


@dataclass(frozen=True)
class VimFunction:
    keyword: Token
    name: Token
    end_line: Optional[int]
    is_dict_member: bool


def iter_vim_functions(source: SourceFile) -> Iterator[VimFunction]:
    """Function definitions with the line of their matching end keyword."""
    tokens = source.significant_tokens()
    stack: List[Tuple[Token, Token, bool]] = []
    found: List[VimFunction] = []
    for idx, token in enumerate(tokens):
        if not is_command_position(tokens, idx):
            continue
        named = _function_name(tokens, idx) if token.text in VIM_FUNCTION_START else None
        if named is not None:
            name, after = named
            is_dict = after < len(tokens) and tokens[after].text == "."
            stack.append((token, name, is_dict))
        elif token.text in VIM_FUNCTION_END and stack:
            keyword, name, is_dict = stack.pop()
            found.append(VimFunction(keyword, name, token.line, is_dict))
    for keyword, name, is_dict in stack:
        found.append(VimFunction(keyword, name, None, is_dict))
    return iter(sorted(found, key=lambda f: f.keyword.offset))
