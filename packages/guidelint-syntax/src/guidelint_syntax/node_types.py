from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Tuple

from tree_sitter import Tree


class TokenKind(str, Enum):
    """Lexical categories produced by the tokenizer"""

    IDENTIFIER = "identifier"
    STRING = "string-literal"
    NUMBER = "number-literal"
    COMMENT = "comment"
    OPERATOR = "operator"
    KEYWORD = "keyword"
    PUNCTUATION = "punctuation"


@dataclass(frozen=True)
class Token:
    """A lexical unit. Lines and columns are 1-based, ends are exclusive."""

    kind: TokenKind
    text: str
    line: int
    column: int
    end_line: int
    end_column: int
    offset: int
    end_offset: int

    @property
    def is_significant(self) -> bool:
        return self.kind is not TokenKind.COMMENT


@dataclass(frozen=True)
class Line:
    """A single physical line of a source file"""

    number: int
    text: str
    offset: int

    @property
    def has_trailing_whitespace(self) -> bool:
        return bool(self.text) and self.text[-1] in " \t"

    @property
    def indent(self) -> int:
        return len(self.text) - len(self.text.lstrip(" \t"))

    @property
    def is_blank(self) -> bool:
        return not self.text.strip()


@dataclass(frozen=True)
class SourceFile:
    """Immutable tokenized view of one file"""

    path: str
    text: str
    language: str
    lines: Tuple[Line, ...]
    tokens: Tuple[Token, ...]

    def line(self, number: int) -> Line:
        return self.lines[number - 1]

    def comments(self) -> Iterator[Token]:
        return (t for t in self.tokens if t.kind is TokenKind.COMMENT)

    def significant_tokens(self) -> List[Token]:
        return [t for t in self.tokens if t.is_significant]

    def tokens_on_line(self, number: int) -> List[Token]:
        return [t for t in self.tokens if t.line == number]

    def is_valid_position(self, line: int, column: int) -> bool:
        """Columns may point one past the last character (end of line)."""
        if line < 1 or line > len(self.lines):
            return False
        return 1 <= column <= len(self.lines[line - 1].text) + 1


@dataclass
class ParseResult:
    """Result of a tree-sitter parse operation"""

    tree: Optional[Tree]
    source: bytes
    errors: List[str] = field(default_factory=list)
