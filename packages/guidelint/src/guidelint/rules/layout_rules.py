import re
from typing import Iterator, Optional

from guidelint_syntax.node_types import SourceFile, TokenKind
from guidelint_syntax.profiles import get_profile

from ..models import Finding, Severity
from .base import BaseRule
from .scanning import line_starts

# A comment holding nothing but one long word (usually a URL)
_UNBREAKABLE_COMMENT = re.compile(r'^\s*(?://|"|#)\s*\S+\s*$')


class TrailingWhitespaceRule(BaseRule):
    """Lines must not end in spaces or tabs.

    The finding points at the first trailing blank. Lines inside block
    comments and multi-line strings are checked as well.
    """

    @property
    def rule_id(self) -> str:
        return "layout.trailing-whitespace"

    @property
    def severity(self) -> Severity:
        return Severity.WARNING

    def check(self, source: SourceFile) -> Iterator[Finding]:
        for line in source.lines:
            if not line.has_trailing_whitespace:
                continue
            start = len(line.text.rstrip(" \t")) + 1
            yield self._create_finding(
                line.number, start, "Trailing whitespace", end_column=len(line.text) + 1
            )


class LineLengthRule(BaseRule):
    """Lines must fit the column budget (80 for vim script, 100 for Objective-C).

    Width is measured in visible columns with tabs expanded to `tab_width`.
    A comment line consisting of a single unbreakable word, typically a URL,
    is exempt.
    """

    def __init__(self, max_length: Optional[int] = None, tab_width: int = 8):
        self._max_length = max_length
        self._tab_width = tab_width

    @property
    def rule_id(self) -> str:
        return "layout.line-length"

    @property
    def severity(self) -> Severity:
        return Severity.WARNING

    def limit_for(self, source: SourceFile) -> int:
        return self._max_length or get_profile(source.language).max_line_length

    def check(self, source: SourceFile) -> Iterator[Finding]:
        limit = self.limit_for(source)
        for line in source.lines:
            width = len(line.text.expandtabs(self._tab_width))
            if width <= limit:
                continue
            if _UNBREAKABLE_COMMENT.match(line.text):
                continue
            yield self._create_finding(
                line.number,
                self._column_past(line.text, limit),
                f"Line is {width} columns long (limit {limit})",
                end_column=len(line.text) + 1,
            )

    def _column_past(self, text: str, limit: int) -> int:
        """Character column of the first character beyond the visible limit."""
        width = 0
        for index, char in enumerate(text):
            width = (width // self._tab_width + 1) * self._tab_width if char == "\t" else width + 1
            if width > limit:
                return index + 1
        return len(text)


class TabIndentRule(BaseRule):
    """Indent with spaces, never tabs"""

    @property
    def rule_id(self) -> str:
        return "layout.tab-indent"

    @property
    def severity(self) -> Severity:
        return Severity.WARNING

    def check(self, source: SourceFile) -> Iterator[Finding]:
        for line in source.lines:
            leading = line.text[: line.indent]
            if "\t" in leading:
                yield self._create_finding(line.number, leading.index("\t") + 1, "Tab used for indentation")


class IndentWidthRule(BaseRule):
    """Indentation must be a multiple of two spaces.

    Exempt: blank lines, lines whose content starts inside a multi-line
    comment or string, continuation lines (vim `\\` lines and anything inside
    open parentheses or brackets, which may be aligned freely), comment
    lines and tab-indented lines (reported by layout.tab-indent).
    """

    @property
    def rule_id(self) -> str:
        return "layout.indent-width"

    @property
    def severity(self) -> Severity:
        return Severity.INFO

    def check(self, source: SourceFile) -> Iterator[Finding]:
        firsts = line_starts(source)
        open_groups = self._open_groups_by_line(source)
        for line in source.lines:
            if line.is_blank or "\t" in line.text[: line.indent] or line.indent % 2 == 0:
                continue
            first = firsts[line.number - 1]
            if first is None or first.column != line.indent + 1:
                continue
            if first.text == "\\" or open_groups.get(line.number, 0) > 0:
                continue
            yield self._create_finding(
                line.number, 1, f"Indentation of {line.indent} spaces is not a multiple of 2",
                end_column=line.indent + 1,
            )

    @staticmethod
    def _open_groups_by_line(source: SourceFile) -> dict:
        """Parenthesis/bracket nesting in effect at the start of each line."""
        groups = [t for t in source.tokens if t.kind is TokenKind.PUNCTUATION and t.text in ("(", "[", ")", "]")]
        result = {}
        depth = 0
        index = 0
        for line in source.lines:
            while index < len(groups) and groups[index].line < line.number:
                depth = depth + 1 if groups[index].text in ("(", "[") else max(depth - 1, 0)
                index += 1
            result[line.number] = depth
        return result
