"""Best-effort tokenizer and line model.

The tokenizer never raises: unterminated strings stop at the end of their
line and unterminated block comments swallow the rest of the file. Every
character of the input ends up either inside exactly one token or in the
whitespace between two tokens.
"""

import re
from bisect import bisect_right
from typing import List, Optional, Tuple

from .node_types import Line, SourceFile, Token, TokenKind
from .profiles import LanguageProfile, get_profile, guess_language

_WHITESPACE = " \t\r\n\f\v"
_NUMBER = re.compile(r"0[xX][0-9a-fA-F]+[uUlL]*|\d+(?:\.\d+)?(?:[eE][+-]?\d+)?[A-Za-z]*")
# Tokens after which a vim '"' separated by whitespace starts a trailing comment
_VIM_EXPRESSION_END = (TokenKind.IDENTIFIER, TokenKind.NUMBER, TokenKind.STRING)


def split_lines(text: str) -> Tuple[Line, ...]:
    """Split text into Lines. A final newline does not open an extra line."""
    raw = text.split("\n")
    if len(raw) > 1 and raw[-1] == "":
        raw.pop()
    lines = []
    offset = 0
    for number, part in enumerate(raw, start=1):
        lines.append(Line(number=number, text=part[:-1] if part.endswith("\r") else part, offset=offset))
        offset += len(part) + 1
    return tuple(lines)


class Lexer:
    """Single-use scanner over one text"""

    def __init__(self, text: str, profile: LanguageProfile):
        self.text = text
        self.profile = profile
        self.tokens: List[Token] = []
        self._line_starts = [0] + [m.end() for m in re.finditer("\n", text)]

    def run(self) -> List[Token]:
        text = self.text
        i = 0
        while i < len(text):
            ch = text[i]
            if ch in _WHITESPACE:
                i += 1
                continue
            i = self._scan(i)
        return self.tokens

    # Scanning

    def _scan(self, i: int) -> int:
        text = self.text
        profile = self.profile
        ch = text[i]

        if profile.block_comment and text.startswith(profile.block_comment[0], i):
            return self._block_comment(i)

        if self._starts_line_comment(i):
            return self._emit(TokenKind.COMMENT, i, self._line_end(i))

        if ch == "@" and profile.name == "objc":
            nxt = text[i + 1 : i + 2]
            if nxt == '"':
                return self._string(i, i + 1)
            if nxt.isalpha():
                end = self._identifier_end(i + 1)
                kind = TokenKind.KEYWORD if text[i:end] in profile.keywords else TokenKind.IDENTIFIER
                return self._emit(kind, i, end)

        if ch in profile.quotes:
            return self._string(i, i)

        if ch.isdigit():
            match = _NUMBER.match(text, i)
            return self._emit(TokenKind.NUMBER, i, match.end())

        if ch.isalpha() or ch == "_":
            end = self._identifier_end(i)
            kind = TokenKind.KEYWORD if text[i:end] in profile.keywords else TokenKind.IDENTIFIER
            return self._emit(kind, i, end)

        for op in profile.operators:
            if text.startswith(op, i):
                return self._emit(TokenKind.OPERATOR, i, i + len(op))

        return self._emit(TokenKind.PUNCTUATION, i, i + 1)

    def _starts_line_comment(self, i: int) -> bool:
        text = self.text
        for marker in self.profile.line_comments:
            if not text.startswith(marker, i):
                continue
            if self.profile.name != "vim":
                return True
            return self._vim_quote_is_comment(i)
        return False

    def _vim_quote_is_comment(self, i: int) -> bool:
        """A vim '"' is a comment at line start or after a finished expression.

        Keywords that never take an argument, such as 'endif' or 'abort',
        also finish a statement, so fold markers and suppression comments
        after them are comments.
        """
        line_start = self._line_starts[bisect_right(self._line_starts, i) - 1]
        if not self.text[line_start:i].strip(" \t:"):
            return True
        if self.text[i - 1] not in " \t" or not self.tokens:
            return False
        prev = self.tokens[-1]
        if prev.end_offset <= line_start:
            return False
        if prev.kind is TokenKind.KEYWORD:
            return prev.text in self.profile.comment_after_keywords
        return prev.kind in _VIM_EXPRESSION_END or prev.text in (")", "]", "}")

    def _block_comment(self, i: int) -> int:
        opener, closer = self.profile.block_comment
        close = self.text.find(closer, i + len(opener))
        if close == -1:
            end = max(len(self.text.rstrip(_WHITESPACE)), i + len(opener))
        else:
            end = close + len(closer)
        return self._emit(TokenKind.COMMENT, i, end)

    def _string(self, start: int, quote_at: int) -> int:
        text = self.text
        quote = text[quote_at]
        limit = self._line_end(quote_at)
        # Vim single-quoted strings have no backslash escapes; '' is a literal quote
        doubled = self.profile.name == "vim" and quote == "'"
        j = quote_at + 1
        while j < limit:
            c = text[j]
            if c == "\\" and not doubled:
                j += 2
                continue
            if c == quote:
                if doubled and text[j + 1 : j + 2] == quote:
                    j += 2
                    continue
                return self._emit(TokenKind.STRING, start, j + 1)
            j += 1
        return self._emit(TokenKind.STRING, start, limit)

    def _identifier_end(self, i: int) -> int:
        text = self.text
        extra = self.profile.identifier_chars
        j = i
        while j < len(text) and (text[j].isalnum() or text[j] == "_" or (j > i and text[j] in extra)):
            j += 1
        return j

    def _line_end(self, i: int) -> int:
        end = self.text.find("\n", i)
        if end == -1:
            end = len(self.text)
        if end > i and self.text[end - 1] == "\r":
            end -= 1
        return end

    # Bookkeeping

    def _position(self, offset: int) -> Tuple[int, int]:
        index = bisect_right(self._line_starts, offset) - 1
        return index + 1, offset - self._line_starts[index] + 1

    def _emit(self, kind: TokenKind, start: int, end: int) -> int:
        line, column = self._position(start)
        end_line, end_column = self._position(end)
        self.tokens.append(
            Token(
                kind=kind,
                text=self.text[start:end],
                line=line,
                column=column,
                end_line=end_line,
                end_column=end_column,
                offset=start,
                end_offset=end,
            )
        )
        return end


def tokenize(text: str, path: str = "", language: Optional[str] = None) -> SourceFile:
    """Turn raw text into a SourceFile. Never raises on malformed input."""
    profile = get_profile(language or guess_language(path))
    tokens = Lexer(text, profile).run()
    return SourceFile(
        path=path,
        text=text,
        language=profile.name,
        lines=split_lines(text),
        tokens=tuple(tokens),
    )
