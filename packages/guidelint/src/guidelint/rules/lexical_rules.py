from typing import Iterator, Optional

from guidelint_syntax.node_types import SourceFile, TokenKind
from guidelint_syntax.profiles import get_profile

from ..models import Finding, Severity
from .base import BaseRule

_QUOTE_NAMES = {"'": "single", '"': "double"}
_QUOTE_CHARS = {"single": "'", "double": '"'}


class QuoteStyleRule(BaseRule):
    """String literals should use the preferred quote character.

    Vim script prefers single quotes, the generic profile double quotes;
    Objective-C has no preference (its quotes are not interchangeable).
    A literal is exempt when switching quotes would change it: its body
    contains the preferred quote, or, for a double-quoted vim string, a
    backslash escape that single quotes do not support.
    """

    languages = frozenset({"vim", "generic"})

    def __init__(self, quote_style: Optional[str] = None):
        self._override = _QUOTE_CHARS[quote_style] if quote_style else None

    @property
    def rule_id(self) -> str:
        return "lexical.quote-style"

    @property
    def severity(self) -> Severity:
        return Severity.INFO

    def check(self, source: SourceFile) -> Iterator[Finding]:
        preferred = self._override or get_profile(source.language).preferred_quote
        if preferred is None:
            return
        for token in source.tokens:
            if token.kind is not TokenKind.STRING:
                continue
            quote = token.text[0]
            if quote == preferred:
                continue
            body = token.text[1:-1] if len(token.text) > 1 and token.text.endswith(quote) else token.text[1:]
            if preferred in body:
                continue
            if source.language == "vim" and quote == '"' and "\\" in body:
                continue
            yield self._finding_at(
                token,
                f"String uses {_QUOTE_NAMES[quote]} quotes; prefer {_QUOTE_NAMES[preferred]} quotes",
            )
