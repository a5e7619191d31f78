from .ast_walker import ASTWalker
from .c_patterns import CPatterns
from .lexer import split_lines, tokenize
from .node_types import Line, ParseResult, SourceFile, Token, TokenKind
from .parser import CFamilyParser
from .profiles import PROFILES, LanguageProfile, get_profile, guess_language

__all__ = [
    "ASTWalker",
    "CFamilyParser",
    "CPatterns",
    "LanguageProfile",
    "Line",
    "PROFILES",
    "ParseResult",
    "SourceFile",
    "Token",
    "TokenKind",
    "get_profile",
    "guess_language",
    "split_lines",
    "tokenize",
]
