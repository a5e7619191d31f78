"""Lexical profiles for the languages the linter understands."""

from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Dict, FrozenSet, Optional, Tuple


@dataclass(frozen=True)
class LanguageProfile:
    """Everything the tokenizer needs to know about a language"""

    name: str
    line_comments: Tuple[str, ...]
    block_comment: Optional[Tuple[str, str]]
    quotes: Tuple[str, ...]
    keywords: FrozenSet[str]
    operators: Tuple[str, ...]
    max_line_length: int
    preferred_quote: Optional[str] = None
    # Characters allowed inside identifiers besides alphanumerics and '_'
    identifier_chars: str = ""
    # Type-like keywords that introduce a variable declaration
    declaration_keywords: FrozenSet[str] = field(default_factory=frozenset)
    # Keywords that never take an argument, so a quote after them opens a comment
    comment_after_keywords: FrozenSet[str] = field(default_factory=frozenset)


def _by_length(*ops: str) -> Tuple[str, ...]:
    # Longest operators first so that '==#' wins over '=='
    return tuple(sorted(set(ops), key=len, reverse=True))


VIM = LanguageProfile(
    name="vim",
    line_comments=('"',),
    block_comment=None,
    quotes=("'", '"'),
    keywords=frozenset(
        {
            "let", "unlet", "const", "var", "final", "function", "endfunction",
            "def", "enddef", "if", "elseif", "else", "endif", "for", "endfor",
            "while", "endwhile", "try", "catch", "finally", "endtry", "return",
            "call", "echo", "echom", "echomsg", "echoerr", "execute", "exe",
            "normal", "norm", "command", "augroup", "autocmd", "abort", "range",
            "dict", "closure", "in", "break", "continue", "throw", "silent",
            "set", "setlocal", "map", "noremap", "nnoremap", "vnoremap",
            "inoremap", "xnoremap", "onoremap", "finish",
        }
    ),
    operators=_by_length(
        "==#", "==?", "!=#", "!=?", "=~#", "=~?", "!~#", "!~?", ">=#", ">=?",
        "<=#", "<=?", ">#", ">?", "<#", "<?", "==", "!=", "=~", "!~",
        ">=", "<=", "&&", "||", "..", "+=", "-=", ".=", "..=", "*=", "/=",
        "->", "=", "+", "-", "*", "/", "%", "<", ">", "!", "?", ".",
    ),
    max_line_length=80,
    preferred_quote="'",
    identifier_chars=":#",
    declaration_keywords=frozenset({"let", "const", "var", "final"}),
    comment_after_keywords=frozenset(
        {
            "abort", "range", "dict", "closure", "else", "endif", "endfunction",
            "enddef", "endfor", "endwhile", "try", "finally", "endtry", "break",
            "continue", "finish",
        }
    ),
)

OBJC = LanguageProfile(
    name="objc",
    line_comments=("//",),
    block_comment=("/*", "*/"),
    quotes=('"', "'"),
    keywords=frozenset(
        {
            "if", "else", "for", "while", "do", "switch", "case", "default",
            "break", "continue", "return", "goto", "sizeof", "typedef",
            "struct", "enum", "union", "static", "extern", "const", "volatile",
            "inline", "void", "int", "char", "short", "long", "float", "double",
            "signed", "unsigned", "BOOL", "YES", "NO", "nil", "self", "super",
            "id", "instancetype", "NSInteger", "NSUInteger", "CGFloat",
            "@interface", "@implementation", "@protocol", "@end", "@property",
            "@synthesize", "@dynamic", "@class", "@try", "@catch", "@finally",
            "@throw", "@selector", "@autoreleasepool", "@synchronized",
            "@optional", "@required", "@private", "@public", "@protected",
            "@import", "in",
        }
    ),
    operators=_by_length(
        "<<=", ">>=", "->", "++", "--", "<<", ">>", "<=", ">=", "==", "!=",
        "&&", "||", "+=", "-=", "*=", "/=", "%=", "&=", "|=", "^=", "=", "+",
        "-", "*", "/", "%", "<", ">", "!", "~", "&", "|", "^", "?", ".",
    ),
    max_line_length=100,
    preferred_quote=None,
    declaration_keywords=frozenset(
        {
            "int", "char", "short", "long", "float", "double", "unsigned",
            "signed", "BOOL", "id", "NSInteger", "NSUInteger", "CGFloat",
            "instancetype",
        }
    ),
)

GENERIC = LanguageProfile(
    name="generic",
    line_comments=("//", "#"),
    block_comment=("/*", "*/"),
    quotes=('"', "'"),
    keywords=frozenset(
        {
            "if", "else", "for", "while", "do", "switch", "case", "default",
            "break", "continue", "return", "function", "class", "struct",
            "enum", "const", "let", "var", "static", "new", "import", "export",
            "throw", "try", "catch", "finally", "typedef", "void", "int",
            "float", "double", "char", "long", "in",
        }
    ),
    operators=_by_length(
        "===", "!==", "<<=", ">>=", "=>", "->", "++", "--", "<<", ">>", "<=",
        ">=", "==", "!=", "&&", "||", "+=", "-=", "*=", "/=", "%=", "=", "+",
        "-", "*", "/", "%", "<", ">", "!", "~", "&", "|", "^", "?", ".",
    ),
    max_line_length=80,
    preferred_quote='"',
    declaration_keywords=frozenset(
        {"let", "var", "const", "int", "float", "double", "char", "long"}
    ),
)

PROFILES: Dict[str, LanguageProfile] = {p.name: p for p in (VIM, OBJC, GENERIC)}

_VIM_NAMES = {"vimrc", ".vimrc", "_vimrc", "gvimrc", ".gvimrc", "_gvimrc", ".exrc"}
_SUFFIXES = {".vim": "vim", ".m": "objc", ".mm": "objc", ".h": "objc"}


def guess_language(path: str) -> str:
    """Pick a profile name from a file path, falling back to 'generic'."""
    if not path:
        return GENERIC.name
    pure = PurePath(path)
    if pure.name in _VIM_NAMES:
        return VIM.name
    return _SUFFIXES.get(pure.suffix.lower(), GENERIC.name)


def get_profile(name: Optional[str]) -> LanguageProfile:
    """Look up a profile by name. Unknown names raise KeyError."""
    if name is None:
        return GENERIC
    try:
        return PROFILES[name]
    except KeyError:
        raise KeyError(f"Unknown language '{name}' (known: {', '.join(sorted(PROFILES))})") from None
