import logging

import tree_sitter_c as tsc
from tree_sitter import Language, Parser

from .node_types import ParseResult

logger = logging.getLogger(__name__)


class CFamilyParser:
    """tree-sitter-c parser used for structural checks on C-like sources.

    Objective-C constructs the C grammar does not know end up in ERROR
    nodes; plain C declarations, function definitions and preprocessor
    directives around them are still recognized.
    """

    def __init__(self):
        self.language = Language(tsc.language())
        self.parser = Parser(self.language)

    def parse_string(self, source: str) -> ParseResult:
        source_bytes = source.encode("utf-8")
        tree = self.parser.parse(source_bytes)
        errors = []
        if tree.root_node.has_error:
            errors.append("source contains constructs outside the C grammar")
            logger.debug("tree-sitter-c reported syntax errors")
        return ParseResult(tree=tree, source=source_bytes, errors=errors)
