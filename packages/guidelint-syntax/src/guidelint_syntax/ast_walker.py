from typing import Iterator, List, Tuple

from tree_sitter import Node


class ASTWalker:
    """Read-only queries over a tree-sitter AST"""

    @staticmethod
    def iter_nodes(node: Node) -> Iterator[Node]:
        """Depth-first, pre-order, which is also document order"""
        stack = [node]
        while stack:
            current = stack.pop()
            yield current
            stack.extend(reversed(current.children))

    @staticmethod
    def find_all_by_type(node: Node, *type_names: str) -> List[Node]:
        """All descendants (and the node itself) of any of the given types"""
        wanted = set(type_names)
        return [n for n in ASTWalker.iter_nodes(node) if n.type in wanted]

    @staticmethod
    def get_text(node: Node, source: bytes) -> str:
        return source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")

    @staticmethod
    def get_position(node: Node, source: bytes) -> Tuple[int, int]:
        """1-based line and character column of a node's start.

        tree-sitter reports byte columns; convert so that non-ASCII text
        before the node does not shift the column.
        """
        row, byte_col = node.start_point
        line_start = node.start_byte - byte_col
        prefix = source[line_start : node.start_byte].decode("utf-8", errors="replace")
        return row + 1, len(prefix) + 1
