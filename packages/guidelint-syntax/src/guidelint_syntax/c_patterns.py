"""C-family AST pattern recognition."""

from typing import Optional

from tree_sitter import Node

from .ast_walker import ASTWalker

MACRO_NODE_TYPES = ("preproc_def", "preproc_function_def")


class CPatterns:
    """Recognize declarations the style rules care about in a tree-sitter-c AST."""

    @staticmethod
    def get_function_name(func_node: Node, source: bytes) -> Optional[str]:
        """Extract the function name from a function_definition node.

        Pointer return types wrap the function_declarator in one or more
        pointer_declarator nodes.
        """
        if func_node.type != "function_definition":
            return None

        declarator = func_node.child_by_field_name("declarator")
        while declarator is not None and declarator.type == "pointer_declarator":
            declarator = declarator.child_by_field_name("declarator")
        if declarator is None or declarator.type != "function_declarator":
            return None

        name_node = declarator.child_by_field_name("declarator")
        if name_node is None or name_node.type != "identifier":
            return None
        return ASTWalker.get_text(name_node, source)

    @staticmethod
    def is_static(node: Node, source: bytes) -> bool:
        """Check if a definition has internal linkage."""
        for child in node.children:
            if child.type == "storage_class_specifier" and ASTWalker.get_text(child, source) == "static":
                return True
        return False

    @staticmethod
    def body_line_count(func_node: Node) -> int:
        """Number of lines between the braces of a function body."""
        body = func_node.child_by_field_name("body")
        if body is None:
            return 0
        return max(body.end_point[0] - body.start_point[0] - 1, 0)

    @staticmethod
    def has_leading_comment(node: Node) -> bool:
        """A comment must end on the line directly above the node."""
        prev = node.prev_sibling
        if prev is None or prev.type != "comment":
            return False
        return node.start_point[0] - prev.end_point[0] <= 1

    @staticmethod
    def get_macro_name(node: Node) -> Optional[Node]:
        """Return the name node of a #define, if the node is one."""
        if node.type not in MACRO_NODE_TYPES:
            return None
        return node.child_by_field_name("name")
