"""Syntax parser adapter for Go sources.

The scan core only needs a root node that exposes the tree-sitter node
interface (``type``, ``children``, ``child_by_field_name``,
``children_by_field_name``, ``text`` and ``start_point``). ``GoParser`` supplies
that from ``tree-sitter-go``; tests can plug in any other ``SyntaxParser``.
"""

import threading
from typing import Protocol

from tree_sitter import Language, Node, Parser

from constscan.errors import FileParseError

_LANGUAGE: Language | None = None
_LANGUAGE_LOCK = threading.Lock()


def _get_go_language() -> Language:
    """Lazily load the tree-sitter Go grammar."""
    global _LANGUAGE
    with _LANGUAGE_LOCK:
        if _LANGUAGE is None:
            import tree_sitter_go as ts_go

            _LANGUAGE = Language(ts_go.language())
    return _LANGUAGE


class SyntaxParser(Protocol):
    """Turns the raw bytes of one file into a syntax tree."""

    def parse(self, source: bytes, file_path: str) -> Node:
        """Parse ``source`` and return the root node.

        Raises:
            FileParseError: If the source is not syntactically valid.
        """
        ...


def _first_error_node(node: Node) -> Node | None:
    """Find the first ERROR or missing node in document order."""
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error:
            found = _first_error_node(child)
            if found is not None:
                return found
    return None


class GoParser:
    """tree-sitter backed parser for Go files.

    tree-sitter recovers from syntax errors and still returns a tree; this
    adapter rejects such trees so a broken file contributes nothing, the same
    way a strict compiler front-end would.
    """

    def __init__(self, language: Language | None = None):
        self._language = language

    @property
    def language(self) -> Language:
        if self._language is None:
            self._language = _get_go_language()
        return self._language

    def parse(self, source: bytes, file_path: str) -> Node:
        # Parser objects are not thread-safe, so each call builds its own.
        parser = Parser(self.language)
        tree = parser.parse(source)
        root = tree.root_node

        if root.has_error:
            bad = _first_error_node(root) or root
            row, column = bad.start_point
            if bad.is_missing:
                reason = f"missing {bad.type}"
            else:
                reason = "syntax error"
            raise FileParseError(file_path, f"{file_path}:{row + 1}:{column + 1}: {reason}")

        # tree-sitter accepts a file without a package clause; Go does not.
        if not any(child.type == "package_clause" for child in root.children):
            raise FileParseError(file_path, f"{file_path}:1:1: expected 'package'")

        return root
