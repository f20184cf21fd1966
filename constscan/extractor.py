"""Extraction of top-level string constants from a parsed Go file.

Only the direct pattern is recognised::

    const Greeting = "hello"
    const (
        Title, Subtitle = "こんにちは", `raw`
    )

A binding whose value is anything other than a bare string literal
(identifiers, calls, arithmetic, parenthesised literals, numbers, runes,
implicit ``iota`` repetition) is simply not a match. The extractor never raises
on input it does not recognise.
"""

from tree_sitter import Node

from constscan.models import ConstantRecord

STRING_LITERAL_TYPES = frozenset({"interpreted_string_literal", "raw_string_literal"})


def contains_non_ascii(raw: bytes) -> bool:
    """Check whether any byte of the verbatim source text is outside 7-bit ASCII.

    The test runs on the literal as written, not on its decoded value, so an
    escape such as ``\\u00e9`` spelled in ASCII does not count.

    Args:
        raw: Source bytes of the literal, quotes included.

    Returns:
        True if a byte >= 0x80 is present.
    """
    return any(b >= 0x80 for b in raw)


def classify_literal(node: Node, file_path: str) -> ConstantRecord | None:
    """Build a record for ``node`` if it is a string literal, else None."""
    if node.type not in STRING_LITERAL_TYPES:
        return None

    raw = node.text or b""
    return ConstantRecord(
        file_path=file_path,
        line=node.start_point[0] + 1,  # tree-sitter rows are 0-indexed
        literal_value=raw.decode("utf-8", errors="replace"),
        contains_non_ascii=contains_non_ascii(raw),
    )


def _value_expressions(spec: Node) -> list[Node]:
    """Return the value expressions of a ``const_spec`` (empty when omitted)."""
    value = spec.child_by_field_name("value")
    if value is None:
        return []
    if value.type == "expression_list":
        return list(value.named_children)
    return [value]


def _const_specs(decl: Node) -> list[Node]:
    """Return every ``const_spec`` of a single or grouped declaration."""
    return [child for child in decl.children if child.type == "const_spec"]


def extract_constants(
    tree: Node,
    file_path: str,
    non_ascii_only: bool = False,
) -> list[ConstantRecord]:
    """Extract string constants declared at the top level of one file.

    Declarations inside function bodies are not inspected.

    Args:
        tree: Root node of the parsed file.
        file_path: Path recorded on each record.
        non_ascii_only: Keep only literals whose source bytes include
            non-ASCII characters.

    Returns:
        Records in source order.
    """
    records: list[ConstantRecord] = []

    for decl in tree.children:
        if decl.type != "const_declaration":
            continue
        for spec in _const_specs(decl):
            for value in _value_expressions(spec):
                record = classify_literal(value, file_path)
                if record is None:
                    continue
                if non_ascii_only and not record.contains_non_ascii:
                    continue
                records.append(record)

    return records
