# render.py
# Presentation helpers for checker results: canonical JSON output, an
# indented tree view with inline error markers and item counts, and the
# status line shown after a check.

from typing import Iterator, Tuple

from nodes import (
    ArrayNode,
    BooleanLiteral,
    ErrorNode,
    Node,
    NullLiteral,
    NumberLiteral,
    ObjectNode,
    ParseResult,
    PropertyNode,
    StringLiteral,
)


# ---------------------------------------------------------------------------
# STATUS
# ---------------------------------------------------------------------------
def summary(result: ParseResult) -> str:
    if result.valid:
        return "Valid JSON"
    n = result.error_count
    return f"Invalid JSON: {n} error{'s' if n > 1 else ''} found"


def line_col(text: str, offset: int) -> Tuple[int, int]:
    """1-based (line, column) of ``offset`` in ``text``."""
    line = text.count("\n", 0, offset) + 1
    column = offset - (text.rfind("\n", 0, offset) + 1) + 1
    return line, column


# ---------------------------------------------------------------------------
# CANONICAL JSON
# ---------------------------------------------------------------------------
def _scalar_text(node: Node) -> str:
    if isinstance(node, StringLiteral):
        return '"' + node.raw + '"'
    return node.raw


def _dump(node: Node, indent, level: int) -> str:
    if isinstance(node, ErrorNode):
        raise ValueError(f"cannot serialise a tree that contains errors: {node.message}")

    if isinstance(node, ObjectNode):
        parts = []
        for entry in node.entries:
            if isinstance(entry, ErrorNode) or isinstance(entry.key, ErrorNode) or entry.value is None:
                raise ValueError("cannot serialise a tree that contains errors")
            sep = ":" if indent is None else ": "
            parts.append(_scalar_text(entry.key) + sep + _dump(entry.value, indent, level + 1))
        return _join("{", parts, "}", indent, level)

    if isinstance(node, ArrayNode):
        parts = [_dump(element, indent, level + 1) for element in node.elements]
        return _join("[", parts, "]", indent, level)

    return _scalar_text(node)


def _join(open_: str, parts, close: str, indent, level: int) -> str:
    if not parts:
        return open_ + close
    if indent is None:
        return open_ + ",".join(parts) + close
    inner = "\n" + " " * (indent * (level + 1))
    outer = "\n" + " " * (indent * level)
    return open_ + inner + ("," + inner).join(parts) + outer + close


def dumps(node: Node, indent=None) -> str:
    """
    Canonical JSON text for a valid tree.

    Compact by default; ``indent`` spaces per level otherwise. Literals are
    written exactly as they appeared in the input.
    """
    return _dump(node, indent, 0)


# ---------------------------------------------------------------------------
# TREE VIEW
# ---------------------------------------------------------------------------
def _error_marker(node: ErrorNode) -> str:
    return f"<!{node.message}: {node.offending_text!r}!>"


def _items(count: int) -> str:
    return f"// {count} item{'' if count == 1 else 's'}"


def _tree_lines(node: Node, indent: str, level: int, prefix: str = "") -> Iterator[str]:
    pad = indent * level

    if isinstance(node, ObjectNode):
        if not node.entries:
            yield f"{pad}{prefix}{{}}"
            return
        yield f"{pad}{prefix}{{"
        for entry in node.entries:
            if not isinstance(entry, PropertyNode):
                yield from _tree_lines(entry, indent, level + 1)
                continue
            if isinstance(entry.key, ErrorNode):
                key = _error_marker(entry.key)
            else:
                key = f'"{entry.key.raw}"'
            if entry.value is None:
                yield f"{pad}{indent}{key}"
            else:
                yield from _tree_lines(entry.value, indent, level + 1, f"{key}: ")
        yield f"{pad}}}"
        return

    if isinstance(node, ArrayNode):
        if not node.elements:
            yield f"{pad}{prefix}[]  {_items(0)}"
            return
        yield f"{pad}{prefix}[  {_items(node.count)}"
        for element in node.elements:
            yield from _tree_lines(element, indent, level + 1)
        yield f"{pad}]"
        return

    if isinstance(node, ErrorNode):
        yield f"{pad}{prefix}{_error_marker(node)}"
    elif isinstance(node, (StringLiteral, NumberLiteral, BooleanLiteral, NullLiteral)):
        yield f"{pad}{prefix}{_scalar_text(node)}"
    else:
        raise TypeError(f"not a node: {node!r}")


def format_tree(node: Node, indent: str = "  ") -> str:
    """Indented view of any tree, errors included, arrays annotated with their item count."""
    return "\n".join(_tree_lines(node, indent, 0))
