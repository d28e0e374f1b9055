# nodes.py
# Output tree of the checker: one frozen record per JSON construct, plus the
# error taxonomy and the per-call result record.

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple, Union


# ---------------------------------------------------------------------------
# ERROR TAXONOMY
# ---------------------------------------------------------------------------
class ErrorKind(Enum):
    """Every syntax violation the checker reports, with its user-facing message."""

    MISSING_OPEN_BRACE = "Opening brace is missing"
    MISSING_OPEN_BRACKET = "Opening square bracket is missing"
    MISSING_CLOSE_BRACE = "Closing brace is missing"
    MISSING_CLOSE_BRACKET = "Closing square bracket is missing"
    MISSING_COLON = "Semi-column is missing"
    MISSING_COMMA = "Comma is missing"
    TRAILING_COMMA = "Trailing comma before closing delimiter"
    INVALID_PROPERTY_NAME = "Name property must be a String wrapped in double quotes"
    INVALID_ESCAPE = "Backslash must be escaped"
    INVALID_UNICODE_ESCAPE = "\\u must be followed by 4 hexadecimal characters"
    UNTERMINATED_STRING = "String is missing its closing quote"
    SINGLE_QUOTED_STRING = "String must be wrapped in double quotes"
    UNKNOWN_LITERAL = "Unknown type"
    MISSING_VALUE = "Value is missing"
    TRAILING_TEXT = "Trailing text after closing delimiter"
    NOT_AN_OBJECT_OR_ARRAY = "JSON expression must be an object or an array"
    DEPTH_EXCEEDED = "Nesting depth limit exceeded"

    @property
    def message(self) -> str:
        return self.value


# ---------------------------------------------------------------------------
# NODES
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class StringLiteral:
    raw: str  # between the quotes, escapes left as written


@dataclass(frozen=True)
class NumberLiteral:
    raw: str


@dataclass(frozen=True)
class BooleanLiteral:
    raw: str


@dataclass(frozen=True)
class NullLiteral:
    raw: str = "null"


@dataclass(frozen=True)
class ErrorNode:
    """A syntax violation recorded inline at the point it was found."""

    kind: ErrorKind
    offending_text: str
    offset: int

    @property
    def message(self) -> str:
        return self.kind.message


@dataclass(frozen=True)
class PropertyNode:
    key: Union[StringLiteral, ErrorNode]
    value: Optional["Node"]  # None when the pair was abandoned before its value


@dataclass(frozen=True)
class ObjectNode:
    entries: Tuple[Union[PropertyNode, ErrorNode], ...] = ()


@dataclass(frozen=True)
class ArrayNode:
    elements: Tuple["Node", ...] = ()
    count: int = 0


Scalar = Union[StringLiteral, NumberLiteral, BooleanLiteral, NullLiteral]
Node = Union[ObjectNode, ArrayNode, Scalar, ErrorNode]


@dataclass(frozen=True)
class ParseResult:
    """
    Outcome of one check.

    ``errors`` holds every ErrorNode in document order, including the
    trailing-text error that has no place inside ``tree``.
    """

    tree: Optional[Node]
    valid: bool
    error_count: int
    errors: Tuple[ErrorNode, ...] = ()


# ---------------------------------------------------------------------------
# CONVERSION
# ---------------------------------------------------------------------------
_STRING_DECODER = json.JSONDecoder(strict=False)


def decode_string(raw: str) -> str:
    """Decode the escapes of an already validated string payload."""
    return _STRING_DECODER.decode('"' + raw + '"')


def decode_number(raw: str) -> Union[int, float]:
    return float(raw) if any(c in raw for c in ".eE") else int(raw)


def to_python(node: Node) -> Any:
    """
    Convert a valid tree to plain Python values.

    Raises ValueError on the first ErrorNode (or abandoned property) met.
    """
    if isinstance(node, ObjectNode):
        out = {}
        for entry in node.entries:
            if isinstance(entry, ErrorNode) or isinstance(entry.key, ErrorNode) or entry.value is None:
                raise ValueError("cannot convert a tree that contains errors")
            out[decode_string(entry.key.raw)] = to_python(entry.value)
        return out
    if isinstance(node, ArrayNode):
        return [to_python(element) for element in node.elements]
    if isinstance(node, StringLiteral):
        return decode_string(node.raw)
    if isinstance(node, NumberLiteral):
        return decode_number(node.raw)
    if isinstance(node, BooleanLiteral):
        return node.raw == "true"
    if isinstance(node, NullLiteral):
        return None
    if isinstance(node, ErrorNode):
        raise ValueError(f"cannot convert a tree that contains errors: {node.message}")
    raise TypeError(f"not a node: {node!r}")
