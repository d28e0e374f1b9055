# classifier.py
# Token classification for the checker: escape validation of quoted literals
# and grammar-only classification of bare scalars.
#
# Bare scalars are matched against the JSON grammar with regular expressions.
# The captured text is user input and is never evaluated.

import re
from typing import Optional, Union

from nodes import BooleanLiteral, ErrorKind, NullLiteral, NumberLiteral

# ---------------------------------------------------------------------------
# REGEX BLUEPRINT
# ---------------------------------------------------------------------------
_NUMBER  = r"-?(?:0|[1-9][0-9]*)(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?"
_LITERAL = r"true|false|null"
_HEX4    = r"[0-9a-fA-F]{4}"

_NUMBER_RE  = re.compile(_NUMBER)
_LITERAL_RE = re.compile(_LITERAL)
_HEX4_RE    = re.compile(_HEX4)

SIMPLE_ESCAPES = "\"\\/bfnrt"

# Scalar capture stops at a comma or the closing delimiter of the context.
_SCALAR_END = {
    "}": re.compile(r"[,}]"),
    "]": re.compile(r"[,\]]"),
}


def scalar_end_pattern(closing: str):
    """Pattern matching the end of a bare scalar inside ``closing``'s context."""
    try:
        return _SCALAR_END[closing]
    except KeyError:
        raise ValueError(f"unsupported closing delimiter {closing!r}") from None


# ---------------------------------------------------------------------------
# STRING ESCAPES
# ---------------------------------------------------------------------------
def check_escapes(literal: str) -> Optional[ErrorKind]:
    """
    Validate the escapes of a quoted literal in one left-to-right pass.

    ``literal`` includes its quotes. Returns the kind of the first violation,
    or None when every backslash starts a legal escape.
    """
    inner = literal[1:-1]
    i = 0
    n = len(inner)
    while i < n:
        if inner[i] != "\\":
            i += 1
            continue
        esc = inner[i + 1:i + 2]
        if esc == "u":
            if not _HEX4_RE.fullmatch(inner, i + 2, i + 6):
                return ErrorKind.INVALID_UNICODE_ESCAPE
            i += 6
            continue
        if not esc or esc not in SIMPLE_ESCAPES:
            return ErrorKind.INVALID_ESCAPE
        i += 2
    return None


# ---------------------------------------------------------------------------
# SCALARS
# ---------------------------------------------------------------------------
def classify_scalar(text: str) -> Union[NumberLiteral, BooleanLiteral, NullLiteral, ErrorKind]:
    """
    Classify a captured, right-trimmed bare scalar.

    Returns the literal node on a grammar match, otherwise the ErrorKind
    describing why the text is not a JSON value.
    """
    if _NUMBER_RE.fullmatch(text):
        return NumberLiteral(text)
    if _LITERAL_RE.fullmatch(text):
        if text == "null":
            return NullLiteral()
        return BooleanLiteral(text)
    if not text:
        return ErrorKind.MISSING_VALUE
    if text.startswith("'"):
        return ErrorKind.SINGLE_QUOTED_STRING
    return ErrorKind.UNKNOWN_LITERAL
