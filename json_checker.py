# json_checker.py
# Fault-tolerant JSON syntax checker: recursive-descent grammar engine that
# keeps going after an error and reports every violation it can find.
#
# =============================================================================
#  ENGINE OVERVIEW
# =============================================================================
#
# One rule per grammar construct: object, pair, array, element list and value.
# All of them read and advance a single Cursor owned by the current call and
# record violations in a Diagnostics sink instead of raising. Each rule knows
# its own recovery point:
#
#   pair list     missing comma  -> next "}" at the same level
#   element list  missing comma  -> next "," or "]" at the same level
#   pair          missing colon  -> next ":" in the object, else straight to the value
#   open brace / bracket missing -> rest of input, construct abandoned
#   close brace / bracket missing-> rest of input, collected children kept
#
# Errors become ErrorNodes in the tree where they occurred, so the well-formed
# parts of a broken document are still decomposed and checked.
# =============================================================================

import argparse
import logging
import sys
from typing import List, Optional

import render
from classifier import check_escapes, classify_scalar, scalar_end_pattern
from cursor import Cursor
from nodes import (
    ArrayNode,
    ErrorKind,
    ErrorNode,
    Node,
    ObjectNode,
    ParseResult,
    PropertyNode,
    StringLiteral,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# CONSTANTS AND TUNABLES
# ---------------------------------------------------------------------------
DEPTH_LIMIT_DEFAULT = 128   # deeper constructs are skipped as a single error

EXIT_VALID   = 0
EXIT_INVALID = 1
EXIT_IO      = 2


class JsonCheckError(SyntaxError):
    """Raised by validate() when the document has at least one error."""

    def __init__(self, result: ParseResult):
        first = result.errors[0]
        plural = "s" if result.error_count > 1 else ""
        super().__init__(
            f"{first.message} at offset {first.offset} "
            f"({result.error_count} error{plural} found)"
        )
        self.result = result


# ---------------------------------------------------------------------------
# DIAGNOSTICS
# ---------------------------------------------------------------------------
class Diagnostics:
    """Collects the errors of one parse call in document order."""

    def __init__(self):
        self.errors: List[ErrorNode] = []

    def report(self, kind: ErrorKind, text: str, offset: int) -> ErrorNode:
        node = ErrorNode(kind, text, offset)
        self.errors.append(node)
        logger.debug("%s at offset %d: %r", kind.name, offset, text)
        return node

    @property
    def count(self) -> int:
        return len(self.errors)


# ---------------------------------------------------------------------------
# STRING RULE
# ---------------------------------------------------------------------------
def _parse_string(cursor: Cursor, diag: Diagnostics) -> Node:
    """Consume the double-quoted literal at the cursor."""
    offset = cursor.offset
    end = cursor.string_end()
    if end == -1:
        return diag.report(ErrorKind.UNTERMINATED_STRING, cursor.take_rest(), offset)
    literal = cursor.take(end + 1)
    problem = check_escapes(literal)
    if problem is not None:
        return diag.report(problem, literal, offset)
    return StringLiteral(literal[1:-1])


def _parse_key(cursor: Cursor, diag: Diagnostics) -> Node:
    """
    Property name: a double-quoted string.

    Anything else runs to the next colon, comma or closing brace of the
    current object, so sibling constructs are still checked.
    """
    if cursor.peek() == '"':
        return _parse_string(cursor, diag)
    offset = cursor.offset
    stop = cursor.scan_to(":,}")
    if stop == -1:
        stop = len(cursor)
    return diag.report(ErrorKind.INVALID_PROPERTY_NAME, cursor.take(stop), offset)


# ---------------------------------------------------------------------------
# VALUE RULE
# ---------------------------------------------------------------------------
def _skip_nested(cursor: Cursor, diag: Diagnostics) -> ErrorNode:
    """Record a construct nested past the depth limit and step over all of it."""
    offset = cursor.offset
    close = cursor.scan_to("}]", 1)
    text = cursor.take_rest() if close == -1 else cursor.take(close + 1)
    return diag.report(ErrorKind.DEPTH_EXCEEDED, text, offset)


def _parse_value(cursor: Cursor, diag: Diagnostics, closing: str, depth: int, max_depth: int) -> Node:
    """
    Dispatch on the next character.

    ``closing`` is the delimiter of the enclosing construct ("}" or "]"); it
    bounds the capture of bare scalars.
    """
    ch = cursor.peek()
    if ch == '"':
        return _parse_string(cursor, diag)
    if ch in ("{", "["):
        if depth >= max_depth:
            return _skip_nested(cursor, diag)
        if ch == "{":
            return parse_object(cursor, diag, depth + 1, max_depth)
        return parse_array(cursor, diag, depth + 1, max_depth)

    offset = cursor.offset
    stop = cursor.search(scalar_end_pattern(closing))
    text = cursor.take_rest() if stop == -1 else cursor.take(stop)
    result = classify_scalar(text)
    if isinstance(result, ErrorKind):
        return diag.report(result, text, offset)
    return result


# ---------------------------------------------------------------------------
# OBJECT RULE
# ---------------------------------------------------------------------------
def parse_pair(cursor: Cursor, diag: Diagnostics, entries: list, depth: int, max_depth: int) -> None:
    """
    Parse one ``name : value`` pair and append it (and any colon error) to entries.

    A pair whose name is not a string and has no colon after it in the same
    object is abandoned without a value.
    """
    key = _parse_key(cursor, diag)
    if cursor.peek() == ":":
        cursor.advance(1)
    elif cursor.at_end:
        entries.append(PropertyNode(key, None))
        return
    else:
        colon = cursor.scan_to(":,}")
        if colon != -1 and cursor.slice(colon, colon + 1) != ":":
            colon = -1
        if colon == -1 and isinstance(key, ErrorNode):
            entries.append(PropertyNode(key, None))
            return
        offset = cursor.offset
        entries.append(diag.report(ErrorKind.MISSING_COLON, cursor.take(colon), offset))
        if colon != -1:
            cursor.advance(1)
    entries.append(PropertyNode(key, _parse_value(cursor, diag, "}", depth, max_depth)))


def parse_object(cursor: Cursor, diag: Diagnostics, depth: int = 1,
                 max_depth: int = DEPTH_LIMIT_DEFAULT) -> Node:
    """
    Parse ``{ pair, ... }`` starting at the cursor.

    A missing opening brace consumes the rest of the input as one error and
    returns it. A missing closing brace is reported after the pairs collected
    so far, which are kept.
    """
    if cursor.peek() != "{":
        offset = cursor.offset
        return diag.report(ErrorKind.MISSING_OPEN_BRACE, cursor.take_rest(), offset)
    cursor.advance(1)

    entries: list = []
    if cursor.peek() != "}":
        while not cursor.at_end:
            parse_pair(cursor, diag, entries, depth, max_depth)
            nxt = cursor.peek()
            if nxt == ",":
                comma = cursor.offset
                cursor.advance(1)
                if cursor.peek() == "}":
                    entries.append(diag.report(ErrorKind.TRAILING_COMMA, ",", comma))
                    break
                continue
            if nxt == "}" or cursor.at_end:
                break
            offset = cursor.offset
            entries.append(diag.report(ErrorKind.MISSING_COMMA, cursor.take(cursor.scan_to("}")), offset))
            break

    if cursor.peek() == "}":
        cursor.advance(1)
    else:
        offset = cursor.offset
        entries.append(diag.report(ErrorKind.MISSING_CLOSE_BRACE, cursor.take_rest(), offset))
    return ObjectNode(tuple(entries))


# ---------------------------------------------------------------------------
# ARRAY RULE
# ---------------------------------------------------------------------------
def parse_array(cursor: Cursor, diag: Diagnostics, depth: int = 1,
                max_depth: int = DEPTH_LIMIT_DEFAULT) -> Node:
    """
    Parse ``[ value, ... ]`` starting at the cursor.

    ``count`` on the returned node is the number of element slots parsed,
    including elements whose value is itself an error.
    """
    if cursor.peek() != "[":
        offset = cursor.offset
        return diag.report(ErrorKind.MISSING_OPEN_BRACKET, cursor.take_rest(), offset)
    cursor.advance(1)

    if cursor.peek() == "]":
        cursor.advance(1)
        return ArrayNode((), 0)

    elements: list = []
    count = 0
    while not cursor.at_end:
        elements.append(_parse_value(cursor, diag, "]", depth, max_depth))
        count += 1

        nxt = cursor.peek()
        if nxt not in (",", "]") and not cursor.at_end:
            offset = cursor.offset
            elements.append(diag.report(ErrorKind.MISSING_COMMA, cursor.take(cursor.scan_to(",]")), offset))
        if cursor.peek() != ",":
            break
        comma = cursor.offset
        cursor.advance(1)
        if cursor.peek() == "]":
            elements.append(diag.report(ErrorKind.TRAILING_COMMA, ",", comma))
            break

    if cursor.peek() == "]":
        cursor.advance(1)
    else:
        offset = cursor.offset
        elements.append(diag.report(ErrorKind.MISSING_CLOSE_BRACKET, cursor.take_rest(), offset))
    return ArrayNode(tuple(elements), count)


# ---------------------------------------------------------------------------
# PUBLIC API
# ---------------------------------------------------------------------------
def check(text: str, *, max_depth: int = DEPTH_LIMIT_DEFAULT) -> ParseResult:
    """
    Check ``text`` and report every syntax error found.

    The document must be an object or an array. Text left over after its
    closing delimiter is reported as trailing text. Never raises on bad input.
    """
    cursor = Cursor(text)
    diag = Diagnostics()

    first = cursor.peek()
    tree: Optional[Node]
    if first == "[":
        tree = parse_array(cursor, diag, 1, max_depth)
    elif first == "{":
        tree = parse_object(cursor, diag, 1, max_depth)
    else:
        offset = cursor.offset
        tree = diag.report(ErrorKind.NOT_AN_OBJECT_OR_ARRAY, cursor.take_rest(), offset)

    if not cursor.at_end:
        offset = cursor.offset
        diag.report(ErrorKind.TRAILING_TEXT, cursor.take_rest(), offset)

    logger.debug("checked %d characters: %d error(s)", len(text), diag.count)
    return ParseResult(tree=tree, valid=diag.count == 0, error_count=diag.count, errors=tuple(diag.errors))


def validate(text: str, *, max_depth: int = DEPTH_LIMIT_DEFAULT) -> Node:
    """
    Strict entry point: return the tree of a valid document.

    Raises JsonCheckError (a SyntaxError) naming the first error when the
    document is invalid; the full result is on the exception.
    """
    result = check(text, max_depth=max_depth)
    if not result.valid:
        raise JsonCheckError(result)
    return result.tree


# ---------------------------------------------------------------------------
# CLI ENTRYPOINT
# ---------------------------------------------------------------------------
def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as fh:
        return fh.read()


def _cli(argv: Optional[List[str]] = None) -> int:
    """
    Command-line interface for checking a file.

    Exit codes: 0 when valid, 1 when errors were found, 2 when the input
    could not be read.
    """
    ap = argparse.ArgumentParser(description="Fault-tolerant JSON syntax checker")
    ap.add_argument("file", help="JSON file to check, or - for standard input")
    ap.add_argument("--max-depth", type=int, default=DEPTH_LIMIT_DEFAULT,
                    help="deepest nesting checked before a construct is skipped")
    ap.add_argument("--tree", action="store_true", help="print the annotated tree")
    ap.add_argument("--normalize", action="store_true", help="print canonical JSON when valid")
    ap.add_argument("--indent", type=int, default=None, help="indentation for --normalize")
    ap.add_argument("--quiet", action="store_true", help="only print the summary")
    ap.add_argument("--debug", action="store_true", help="enable debug logging")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        data = _read_input(args.file)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"error: cannot read {args.file}: {exc}", file=sys.stderr)
        return EXIT_IO

    result = check(data, max_depth=args.max_depth)

    if args.tree and result.tree is not None:
        print(render.format_tree(result.tree))

    if result.valid:
        if args.normalize:
            print(render.dumps(result.tree, indent=args.indent))
        else:
            print("OK")
        return EXIT_VALID

    if not args.quiet:
        for err in result.errors:
            line, col = render.line_col(data, err.offset)
            print(f"line {line}, column {col}: {err.message}: {err.offending_text!r}", file=sys.stderr)
    print(render.summary(result), file=sys.stderr)
    return EXIT_INVALID


def main() -> None:
    sys.exit(_cli(sys.argv[1:]))


# ---------------------------------------------------------------------------
# MAIN GUARD
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    main()
