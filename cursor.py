# cursor.py
# Processed/remaining split over the input text plus the balanced-text
# scanners the grammar rules use to find string ends and recovery points.
#
# =============================================================================
#  CURSOR MODEL
# =============================================================================
#
# The cursor never copies the input. It keeps the original text and a single
# position; everything before the position is processed, everything after it
# is remaining. Every advance skips the whitespace that follows, so the first
# character of remaining is always the next token (or the end of input).
# =============================================================================

import re
from typing import Optional, Pattern, Union

# ---------------------------------------------------------------------------
# REGEX BLUEPRINT
# ---------------------------------------------------------------------------
_WHITESPACE = re.compile(r"[ \t\n\r]*")
_JSON_SPACE = " \t\n\r"

_OPENERS = "{["
_CLOSERS = "}]"


# ---------------------------------------------------------------------------
# BALANCED-TEXT SCANNING
# ---------------------------------------------------------------------------
def find_string_end(text: str, start: int = 0) -> int:
    """
    Index of the quote closing the string opened at ``text[start]``, or -1.

    A candidate quote closes the string only when the run of backslashes
    right before it is of even length; an odd run means the quote itself is
    escaped and scanning continues.
    """
    pos = start
    while True:
        pos = text.find('"', pos + 1)
        if pos == -1:
            return -1
        backslashes = 0
        while pos - backslashes - 1 > start and text[pos - backslashes - 1] == "\\":
            backslashes += 1
        if backslashes % 2 == 0:
            return pos


def find_at_level(text: str, targets: str, start: int = 0) -> int:
    """
    First index >= start of a character in ``targets`` at nesting level zero.

    Quoted strings and balanced {...} / [...] groups are stepped over, so a
    comma inside a nested value or a brace inside a string never matches.
    Returns -1 when no such character exists.
    """
    depth = 0
    i = start
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == '"':
            end = find_string_end(text, i)
            if end == -1:
                return -1
            i = end + 1
            continue
        if depth == 0 and ch in targets:
            return i
        if ch in _OPENERS:
            depth += 1
        elif ch in _CLOSERS and depth > 0:
            depth -= 1
        i += 1
    return -1


# ---------------------------------------------------------------------------
# CURSOR
# ---------------------------------------------------------------------------
class Cursor:
    """
    Owned, mutable read position over one input string.

    One cursor belongs to one parse call. ``processed + remaining`` always
    rebuilds the input exactly, and the position only moves forward.
    """

    def __init__(self, text: str):
        self._text = text
        self._pos = 0
        self._skip_whitespace()

    def _skip_whitespace(self) -> None:
        self._pos = _WHITESPACE.match(self._text, self._pos).end()

    @property
    def processed(self) -> str:
        return self._text[:self._pos]

    @property
    def remaining(self) -> str:
        return self._text[self._pos:]

    @property
    def offset(self) -> int:
        """Absolute index of the first remaining character."""
        return self._pos

    @property
    def at_end(self) -> bool:
        return self._pos >= len(self._text)

    def __len__(self) -> int:
        return len(self._text) - self._pos

    def peek(self) -> str:
        """Next character, or "" at the end of input."""
        return self._text[self._pos:self._pos + 1]

    # -- mutation ----------------------------------------------------------

    def advance(self, count: int) -> None:
        """Commit ``count`` characters and skip the whitespace after them."""
        self._pos = min(self._pos + count, len(self._text))
        self._skip_whitespace()

    def take(self, count: Union[int, None]) -> str:
        """
        Commit and return the first ``count`` remaining characters, right-trimmed.

        A count that is not a non-negative int within the remaining length
        leaves the cursor untouched and returns "".
        """
        if not isinstance(count, int) or isinstance(count, bool):
            return ""
        if count < 0 or count > len(self):
            return ""
        chunk = self._text[self._pos:self._pos + count]
        self.advance(count)
        return chunk.rstrip(_JSON_SPACE)

    def take_rest(self) -> str:
        return self.take(len(self))

    # -- read-only lookups -------------------------------------------------

    def index(self, token: str, start: int = 0) -> int:
        found = self._text.find(token, self._pos + start)
        return -1 if found == -1 else found - self._pos

    def slice(self, start: int, end: Optional[int] = None) -> str:
        stop = len(self._text) if end is None else self._pos + end
        return self._text[self._pos + start:stop]

    def search(self, pattern: Pattern) -> int:
        m = pattern.search(self._text, self._pos)
        return -1 if m is None else m.start() - self._pos

    def string_end(self) -> int:
        """Relative index of the quote closing the string at the cursor, or -1."""
        end = find_string_end(self._text, self._pos)
        return -1 if end == -1 else end - self._pos

    def scan_to(self, targets: str, start: int = 0) -> int:
        """Relative index of the next level-zero character in ``targets``, or -1."""
        found = find_at_level(self._text, targets, self._pos + start)
        return -1 if found == -1 else found - self._pos

    def __repr__(self) -> str:
        return f"Cursor(offset={self._pos}, remaining={self.remaining[:20]!r})"
