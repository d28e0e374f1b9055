import re

import pytest

import cursor as cu


def test_initial_whitespace_is_skipped():
    c = cu.Cursor("   \n\t[1]")
    assert c.peek() == "["
    assert c.offset == 5
    assert c.processed + c.remaining == "   \n\t[1]"


def test_advance_commits_and_skips_whitespace():
    c = cu.Cursor('{  "a"')
    c.advance(1)
    assert c.remaining == '"a"'
    assert c.processed == "{  "


def test_take_returns_right_trimmed_prefix():
    c = cu.Cursor("true   , 1")
    assert c.take(7) == "true"
    assert c.peek() == ","


@pytest.mark.parametrize("count", [-1, 99, None, "3", 1.5])
def test_take_rejects_invalid_counts_without_moving(count):
    c = cu.Cursor("abc")
    assert c.take(count) == ""
    assert c.offset == 0


def test_take_rest_empties_cursor():
    c = cu.Cursor("[1, 2]  ")
    assert c.take_rest() == "[1, 2]"
    assert c.at_end
    assert c.remaining == ""


def test_lookups_do_not_mutate():
    c = cu.Cursor("ab:cd,ef")
    assert c.index(":") == 2
    assert c.index("z") == -1
    assert c.index("c", 3) == 3
    assert c.slice(1, 4) == "b:c"
    assert c.slice(6) == "ef"
    assert c.search(re.compile(r"[,}]")) == 5
    assert c.search(re.compile(r"\]")) == -1
    assert c.offset == 0


def test_lookups_are_relative_to_remaining():
    c = cu.Cursor("[ 1, 2]")
    c.advance(1)
    assert c.index(",") == 1
    assert c.slice(0, 1) == "1"


@pytest.mark.parametrize("backslashes,closes", [(0, True), (1, False), (2, True), (3, False), (4, True)])
def test_string_end_backslash_parity(backslashes, closes):
    text = '"a' + "\\" * backslashes + '"'
    end = cu.find_string_end(text + 'b"')
    if closes:
        assert end == len(text) - 1
    else:
        assert end == len(text) + 1


def test_unterminated_string_end_is_minus_one():
    assert cu.find_string_end('"abc') == -1
    assert cu.find_string_end('"abc\\"') == -1
    assert cu.find_string_end('"') == -1


def test_string_end_from_offset():
    text = 'x "ab" y'
    assert cu.find_string_end(text, 2) == 5


def test_find_at_level_skips_nested_and_strings():
    text = '"a,}": {"b": [1, 2]}, "c"}'
    assert cu.find_at_level(text, ",") == 20
    assert cu.find_at_level(text, "}") == 25


def test_find_at_level_missing_target():
    assert cu.find_at_level('[1, 2', "]") == -1
    assert cu.find_at_level('"unterminated, }', ",}") == -1


def test_scan_to_is_relative():
    c = cu.Cursor('{"a": [1,2], "b"}')
    c.advance(1)
    assert c.scan_to(",") == 10
    assert c.scan_to("}") == 15


def test_only_json_whitespace_is_skipped():
    c = cu.Cursor("\u00a0[1]")
    assert c.peek() == "\u00a0"
    c = cu.Cursor(" \t\r\n[1 \u2028 ]")
    assert c.peek() == "["
    assert c.take(5) == "[1 \u2028"
