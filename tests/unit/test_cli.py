import pathlib
import subprocess
import sys
import tempfile

import pytest

import json_checker as jc

REPO_ROOT = pathlib.Path(__file__).resolve().parents[2]


def _write(data):
    with tempfile.NamedTemporaryFile("w", suffix=".json", delete=False, encoding="utf-8") as f:
        f.write(data)
        return f.name


@pytest.fixture
def json_file():
    paths = []

    def make(data):
        paths.append(_write(data))
        return paths[-1]

    yield make
    for p in paths:
        pathlib.Path(p).unlink(missing_ok=True)


def test_cli_valid_prints_ok(json_file, capsys):
    assert jc._cli([json_file("[1,2,3]")]) == 0
    assert capsys.readouterr().out.strip() == "OK"


def test_cli_invalid_lists_every_error(json_file, capsys):
    path = json_file('{\n  "a": tru,\n  "b" 2,\n}')
    assert jc._cli([path]) == 1
    err = capsys.readouterr().err.splitlines()
    assert err == [
        "line 2, column 8: Unknown type: 'tru'",
        "line 3, column 7: Semi-column is missing: ''",
        "line 3, column 8: Trailing comma before closing delimiter: ','",
        "Invalid JSON: 3 errors found",
    ]


def test_cli_quiet_prints_summary_only(json_file, capsys):
    assert jc._cli([json_file("[1,]"), "--quiet"]) == 1
    assert capsys.readouterr().err.strip() == "Invalid JSON: 1 error found"


def test_cli_tree_and_normalize(json_file, capsys):
    assert jc._cli([json_file('{ "a" : [ 1 ] }'), "--tree", "--normalize"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out == ["{", '  "a": [  // 1 item', "    1", "  ]", "}", '{"a":[1]}']


def test_cli_normalize_with_indent(json_file, capsys):
    assert jc._cli([json_file("[1]"), "--normalize", "--indent", "4"]) == 0
    assert capsys.readouterr().out == "[\n    1\n]\n"


def test_cli_max_depth(json_file, capsys):
    assert jc._cli([json_file("[[1]]"), "--max-depth", "1"]) == 1
    assert "Nesting depth limit exceeded" in capsys.readouterr().err


def test_cli_missing_file_exit_code(tmp_path, capsys):
    assert jc._cli([str(tmp_path / "absent.json")]) == 2
    assert "cannot read" in capsys.readouterr().err


def test_cli_reads_stdin():
    cp = subprocess.run(
        [sys.executable, "json_checker.py", "-"],
        input='{"a": [true, null]}',
        capture_output=True,
        text=True,
        cwd=REPO_ROOT,
    )
    assert cp.returncode == 0
    assert cp.stdout.strip() == "OK"


def test_cli_script_exit_code_on_invalid(json_file):
    cmd = [sys.executable, "json_checker.py", json_file("not json")]
    cp = subprocess.run(cmd, capture_output=True, text=True, cwd=REPO_ROOT)
    assert cp.returncode == 1
    assert "JSON expression must be an object or an array" in cp.stderr
