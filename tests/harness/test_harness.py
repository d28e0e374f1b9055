import json
import os
import subprocess
import sys

import pytest

import json_checker as jc
from nodes import to_python

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
TEST_DIR = os.path.dirname(__file__)

json_files = sorted(f for f in os.listdir(TEST_DIR) if f.endswith(".json"))

VALID_FILES = [f for f in json_files if f.startswith("pass")]
INVALID_FILES = [f for f in json_files if f.startswith("fail")]

# Hard fail if fixtures are missing
if not VALID_FILES:
    raise RuntimeError("No pass*.json files found in harness directory")
if not INVALID_FILES:
    raise RuntimeError("No fail*.json files found in harness directory")


def _read(filename):
    with open(os.path.join(TEST_DIR, filename), encoding="utf-8") as fh:
        return fh.read()


@pytest.mark.parametrize("filename", VALID_FILES)
def test_valid_json_returns_0(filename):
    path = os.path.join(TEST_DIR, filename)
    result = subprocess.run([sys.executable, "json_checker.py", path], cwd=REPO_ROOT)
    assert result.returncode == 0, f"Expected 0 from {filename}, got {result.returncode}"


@pytest.mark.parametrize("filename", INVALID_FILES)
def test_invalid_json_returns_1(filename):
    path = os.path.join(TEST_DIR, filename)
    result = subprocess.run([sys.executable, "json_checker.py", path], cwd=REPO_ROOT)
    assert result.returncode == 1, f"Expected 1 from {filename}, got {result.returncode}"


@pytest.mark.parametrize("filename", VALID_FILES)
def test_valid_fixture_matches_stdlib(filename):
    text = _read(filename)
    assert to_python(jc.check(text).tree) == json.loads(text)


@pytest.mark.parametrize("filename", INVALID_FILES)
def test_invalid_fixture_reports_errors(filename):
    result = jc.check(_read(filename))
    assert not result.valid
    assert result.error_count == len(result.errors) >= 1
