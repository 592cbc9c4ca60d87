"""
Pytest configuration and fixtures for stabel tests.
"""
import os
import shutil
from pathlib import Path

import pytest

from stabel.build import NativeBuilder, write_source
from stabel.transpiler import transpile


def _find_compiler():
    for name in (os.environ.get("CC"), "cc", "gcc", "clang"):
        if name and shutil.which(name):
            return name
    return None


CC = _find_compiler()


@pytest.fixture(autouse=True)
def clean_stabel_env(monkeypatch):
    """Keep STABEL_* settings from the caller's shell out of the tests."""
    for key in ("STABEL_STACK_SIZE", "STABEL_TRACE", "STABEL_STRICT_BLOCKS", "STABEL_LOG"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def c_compiler():
    """Name of a working C compiler; skips the test when there is none."""
    if CC is None:
        pytest.skip("no C compiler on PATH")
    return CC


@pytest.fixture
def run_program(tmp_path, c_compiler):
    """
    Transpile, compile and run a stabel program.
    Returns the CompletedProcess of the executable.
    """
    builder = NativeBuilder(c_compiler)
    counter = {"n": 0}

    def _run(source: str, options=None):
        counter["n"] += 1
        c_path = write_source(tmp_path / f"prog{counter['n']}.c", transpile(source, options).code)
        exe = builder.compile(c_path, tmp_path / f"prog{counter['n']}")
        return builder.run(exe, timeout=30)

    return _run


@pytest.fixture
def stdout_lines(run_program):
    def _lines(source: str, options=None):
        completed = run_program(source, options)
        assert completed.returncode == 0, completed.stdout + completed.stderr
        return completed.stdout.splitlines()

    return _lines
