"""
Pytest fixtures for the BASIC interpreter tests.
"""

import io
import textwrap
from pathlib import Path

import pytest

from basic_interpreter import BasicInterpreter


SAMPLES = Path(__file__).parent.parent / "samples"


def program(text):
    """Dedent a triple-quoted program so tests can indent it freely."""
    return textwrap.dedent(text).lstrip("\n")


@pytest.fixture
def run_program():
    """
    Run a BASIC program and return (stdout text, interpreter).

    Raised errors propagate; use `interp_for` when the partial output of a
    failing run is needed.
    """
    def _run(text, max_steps=None, start_line=None):
        out = io.StringIO()
        interp = BasicInterpreter(program(text), out=out)
        interp.run(max_steps=max_steps, start_line=start_line)
        return out.getvalue(), interp
    return _run


@pytest.fixture
def interp_for():
    """Build an interpreter writing to a StringIO, without running it."""
    def _make(text):
        out = io.StringIO()
        return BasicInterpreter(program(text), out=out), out
    return _make


@pytest.fixture
def samples_dir():
    return SAMPLES
