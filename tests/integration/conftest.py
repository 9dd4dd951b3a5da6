"""Fixtures for integration tests that exercise the compile stage without TeX."""

import os
import stat
from pathlib import Path

import pytest

# Stand-in for a LaTeX engine: records its arguments and search path, then
# writes a log and (unless told to fail) an output document named after the input.
FAKE_ENGINE_SCRIPT = """#!/bin/sh
for arg in "$@"; do tex="$arg"; done
name="${tex%.tex}"
echo "$@" >> engine_args.txt
echo "$TEXINPUTS" > engine_texinputs.txt
cp "$tex" engine_input_copy.tex
case "$*" in
    *-output-format=dvi*) ext=dvi ;;
    *) ext=pdf ;;
esac
echo "This is FakeTeX, Version 3.14"
if [ "${FAKE_ENGINE_FAIL}" = "1" ]; then
    printf '%s\\n' "./$tex:3: Undefined control sequence." "l.3 \\\\badcommand" > "$name.log"
    exit 1
fi
printf '%s\\n' "LaTeX Warning: Reference \\`sec:intro' on page 1 undefined." > "$name.log"
echo "fake $ext output" > "$name.$ext"
exit 0
"""

# Engine whose fatal diagnostic only reaches stderr; the .log holds the generic stop
STDERR_ENGINE_SCRIPT = """#!/bin/sh
for arg in "$@"; do tex="$arg"; done
name="${tex%.tex}"
echo "! Emergency stop." > "$name.log"
echo "error: fatal: font cmr10 missing" >&2
exit 1
"""


def _install_engine(bin_dir: Path, script: str) -> Path:
    if os.name != "posix":
        pytest.skip("fake engine is a POSIX shell script")
    bin_dir.mkdir()
    engine = bin_dir / "fakelatex"
    engine.write_text(script, encoding="utf-8")
    engine.chmod(engine.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return engine


@pytest.fixture
def fake_engine(tmp_path):
    """Path to an executable fake LaTeX engine that succeeds."""
    return _install_engine(tmp_path / "bin", FAKE_ENGINE_SCRIPT.replace("${FAKE_ENGINE_FAIL}", "0"))


@pytest.fixture
def failing_engine(tmp_path):
    """Path to an executable fake LaTeX engine that reports an error."""
    return _install_engine(tmp_path / "failbin", FAKE_ENGINE_SCRIPT.replace("${FAKE_ENGINE_FAIL}", "1"))


@pytest.fixture
def stderr_failing_engine(tmp_path):
    """Path to a fake engine that fails and explains why only on stderr."""
    return _install_engine(tmp_path / "stderrbin", STDERR_ENGINE_SCRIPT)
