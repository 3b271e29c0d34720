"""
Integration tests for compilation - runs real subprocesses.

A small POSIX shell script stands in for the LaTeX compiler so the full
workflow can be exercised without a TeX installation. When pdflatex is
available, one test also runs the real compiler.
"""

import os
import shutil
import stat
import sys

import pytest

from texcreate.contexts.rendering import (
    CompilerConfig,
    CompilerExecutionError,
    CompilerMode,
    CompilerTimeoutError,
    RecordingReporter,
)

skip_on_windows = pytest.mark.skipif(
    sys.platform == "win32", reason="fake compiler is a POSIX shell script"
)

PDFLATEX_AVAILABLE = shutil.which("pdflatex") is not None
skip_if_no_pdflatex = pytest.mark.skipif(
    not PDFLATEX_AVAILABLE,
    reason="pdflatex not installed - install TeX Live, MiKTeX, or MacTeX"
)

FAKE_COMPILER = """#!/bin/sh
printf '%s\\n' "$@" > args.txt
for name; do :; done
echo "Fake LaTeX compiling $name"
{body}
"""

WRITE_ARTIFACTS = 'touch "out/$name.aux" "out/$name.log" "out/$name.pdf"'


def _fake_compiler(directory, body=WRITE_ARTIFACTS):
    script = directory / "fakelatex"
    script.write_text(FAKE_COMPILER.format(body=body))
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return str(script)


@pytest.mark.integration
@skip_on_windows
def test_compile_output_mode_end_to_end(project_dir, tmp_path):
    """Test a full compile with captured output and cleanup."""
    config = CompilerConfig.new("report")
    config.compiler = _fake_compiler(tmp_path)
    config.flags = ["-interaction=nonstopmode", "-halt-on-error"]
    reporter = RecordingReporter()

    config.compile(project_dir, reporter=reporter)

    args = (project_dir / "args.txt").read_text().splitlines()
    assert args == ["-output-directory=out", "-interaction=nonstopmode", "-halt-on-error", "report"]
    out = project_dir / "out"
    assert (out / "report.pdf").exists()
    assert not (out / "report.aux").exists()
    assert not (out / "report.log").exists()
    assert reporter.messages == ["The project `report` successfully compiled!"]


@pytest.mark.integration
@skip_on_windows
def test_compile_spawn_mode_shows_output(project_dir, tmp_path, capfd):
    """Test Spawn mode lets compiler output reach the terminal."""
    config = CompilerConfig.new("report")
    config.compiler = _fake_compiler(tmp_path)
    config.mode = CompilerMode.SPAWN

    config.compile(project_dir, reporter=RecordingReporter())

    assert "Fake LaTeX compiling report" in capfd.readouterr().out


@pytest.mark.integration
@skip_on_windows
def test_compile_output_mode_hides_output(project_dir, tmp_path, capfd):
    """Test Output mode keeps compiler output off the terminal."""
    config = CompilerConfig.new("report")
    config.compiler = _fake_compiler(tmp_path)

    config.compile(project_dir, reporter=RecordingReporter())

    assert "Fake LaTeX compiling" not in capfd.readouterr().out


@pytest.mark.integration
@skip_on_windows
@pytest.mark.parametrize("mode", [CompilerMode.OUTPUT, CompilerMode.SPAWN])
def test_compile_failing_compiler(project_dir, tmp_path, mode):
    """Test a non-zero exit aborts before cleanup and reporting."""
    config = CompilerConfig.new("report")
    config.compiler = _fake_compiler(tmp_path, body=f"{WRITE_ARTIFACTS}\nexit 3")
    config.mode = mode
    reporter = RecordingReporter()

    with pytest.raises(CompilerExecutionError) as exc_info:
        config.compile(project_dir, reporter=reporter)

    assert exc_info.value.returncode == 3
    assert (project_dir / "out" / "report.aux").exists()
    assert reporter.messages == []


@pytest.mark.integration
@skip_on_windows
@pytest.mark.parametrize("mode", [CompilerMode.OUTPUT, CompilerMode.SPAWN])
def test_compile_hung_compiler_times_out(project_dir, tmp_path, mode):
    """Test that a compiler exceeding the timeout is killed."""
    config = CompilerConfig.new("report")
    config.compiler = _fake_compiler(tmp_path, body="exec sleep 30")
    config.mode = mode

    with pytest.raises(CompilerTimeoutError):
        config.compile(project_dir, reporter=RecordingReporter(), timeout=0.5)


@pytest.mark.integration
@pytest.mark.latex
@skip_if_no_pdflatex
def test_compile_with_pdflatex(project_dir):
    """Test compiling a minimal document with the real compiler."""
    (project_dir / "report.tex").write_text(
        r"""
\documentclass{article}
\begin{document}
Hello from texcreate.
\end{document}
"""
    )
    config = CompilerConfig.new("report")
    config.compiler = "pdflatex"
    config.flags = ["-interaction=nonstopmode"]
    reporter = RecordingReporter()

    config.compile(project_dir, reporter=reporter, timeout=120)

    out = project_dir / "out"
    assert (out / "report.pdf").exists()
    assert not (out / "report.aux").exists()
    assert not (out / "report.log").exists()
    assert len(reporter.messages) == 1


@pytest.mark.integration
@skip_on_windows
def test_compile_output_mode_does_not_read_terminal_input(project_dir, tmp_path):
    """Test Output mode gives the compiler no stdin, so a prompt cannot consume user input."""
    read_stdin = 'if read -r line; then echo "$line" > stdin.txt; fi\n' + WRITE_ARTIFACTS
    config = CompilerConfig.new("report")
    config.compiler = _fake_compiler(tmp_path, body=read_stdin)

    read_fd, write_fd = os.pipe()
    os.write(write_fd, b"TERMINAL-INPUT\n")
    os.close(write_fd)
    saved_stdin = os.dup(0)
    os.dup2(read_fd, 0)
    try:
        config.compile(project_dir, reporter=RecordingReporter())
    finally:
        os.dup2(saved_stdin, 0)
        os.close(saved_stdin)
        os.close(read_fd)

    assert not (project_dir / "stdin.txt").exists()
