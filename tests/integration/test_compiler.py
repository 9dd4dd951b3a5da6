"""
Integration tests for the compile stage using a fake LaTeX engine.
"""

import os

import pytest

from rsume.contexts.rendering.compiler import (
    CompilerConfig,
    _build_command,
    _parse_latex_log,
    artifact_paths,
    compile_latex,
)

SOURCE = "\\documentclass{article}\n\\begin{document}\nHello\n\\end{document}\n"


@pytest.mark.integration
def test_compile_success(fake_engine, tmp_path):
    build_dir = tmp_path / "build"
    build_dir.mkdir()
    config = CompilerConfig(compiler=str(fake_engine), filesystem_root=tmp_path, input_name="cv")

    result = compile_latex(SOURCE, config, build_dir)

    assert result.success, result.errors
    assert result.document_path == build_dir / "cv.pdf"
    assert result.document_path.exists()
    assert (build_dir / "cv.tex").read_text(encoding="utf-8") == SOURCE
    assert len(result.warnings) == 1
    assert "FakeTeX" in result.stdout


@pytest.mark.integration
def test_compile_runs_requested_passes(fake_engine, tmp_path):
    build_dir = tmp_path / "build"
    build_dir.mkdir()
    config = CompilerConfig(compiler=str(fake_engine), filesystem_root=tmp_path, num_passes=3)

    compile_latex(SOURCE, config, build_dir)

    passes = (build_dir / "engine_args.txt").read_text().splitlines()
    assert len(passes) == 3
    assert all(line.endswith("resume.tex") for line in passes)


@pytest.mark.integration
def test_filesystem_root_on_search_path(fake_engine, tmp_path):
    root = tmp_path / "assets"
    root.mkdir()
    build_dir = tmp_path / "build"
    build_dir.mkdir()
    config = CompilerConfig(compiler=str(fake_engine), filesystem_root=root)

    compile_latex(SOURCE, config, build_dir)

    texinputs = (build_dir / "engine_texinputs.txt").read_text().strip()
    assert texinputs.startswith(f"{root.resolve()}//{os.pathsep}")


@pytest.mark.integration
def test_compile_dvi_output(fake_engine, tmp_path):
    build_dir = tmp_path / "build"
    build_dir.mkdir()
    config = CompilerConfig(compiler=str(fake_engine), filesystem_root=tmp_path, output_format="dvi")

    result = compile_latex(SOURCE, config, build_dir)

    assert result.success
    assert result.document_path == build_dir / "resume.dvi"
    assert result.page_count is None


@pytest.mark.integration
def test_compile_failure_reports_log_errors(failing_engine, tmp_path):
    build_dir = tmp_path / "build"
    build_dir.mkdir()
    config = CompilerConfig(compiler=str(failing_engine), filesystem_root=tmp_path, num_passes=2)

    result = compile_latex(SOURCE, config, build_dir)

    assert result.success is False
    assert result.document_path is None
    assert "Undefined control sequence." in result.errors
    assert "Undefined control sequence" in result.log
    # Engine stops after the first failing pass
    assert len((build_dir / "engine_args.txt").read_text().splitlines()) == 1


@pytest.mark.integration
def test_compiler_not_found(tmp_path):
    config = CompilerConfig(compiler="definitely-not-a-latex-engine", filesystem_root=tmp_path)

    result = compile_latex(SOURCE, config, tmp_path)

    assert result.success is False
    assert "not found" in result.errors[0]


@pytest.mark.integration
def test_missing_filesystem_root(fake_engine, tmp_path):
    config = CompilerConfig(compiler=str(fake_engine), filesystem_root=tmp_path / "missing")

    result = compile_latex(SOURCE, config, tmp_path)

    assert result.success is False
    assert "Filesystem root not found" in result.errors[0]


@pytest.mark.integration
def test_artifact_paths(fake_engine, tmp_path):
    build_dir = tmp_path / "build"
    build_dir.mkdir()
    config = CompilerConfig(compiler=str(fake_engine), filesystem_root=tmp_path)

    compile_latex(SOURCE, config, build_dir)

    assert artifact_paths(build_dir, "resume") == [build_dir / "resume.log"]


class TestCompilerConfig:
    """Engine command lines and config validation."""

    @pytest.mark.unit
    def test_pdflatex_command(self, tmp_path):
        config = CompilerConfig(compiler="pdflatex", filesystem_root=tmp_path)
        assert _build_command(config, "cv.tex") == [
            "pdflatex",
            "-interaction=nonstopmode",
            "-file-line-error",
            "-output-format=pdf",
            "cv.tex",
        ]

    @pytest.mark.unit
    def test_xelatex_dvi_command(self, tmp_path):
        config = CompilerConfig(compiler="/usr/bin/xelatex", filesystem_root=tmp_path, output_format="dvi")

        assert "-no-pdf" in _build_command(config, "cv.tex")
        assert config.output_suffix == ".xdv"

    @pytest.mark.unit
    def test_tectonic_command(self, tmp_path):
        config = CompilerConfig(compiler="tectonic", filesystem_root=tmp_path)
        cmd = _build_command(config, "cv.tex")

        assert cmd[0] == "tectonic"
        assert f"search-path={tmp_path.resolve()}" in cmd
        assert cmd[-1] == "cv.tex"
        assert cmd[cmd.index("--outfmt") + 1] == "pdf"

    @pytest.mark.unit
    def test_tectonic_dvi_produces_xdv(self, tmp_path):
        config = CompilerConfig(compiler="tectonic", filesystem_root=tmp_path, output_format="dvi")
        cmd = _build_command(config, "cv.tex")

        assert cmd[cmd.index("--outfmt") + 1] == "xdv"
        assert config.output_suffix == ".xdv"

    @pytest.mark.unit
    def test_invalid_output_format(self):
        with pytest.raises(ValueError):
            CompilerConfig(output_format="html")

    @pytest.mark.unit
    def test_invalid_passes(self):
        with pytest.raises(ValueError):
            CompilerConfig(num_passes=0)


class TestParseLatexLog:
    """Tests for _parse_latex_log function."""

    @pytest.mark.unit
    def test_bang_errors(self):
        errors, warnings = _parse_latex_log("! Missing $ inserted.\n<inserted text>\n")
        assert errors == ["Missing $ inserted."]
        assert warnings == []

    @pytest.mark.unit
    def test_file_line_errors(self):
        errors, _ = _parse_latex_log("./cv.tex:12: Undefined control sequence.\nl.12 \\foo\n")
        assert errors == ["Undefined control sequence."]

    @pytest.mark.unit
    def test_warnings(self):
        log = (
            "LaTeX Warning: Label(s) may have changed.\n"
            "Package hyperref Warning: Token not allowed.\n"
            "Overfull \\hbox (12.0pt too wide) in paragraph at lines 3--4\n"
        )
        errors, warnings = _parse_latex_log(log)

        assert errors == []
        assert warnings == [
            "Label(s) may have changed.",
            "Token not allowed.",
            "12.0pt too wide",
        ]
