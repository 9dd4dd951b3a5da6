"""
Integration tests for the resume build pipeline.

Runs load -> validate -> context -> render (-> compile with a fake engine).
"""

from pathlib import Path

import pytest

from rsume.config import RunConfig
from rsume.exceptions import CompilationError, MissingFieldError, ResumeIOError, TemplateError
from rsume.pipeline import load_resume, render_resume, run_pipeline

FIXTURES_PATH = Path(__file__).parent.parent / "fixtures"
TEMPLATES_PATH = FIXTURES_PATH / "templates"
PROJECT_TEMPLATES_PATH = Path(__file__).parent.parent.parent / "templates"
PROJECT_DATA_PATH = Path(__file__).parent.parent.parent / "data"


def _config(tmp_path, **overrides) -> RunConfig:
    values = dict(
        data_file=FIXTURES_PATH / "minimal_author.toml",
        template_dir=TEMPLATES_PATH,
        template_name="simple.tex",
        filesystem_root=tmp_path,
        output_dir=tmp_path / "out",
        compiler="pdflatex",
        output_format="pdf",
        keep_source=False,
        keep_artifacts=False,
    )
    values.update(overrides)
    return RunConfig(**values)


@pytest.mark.integration
def test_render_escapes_name_and_keeps_position(tmp_path):
    """Current position without end date; no educations, skills or projects."""
    author = load_resume(FIXTURES_PATH / "minimal_author.toml")

    assert author.experiences[0].current is True
    assert author.experiences[0].end_date is None
    assert author.educations == () and author.skills == () and author.projects == ()

    rendered = render_resume(author, TEMPLATES_PATH, "simple.tex")

    escaped_name = r"Grace Hopper \& Associates \#1"
    assert f"Name: {escaped_name}" in rendered
    assert "Position: C# & COBOL Lead" in rendered
    assert rendered.index(escaped_name) < rendered.index("C# & COBOL Lead")


@pytest.mark.integration
def test_render_only_writes_source(tmp_path):
    result = run_pipeline(_config(tmp_path), compile_document=False)

    assert result.document_path is None
    assert result.source_path == tmp_path / "out" / "minimal_author.tex"
    assert result.source_path.read_text(encoding="utf-8") == result.source


@pytest.mark.integration
def test_missing_template_aborts_without_output(tmp_path):
    config = _config(tmp_path, template_name="does_not_exist.tex", keep_source=True)

    with pytest.raises(TemplateError) as exc_info:
        run_pipeline(config)

    assert exc_info.value.stage == "render"
    assert not (tmp_path / "out").exists()


@pytest.mark.integration
def test_missing_data_file(tmp_path):
    with pytest.raises(ResumeIOError):
        run_pipeline(_config(tmp_path, data_file=tmp_path / "missing.toml"))


@pytest.mark.integration
def test_no_data_file_configured(tmp_path):
    with pytest.raises(ResumeIOError):
        run_pipeline(_config(tmp_path, data_file=None))


@pytest.mark.integration
def test_schema_error_aborts(tmp_path):
    data_file = tmp_path / "nameless.toml"
    source = (FIXTURES_PATH / "minimal_author.toml").read_text(encoding="utf-8")
    data_file.write_text(source.replace('name = "Grace Hopper & Associates #1"\n', ""), encoding="utf-8")

    with pytest.raises(MissingFieldError) as exc_info:
        run_pipeline(_config(tmp_path, data_file=data_file))

    assert exc_info.value.field_path == "name"
    assert not (tmp_path / "out").exists()


@pytest.mark.integration
def test_build_with_fake_engine(fake_engine, tmp_path):
    config = _config(tmp_path, compiler=str(fake_engine), keep_source=True, input_name="grace")

    result = run_pipeline(config)

    assert result.document_path == tmp_path / "out" / "grace.pdf"
    assert result.document_path.exists()
    assert result.source_path == tmp_path / "out" / "grace.tex"
    assert len(result.warnings) == 1
    # Artifacts are not kept by default
    assert not (tmp_path / "out" / "grace.log").exists()


@pytest.mark.integration
def test_build_keeps_artifacts_when_requested(fake_engine, tmp_path):
    config = _config(tmp_path, compiler=str(fake_engine), keep_artifacts=True)

    run_pipeline(config)

    assert (tmp_path / "out" / "minimal_author.log").exists()


@pytest.mark.integration
def test_compilation_failure(failing_engine, tmp_path):
    config = _config(tmp_path, compiler=str(failing_engine), keep_source=True)

    with pytest.raises(CompilationError) as exc_info:
        run_pipeline(config)

    error = exc_info.value
    assert error.stage == "compile"
    assert "Undefined control sequence." in error.errors
    assert "badcommand" in error.output
    assert not (tmp_path / "out" / "minimal_author.pdf").exists()


@pytest.mark.integration
def test_project_template_renders_sample_data(tmp_path):
    """The bundled template covers every section of the sample data."""
    author = load_resume(PROJECT_DATA_PATH / "author.toml")
    rendered = render_resume(author, PROJECT_TEMPLATES_PATH, "resume.tex")

    assert r"\section{Experience}" in rendered
    assert r"\section{Education}" in rendered
    assert r"\section{Skills}" in rendered
    assert r"\section{Projects}" in rendered
    assert r"Babbage \& Co." in rendered
    assert r"batch runtime by 40\%" in rendered
    assert "2021-03-01 -- Present" in rendered
    assert "2017-09-01 -- 2021-02-28" in rendered
    assert "GPA: 3.92 (major: 3.97)" in rendered
    assert r"\textit{summa cum laude}" in rendered
    assert "Github: ada" in rendered
    assert r"Python (Expert), C++ (Advanced)" in rendered


@pytest.mark.integration
def test_project_template_renders_yaml_fixture(tmp_path):
    author = load_resume(FIXTURES_PATH / "author.yaml")
    rendered = render_resume(author, PROJECT_TEMPLATES_PATH, "resume.tex")

    assert "Katherine Johnson" in rendered
    assert "1953-06-01 -- 1986-08-01" in rendered
    assert "GPA: 3.90" in rendered
    assert "(major:" not in rendered


@pytest.mark.integration
def test_compilation_failure_keeps_engine_stderr(stderr_failing_engine, tmp_path):
    config = _config(tmp_path, compiler=str(stderr_failing_engine))

    with pytest.raises(CompilationError) as exc_info:
        run_pipeline(config)

    output = exc_info.value.output
    assert "Emergency stop." in output
    assert "error: fatal: font cmr10 missing" in output


@pytest.mark.integration
def test_failed_source_write_leaves_no_document(fake_engine, tmp_path):
    output_dir = tmp_path / "out"
    # A directory where the rendered .tex should go makes the write fail
    (output_dir / "minimal_author.tex").mkdir(parents=True)
    config = _config(tmp_path, compiler=str(fake_engine), keep_source=True)

    with pytest.raises(ResumeIOError) as exc_info:
        run_pipeline(config)

    assert exc_info.value.stage == "persist"
    assert not (output_dir / "minimal_author.pdf").exists()
