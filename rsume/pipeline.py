"""
Resume Build Pipeline

Orchestrates a single build: load data file -> validate -> build context ->
render template -> compile LaTeX -> persist outputs. The first failing stage
aborts the run with its exception; nothing is retried.
"""

import shutil
import tempfile
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from loguru import logger

from rsume.config import RunConfig
from rsume.contexts.rendering.compiler import CompilerConfig, artifact_paths, compile_latex
from rsume.contexts.schema import Author, load_data_file, validate_author
from rsume.contexts.templating import TemplateRegistry, build_context, render_template
from rsume.exceptions import CompilationError, ResumeIOError


@dataclass
class BuildResult:
    """
    Outcome of a successful pipeline run.

    Attributes:
        source: Rendered LaTeX source
        document_path: Compiled document in the output directory (None when not compiled)
        source_path: Rendered .tex in the output directory (None unless requested)
        page_count: Pages in the compiled PDF, when known
        warnings: LaTeX warnings reported by the engine
        elapsed_time: Wall-clock duration of the run in seconds
    """

    source: str
    document_path: Optional[Path] = None
    source_path: Optional[Path] = None
    page_count: Optional[int] = None
    warnings: List[str] = field(default_factory=list)
    elapsed_time: float = 0.0


def load_resume(data_file: Path) -> Author:
    """Load and validate a resume data file."""
    logger.info(f"Loading resume data: {data_file}")
    return validate_author(load_data_file(data_file))


def render_resume(author: Author, template_dir: Path, template_name: str) -> str:
    """
    Render a validated resume through a template.

    A fresh TemplateRegistry is created per call, so no template cache is
    shared between runs.
    """
    context = build_context(author)
    registry = TemplateRegistry(template_dir)
    return render_template(registry, template_name, context)


def _ensure_output_dir(output_dir: Path) -> Path:
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ResumeIOError(f"Could not create output directory ({e})", output_dir, stage="persist") from e
    return output_dir


def _write_source(source: str, output_dir: Path, name: str) -> Path:
    source_path = _ensure_output_dir(output_dir) / f"{name}.tex"
    try:
        source_path.write_text(source, encoding="utf-8")
    except OSError as e:
        raise ResumeIOError(f"Could not write rendered source ({e})", source_path, stage="persist") from e
    logger.info(f"Rendered source saved to: {source_path}")
    return source_path


def _copy_to_output(path: Path, output_dir: Path) -> Path:
    destination = _ensure_output_dir(output_dir) / path.name
    try:
        shutil.copy2(path, destination)
    except OSError as e:
        raise ResumeIOError(f"Could not write output file ({e})", destination, stage="persist") from e
    return destination


def run_pipeline(config: RunConfig, compile_document: bool = True, verbose: bool = False) -> BuildResult:
    """
    Run the resume build pipeline.

    Args:
        config: Paths and options for this run
        compile_document: Compile to PDF/DVI; when False, stop after rendering
                          and persist only the rendered .tex
        verbose: Log full engine output even on success

    Returns:
        BuildResult describing the persisted outputs

    Raises:
        ResumeIOError: Data file missing/unreadable, or outputs cannot be written
        SchemaError: Data does not match the resume data model
        TemplateError: Template missing, malformed, or referencing undefined values
        CompilationError: The LaTeX engine rejected the rendered source
    """
    if config.data_file is None:
        raise ResumeIOError("No data file configured")

    start_time = time.time()
    name = config.document_name

    author = load_resume(Path(config.data_file))
    source = render_resume(author, Path(config.template_dir), config.template_name)
    output_dir = Path(config.output_dir)

    if not compile_document:
        source_path = _write_source(source, output_dir, name)
        return BuildResult(source=source, source_path=source_path, elapsed_time=time.time() - start_time)

    compiler_config = CompilerConfig(
        compiler=config.compiler,
        filesystem_root=Path(config.filesystem_root),
        input_name=name,
        output_format=config.output_format,
        num_passes=config.num_passes,
        keep_artifacts=config.keep_artifacts,
    )

    # Build directory lives only for this run; outputs are copied out on success
    with tempfile.TemporaryDirectory(prefix="rsume_") as tmp:
        build_dir = Path(tmp)
        result = compile_latex(source, compiler_config, build_dir, verbose=verbose)

        if not result.success:
            raise CompilationError(
                f"{compiler_config.engine} failed to compile {name}",
                errors=result.errors,
                warnings=result.warnings,
                output="\n".join(filter(None, (result.log, result.stdout, result.stderr))),
            )

        # Source goes first so a failed write leaves no document behind
        source_path = _write_source(source, output_dir, name) if config.keep_source else None
        document_path = _copy_to_output(result.document_path, output_dir)
        logger.success(f"Document saved to: {document_path}")

        if compiler_config.keep_artifacts:
            for artifact in artifact_paths(build_dir, name):
                _copy_to_output(artifact, output_dir)
            logger.debug("Copied LaTeX artifacts to output directory.")

    return BuildResult(
        source=source,
        document_path=document_path,
        source_path=source_path,
        page_count=result.page_count,
        warnings=result.warnings,
        elapsed_time=time.time() - start_time,
    )
