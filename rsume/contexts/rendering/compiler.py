"""
LaTeX Compilation Module

Compiles rendered LaTeX source to PDF (or DVI) with an external engine
(pdflatex, xelatex, lualatex or tectonic) run as a subprocess.
"""

import os
import re
import shutil
import subprocess
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from PyPDF2 import PdfReader

from rsume.contexts.rendering.logger import (
    _log_error,
    log_compilation_result,
    log_compilation_start,
)

load_dotenv()

LATEX_COMPILER = os.getenv("LATEX_COMPILER", "pdflatex")
OUTPUT_FORMAT = os.getenv("RSUME_OUTPUT_FORMAT", "pdf")
KEEP_LATEX_ARTIFACTS = os.getenv("KEEP_LATEX_ARTIFACTS", "false").lower() == "true"

OUTPUT_FORMATS = ("pdf", "dvi")

# LaTeX intermediate files created during compilation
LATEX_ARTIFACTS = [".aux", ".log", ".out", ".toc"]


@dataclass
class CompilerConfig:
    """
    Configuration for one compilation, owned by the caller for a single run.

    Attributes:
        compiler: Engine executable (pdflatex, xelatex, lualatex, tectonic) or path to one
        filesystem_root: Directory searched for relative \\input and \\includegraphics
        input_name: Logical name of the document; names the .tex and output files
        output_format: "pdf" or "dvi"
        num_passes: Engine passes for cross-references (tectonic reruns itself and uses one)
        keep_artifacts: Keep .aux/.log/... next to the output document
    """

    compiler: str = LATEX_COMPILER
    filesystem_root: Path = Path(".")
    input_name: str = "resume"
    output_format: str = OUTPUT_FORMAT
    num_passes: int = 2
    keep_artifacts: bool = KEEP_LATEX_ARTIFACTS

    def __post_init__(self):
        self.filesystem_root = Path(self.filesystem_root)
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"Unsupported output format '{self.output_format}'. Valid formats: {OUTPUT_FORMATS}"
            )
        if self.num_passes < 1:
            raise ValueError("num_passes must be at least 1")

    @property
    def engine(self) -> str:
        """Engine name without directory (e.g. 'xelatex')."""
        return Path(self.compiler).name

    @property
    def output_suffix(self) -> str:
        # xelatex and tectonic have no DVI mode; they produce extended DVI instead
        if self.output_format == "dvi" and self.engine.startswith(("xelatex", "tectonic")):
            return ".xdv"
        return f".{self.output_format}"


@dataclass
class CompilationResult:
    """
    Result of LaTeX compilation.

    Attributes:
        success: Whether compilation succeeded
        document_path: Path to the generated document (None if failed)
        stdout: Standard output from the engine, all passes
        stderr: Standard error from the engine, all passes
        log: Contents of the engine's .log file
        errors: List of parsed LaTeX errors
        warnings: List of parsed LaTeX warnings
        page_count: Number of pages in the generated PDF (None if not available)
    """

    success: bool
    document_path: Optional[Path] = None
    stdout: str = ""
    stderr: str = ""
    log: str = ""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    page_count: Optional[int] = None


def _parse_latex_log(log_content: str) -> tuple[List[str], List[str]]:
    """
    Parse LaTeX log file for errors and warnings.

    Args:
        log_content: Content of the .log file

    Returns:
        Tuple of (errors, warnings)
    """
    errors = []
    warnings = []

    # LaTeX error pattern: "! Error message"
    error_pattern = re.compile(r"^! (.+)$", re.MULTILINE)
    for match in error_pattern.finditer(log_content):
        errors.append(match.group(1).strip())

    # -file-line-error style: "./resume.tex:12: Undefined control sequence."
    file_line_pattern = re.compile(r"^[^\s:]+\.tex:\d+: (.+)$", re.MULTILINE)
    for match in file_line_pattern.finditer(log_content):
        message = match.group(1).strip()
        if message not in errors:
            errors.append(message)

    additional_error_patterns = [
        r"Undefined control sequence",
        r"File ended while scanning use of",
        r"Emergency stop",
    ]
    for pattern in additional_error_patterns:
        if re.search(pattern, log_content):
            match = re.search(rf"({pattern}.*?)$", log_content, re.MULTILINE)
            if match and not any(match.group(1) in err for err in errors):
                errors.append(match.group(1))

    warning_patterns = [
        r"LaTeX Warning: (.+)",
        r"Package \w+ Warning: (.+)",
        r"Overfull \\hbox \((.+)\)",
        r"Underfull \\hbox \((.+)\)",
    ]

    for pattern in warning_patterns:
        compiled = re.compile(pattern, re.MULTILINE)
        for match in compiled.finditer(log_content):
            warnings.append(match.group(1).strip())

    return errors, warnings


def _build_command(config: CompilerConfig, tex_name: str) -> List[str]:
    """Engine command line for one pass over tex_name."""
    root = str(config.filesystem_root.resolve())

    if config.engine.startswith("tectonic"):
        return [
            config.compiler,
            "--keep-logs",
            "--outfmt",
            config.output_suffix.lstrip("."),
            "-Z",
            f"search-path={root}",
            tex_name,
        ]

    cmd = [config.compiler, "-interaction=nonstopmode", "-file-line-error"]
    if config.engine.startswith("xelatex"):
        if config.output_format == "dvi":
            cmd.append("-no-pdf")
    else:
        cmd.append(f"-output-format={config.output_format}")
    cmd.append(tex_name)
    return cmd


def _search_path_env(filesystem_root: Path) -> dict:
    """Process environment with the filesystem root prepended to TEXINPUTS."""
    env = os.environ.copy()
    # Trailing separator keeps the engine's default search path; '//' searches subdirectories
    env["TEXINPUTS"] = f"{filesystem_root.resolve()}//{os.pathsep}{env.get('TEXINPUTS', '')}"
    return env


def page_count(pdf_path: Path) -> Optional[int]:
    """Get page count from PDF, or None if unreadable."""
    try:
        reader = PdfReader(str(pdf_path))
        return len(reader.pages)
    except Exception:
        return None


def artifact_paths(build_dir: Path, input_name: str) -> List[Path]:
    """Intermediate files left by compiling input_name in build_dir."""
    return [
        build_dir / f"{input_name}{ext}"
        for ext in LATEX_ARTIFACTS
        if (build_dir / f"{input_name}{ext}").exists()
    ]


def compile_latex(
    source: str,
    config: CompilerConfig,
    build_dir: Path,
    verbose: bool = False,
) -> CompilationResult:
    """
    Compile LaTeX source text to a document.

    Writes the source to build_dir/<input_name>.tex and runs the engine there.
    Relative references in the source resolve against config.filesystem_root.

    Args:
        source: Rendered LaTeX source
        config: Compiler configuration for this run
        build_dir: Working directory for the engine (must exist)
        verbose: Log full engine output even on success

    Returns:
        CompilationResult with success status and diagnostic information
    """
    if shutil.which(config.compiler) is None:
        _log_error(f"LaTeX compiler not found: {config.compiler}")
        return CompilationResult(success=False, errors=[f"LaTeX compiler not found: {config.compiler}"])

    if not config.filesystem_root.is_dir():
        _log_error(f"Filesystem root not found: {config.filesystem_root}")
        return CompilationResult(
            success=False, errors=[f"Filesystem root not found: {config.filesystem_root}"]
        )

    tex_file = build_dir / f"{config.input_name}.tex"
    tex_file.write_text(source, encoding="utf-8")

    num_passes = 1 if config.engine.startswith("tectonic") else config.num_passes
    log_compilation_start(config, num_passes, build_dir)

    all_stdout = []
    all_stderr = []
    env = _search_path_env(config.filesystem_root)
    start_time = time.time()

    # First pass generates .aux, later passes resolve references
    for _ in range(num_passes):
        result = subprocess.run(
            _build_command(config, tex_file.name),
            cwd=build_dir,
            env=env,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",  # Replace invalid UTF-8 bytes instead of crashing
        )

        all_stdout.append(result.stdout)
        all_stderr.append(result.stderr)

        if result.returncode != 0:
            break

    elapsed_time = time.time() - start_time

    log_file = build_dir / f"{config.input_name}.log"
    log_content = ""
    errors = []
    warnings = []

    if log_file.exists():
        # Engines write log files in latin-1 (font metadata contains non-UTF-8)
        log_content = log_file.read_text(encoding="latin-1")
        errors, warnings = _parse_latex_log(log_content)

    document_path = build_dir / f"{config.input_name}{config.output_suffix}"
    if not document_path.exists():
        success = False
        if not errors:
            errors.append(f"{config.output_format.upper()} file was not generated")
    else:
        # Engines may exit non-zero for warnings; a document without errors counts as success
        success = len(errors) == 0

    result = CompilationResult(
        success=success,
        document_path=document_path if document_path.exists() else None,
        stdout="\n".join(all_stdout),
        stderr="\n".join(all_stderr),
        log=log_content,
        errors=errors,
        warnings=warnings,
        page_count=page_count(document_path) if success and document_path.suffix == ".pdf" else None,
    )

    log_compilation_result(config, result, elapsed_time, verbose=verbose)
    return result
