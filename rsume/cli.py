#!/usr/bin/env python3
"""
Resume Build CLI

Builds typeset resumes from structured data files.

Commands:
    build    - Render and compile a resume to PDF (or DVI)
    render   - Render the LaTeX source only, without compiling
    validate - Check a data file against the resume data model

Examples:\n

    rsume build data/author.toml                               # Build with .env defaults

    rsume build data/author.toml -t templates -o outs/results  # Explicit paths

    rsume build data/author.toml --compiler xelatex --verbose  # Different engine

    rsume render data/author.toml -o outs/rendered             # LaTeX source only

    rsume validate data/author.yaml                            # Validate data only
"""

import os
from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from omegaconf.errors import OmegaConfBaseException
from typing_extensions import Annotated

from rsume.config import RunConfig
from rsume.exceptions import CompilationError, RsumeError
from rsume.pipeline import load_resume, run_pipeline
from rsume.utils.logger import run_log_dir, setup_logger

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

# Engine output lines shown on compilation failure
OUTPUT_TAIL_LINES = 20


class OutputFormat(str, Enum):
    pdf = "pdf"
    dvi = "dvi"


app = typer.Typer(
    help="Build typeset resumes from structured resume data files",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _load_config(config_file: Optional[Path], **overrides) -> RunConfig:
    """Resolve run configuration: CLI flags over config file over environment."""
    try:
        if config_file is not None:
            return RunConfig.from_yaml(config_file, **overrides)
        return RunConfig.from_env(**overrides)
    except (OSError, OmegaConfBaseException) as e:
        typer.secho(f"Error: invalid configuration: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


def _report_failure(error: RsumeError) -> None:
    typer.secho(f"✗ {error.stage} stage failed", fg=typer.colors.RED, bold=True, err=True)
    typer.secho(f"  {error}", fg=typer.colors.RED, err=True)

    if isinstance(error, CompilationError) and error.output:
        tail = error.output.strip().splitlines()[-OUTPUT_TAIL_LINES:]
        typer.echo("\nEngine output (last lines):", err=True)
        for line in tail:
            typer.echo(f"  {line}", err=True)


def _setup_run_logging(command: str, logs_dir: Path, verbose: bool, compiler: str = None) -> Path:
    log_dir = run_log_dir(logs_dir, command)
    provenance = {"LaTeX compiler": compiler} if compiler else None
    return setup_logger(context_name=command, log_dir=log_dir, extra_provenance=provenance, verbose=verbose)


@app.command("build")
def build_command(
    data_file: Annotated[Path, typer.Argument(help="Resume data file (.toml, .yaml or .yml)")],
    template_dir: Annotated[
        Optional[Path], typer.Option("--templates", "-t", help="Template directory")
    ] = None,
    template_name: Annotated[
        Optional[str], typer.Option("--template", "-T", help="Entry-point template file name")
    ] = None,
    filesystem_root: Annotated[
        Optional[Path],
        typer.Option("--root", "-r", help="Directory searched for relative \\input and images"),
    ] = None,
    output_dir: Annotated[
        Optional[Path], typer.Option("--output", "-o", help="Output directory")
    ] = None,
    input_name: Annotated[
        Optional[str],
        typer.Option("--name", "-n", help="Document name (default: data file stem)"),
    ] = None,
    compiler: Annotated[
        Optional[str],
        typer.Option("--compiler", "-c", help="LaTeX engine (pdflatex, xelatex, lualatex, tectonic)"),
    ] = None,
    output_format: Annotated[
        Optional[OutputFormat], typer.Option("--format", "-f", help="Output format")
    ] = None,
    num_passes: Annotated[
        Optional[int],
        typer.Option("--passes", "-p", help="Number of compiler passes (default: 2)", min=1, max=5),
    ] = None,
    keep_source: Annotated[
        Optional[bool],
        typer.Option("--keep-source/--no-keep-source", help="Also write the rendered .tex file"),
    ] = None,
    keep_artifacts: Annotated[
        Optional[bool],
        typer.Option("--keep-artifacts/--no-keep-artifacts", help="Keep LaTeX artifacts (.aux, .log, etc.)"),
    ] = None,
    config_file: Annotated[
        Optional[Path], typer.Option("--config", help="YAML configuration file")
    ] = None,
    logs_dir: Annotated[Path, typer.Option("--logs", help="Log directory root")] = LOGS_PATH,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show detailed output (engine stdout)")
    ] = False,
):
    """
    Render a resume data file through a template and compile it.

    Examples:\n

        $ rsume build data/author.toml                        # Build resume

        $ rsume build data/author.toml --keep-source          # Also keep rendered .tex

        $ rsume build data/author.toml --format dvi -p 3      # DVI, three passes
    """
    config = _load_config(
        config_file,
        data_file=data_file,
        template_dir=template_dir,
        template_name=template_name,
        filesystem_root=filesystem_root,
        output_dir=output_dir,
        input_name=input_name,
        compiler=compiler,
        output_format=output_format.value if output_format else None,
        num_passes=num_passes,
        keep_source=keep_source,
        keep_artifacts=keep_artifacts,
    )

    _setup_run_logging("build", logs_dir, verbose, compiler=config.compiler)
    typer.secho(f"\nBuilding: {config.data_file}", fg=typer.colors.BLUE, bold=True)
    typer.echo(f"Template: {config.template_dir / config.template_name}")
    typer.echo("")

    try:
        result = run_pipeline(config, verbose=verbose)
    except RsumeError as e:
        typer.echo("")
        _report_failure(e)
        raise typer.Exit(code=1)
    except ValueError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.echo("")
    typer.secho("✓ Build succeeded", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"  Document: {result.document_path}")
    if result.page_count is not None:
        typer.echo(f"  Pages: {result.page_count}")
    typer.echo(f"  LaTeX warnings: {len(result.warnings)}")
    if verbose and result.warnings:
        for warning in result.warnings[:10]:
            typer.echo(f"  - {warning}")
        if len(result.warnings) > 10:
            typer.echo(f"  ... and {len(result.warnings) - 10} more")
    if result.source_path:
        typer.echo(f"  Source: {result.source_path}")
    typer.echo("")


@app.command("render")
def render_command(
    data_file: Annotated[Path, typer.Argument(help="Resume data file (.toml, .yaml or .yml)")],
    template_dir: Annotated[
        Optional[Path], typer.Option("--templates", "-t", help="Template directory")
    ] = None,
    template_name: Annotated[
        Optional[str], typer.Option("--template", "-T", help="Entry-point template file name")
    ] = None,
    output_dir: Annotated[
        Optional[Path], typer.Option("--output", "-o", help="Output directory")
    ] = None,
    input_name: Annotated[
        Optional[str],
        typer.Option("--name", "-n", help="Document name (default: data file stem)"),
    ] = None,
    config_file: Annotated[
        Optional[Path], typer.Option("--config", help="YAML configuration file")
    ] = None,
    logs_dir: Annotated[Path, typer.Option("--logs", help="Log directory root")] = LOGS_PATH,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug output")] = False,
):
    """
    Render the LaTeX source for a resume without compiling it.

    Examples:\n

        $ rsume render data/author.toml                       # Write outs/results/author.tex

        $ rsume render data/author.toml -T cv.tex -o build    # Different template and output
    """
    config = _load_config(
        config_file,
        data_file=data_file,
        template_dir=template_dir,
        template_name=template_name,
        output_dir=output_dir,
        input_name=input_name,
    )

    _setup_run_logging("render", logs_dir, verbose)

    try:
        result = run_pipeline(config, compile_document=False)
    except RsumeError as e:
        _report_failure(e)
        raise typer.Exit(code=1)

    typer.secho("✓ Render succeeded", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"  Source: {result.source_path}")


@app.command("validate")
def validate_command(
    data_file: Annotated[Path, typer.Argument(help="Resume data file (.toml, .yaml or .yml)")],
):
    """
    Validate a resume data file against the resume data model.

    Examples:\n

        $ rsume validate data/author.toml
    """
    try:
        author = load_resume(data_file)
    except RsumeError as e:
        _report_failure(e)
        raise typer.Exit(code=1)

    typer.secho(f"✓ {data_file} is valid", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"  Author: {author.name}")
    typer.echo(f"  Experiences: {len(author.experiences)}")
    typer.echo(f"  Educations: {len(author.educations)}")
    typer.echo(f"  Skills: {len(author.skills)}")
    typer.echo(f"  Projects: {len(author.projects)}")
    if author.social:
        typer.echo(f"  Social: {', '.join(sorted(author.social))}")


if __name__ == "__main__":
    app()
