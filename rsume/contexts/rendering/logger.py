"""
Rendering context logger.

Wrappers add the [render] prefix. Compilation helpers summarize an engine run
on the console and keep the full engine output in the run log file.
"""

from loguru import logger

CONTEXT_PREFIX = "[render]"

# Log lines shown on the console when an engine run fails
FAILURE_LOG_TAIL = 15


def _log_info(message: str) -> None:
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_compilation_start(config, num_passes: int, build_dir) -> None:
    """Log engine, format and search root for a compilation (config: CompilerConfig)."""
    _log_info(
        f"Compiling {config.input_name}.tex with {config.engine} "
        f"-> {config.output_format.upper()} ({num_passes} pass{'es' if num_passes > 1 else ''})"
    )
    _log_debug(f"  Build directory: {build_dir}")
    _log_debug(f"  Filesystem root: {config.filesystem_root.resolve()}")


def log_compilation_result(config, result, elapsed_time: float, verbose: bool = False) -> None:
    """
    Summarize a finished compilation.

    Args:
        config: CompilerConfig used for the run
        result: CompilationResult from compile_latex()
        elapsed_time: Engine wall-clock time in seconds
        verbose: List every warning and dump engine stdout even on success
    """
    if result.success:
        pages = f", {result.page_count} pages" if result.page_count is not None else ""
        _log_success(f"{config.input_name}{config.output_suffix} built in {elapsed_time:.2f}s{pages}")
    else:
        _log_error(f"{config.engine} failed on {config.input_name}.tex after {elapsed_time:.2f}s")
        for err in result.errors:
            _log_error(f"  {err}")
        if result.log:
            tail = result.log.rstrip().splitlines()[-FAILURE_LOG_TAIL:]
            _log_debug("  Log tail:\n" + "\n".join(f"    {line}" for line in tail))

    if result.warnings:
        _log_warning(f"{len(result.warnings)} LaTeX warnings")
        shown = result.warnings if verbose else result.warnings[:3]
        for warn in shown:
            _log_debug(f"  {warn}")

    # raw=True keeps multi-line engine output free of per-line prefixes
    if (verbose or not result.success) and (result.stdout or result.stderr):
        logger.opt(raw=True).debug(
            f"\n{'=' * 80}\n{config.engine} output\n{'=' * 80}\n{result.stdout}{result.stderr}\n"
        )
