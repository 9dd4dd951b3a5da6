"""
Run logging for rsume commands.

Each CLI run gets its own log directory (`<logs_root>/<command>_<timestamp>/`)
holding a DEBUG-level log file, while the console shows INFO and above.
Context modules log through their own prefixed wrappers in
contexts/{context}/logger.py.
"""

import sys
from pathlib import Path

from loguru import logger

from rsume import __version__
from rsume.utils.timestamp import now

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}"
CONSOLE_FORMAT = "<level>{level: <7}</level> | <level>{message}</level>"

LEVEL_COLORS = {
    "WARNING": "<yellow>",
    "ERROR": "<red>",
    "CRITICAL": "<bold><red>",
}


def run_log_dir(logs_root: Path, command: str) -> Path:
    """Directory for one run of `command`, e.g. outs/logs/build_20251114_123456."""
    return Path(logs_root) / f"{command}_{now()}"


def setup_logger(
    context_name: str,
    log_dir: Path,
    extra_provenance: dict = None,
    verbose: bool = False,
) -> Path:
    """
    Replace loguru's sinks with a run log file and a console sink.

    Args:
        context_name: Command being run; names the log file (e.g. "build" -> build.log)
        log_dir: Directory for this run, created if missing
        extra_provenance: Key-value pairs added to the provenance header
        verbose: Also show DEBUG messages on the console

    Returns:
        Path to the log file
    """
    log_dir.mkdir(exist_ok=True, parents=True)
    log_file = log_dir / f"{context_name}.log"

    logger.remove()
    for level_name, color in LEVEL_COLORS.items():
        logger.level(level_name, color=color)

    logger.add(log_file, format=FILE_FORMAT, level="DEBUG")
    logger.add(
        sys.stdout,
        format=CONSOLE_FORMAT,
        level="DEBUG" if verbose else "INFO",
        colorize=True,
    )

    log_provenance(context_name, extra_provenance)
    logger.debug(f"Log file: {log_file}")

    return log_file


def log_provenance(command: str, extra_context: dict = None) -> None:
    """
    Record how this run was invoked, at DEBUG level so it stays in the log file.

    Args:
        command: rsume command name
        extra_context: Additional key-value pairs to record
    """
    logger.debug("=" * 80)
    logger.debug(f"rsume {__version__} {command}")
    logger.debug(f"Command line: {' '.join(sys.argv)}")
    logger.debug(f"Working directory: {Path.cwd()}")
    logger.debug(f"Python: {sys.version.split()[0]}")

    for key, value in (extra_context or {}).items():
        logger.debug(f"{key}: {value}")

    logger.debug("=" * 80)
