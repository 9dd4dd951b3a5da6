"""
Data File Loader

Reads a resume data file into a plain nested dictionary. TOML is the primary
format because it has native date values; YAML is read through OmegaConf,
where dates arrive as strings and are parsed later by the validator.
"""

import tomllib
from pathlib import Path
from typing import Any, Dict

from omegaconf import OmegaConf
from omegaconf.errors import OmegaConfBaseException
from yaml import YAMLError

from rsume.contexts.schema.logger import _log_debug
from rsume.exceptions import ResumeIOError

TOML_SUFFIXES = {".toml"}
YAML_SUFFIXES = {".yaml", ".yml"}


def load_data_file(data_path: Path) -> Dict[str, Any]:
    """
    Load a resume data file into a nested dictionary.

    Args:
        data_path: Path to a .toml, .yaml or .yml file

    Returns:
        Raw document as nested dicts/lists/scalars

    Raises:
        ResumeIOError: If the file is missing, unreadable, malformed,
            or has an unsupported extension
    """
    data_path = Path(data_path)
    suffix = data_path.suffix.lower()

    if suffix not in TOML_SUFFIXES | YAML_SUFFIXES:
        raise ResumeIOError(
            f"Unsupported data file format '{suffix}' (expected .toml, .yaml or .yml)", data_path
        )
    if not data_path.is_file():
        raise ResumeIOError("Data file not found", data_path)

    try:
        text = data_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ResumeIOError(f"Could not read data file ({e})", data_path) from e

    if suffix in TOML_SUFFIXES:
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as e:
            raise ResumeIOError(f"Invalid TOML ({e})", data_path) from e
    else:
        try:
            data = OmegaConf.to_container(OmegaConf.create(text), resolve=True)
        except (YAMLError, OmegaConfBaseException) as e:
            raise ResumeIOError(f"Invalid YAML ({e})", data_path) from e
        if not isinstance(data, dict):
            raise ResumeIOError("YAML data file must contain a mapping at the top level", data_path)

    _log_debug(f"Loaded {len(data)} top-level keys from {data_path}")
    return data
