"""
Run configuration.

Defaults come from environment variables (loaded from .env with python-dotenv).
A YAML config file can override them, and CLI flags override both.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from omegaconf import OmegaConf

load_dotenv()


def _env_path(name: str, default: str) -> Path:
    return Path(os.getenv(name, default))


@dataclass
class RunConfig:
    """
    Paths and options for one pipeline run.

    Attributes:
        data_file: Resume data file (.toml, .yaml or .yml)
        template_dir: Template root directory
        template_name: Entry-point template file name, relative to template_dir
        filesystem_root: Directory the compiler searches for relative includes
        output_dir: Directory receiving the compiled document
        input_name: Logical document name; defaults to the data file stem
        compiler: LaTeX engine executable
        output_format: "pdf" or "dvi"
        num_passes: Engine passes
        keep_source: Also write the rendered .tex to output_dir
        keep_artifacts: Also copy LaTeX artifacts (.aux, .log, ...) to output_dir
    """

    data_file: Optional[Path] = None
    template_dir: Path = field(default_factory=lambda: _env_path("RSUME_TEMPLATES_PATH", "templates"))
    template_name: str = field(default_factory=lambda: os.getenv("RSUME_TEMPLATE_NAME", "resume.tex"))
    filesystem_root: Path = field(default_factory=lambda: _env_path("RSUME_FILESYSTEM_ROOT", "."))
    output_dir: Path = field(default_factory=lambda: _env_path("RSUME_OUTPUT_PATH", "outs/results"))
    input_name: Optional[str] = None
    compiler: str = field(default_factory=lambda: os.getenv("LATEX_COMPILER", "pdflatex"))
    output_format: str = field(default_factory=lambda: os.getenv("RSUME_OUTPUT_FORMAT", "pdf"))
    num_passes: int = 2
    keep_source: bool = False
    keep_artifacts: bool = field(
        default_factory=lambda: os.getenv("KEEP_LATEX_ARTIFACTS", "false").lower() == "true"
    )

    @property
    def document_name(self) -> str:
        """Logical document name: input_name, else the data file stem, else 'resume'."""
        if self.input_name:
            return self.input_name
        if self.data_file is not None:
            return Path(self.data_file).stem
        return "resume"

    @classmethod
    def from_env(cls, **overrides) -> "RunConfig":
        """Build a config from environment defaults, applying non-None overrides."""
        return cls(**{key: value for key, value in overrides.items() if value is not None})

    @classmethod
    def from_yaml(cls, config_path: Path, **overrides) -> "RunConfig":
        """
        Build a config from a YAML file merged over environment defaults.

        Keys in the file must match RunConfig attribute names; unknown keys
        raise an OmegaConf validation error.

        Args:
            config_path: YAML config file
            **overrides: Values that take precedence over the file (None is ignored)

        Example:
            # rsume.yaml
            template_dir: templates
            template_name: resume.tex
            output_dir: outs/results
            keep_source: true
        """
        base = OmegaConf.structured(cls())
        file_conf = OmegaConf.load(config_path)
        cli_conf = OmegaConf.create(
            {key: (str(value) if isinstance(value, Path) else value)
             for key, value in overrides.items() if value is not None}
        )
        merged = OmegaConf.merge(base, file_conf, cli_conf)
        return OmegaConf.to_object(merged)
