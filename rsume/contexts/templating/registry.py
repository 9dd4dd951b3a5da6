import os
from pathlib import Path
from typing import Dict

from dotenv import load_dotenv
from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template, TemplateNotFound

from rsume.contexts.templating.escaping import ESCAPE_FILTER_NAME, escape_latex

load_dotenv()
TEMPLATES_PATH = Path(os.getenv("RSUME_TEMPLATES_PATH", "templates"))


class TemplateRegistry:
    """
    Registry for loading and caching Jinja2 templates for LaTeX generation.

    Templates live under a single template directory and use custom delimiters
    to avoid conflicts with LaTeX syntax:
    - Variable: <<< var >>>
    - Block: <%% block %%>
    - Comment: <# comment #>

    The LaTeX escaping transform is registered as the `latex_escape` filter.
    """

    def __init__(self, template_dir: Path = None):
        """
        Initialize the template registry.

        Args:
            template_dir: Template root directory. Defaults to
                          RSUME_TEMPLATES_PATH from environment
        """
        if template_dir is None:
            template_dir = TEMPLATES_PATH

        self.template_dir = Path(template_dir)
        self._cache: Dict[str, Template] = {}

        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            # Undefined context references raise instead of rendering as empty
            undefined=StrictUndefined,
            variable_start_string="<<<",
            variable_end_string=">>>",
            block_start_string="<%%",
            block_end_string="%%>",
            comment_start_string="<#",
            comment_end_string="#>",
            # Preserve whitespace (important for LaTeX)
            trim_blocks=False,
            lstrip_blocks=False,
            keep_trailing_newline=True,
            autoescape=False,
        )
        self.env.filters[ESCAPE_FILTER_NAME] = escape_latex

    def get_template(self, template_name: str) -> Template:
        """
        Get a template by file name, loading and caching it if necessary.

        Args:
            template_name: File name relative to the template directory (e.g. 'resume.tex')

        Returns:
            Jinja2 Template object

        Raises:
            TemplateNotFound: If template file doesn't exist
            TemplateSyntaxError: If template has Jinja2 syntax errors
        """
        if template_name in self._cache:
            return self._cache[template_name]

        try:
            template = self.env.get_template(template_name)
        except TemplateNotFound as e:
            raise TemplateNotFound(
                f"Template '{template_name}' not found at {self.get_template_path(template_name)}"
            ) from e

        self._cache[template_name] = template
        return template

    def get_template_path(self, template_name: str) -> Path:
        """Get the file path for a template name."""
        return self.template_dir / template_name
