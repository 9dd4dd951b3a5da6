"""
Templating Context

Responsibilities:
- Builds the template context tree from the validated data model
- Escapes user-supplied text for LaTeX (`latex_escape` filter)
- Loads and renders Jinja2 templates with LaTeX-safe delimiters

Owns: Template context construction, escaping, template rendering
Never: Compiles LaTeX or validates resume data
"""

from rsume.contexts.templating.context_builder import build_context
from rsume.contexts.templating.escaping import ESCAPE_FILTER_NAME, escape_latex
from rsume.contexts.templating.registry import TemplateRegistry
from rsume.contexts.templating.renderer import render_template

__all__ = [
    "build_context",
    "escape_latex",
    "ESCAPE_FILTER_NAME",
    "TemplateRegistry",
    "render_template",
]
