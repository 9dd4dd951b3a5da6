"""
Template Renderer

Renders the entry-point template against a context and converts every Jinja2
failure into a TemplateError carrying the template location.
"""

from typing import Any, Dict

import jinja2

from rsume.contexts.templating.logger import _log_debug, _log_error, _log_info
from rsume.contexts.templating.registry import TemplateRegistry
from rsume.exceptions import TemplateError


def render_template(
    registry: TemplateRegistry, template_name: str, context: Dict[str, Any]
) -> str:
    """
    Render a template from the registry.

    Args:
        registry: Template registry owning the Jinja2 environment
        template_name: Entry-point template file name
        context: Template context from build_context()

    Returns:
        Rendered LaTeX source

    Raises:
        TemplateError: If the template is missing, unreadable or malformed,
            references something the context does not define, or fails while rendering
    """
    template_path = registry.get_template_path(template_name)
    _log_info(f"Rendering template: {template_path}")

    try:
        template = registry.get_template(template_name)
        rendered = template.render(context)
    except jinja2.TemplateNotFound as e:
        _log_error(f"Template not found: {template_path}")
        raise TemplateError(
            "Template not found",
            template_name=template_name,
            template_path=template_path,
            original_error=e,
        ) from e
    except jinja2.TemplateSyntaxError as e:
        # Syntax errors may come from an included template rather than the entry point
        location = f"{e.filename or template_path}:{e.lineno}"
        _log_error(f"Template syntax error at {location}: {e.message}")
        raise TemplateError(
            f"Template syntax error at {location}",
            template_name=template_name,
            template_path=template_path,
            original_error=e,
        ) from e
    except jinja2.UndefinedError as e:
        _log_error(f"Undefined context reference in {template_path}: {e.message}")
        raise TemplateError(
            "Template references an undefined value",
            template_name=template_name,
            template_path=template_path,
            original_error=e,
        ) from e
    except Exception as e:
        # Other Jinja2 errors, plus plain Python errors raised by expressions and
        # filters (e.g. None | format) or while decoding the template file
        _log_error(f"Template rendering failed: {type(e).__name__}: {e}")
        raise TemplateError(
            "Template rendering failed",
            template_name=template_name,
            template_path=template_path,
            original_error=e,
        ) from e

    _log_debug(f"Rendered {len(rendered)} characters")
    return rendered
