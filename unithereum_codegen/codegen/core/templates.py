"""
Template engine wrapper for generated support files.

Provides a small Jinja2 interface used to render the files that sit next
to generated code (assembly definition, compiler response file).
"""

import json
from typing import Dict, Any

from jinja2 import DictLoader, Environment, StrictUndefined


class TemplateError(Exception):
    """Exception raised for template-related errors."""

    pass


class TemplateEngine:
    """Wrapper for Jinja2 with in-memory templates."""

    def __init__(self, templates: Dict[str, str] = None):
        """
        Initialize template engine.

        Args:
            templates: Mapping of template name to template source
        """
        self._env = Environment(
            loader=DictLoader(dict(templates or {})),
            autoescape=False,
            keep_trailing_newline=False,
            undefined=StrictUndefined,
        )
        self._env.filters["json_string"] = lambda value: json.dumps(
            value, ensure_ascii=False
        )

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a template with the given context.

        Args:
            template_name: Name of a registered template
            context: Variables to pass to template

        Returns:
            Rendered template content
        """
        try:
            template = self._env.get_template(template_name)
            return template.render(**context)
        except Exception as e:
            raise TemplateError(
                f"Failed to render template {template_name}: {str(e)}"
            ) from e

    def add_template(self, name: str, content: str):
        """Add an in-memory template."""
        self._env.loader.mapping[name] = content

    def template_exists(self, template_name: str) -> bool:
        """Check if a template exists."""
        return template_name in self._env.loader.mapping


# Unity assembly definition naming the generated namespace
ASMDEF_TEMPLATE = '{{ {"name": namespace} | json_string }}'

# Compiler response file silencing warnings in generated code
CSC_RSP_TEMPLATE = "-warn:0"

ASMDEF_TEMPLATE_NAME = "asmdef"
CSC_RSP_TEMPLATE_NAME = "csc.rsp"

# Default template engine instance
_default_engine = None


def get_default_template_engine() -> TemplateEngine:
    """Get the default template engine instance."""
    global _default_engine
    if _default_engine is None:
        _default_engine = TemplateEngine(
            {
                ASMDEF_TEMPLATE_NAME: ASMDEF_TEMPLATE,
                CSC_RSP_TEMPLATE_NAME: CSC_RSP_TEMPLATE,
            }
        )
    return _default_engine


def render_assembly_definition(namespace: str) -> str:
    """Render the assembly definition declaring the generated namespace."""
    return get_default_template_engine().render_template(
        ASMDEF_TEMPLATE_NAME, {"namespace": namespace}
    )


def render_compiler_response() -> str:
    """Render the compiler response file for generated code."""
    return get_default_template_engine().render_template(CSC_RSP_TEMPLATE_NAME, {})
