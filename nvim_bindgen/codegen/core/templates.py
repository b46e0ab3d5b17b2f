"""
Jinja2 rendering for generated bindings.

Templates live in a language's template directory. Rendering is strict: an
undefined variable is an error rather than an empty string, and nothing is
HTML-escaped.
"""

from typing import Dict, Any, Optional
from pathlib import Path

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError as JinjaTemplateError,
)


class TemplateError(Exception):
    """A template is missing or failed to render."""

    pass


def indent_lines(value: str, spaces: int = 4) -> str:
    """Prefix every non-blank line with ``spaces`` spaces."""
    pad = " " * spaces
    return "\n".join(
        pad + line if line.strip() else line for line in str(value).split("\n")
    )


class TemplateEngine:
    """Strict Jinja2 environment over one template directory."""

    def __init__(self, template_dir: Optional[Path] = None):
        self.template_dir = template_dir
        search_path = [str(template_dir)] if template_dir and template_dir.is_dir() else []

        self._env = Environment(
            loader=FileSystemLoader(search_path),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        self._env.filters["indent_lines"] = indent_lines

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a named template.

        Raises:
            TemplateError: If the template cannot be found or rendered
        """
        try:
            return self._env.get_template(template_name).render(**context)
        except JinjaTemplateError as e:
            raise TemplateError(f"Failed to render template {template_name}: {e}") from e

    def template_exists(self, template_name: str) -> bool:
        return template_name in self._env.list_templates()


def create_template_engine(template_dir: Optional[Path] = None) -> TemplateEngine:
    return TemplateEngine(template_dir)
