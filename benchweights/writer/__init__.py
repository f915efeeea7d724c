"""Artifact generation: output naming, template rendering and file writing."""

from .naming import output_target, snake_case
from .render import Renderer, TemplateRenderer, default_template
from .writer import write_html_results, write_results

__all__ = [
    "Renderer",
    "TemplateRenderer",
    "default_template",
    "output_target",
    "snake_case",
    "write_html_results",
    "write_results",
]
