"""Template rendering for generated artifacts.

Rendering goes through the ``Renderer`` protocol so the writer can be driven
with any template engine. ``TemplateRenderer`` is the default implementation
on top of Jinja2; it renders strictly (an undefined field is an error, not
an empty string) and registers the two filters the templates rely on:

- ``underscore``: group the digits of an integer with ``_`` (``10_000``),
  the literal form Rust accepts.
- ``join``: Jinja2's ``join`` with a single space as the default separator.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Protocol, Union

import jinja2
import jinja2.filters
import jinja2.nodes

from ..domain.models import OutputMode
from ..errors import RenderError

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"


class Renderer(Protocol):
    """Substitutes a record of named fields into template text."""

    def render(self, template_text: str, record: Mapping[str, Any]) -> str:
        """Render ``template_text`` with ``record``.

        Raises
        ------
        RenderError
            If the template is malformed or references a missing field.
        """
        raise NotImplementedError


def underscore(value: Any) -> str:
    """Format an integer with ``_`` digit separators.

    Examples
    --------
    >>> underscore(1234567)
    '1_234_567'
    >>> underscore("42")
    '42'
    """
    try:
        return f"{int(value):_}"
    except (TypeError, ValueError) as exc:
        raise RenderError(f"underscore expects an integer, got {value!r}") from exc


@jinja2.pass_eval_context
def join(
    eval_ctx: jinja2.nodes.EvalContext,
    value: Iterable[Any],
    d: str = " ",
    attribute: Optional[Union[str, int]] = None,
) -> str:
    return jinja2.filters.do_join(eval_ctx, value, d, attribute)


class TemplateRenderer:
    """Jinja2-backed ``Renderer``.

    Parameters
    ----------
    autoescape: bool
        HTML-escape substituted values. Enabled for reports, disabled for
        generated source code where quotes and angle brackets are literal.
    """

    def __init__(self, autoescape: bool = False) -> None:
        self.env = jinja2.Environment(
            autoescape=autoescape,
            undefined=jinja2.StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["underscore"] = underscore
        self.env.filters["join"] = join

    @classmethod
    def for_mode(cls, mode: OutputMode) -> "TemplateRenderer":
        return cls(autoescape=mode.autoescape)

    def render(self, template_text: str, record: Mapping[str, Any]) -> str:
        try:
            template = self.env.from_string(template_text)
            return template.render(**record)
        except jinja2.TemplateSyntaxError as exc:
            raise RenderError(
                f"malformed template (line {exc.lineno}): {exc.message}"
            ) from exc
        except RenderError:
            raise
        except jinja2.TemplateError as exc:
            raise RenderError(f"template rendering failed: {exc}") from exc
        except Exception as exc:
            raise RenderError(
                f"template rendering failed: {type(exc).__name__}: {exc}"
            ) from exc


def default_template(mode: OutputMode) -> str:
    """Return the built-in template text for ``mode``."""
    return (TEMPLATES_DIR / mode.default_template).read_text(encoding="utf-8")
