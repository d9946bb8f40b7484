"""
Jinja2 front end for the generation helpers.

Templates see the run's function table as globals (``shortname(t.name)``,
``colnames(t.fields, 'ID')``...) plus a handful of Go-oriented filters.
Output is never escaped: the result is Go or protobuf source, not markup.
"""

from typing import Callable, Dict, Any, Optional
from pathlib import Path

import jinja2
from jinja2 import ChoiceLoader, DictLoader, Environment, FileSystemLoader, StrictUndefined

from .naming import (
    camel_to_snake,
    force_lower_camel_identifier,
    snake_to_camel,
)


class TemplateError(Exception):
    """A template could not be found, compiled or rendered."""

    pass


def go_comment(value: str, marker: str = "//") -> str:
    """Prefix every non-blank line with a Go line comment marker."""
    return "\n".join(
        f"{marker} {line}" if line.strip() else line for line in str(value).split("\n")
    )


def tab_indent(value: str, depth: int = 1) -> str:
    """Indent non-blank lines with tabs, gofmt style."""
    prefix = "\t" * depth
    return "\n".join(
        prefix + line if line.strip() else line for line in str(value).split("\n")
    )


FILTERS: Dict[str, Callable] = {
    "snake_case": lambda v: camel_to_snake(str(v)),
    "go_name": lambda v: snake_to_camel(str(v)),
    "lower_camel": lambda v: force_lower_camel_identifier(str(v)),
    "comment": go_comment,
    "indent": tab_indent,
}


class TemplateEngine:
    """
    Renders Go templates against one run's function table.

    In-memory templates added with add_template take precedence over files
    of the same name in template_dir.
    """

    def __init__(
        self,
        template_dir: Optional[Path] = None,
        funcs: Optional[Dict[str, Callable]] = None,
    ):
        self.template_dir = template_dir
        self.funcs = dict(funcs or {})
        self._memory: Dict[str, str] = {}

        loaders = [DictLoader(self._memory)]
        if template_dir and template_dir.exists():
            loaders.append(FileSystemLoader(str(template_dir)))

        self._env = Environment(
            loader=ChoiceLoader(loaders),
            autoescape=False,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            lstrip_blocks=True,
        )
        self._env.filters.update(FILTERS)
        self._env.globals.update(self.funcs)

    def register_funcs(self, funcs: Dict[str, Callable]):
        """Add or replace entries of the function table."""
        self.funcs.update(funcs)
        self._env.globals.update(funcs)

    def add_template(self, name: str, content: str):
        self._memory[name] = content
        # a file template of the same name may already be cached
        if self._env.cache is not None:
            self._env.cache.clear()

    def template_exists(self, name: str) -> bool:
        try:
            self._env.get_template(name)
        except jinja2.TemplateNotFound:
            return False
        return True

    def render_template(self, name: str, context: Dict[str, Any]) -> str:
        """
        Render a named template (in-memory first, then template_dir).

        Raises:
            TemplateError: on lookup, syntax or undefined-variable errors.
                Errors raised by the function table propagate unchanged.
        """
        try:
            return self._env.get_template(name).render(**context)
        except jinja2.TemplateError as e:
            raise TemplateError(f"{name}: {e}") from e

    def render_string(self, source: str, context: Dict[str, Any]) -> str:
        """Render template source text; errors as for render_template."""
        try:
            return self._env.from_string(source).render(**context)
        except jinja2.TemplateError as e:
            raise TemplateError(f"<string>: {e}") from e
