"""Jinja2 rendering of the page and its swappable fragments."""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape

logger = logging.getLogger(__name__)


class Fragment(str, Enum):
    """Every template the renderer knows, keyed by its file name."""

    PAGE = "index.html"
    TASK_LIST = "_list.html"
    TASK_ITEM = "_todo-task.html"
    NO_TASKS = "_no-tasks.html"
    VIEW_TOGGLE = "_view-toggle.html"


class FragmentError(RuntimeError):
    """Base class for rendering failures."""


class UnknownFragmentError(FragmentError, LookupError):
    """Raised when a fragment name is not in the registry."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown fragment '{name}'")
        self.name = name


class FragmentRenderError(FragmentError):
    """Raised when a template fails to load or render."""

    def __init__(self, fragment: Fragment, cause: Exception) -> None:
        super().__init__(f"Failed to render fragment '{fragment.value}': {cause}")
        self.fragment = fragment


class FragmentRenderer:
    """Renders fragments from a template directory.

    With ``reload`` enabled templates are re-parsed from disk on every
    render so edits show up without a restart; otherwise each template is
    parsed once and cached.
    """

    def __init__(self, templates_dir: str | Path, reload: bool = False):
        """Initialize the renderer.

        Args:
            templates_dir: Directory containing the fragment templates
            reload: Re-parse templates on every render
        """
        self.templates_dir = Path(templates_dir)
        self.reload = reload
        self._env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html"]),
            auto_reload=reload,
            cache_size=0 if reload else 400,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        logger.debug("Fragment templates loaded from %s (reload=%s)", self.templates_dir, reload)

    @staticmethod
    def resolve(fragment: Fragment | str) -> Fragment:
        """Map a fragment or its template name onto the registry."""
        if isinstance(fragment, Fragment):
            return fragment
        try:
            return Fragment(fragment)
        except ValueError:
            pass
        try:
            return Fragment[fragment]
        except KeyError:
            raise UnknownFragmentError(str(fragment)) from None

    def render(self, fragment: Fragment | str, **context: Any) -> str:
        """Render ``fragment`` with ``context``.

        Raises:
            UnknownFragmentError: If the name is not a known fragment
            FragmentRenderError: If the template cannot be loaded or rendered
        """
        resolved = self.resolve(fragment)
        try:
            template = self._env.get_template(resolved.value)
            return template.render(**context)
        except TemplateError as exc:
            raise FragmentRenderError(resolved, exc) from exc
