"""Render registered partials through the ``material`` directive."""

from .beautifier import beautify_html
from .helpers import install_helpers, render_markdown, singularize
from .material import MaterialRenderer

__all__ = [
    "MaterialRenderer",
    "beautify_html",
    "install_helpers",
    "render_markdown",
    "singularize",
]
