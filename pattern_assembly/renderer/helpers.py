"""Template helpers installed on every assembly environment."""

from __future__ import annotations

import typing as typ

from markdown import Markdown
from markupsafe import Markup, escape

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from jinja2 import Environment

    from .material import MaterialRenderer

MARKDOWN_EXTENSIONS = ["fenced_code", "tables", "sane_lists"]


def render_markdown(text: str | None) -> Markup:
    """Render Markdown ``text`` into HTML."""
    if not text or not str(text).strip():
        return Markup("")
    md = Markdown(extensions=MARKDOWN_EXTENSIONS)
    return Markup(md.convert(str(text)))


def singularize(word: str) -> str:
    """Return a naive singular form of a catalog key.

    >>> singularize("materials"), singularize("patterns"), singularize("kit")
    ('material', 'pattern', 'kit')
    """
    if word.endswith("ies") and len(word) > 3:
        return f"{word[:-3]}y"
    if word.endswith("s") and not word.endswith("ss"):
        return word[:-1]
    return word


def install_helpers(
    env: Environment,
    renderer: MaterialRenderer,
    *,
    directive_name: str,
    user_helpers: cabc.Mapping[str, cabc.Callable[..., typ.Any]] | None = None,
) -> list[str]:
    """Install built-in and user helpers on ``env``.

    Built-ins are the ``markdown`` filter, the ``raw`` global returning a
    partial's unrendered source (escaped), and the material directive under
    ``directive_name``. User helpers are installed last as globals and may
    replace ``raw``; they cannot replace the directive.

    Returns
    -------
    list[str]
        Names of the installed globals.
    """
    env.filters["markdown"] = render_markdown
    env.globals["raw"] = lambda name: escape(renderer.raw_source(name))
    for helper_name, helper in (user_helpers or {}).items():
        env.globals[helper_name] = helper
    env.globals[directive_name] = renderer.directive()
    return ["raw", *(user_helpers or {}), directive_name]


__all__ = ["install_helpers", "render_markdown", "singularize"]
