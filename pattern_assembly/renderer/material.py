"""The ``material`` directive: render a registered partial by name.

Templates call the directive as ``{{ material("02-button", page, label="Go") }}``.
The name is normalized the same way the catalog registers ids, the partial is
compiled on first use, and the output is trimmed and pretty-printed. Nested
calls are tracked on an explicit stack so a partial that includes itself
fails with :class:`~pattern_assembly.errors.CyclicIncludeError` instead of
recursing until the interpreter gives up.
"""

from __future__ import annotations

import typing as typ

from jinja2 import pass_context
from markupsafe import Markup

from pattern_assembly._constants import MAX_INCLUDE_DEPTH, VARIANT_SEPARATOR
from pattern_assembly.errors import (
    AssemblyError,
    CyclicIncludeError,
    TemplateRenderError,
)
from pattern_assembly.naming import normalize_reference

from .beautifier import beautify_html

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from jinja2 import Environment
    from jinja2.runtime import Context

    from pattern_assembly.config import BeautifierConfig
    from pattern_assembly.registry import PartialRegistry


class MaterialRenderer:
    """Resolve, compile, and render partials for one assembly run."""

    def __init__(
        self,
        registry: PartialRegistry,
        env: Environment,
        *,
        beautifier: BeautifierConfig,
        ambient: cabc.Callable[[], cabc.Mapping[str, typ.Any]] | None = None,
        max_depth: int = MAX_INCLUDE_DEPTH,
        separator: str = VARIANT_SEPARATOR,
    ) -> None:
        """Initialize the renderer.

        Parameters
        ----------
        registry : PartialRegistry
            Source of partial templates; compiled forms are cached on it.
        env : Environment
            Jinja environment partials are compiled with.
        beautifier : BeautifierConfig
            Indentation used when pretty-printing output.
        ambient : callable, optional
            Returns the lowest-precedence context layer (data files and
            catalogs). Called on every render so it reflects the current run.
        max_depth : int, optional
            Maximum number of nested directive calls.
        separator : str, optional
            Variant separator, so ``button--large`` resolves to ``large``.
        """
        self.registry = registry
        self.env = env
        self.beautifier = beautifier
        self._ambient = ambient or dict
        self.max_depth = max_depth
        self.separator = separator
        self._stack: list[str] = []

    @property
    def stack(self) -> tuple[str, ...]:
        """Ids of the partials currently being rendered, outermost first."""
        return tuple(self._stack)

    def build_context(
        self,
        context: cabc.Mapping[str, typ.Any] | None = None,
        explicit_args: cabc.Mapping[str, typ.Any] | None = None,
    ) -> dict[str, typ.Any]:
        """Merge ambient data, ``context``, and ``explicit_args`` into a new mapping."""
        merged: dict[str, typ.Any] = dict(self._ambient())
        if context:
            merged.update(context)
        if explicit_args:
            merged.update(explicit_args)
        return merged

    def render(
        self,
        name: str,
        context: cabc.Mapping[str, typ.Any] | None = None,
        explicit_args: cabc.Mapping[str, typ.Any] | None = None,
    ) -> Markup:
        """Render the partial referenced by ``name``.

        Parameters
        ----------
        name : str
            Partial reference; ordering prefixes are ignored, so ``02-button``
            and ``button`` resolve to the same partial.
        context : Mapping, optional
            Page-level variables.
        explicit_args : Mapping, optional
            Keyword arguments given to the directive; they win over
            ``context`` and ambient data.

        Returns
        -------
        Markup
            Trimmed, pretty-printed markup, safe to embed in autoescaped
            templates.

        Raises
        ------
        PartialNotFoundError
            If no partial is registered under the normalized name.
        CyclicIncludeError
            If the partial is already being rendered, nesting exceeds
            ``max_depth``, or it reaches itself through ``{% include %}``.
        TemplateCompileError
            If the partial's source is not a valid template.
        TemplateRenderError
            If executing the template fails for any other reason.
        """
        key = normalize_reference(name, separator=self.separator)
        if key in self._stack:
            chain = " -> ".join([*self._stack, key])
            msg = f"Partial '{key}' includes itself ({chain})."
            raise CyclicIncludeError(msg, reason=key, path=self._entry_path(key))
        if len(self._stack) >= self.max_depth:
            msg = f"Material nesting exceeded {self.max_depth} levels at '{key}'."
            raise CyclicIncludeError(msg, reason="max-depth")

        template = self.registry.compile(key, self.env)
        effective = self.build_context(context, explicit_args)
        self._stack.append(key)
        try:
            raw = template.render(effective)
        except AssemblyError:
            raise
        except RecursionError as exc:
            # {% include %} cycles never pass through this method
            msg = f"Partial '{key}' includes itself through template includes."
            raise CyclicIncludeError(
                msg, reason="include", path=self._entry_path(key)
            ) from exc
        except Exception as exc:
            msg = f"Partial '{key}' failed to render: {exc}"
            raise TemplateRenderError(
                msg, reason=type(exc).__name__, path=self._entry_path(key)
            ) from exc
        finally:
            self._stack.pop()
        return Markup(beautify_html(raw.lstrip(), self.beautifier))

    def directive(self) -> cabc.Callable[..., Markup]:
        """Return the Jinja global implementing ``material(name, context, **hash)``.

        When ``context`` is omitted the caller's template variables are used.
        """

        @pass_context
        def material(
            jinja_context: Context,
            name: str,
            context: cabc.Mapping[str, typ.Any] | None = None,
            **explicit_args: typ.Any,
        ) -> Markup:
            page = context if context is not None else jinja_context.get_all()
            return self.render(name, page, explicit_args)

        return material

    def raw_source(self, name: str) -> str:
        """Return the unrendered body of the partial referenced by ``name``."""
        key = normalize_reference(name, separator=self.separator)
        return self.registry.get(key).source

    def _entry_path(self, key: str) -> str | None:
        if key not in self.registry:
            return None
        path = self.registry.get(key).path
        return str(path) if path is not None else None


__all__ = ["MaterialRenderer"]
