"""Orchestrate a single assembly run.

An :class:`Assembly` owns everything a run produces: the partial registry,
the Jinja environment, layouts, the data store, and the material catalog.
:meth:`Assembly.setup` fills them in a fixed order (helpers, layouts,
layout includes, data, materials) and routes every failure through the
run's :class:`~pattern_assembly.errors.ErrorHandler`.

Example
-------
>>> from pattern_assembly import assemble
>>> assembly = assemble({"cwd": "toolkit", "logErrors": True})  # doctest: +SKIP
>>> assembly.render_material("button", label="Go")  # doctest: +SKIP
Markup('<button>\\n\\tGo\\n</button>')
"""

from __future__ import annotations

import logging
import typing as typ

from jinja2 import Environment, select_autoescape

from .catalog import Catalog, CatalogBuilder
from .config import AssemblyConfig, resolve_options
from .data_loader import load_data
from .errors import ErrorHandler
from .registry import PartialRegistry, load_layouts, register_from_files
from .renderer import MaterialRenderer, install_helpers, singularize

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from markupsafe import Markup

logger = logging.getLogger(__name__)


class Assembly:
    """Run context holding every table an assembly run populates."""

    def __init__(
        self, config: AssemblyConfig, *, handler: ErrorHandler | None = None
    ) -> None:
        """Create an empty run for ``config``.

        Parameters
        ----------
        config : AssemblyConfig
            Resolved options for the run.
        handler : ErrorHandler, optional
            Error funnel; built from ``config.on_error`` and
            ``config.log_errors`` when omitted.
        """
        self.config = config
        self.handler = handler or ErrorHandler(
            config.on_error, log_errors=config.log_errors
        )
        self.registry = PartialRegistry()
        self.env = Environment(
            loader=self.registry.loader(),
            autoescape=select_autoescape(["html", "xml"], default=True),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.renderer = MaterialRenderer(
            self.registry,
            self.env,
            beautifier=config.beautifier,
            ambient=self.ambient_context,
            separator=config.separator,
        )
        self.layouts: dict[str, str] = {}
        self.data: dict[str, typ.Any] = {}
        self.catalog: Catalog = {}

    @property
    def directive_name(self) -> str:
        """Name of the material directive, the singular of the materials key."""
        return singularize(self.config.keys.materials)

    def setup(self) -> Assembly:
        """Populate helpers, layouts, includes, data, and the catalog in order.

        A failing phase is reported through the handler and the remaining
        phases still run.
        """
        steps: list[tuple[str, cabc.Callable[[], None]]] = [
            ("Registering helpers", self.register_helpers),
            ("Parsing layouts", self.parse_layouts),
            ("Parsing layout includes", self.parse_layout_includes),
            ("Parsing data", self.parse_data),
            ("Parsing materials", self.parse_materials),
        ]
        for label, step in steps:
            logger.info(label)
            try:
                step()
            except Exception as exc:
                self.handler.handle(exc)
        return self

    def register_helpers(self) -> None:
        """Install built-in helpers, user helpers, and the material directive."""
        install_helpers(
            self.env,
            self.renderer,
            directive_name=self.directive_name,
            user_helpers=self.config.helpers,
        )

    def parse_layouts(self) -> None:
        """Load layout sources keyed by id."""
        self.layouts = load_layouts(
            self.config.layouts, base_dir=self.config.cwd, on_error=self.handler.handle
        )

    def parse_layout_includes(self) -> None:
        """Register layout includes as partials."""
        register_from_files(
            self.registry,
            self.config.layout_includes,
            base_dir=self.config.cwd,
            on_error=self.handler.handle,
        )

    def parse_data(self) -> None:
        """Rebuild the data store from the configured data files."""
        self.data = load_data(
            self.config.data, base_dir=self.config.cwd, on_error=self.handler.handle
        )

    def parse_materials(self) -> None:
        """Build the material catalog, registering each entry as a partial."""
        builder = CatalogBuilder(
            self.registry,
            self.env,
            base_dir=self.config.cwd,
            extension=self.config.extension,
            separator=self.config.separator,
            on_error=self.handler.handle,
        )
        self.catalog = builder.build(self.config.materials)

    def ambient_context(self) -> dict[str, typ.Any]:
        """Return data files merged with the catalog under its configured key."""
        context: dict[str, typ.Any] = dict(self.data)
        context[self.config.keys.materials] = {
            key: collection.as_dict() for key, collection in self.catalog.items()
        }
        return context

    def render_material(
        self,
        name: str,
        context: cabc.Mapping[str, typ.Any] | None = None,
        **explicit_args: typ.Any,
    ) -> Markup | None:
        """Render a material, reporting failures through the handler.

        Returns ``None`` when the failure was reported and suppressed.
        """
        try:
            return self.renderer.render(name, context, explicit_args)
        except Exception as exc:
            self.handler.handle(exc)
        return None

    def render_source(
        self, source: str, context: cabc.Mapping[str, typ.Any] | None = None
    ) -> str | None:
        """Render template ``source`` (for example a page body) with ambient data."""
        try:
            template = self.env.from_string(source)
            return template.render(self.renderer.build_context(context))
        except Exception as exc:
            self.handler.handle(exc)
        return None


def assemble(
    user_options: cabc.Mapping[str, typ.Any] | None = None,
) -> Assembly | None:
    """Resolve options, then build and set up an :class:`Assembly`.

    Failures before the run exists (such as invalid options) are reported
    through a handler built from the raw ``onError``/``logErrors`` values.
    Returns ``None`` when setup could not start.
    """
    try:
        config = resolve_options(user_options)
    except Exception as exc:
        raw = dict(user_options) if isinstance(user_options, typ.Mapping) else {}
        on_error = raw.get("onError", raw.get("on_error"))
        handler = ErrorHandler(
            on_error if callable(on_error) else None,
            log_errors=bool(raw.get("logErrors", raw.get("log_errors", False))),
        )
        handler.handle(exc)
        return None
    return Assembly(config).setup()


__all__ = ["Assembly", "assemble"]
