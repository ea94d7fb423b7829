"""Typed dataclasses describing a resolved assembly configuration."""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import typing as typ
from pathlib import Path

from pattern_assembly._constants import PAGE_EXTENSION, VARIANT_SEPARATOR

if typ.TYPE_CHECKING:
    from pattern_assembly.errors import AssemblyError


@dc.dataclass(frozen=True, slots=True)
class KeysConfig:
    """Names under which catalogs are exposed to templates."""

    materials: str = "materials"
    views: str = "views"
    docs: str = "docs"


@dc.dataclass(frozen=True, slots=True)
class BeautifierConfig:
    """Indentation settings for pretty-printed material markup."""

    indent_size: int = 1
    indent_char: str = "\t"
    indent_with_tabs: bool = True

    @property
    def indent(self) -> str:
        """Return the string used for one level of indentation."""
        if self.indent_with_tabs:
            return "\t"
        return self.indent_char * self.indent_size


@dc.dataclass(frozen=True, slots=True)
class AssemblyConfig:
    """A fully resolved, read-only configuration for one assembly run.

    Attributes
    ----------
    layout : str
        Id of the default layout.
    layouts, layout_includes, views, materials, css, js, data, docs : tuple[str, ...]
        Glob patterns for each input category. ``css`` and ``js`` are
        accepted but not processed.
    keys : KeysConfig
        Template access keys for the catalogs.
    dest : Path
        Output directory used by the view-writing stage.
    beautifier : BeautifierConfig
        Pretty-printer indentation.
    on_error : callable or None
        Callback receiving each structured error.
    log_errors : bool
        Print errors to the console instead of exiting.
    helpers : Mapping[str, Callable]
        User template helpers installed on the run's environment.
    cwd : Path
        Base directory for relative patterns.
    extension : str
        Extension identifying page templates.
    separator : str
        Token marking variant files.
    """

    layout: str = "default"
    layouts: tuple[str, ...] = ()
    layout_includes: tuple[str, ...] = ()
    views: tuple[str, ...] = ()
    materials: tuple[str, ...] = ()
    css: tuple[str, ...] = ()
    js: tuple[str, ...] = ()
    data: tuple[str, ...] = ()
    docs: tuple[str, ...] = ()
    keys: KeysConfig = dc.field(default_factory=KeysConfig)
    dest: Path = Path("dist")
    beautifier: BeautifierConfig = dc.field(default_factory=BeautifierConfig)
    on_error: cabc.Callable[[AssemblyError], object] | None = None
    log_errors: bool = False
    helpers: cabc.Mapping[str, cabc.Callable[..., typ.Any]] = dc.field(
        default_factory=dict
    )
    cwd: Path = dc.field(default_factory=Path.cwd)
    extension: str = PAGE_EXTENSION
    separator: str = VARIANT_SEPARATOR


__all__ = ["AssemblyConfig", "BeautifierConfig", "KeysConfig"]
