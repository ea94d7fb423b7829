"""Named partial templates shared by layouts, catalog items, and the renderer.

A :class:`PartialRegistry` belongs to a single assembly run. Entries are
registered as raw source; the first render compiles the source and keeps the
compiled template on the entry, so each partial compiles at most once.

Example
-------
>>> from jinja2 import Environment
>>> from pattern_assembly.registry import PartialRegistry
>>> registry = PartialRegistry()
>>> registry.register("badge", "<span>{{ text }}</span>")
>>> registry.compile("badge", Environment()).render(text="new")
'<span>new</span>'
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from jinja2 import FunctionLoader, Template, TemplateSyntaxError

from .errors import (
    AssemblyError,
    PartialNotFoundError,
    TemplateCompileError,
)
from .files import expand_patterns, read_text
from .naming import resolve_name

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from jinja2 import Environment


@dc.dataclass(slots=True)
class PartialEntry:
    """A registered partial.

    Attributes
    ----------
    id : str
        Canonical id the partial is registered under.
    source : str
        Raw template text.
    path : Path or None
        File the source came from, when known.
    compiled : Template or None
        Compiled form, populated on first render.
    """

    id: str
    source: str
    path: Path | None = None
    compiled: Template | None = None


class PartialRegistry:
    """Map canonical ids to partial templates for one run."""

    def __init__(self) -> None:
        self._entries: dict[str, PartialEntry] = {}

    def __contains__(self, partial_id: object) -> bool:
        return partial_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def ids(self) -> list[str]:
        """Return registered ids in registration order."""
        return list(self._entries)

    def register(self, partial_id: str, source: str, path: Path | None = None) -> None:
        """Register raw ``source``, replacing any entry with the same id."""
        entry = PartialEntry(id=partial_id, source=source, path=path)
        self._entries[partial_id] = entry

    def unregister(self, partial_id: str) -> None:
        """Remove ``partial_id`` if present."""
        self._entries.pop(partial_id, None)

    def get(self, partial_id: str) -> PartialEntry:
        """Return the entry for ``partial_id``.

        Raises
        ------
        PartialNotFoundError
            If nothing is registered under ``partial_id``.
        """
        try:
            return self._entries[partial_id]
        except KeyError as exc:
            msg = f"No partial named '{partial_id}' is registered."
            raise PartialNotFoundError(msg, reason=partial_id) from exc

    def compile(self, partial_id: str, env: Environment) -> Template:
        """Return the compiled template for ``partial_id``, compiling it once."""
        entry = self.get(partial_id)
        if entry.compiled is None:
            try:
                entry.compiled = env.from_string(entry.source)
            except TemplateSyntaxError as exc:
                msg = f"Partial '{partial_id}' failed to compile: {exc.message}"
                raise TemplateCompileError(
                    msg, reason="syntax", path=entry.path
                ) from exc
        return entry.compiled

    def check_syntax(self, partial_id: str, env: Environment) -> None:
        """Parse the raw source of ``partial_id`` without caching the result.

        Raises
        ------
        TemplateCompileError
            If the source is not a valid template.
        """
        entry = self.get(partial_id)
        try:
            env.parse(entry.source)
        except TemplateSyntaxError as exc:
            msg = f"Partial '{partial_id}' failed to compile: {exc.message}"
            raise TemplateCompileError(msg, reason="syntax", path=entry.path) from exc

    def loader(self) -> FunctionLoader:
        """Return a Jinja loader resolving ``{% include "id" %}`` from the registry."""

        def _load(name: str) -> tuple[str, str | None, cabc.Callable[[], bool]] | None:
            entry = self._entries.get(name)
            if entry is None:
                return None
            filename = str(entry.path) if entry.path is not None else None
            return entry.source, filename, lambda: name in self._entries

        return FunctionLoader(_load)


def load_layouts(
    patterns: str | cabc.Iterable[str],
    *,
    base_dir: Path,
    on_error: cabc.Callable[[AssemblyError], None] | None = None,
) -> dict[str, str]:
    """Return ``id -> raw source`` for every layout file."""
    layouts: dict[str, str] = {}
    for path in expand_patterns(patterns, base_dir=base_dir):
        try:
            layouts[resolve_name(path).id] = read_text(path)
        except AssemblyError as exc:
            if on_error is None:
                raise
            on_error(exc)
    return layouts


def register_from_files(
    registry: PartialRegistry,
    patterns: str | cabc.Iterable[str],
    *,
    base_dir: Path,
    on_error: cabc.Callable[[AssemblyError], None] | None = None,
) -> list[str]:
    """Register every file matched by ``patterns`` as a raw partial.

    Returns
    -------
    list[str]
        Ids registered, in file order.
    """
    registered: list[str] = []
    for path in expand_patterns(patterns, base_dir=base_dir):
        try:
            source = read_text(path)
        except AssemblyError as exc:
            if on_error is None:
                raise
            on_error(exc)
            continue
        partial_id = resolve_name(path).id
        registry.register(partial_id, source, path)
        registered.append(partial_id)
    return registered


__all__ = [
    "PartialEntry",
    "PartialRegistry",
    "load_layouts",
    "register_from_files",
]
