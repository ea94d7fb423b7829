"""Assemble pattern-library materials into rendered toolkit documentation.

The package walks conventionally organized material, layout, and data trees,
groups materials into a catalog of collections, items, and variants, and
exposes a ``material`` template directive that renders any catalog entry by
name.

Exports
-------
- ``assemble``: resolve options and run setup, returning the ``Assembly``.
- ``Assembly``: run context holding the registry, catalog, and data store.
- ``resolve_name``: derive ids, titles, and ranks from file paths.
- ``app`` / ``main``: the ``assemble`` console command.

Examples
--------
>>> from pattern_assembly import resolve_name
>>> resolve_name("02-Button.html").id
'button'
>>> from pattern_assembly import assemble
>>> assembly = assemble({"cwd": "toolkit"})  # doctest: +SKIP
"""

from __future__ import annotations

from .assembly import Assembly, assemble
from .cli import app, main
from .naming import CanonicalName, resolve_name

__all__ = ["Assembly", "CanonicalName", "app", "assemble", "main", "resolve_name"]
