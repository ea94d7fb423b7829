"""Load JSON and YAML data files into a flat lookup table.

Each matched file becomes one entry keyed by its canonical id, so
``src/data/01-site.yml`` is exposed to templates as ``site``. The table is
rebuilt from scratch on every call.

Example
-------
>>> from pathlib import Path
>>> from pattern_assembly.data_loader import load_data
>>> load_data("src/data/*.yml", base_dir=Path("toolkit"))  # doctest: +SKIP
{'site': {'title': 'Toolkit'}}
"""

from __future__ import annotations

import json
import logging
import typing as typ

from ruamel.yaml import YAML, YAMLError

from .errors import AssemblyError, ContentParseError
from .files import expand_patterns, read_text
from .naming import resolve_name

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

logger = logging.getLogger(__name__)

JSON_SUFFIXES = frozenset({".json"})


def parse_data_file(path: Path) -> typ.Any:
    """Parse one data file, choosing the parser from its extension.

    Raises
    ------
    FileReadError
        If the file cannot be read or is not valid UTF-8.
    ContentParseError
        If the content is not valid JSON or YAML.
    """
    text = read_text(path)

    try:
        if path.suffix.lower() in JSON_SUFFIXES:
            return json.loads(text)
        loader = YAML(typ="safe")
        loader.version = (1, 2)
        return loader.load(text)
    except (json.JSONDecodeError, YAMLError) as exc:
        msg = f"Unable to parse data file '{path}': {exc}"
        raise ContentParseError(msg, reason=type(exc).__name__, path=path) from exc


def load_data(
    patterns: str | cabc.Iterable[str],
    *,
    base_dir: Path,
    on_error: cabc.Callable[[AssemblyError], None] | None = None,
) -> dict[str, typ.Any]:
    """Return ``id -> parsed value`` for every file matched by ``patterns``.

    Parameters
    ----------
    patterns : str or iterable of str
        Data file globs.
    base_dir : Path
        Directory relative patterns resolve against.
    on_error : callable, optional
        Receives failures; the failing file is skipped. When omitted the
        first failure propagates.
    """
    store: dict[str, typ.Any] = {}
    for path in expand_patterns(patterns, base_dir=base_dir):
        try:
            value = parse_data_file(path)
        except AssemblyError as exc:
            if on_error is None:
                raise
            on_error(exc)
            continue
        key = resolve_name(path).id
        if key in store:
            logger.warning("Data file %s replaces earlier entry '%s'", path, key)
        store[key] = value
    return store


__all__ = ["load_data", "parse_data_file"]
