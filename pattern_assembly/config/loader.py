"""Resolve user options over defaults into an :class:`AssemblyConfig`."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from pattern_assembly.errors import ConfigurationError

from .helpers import (
    DEFAULTS,
    PATTERN_OPTIONS,
    _build_beautifier,
    _build_keys,
    _canonical_keys,
    _deep_merge,
    _pattern_tuple,
    _validate_helpers,
)
from .models import AssemblyConfig


def resolve_options(
    user_options: typ.Mapping[str, typ.Any] | None = None,
) -> AssemblyConfig:
    """Deep-merge ``user_options`` over the defaults and validate the result.

    Parameters
    ----------
    user_options : Mapping, optional
        Options using either the camelCase surface (``layoutIncludes``,
        ``onError``, ``logErrors``) or snake_case names. Lists replace the
        default list at the same key rather than extending it.

    Returns
    -------
    AssemblyConfig
        Immutable configuration for a single run.

    Raises
    ------
    ConfigurationError
        If an option is unknown or has the wrong shape.

    Examples
    --------
    >>> config = resolve_options({"materials": "patterns/*"})
    >>> config.materials
    ('patterns/*',)
    >>> config.keys.materials
    'materials'
    """
    if user_options is not None and not isinstance(user_options, typ.Mapping):
        msg = "Options must be a mapping."
        raise ConfigurationError(msg, reason="invalid-options")
    merged = _deep_merge(DEFAULTS, _canonical_keys(user_options or {}))

    on_error = merged["on_error"]
    if on_error is not None and not callable(on_error):
        msg = "Option 'onError' must be callable."
        raise ConfigurationError(msg, reason="invalid-callback")
    if not isinstance(merged["layout"], str):
        msg = "Option 'layout' must be a layout id."
        raise ConfigurationError(msg, reason="invalid-layout")
    separator = merged["separator"]
    if not isinstance(separator, str) or not separator:
        msg = "Option 'separator' must be a non-empty string."
        raise ConfigurationError(msg, reason="invalid-separator")
    extension = str(merged["extension"])
    if not extension.startswith("."):
        extension = f".{extension}"

    cwd = merged["cwd"]
    patterns = {name: _pattern_tuple(name, merged[name]) for name in PATTERN_OPTIONS}
    return AssemblyConfig(
        layout=merged["layout"],
        keys=_build_keys(merged["keys"]),
        dest=Path(merged["dest"]),
        beautifier=_build_beautifier(merged["beautifier"]),
        on_error=on_error,
        log_errors=bool(merged["log_errors"]),
        helpers=_validate_helpers(merged["helpers"]),
        cwd=Path(cwd) if cwd is not None else Path.cwd(),
        extension=extension,
        separator=separator,
        **patterns,
    )


def load_config_file(path: Path) -> dict[str, typ.Any]:
    """Load a YAML options file for use with :func:`resolve_options`.

    Relative patterns in the file resolve against the file's directory unless
    the file sets ``cwd`` itself.

    Raises
    ------
    FileNotFoundError
        If ``path`` does not exist.
    ConfigurationError
        If the document is not a mapping.
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise ConfigurationError(msg, reason="invalid-options", path=path)
    raw: dict[str, typ.Any] = dict(loaded)
    base = path.resolve().parent
    if raw.get("cwd") is None:
        raw["cwd"] = base
    else:
        raw["cwd"] = base / Path(raw["cwd"])
    return raw


__all__ = ["load_config_file", "resolve_options"]
