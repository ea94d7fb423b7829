"""Defaults and merge helpers shared by the options resolver."""

from __future__ import annotations

import copy
import typing as typ

from pattern_assembly.errors import ConfigurationError

from .models import BeautifierConfig, KeysConfig

DEFAULTS: dict[str, typ.Any] = {
    "layout": "default",
    "layouts": ["src/views/layouts/*"],
    "layout_includes": ["src/views/layouts/includes/*"],
    "views": ["src/views/**/*", "!src/views/layouts/**"],
    "materials": ["src/materials/*"],
    "css": ["src/assets/toolkit/styles/components/*"],
    "js": ["src/assets/toolkit/scripts/modules/*"],
    "data": ["src/data/**/*.{json,yml,yaml}"],
    "docs": ["src/docs/**/*.md"],
    "keys": {"materials": "materials", "views": "views", "docs": "docs"},
    "dest": "dist",
    "beautifier": {"indent_size": 1, "indent_char": "\t", "indent_with_tabs": True},
    "on_error": None,
    "log_errors": False,
    "helpers": {},
    "cwd": None,
    "extension": ".html",
    "separator": "--",
}

OPTION_ALIASES: dict[str, str] = {
    "layoutIncludes": "layout_includes",
    "onError": "on_error",
    "logErrors": "log_errors",
}

PATTERN_OPTIONS = (
    "layouts",
    "layout_includes",
    "views",
    "materials",
    "css",
    "js",
    "data",
    "docs",
)


def _canonical_keys(options: typ.Mapping[str, typ.Any]) -> dict[str, typ.Any]:
    """Rename camelCase option names and reject unknown ones."""
    result: dict[str, typ.Any] = {}
    for key, value in options.items():
        name = OPTION_ALIASES.get(key, key)
        if name not in DEFAULTS:
            msg = f"Unknown option '{key}'."
            raise ConfigurationError(msg, reason="unknown-option")
        result[name] = value
    return result


def _deep_merge(
    base: typ.Mapping[str, typ.Any], override: typ.Mapping[str, typ.Any]
) -> dict[str, typ.Any]:
    """Merge ``override`` into ``base``; nested mappings merge, other values replace."""
    merged: dict[str, typ.Any] = copy.deepcopy(dict(base))
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, typ.Mapping):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def _pattern_tuple(name: str, value: object) -> tuple[str, ...]:
    """Validate a pattern option and return it as a tuple of strings."""
    match value:
        case None:
            return ()
        case str():
            return (value,)
        case list() | tuple() if all(isinstance(item, str) for item in value):
            return tuple(value)
        case _:
            msg = f"Option '{name}' must be a glob pattern or a list of patterns."
            raise ConfigurationError(msg, reason="invalid-pattern")


def _build_keys(payload: object) -> KeysConfig:
    if not isinstance(payload, typ.Mapping):
        msg = "Option 'keys' must be a mapping."
        raise ConfigurationError(msg, reason="invalid-keys")
    base = KeysConfig()
    values = {
        field: payload.get(field, getattr(base, field))
        for field in ("materials", "views", "docs")
    }
    for field, value in values.items():
        if not isinstance(value, str) or not value:
            msg = f"Key name for '{field}' must be a non-empty string."
            raise ConfigurationError(msg, reason="invalid-keys")
    return KeysConfig(**values)


def _build_beautifier(payload: object) -> BeautifierConfig:
    if not isinstance(payload, typ.Mapping):
        msg = "Option 'beautifier' must be a mapping."
        raise ConfigurationError(msg, reason="invalid-beautifier")
    base = BeautifierConfig()
    try:
        indent_size = int(payload.get("indent_size", base.indent_size))
    except (TypeError, ValueError) as exc:
        msg = "Beautifier 'indent_size' must be an integer."
        raise ConfigurationError(msg, reason="invalid-beautifier") from exc
    return BeautifierConfig(
        indent_size=indent_size,
        indent_char=str(payload.get("indent_char", base.indent_char)),
        indent_with_tabs=bool(payload.get("indent_with_tabs", base.indent_with_tabs)),
    )


def _validate_helpers(payload: object) -> dict[str, typ.Any]:
    if payload is None:
        return {}
    if not isinstance(payload, typ.Mapping):
        msg = "Option 'helpers' must map helper names to callables."
        raise ConfigurationError(msg, reason="invalid-helpers")
    for name, helper in payload.items():
        if not callable(helper):
            msg = f"Helper '{name}' is not callable."
            raise ConfigurationError(msg, reason="invalid-helpers")
    return dict(payload)


__all__ = [
    "DEFAULTS",
    "OPTION_ALIASES",
    "PATTERN_OPTIONS",
    "_build_beautifier",
    "_build_keys",
    "_canonical_keys",
    "_deep_merge",
    "_pattern_tuple",
    "_validate_helpers",
]
