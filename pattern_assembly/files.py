"""Expand configured glob patterns into concrete filesystem paths.

Options accept a single pattern or a list of them. Patterns support ``**``
recursion, ``{json,yml}`` brace alternatives, and a leading ``!`` to exclude
paths matched by earlier entries, so ``["src/views/**/*",
"!src/views/layouts/**"]`` selects every view outside the layouts folder.
Results keep first-match order and are sorted within each pattern so
repeated runs enumerate files identically. ``read_text`` reads a matched
file as UTF-8 and reports failures as ``FileReadError``.
"""

from __future__ import annotations

import fnmatch
import re
import typing as typ
from pathlib import Path

from .errors import FileReadError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

BRACE_PATTERN = re.compile(r"\{([^{}]*)\}")
GLOB_CHARS = frozenset("*?[{")


def as_pattern_list(patterns: str | cabc.Iterable[str] | None) -> list[str]:
    """Return ``patterns`` as a list, wrapping a bare string."""
    if patterns is None:
        return []
    if isinstance(patterns, str):
        return [patterns]
    return list(patterns)


def expand_braces(pattern: str) -> list[str]:
    """Expand ``{a,b}`` alternatives into separate patterns.

    >>> expand_braces("data/*.{json,yml}")
    ['data/*.json', 'data/*.yml']
    """
    match = BRACE_PATTERN.search(pattern)
    if not match:
        return [pattern]
    head, tail = pattern[: match.start()], pattern[match.end() :]
    expanded: list[str] = []
    for option in match.group(1).split(","):
        expanded.extend(expand_braces(f"{head}{option}{tail}"))
    return expanded


def read_text(path: Path) -> str:
    """Return the UTF-8 text of ``path``.

    Raises
    ------
    FileReadError
        If the file cannot be read or is not valid UTF-8.
    """
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        msg = f"Unable to decode '{path}' as UTF-8: {exc.reason}"
        raise FileReadError(msg, reason="encoding", path=path) from exc
    except OSError as exc:
        msg = f"Unable to read '{path}': {exc.strerror or exc}"
        raise FileReadError(msg, reason=type(exc).__name__, path=path) from exc


def _glob(base_dir: Path, pattern: str) -> list[Path]:
    candidate = Path(pattern)
    if candidate.is_absolute():
        anchor = Path(candidate.anchor)
        relative = str(candidate.relative_to(anchor))
    else:
        anchor = base_dir
        relative = pattern
    relative = relative.rstrip("/") or "."
    if not any(char in GLOB_CHARS for char in relative):
        target = anchor / relative
        return [target] if target.exists() else []
    return sorted(anchor.glob(relative))


def _excluded(path: Path, base_dir: Path, negations: list[str]) -> bool:
    try:
        relative = path.relative_to(base_dir).as_posix()
    except ValueError:
        relative = path.as_posix()
    for negation in negations:
        if fnmatch.fnmatch(relative, negation) or fnmatch.fnmatch(
            path.as_posix(), negation
        ):
            return True
    return False


def expand_patterns(
    patterns: str | cabc.Iterable[str] | None,
    *,
    base_dir: Path,
    files_only: bool = True,
    dirs_only: bool = False,
) -> list[Path]:
    """Resolve ``patterns`` relative to ``base_dir``.

    Parameters
    ----------
    patterns : str or iterable of str
        Glob patterns; entries starting with ``!`` exclude matches.
    base_dir : Path
        Directory relative patterns are resolved against.
    files_only : bool, optional
        Drop directories from the result (the default).
    dirs_only : bool, optional
        Keep only directories; overrides ``files_only``.

    Returns
    -------
    list[Path]
        Unique matches in first-seen order.
    """
    includes: list[str] = []
    negations: list[str] = []
    for raw in as_pattern_list(patterns):
        if raw.startswith("!"):
            negations.extend(expand_braces(raw[1:]))
        else:
            includes.extend(expand_braces(raw))

    seen: set[Path] = set()
    results: list[Path] = []
    for pattern in includes:
        for path in _glob(base_dir, pattern):
            if path in seen or path.name.startswith("."):
                continue
            if dirs_only and not path.is_dir():
                continue
            if files_only and not dirs_only and not path.is_file():
                continue
            if negations and _excluded(path, base_dir, negations):
                continue
            seen.add(path)
            results.append(path)
    return results


__all__ = ["as_pattern_list", "expand_braces", "expand_patterns", "read_text"]
