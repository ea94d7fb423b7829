r"""Split page templates into a YAML front-matter header and a template body.

A header is a YAML mapping fenced by ``---`` lines at the very top of the
file. Files without a header yield an empty mapping and their full text as
the body.

Example
-------
>>> from pattern_assembly.front_matter import parse_front_matter
>>> doc = parse_front_matter('---\ntitle: Button\n---\n<button></button>\n')
>>> doc.data, doc.body
({'title': 'Button'}, '<button></button>\n')
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ

from ruamel.yaml import YAML, YAMLError

from .errors import ContentParseError
from .files import read_text

if typ.TYPE_CHECKING:
    from pathlib import Path

FRONT_MATTER_PATTERN = re.compile(
    r"\A---[ \t]*\r?\n(?P<header>.*?)(?:\r?\n)?^---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL | re.MULTILINE,
)


@dc.dataclass(slots=True)
class FrontMatterDocument:
    """Parsed page template.

    Attributes
    ----------
    data : dict[str, Any]
        Header mapping; empty when the file has no header.
    body : str
        Template text following the header.
    """

    data: dict[str, typ.Any]
    body: str


def _yaml_loader() -> YAML:
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    return loader


def parse_front_matter(text: str, *, path: Path | None = None) -> FrontMatterDocument:
    """Separate the YAML header from the body of ``text``.

    Raises
    ------
    ContentParseError
        If the header is not valid YAML or is not a mapping.
    """
    match = FRONT_MATTER_PATTERN.match(text)
    if not match:
        return FrontMatterDocument(data={}, body=text)
    try:
        loaded = _yaml_loader().load(match.group("header")) or {}
    except YAMLError as exc:
        msg = f"Malformed front matter: {exc}"
        raise ContentParseError(msg, reason="front-matter", path=path) from exc
    if not isinstance(loaded, dict):
        msg = "Front matter must be a mapping."
        raise ContentParseError(msg, reason="front-matter", path=path)
    return FrontMatterDocument(data=dict(loaded), body=text[match.end() :])


def read_front_matter(path: Path) -> FrontMatterDocument:
    """Read ``path`` and parse its front matter."""
    text = read_text(path)
    return parse_front_matter(text, path=path)


__all__ = ["FrontMatterDocument", "parse_front_matter", "read_front_matter"]
