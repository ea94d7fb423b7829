"""Shared fixtures building throwaway toolkit trees for assembly tests."""

from __future__ import annotations

import typing as typ

import pytest

if typ.TYPE_CHECKING:
    from pathlib import Path

TOOLKIT_FILES: dict[str, str] = {
    "src/materials/components/01-button.html": (
        "---\ntitle: Button\n---\n<button>{{label}}</button>\n"
    ),
    "src/materials/components/button--large.html": (
        '<button class="lg">{{label}}</button>\n'
    ),
    "src/materials/structures/01-header/header.html": (
        "<header>{{ site.title }}</header>\n"
    ),
    "src/materials/structures/02-card/card.html": (
        "---\nnotes: Holds a call to action.\n---\n\n"
        "<div class=\"card\">{{ material('button', label=cta) }}</div>\n"
    ),
    "src/materials/structures/02-card/card--wide.html": (
        '<div class="card wide">{{ title }}</div>\n'
    ),
    "src/materials/structures/02-card/card.css": ".card { display: block; }\n",
    "src/materials/structures/10-footer.html": "<footer>{{ site.title }}</footer>\n",
    "src/materials/structures/notes.md": "Structures are page-level blocks.\n",
    "src/data/site.yml": "title: Toolkit\n",
    "src/data/02-nav.json": '{"links": ["home", "about"]}\n',
    "src/views/layouts/default.html": "<html>{% block body %}{% endblock %}</html>\n",
    "src/views/layouts/includes/f-intro.html": "<p>{{ intro }}</p>\n",
}


def write_tree(root: Path, files: typ.Mapping[str, str]) -> Path:
    """Write ``files`` (relative path -> text) beneath ``root``."""
    for relative, text in files.items():
        target = root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8")
    return root


@pytest.fixture
def toolkit(tmp_path: Path) -> Path:
    """Return a toolkit directory with materials, data, and layouts."""
    return write_tree(tmp_path / "toolkit", TOOLKIT_FILES)


@pytest.fixture
def errors() -> list[typ.Any]:
    """Collect structured errors passed to ``onError``."""
    return []
