"""End-to-end tests for :func:`pattern_assembly.assemble`."""

from __future__ import annotations

import typing as typ

import pytest
from conftest import write_tree

from pattern_assembly import Assembly, assemble
from pattern_assembly.errors import (
    AssemblyError,
    ConfigurationError,
    CyclicIncludeError,
    PartialNotFoundError,
)

if typ.TYPE_CHECKING:
    from pathlib import Path


def _run(toolkit: Path, errors: list[AssemblyError], **options: typ.Any) -> Assembly:
    assembly = assemble({"cwd": toolkit, "onError": errors.append, **options})
    assert assembly is not None
    return assembly


def test_setup_populates_every_table(
    toolkit: Path, errors: list[AssemblyError]
) -> None:
    assembly = _run(toolkit, errors)
    assert errors == []
    assert list(assembly.catalog) == ["components", "structures"]
    assert list(assembly.layouts) == ["default"]
    assert "{% block body %}" in assembly.layouts["default"]
    assert assembly.data["site"] == {"title": "Toolkit"}
    assert assembly.data["nav"] == {"links": ["home", "about"]}
    assert "f-intro" in assembly.registry
    assert assembly.directive_name == "material"


def test_render_material_with_explicit_args(
    toolkit: Path, errors: list[AssemblyError]
) -> None:
    assembly = _run(toolkit, errors)
    html = assembly.render_material("02-button", label="Go")
    assert html is not None
    assert html == "<button>Go</button>"
    large = assembly.render_material("large", label="Go")
    assert large is not None
    assert large == '<button class="lg">Go</button>'


def test_nested_material(toolkit: Path, errors: list[AssemblyError]) -> None:
    assembly = _run(toolkit, errors)
    html = assembly.render_material("card", cta="Buy")
    assert html is not None
    assert html == '<div class="card"><button>Buy</button></div>'


def test_data_is_ambient(toolkit: Path, errors: list[AssemblyError]) -> None:
    assembly = _run(toolkit, errors)
    header = assembly.render_material("header")
    assert header is not None
    assert header == "<header>Toolkit</header>"
    overridden = assembly.render_material("footer", {"site": {"title": "Page"}})
    assert overridden is not None
    assert overridden == "<footer>Page</footer>"


def test_catalog_is_exposed_to_templates(
    toolkit: Path, errors: list[AssemblyError]
) -> None:
    assembly = _run(toolkit, errors)
    source = (
        "{% for id, item in materials['structures']['items'] | dictsort %}"
        "{{ id }}:{{ item['variants'] | length }} "
        "{% endfor %}"
    )
    assert assembly.render_source(source) == "card:1 footer:0 header:0 "


def test_missing_material_goes_to_callback(
    toolkit: Path, errors: list[AssemblyError]
) -> None:
    assembly = _run(toolkit, errors)
    assert assembly.render_material("ghost") is None
    assert len(errors) == 1
    assert isinstance(errors[0], PartialNotFoundError)
    assert errors[0].as_dict()["reason"] == "ghost"


def test_missing_material_exits_without_handler(toolkit: Path) -> None:
    assembly = assemble({"cwd": toolkit})
    assert assembly is not None
    with pytest.raises(SystemExit) as excinfo:
        assembly.render_material("ghost")
    assert excinfo.value.code == 1


def test_log_errors_prints_and_continues(
    toolkit: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    assembly = assemble({"cwd": toolkit, "logErrors": True})
    assert assembly is not None
    assert assembly.render_material("ghost") is None
    err = capsys.readouterr().err
    assert "Error (pattern-assembly): No partial named 'ghost'" in err
    assert "PartialNotFoundError" in err


def test_cyclic_material_is_reported(
    tmp_path: Path, errors: list[AssemblyError]
) -> None:
    root = write_tree(
        tmp_path,
        {"src/materials/loops/01-loop.html": "<i>{{ material('loop') }}</i>\n"},
    )
    assembly = _run(root, errors)
    assert assembly.render_material("loop") is None
    assert [type(error) for error in errors] == [CyclicIncludeError]
    assert assembly.renderer.stack == ()


def test_render_source_helpers(toolkit: Path, errors: list[AssemblyError]) -> None:
    assembly = _run(toolkit, errors, helpers={"shout": str.upper})
    source = (
        "{{ notes | markdown }}\n"
        "{% include 'f-intro' %}\n"
        "<pre>{{ raw('button') }}</pre>\n"
        "{{ shout('hi') }}"
    )
    html = assembly.render_source(source, {"notes": "**Bold**", "intro": "Hi"})
    assert html is not None
    assert "<p><strong>Bold</strong></p>" in html
    assert "<p>Hi</p>" in html
    assert "<pre>&lt;button&gt;{{label}}&lt;/button&gt;\n</pre>" in html
    assert html.endswith("HI")
    assert errors == []


def test_render_source_syntax_error(
    toolkit: Path, errors: list[AssemblyError]
) -> None:
    assembly = _run(toolkit, errors)
    assert assembly.render_source("{% if %}") is None
    assert errors[0].name == "TemplateCompileError"


def test_custom_materials_key(toolkit: Path, errors: list[AssemblyError]) -> None:
    assembly = _run(toolkit, errors, keys={"materials": "patterns"})
    assert assembly.directive_name == "pattern"
    html = assembly.render_source("{{ pattern('button', label='Go') }}")
    assert html is not None
    assert html == "<button>Go</button>"
    assert assembly.render_source("{{ patterns | join(',') }}") == (
        "components,structures"
    )


def test_rerun_builds_fresh_state(
    toolkit: Path, errors: list[AssemblyError]
) -> None:
    first = _run(toolkit, errors)
    (toolkit / "src/materials/components/03-badge.html").write_text(
        "<span>{{ text }}</span>\n", encoding="utf-8"
    )
    second = _run(toolkit, errors)
    assert "badge" not in first.catalog["components"].items
    assert list(second.catalog["components"].items) == ["button", "badge"]
    assert first.registry is not second.registry


def test_invalid_options_use_raw_callback(errors: list[AssemblyError]) -> None:
    assert assemble({"unknown": True, "onError": errors.append}) is None
    assert isinstance(errors[0], ConfigurationError)
    assert errors[0].reason == "unknown-option"


def test_invalid_options_exit_without_handler() -> None:
    with pytest.raises(SystemExit):
        assemble({"materials": 5})


def _explode() -> str:
    msg = "helper failed"
    raise ValueError(msg)


def test_failing_helper_goes_to_callback(
    toolkit: Path, errors: list[AssemblyError]
) -> None:
    """Exceptions raised by user helpers are reported, never propagated."""
    write_tree(toolkit, {"src/materials/components/03-boom.html": "{{ boom() }}\n"})
    assembly = _run(toolkit, errors, helpers={"boom": _explode})
    assert assembly.render_material("boom") is None
    assert assembly.render_source("<p>{{ boom() }}</p>") is None
    assert [error.name for error in errors] == ["TemplateRenderError", "Error"]
    assert errors[0].path == toolkit / "src/materials/components/03-boom.html"
    assert isinstance(errors[1].__cause__, ValueError)


def test_runtime_type_error_goes_to_callback(
    toolkit: Path, errors: list[AssemblyError]
) -> None:
    write_tree(
        toolkit, {"src/materials/components/04-count.html": "<b>{{ label + 1 }}</b>\n"}
    )
    assembly = _run(toolkit, errors)
    assert assembly.render_material("count", label="x") is None
    assert [error.reason for error in errors] == ["TypeError"]


def test_undecodable_files_do_not_stop_setup(
    toolkit: Path, errors: list[AssemblyError]
) -> None:
    (toolkit / "src/materials/components/02-latin.html").write_bytes(b"caf\xe9\n")
    (toolkit / "src/data/legacy.yml").write_bytes(b"title: caf\xe9\n")
    assembly = _run(toolkit, errors)
    assert list(assembly.catalog["components"].items) == ["button"]
    assert "legacy" not in assembly.data
    assert [error.reason for error in errors] == ["encoding", "encoding"]


def test_include_cycle_goes_to_callback(
    toolkit: Path, errors: list[AssemblyError]
) -> None:
    write_tree(
        toolkit,
        {"src/materials/components/06-echo.html": "<i>{% include 'echo' %}</i>\n"},
    )
    assembly = _run(toolkit, errors)
    assert assembly.render_material("echo") is None
    assert [type(error) for error in errors] == [CyclicIncludeError]


def test_layout_include_survives_material_with_same_id(
    toolkit: Path, errors: list[AssemblyError]
) -> None:
    write_tree(toolkit, {"src/materials/components/07-f-intro.html": "<p>x</p>\n"})
    assembly = _run(toolkit, errors)
    assert "f-intro" not in assembly.catalog["components"].items
    assert assembly.registry.get("f-intro").source == "<p>{{ intro }}</p>\n"
    assert [error.reason for error in errors] == ["duplicate-id"]
