"""Tests for the ``material`` directive and the partial registry.

These tests drive ``MaterialRenderer`` against a hand-filled
``PartialRegistry`` so each rendering rule can be checked in isolation:
name normalization, compile-once caching, context precedence, trimming,
pretty-printing, and the recursion guard.

Usage
-----
Run ``pytest tests/test_renderer.py -v``. No filesystem fixtures are needed.
"""

from __future__ import annotations

import pytest
from jinja2 import Environment, select_autoescape

from pattern_assembly.config import BeautifierConfig
from pattern_assembly.errors import (
    CyclicIncludeError,
    PartialNotFoundError,
    TemplateCompileError,
    TemplateRenderError,
)
from pattern_assembly.registry import PartialRegistry
from pattern_assembly.renderer import MaterialRenderer, beautify_html, install_helpers


@pytest.fixture
def registry() -> PartialRegistry:
    partials = PartialRegistry()
    partials.register("button", "<button>{{label}}</button>\n")
    partials.register("large", '<button class="lg">{{label}}</button>\n')
    partials.register("padded", "\n\n   <p>{{ text }}</p>")
    partials.register("card", "<div>{{ material('button', label=cta) }}</div>")
    partials.register("greeting", "<p>{{ greeting }}, {{ name }}</p>")
    return partials


@pytest.fixture
def renderer(registry: PartialRegistry) -> MaterialRenderer:
    env = Environment(
        loader=registry.loader(),
        autoescape=select_autoescape(["html", "xml"], default=True),
    )
    material = MaterialRenderer(
        registry,
        env,
        beautifier=BeautifierConfig(),
        ambient=lambda: {"greeting": "Hello", "name": "ambient"},
    )
    install_helpers(env, material, directive_name="material")
    return material


def test_renders_and_pretty_prints(renderer: MaterialRenderer) -> None:
    html = renderer.render("button", {"label": "Go"})
    assert html == "<button>Go</button>"


def test_variant_renders_by_its_own_id(renderer: MaterialRenderer) -> None:
    html = renderer.render("large", {"label": "Go"})
    assert html == '<button class="lg">Go</button>'


@pytest.mark.parametrize(
    "name", ["button", "02-button", "02.01-button", "02button", "Button"]
)
def test_prefixed_references_resolve(renderer: MaterialRenderer, name: str) -> None:
    """References with ordering prefixes resolve to the stripped id."""
    assert renderer.render(name, {"label": "Go"}) == "<button>Go</button>"


def test_leading_whitespace_is_trimmed(renderer: MaterialRenderer) -> None:
    assert renderer.render("padded", {"text": "x"}).startswith("<p>")


def test_context_precedence(renderer: MaterialRenderer) -> None:
    """Explicit arguments beat page context, which beats ambient data."""
    assert renderer.render("greeting") == "<p>Hello, ambient</p>"
    assert renderer.render("greeting", {"name": "page"}) == (
        "<p>Hello, page</p>"
    )
    html = renderer.render("greeting", {"name": "page"}, {"name": "arg"})
    assert html == "<p>Hello, arg</p>"


def test_repeated_renders_do_not_leak(
    renderer: MaterialRenderer, registry: PartialRegistry
) -> None:
    """Each call builds its own context and the stored source never changes."""
    first = renderer.render("button", {}, {"label": "One"})
    compiled = registry.get("button").compiled
    second = renderer.render("button", {}, {"label": "Two"})
    third = renderer.render("button")
    assert first == "<button>One</button>"
    assert second == "<button>Two</button>"
    assert third == "<button></button>"
    assert registry.get("button").compiled is compiled
    assert registry.get("button").source == "<button>{{label}}</button>\n"


def test_compiles_lazily(renderer: MaterialRenderer, registry: PartialRegistry) -> None:
    assert registry.get("large").compiled is None
    renderer.render("large", {"label": "x"})
    assert registry.get("large").compiled is not None


def test_nested_material_uses_caller_variables(renderer: MaterialRenderer) -> None:
    html = renderer.render("card", {"cta": "Buy"})
    assert html == "<div><button>Buy</button></div>"


def test_block_children_are_indented(
    renderer: MaterialRenderer, registry: PartialRegistry
) -> None:
    """Block elements break onto indented lines; inline content stays put."""
    registry.register(
        "panel",
        "<section>{{ material('card', cta='Buy') }}<p>Hi <b>there</b>!</p></section>",
    )
    assert renderer.render("panel").splitlines() == [
        "<section>",
        "\t<div><button>Buy</button></div>",
        "\t<p>Hi <b>there</b>!</p>",
        "</section>",
    ]


def test_output_is_autoescape_safe(renderer: MaterialRenderer) -> None:
    """Directive output is not escaped again when embedded in a template."""
    template = renderer.env.from_string("{{ material('button', label='<b>') }}")
    assert template.render() == "<button>&lt;b&gt;</button>"


def test_missing_partial(renderer: MaterialRenderer) -> None:
    with pytest.raises(PartialNotFoundError) as excinfo:
        renderer.render("does-not-exist")
    assert excinfo.value.reason == "does-not-exist"


def test_self_inclusion_is_cyclic(
    renderer: MaterialRenderer, registry: PartialRegistry
) -> None:
    registry.register("loop", "<i>{{ material('01-loop') }}</i>")
    with pytest.raises(CyclicIncludeError) as excinfo:
        renderer.render("loop")
    assert "loop -> loop" in excinfo.value.message
    assert renderer.stack == ()


def test_indirect_cycle(renderer: MaterialRenderer, registry: PartialRegistry) -> None:
    registry.register("ping", "{{ material('pong') }}")
    registry.register("pong", "{{ material('ping') }}")
    with pytest.raises(CyclicIncludeError):
        renderer.render("ping")


def test_depth_guard(registry: PartialRegistry) -> None:
    registry.register("a", "{{ material('b') }}")
    registry.register("b", "{{ material('c') }}")
    registry.register("c", "<i>c</i>")
    env = Environment(autoescape=True)
    shallow = MaterialRenderer(
        registry, env, beautifier=BeautifierConfig(), max_depth=2
    )
    install_helpers(env, shallow, directive_name="material")
    with pytest.raises(CyclicIncludeError) as excinfo:
        shallow.render("a")
    assert excinfo.value.reason == "max-depth"


def test_compile_error(renderer: MaterialRenderer, registry: PartialRegistry) -> None:
    registry.register("broken", "{% if %}")
    with pytest.raises(TemplateCompileError):
        renderer.render("broken")


def test_render_error(renderer: MaterialRenderer, registry: PartialRegistry) -> None:
    registry.register("strict", "{{ missing.attribute.deeper }}")
    with pytest.raises(TemplateRenderError):
        renderer.render("strict")


def test_space_indentation(registry: PartialRegistry) -> None:
    spaced = MaterialRenderer(
        registry,
        Environment(),
        beautifier=BeautifierConfig(
            indent_size=2, indent_char=" ", indent_with_tabs=False
        ),
    )
    registry.register("list", "<ul><li>{{ label }}</li></ul>")
    html = spaced.render("list", {"label": "Go"})
    assert html == "<ul>\n  <li>Go</li>\n</ul>"


def test_beautify_empty_markup() -> None:
    assert beautify_html("   \n") == ""


def test_raw_helper_shows_source(renderer: MaterialRenderer) -> None:
    template = renderer.env.from_string("<pre>{{ raw('02-button') }}</pre>")
    assert template.render() == "<pre>&lt;button&gt;{{label}}&lt;/button&gt;\n</pre>"


def test_markdown_filter(renderer: MaterialRenderer) -> None:
    template = renderer.env.from_string("{{ notes | markdown }}")
    assert template.render(notes="Use **sparingly**.") == (
        "<p>Use <strong>sparingly</strong>.</p>"
    )


def test_include_resolves_registered_partials(renderer: MaterialRenderer) -> None:
    template = renderer.env.from_string("{% include 'button' %}")
    assert template.render(label="Go").strip() == "<button>Go</button>"


def test_variant_reference_resolves_to_variant(renderer: MaterialRenderer) -> None:
    html = renderer.render("button--large", {"label": "Go"})
    assert html == '<button class="lg">Go</button>'


def test_include_self_reference_is_cyclic(
    renderer: MaterialRenderer, registry: PartialRegistry
) -> None:
    """A partial reaching itself through ``{% include %}`` fails cleanly."""
    registry.register("echo", "<i>{% include 'echo' %}</i>")
    with pytest.raises(CyclicIncludeError) as excinfo:
        renderer.render("echo")
    assert excinfo.value.reason == "include"
    assert renderer.stack == ()


def test_runtime_type_error_is_structured(
    renderer: MaterialRenderer, registry: PartialRegistry
) -> None:
    registry.register("count", "<b>{{ label + 1 }}</b>")
    with pytest.raises(TemplateRenderError) as excinfo:
        renderer.render("count", {"label": "x"})
    assert excinfo.value.reason == "TypeError"
    assert isinstance(excinfo.value.__cause__, TypeError)


def test_failing_helper_is_structured(
    renderer: MaterialRenderer, registry: PartialRegistry
) -> None:
    def explode() -> str:
        msg = "helper failed"
        raise ValueError(msg)

    renderer.env.globals["explode"] = explode
    registry.register("boom", "<b>{{ explode() }}</b>")
    with pytest.raises(TemplateRenderError, match="helper failed") as excinfo:
        renderer.render("boom")
    assert excinfo.value.reason == "ValueError"


@pytest.mark.parametrize(
    ("markup", "expected"),
    [
        ("<p>Hello <b>there</b>!</p>", "<p>Hello <b>there</b>!</p>"),
        ("<p>\n  Hello\n  <em>you</em>\n</p>", "<p>Hello <em>you</em></p>"),
        ('<a href="/" class="x y">Home</a>', '<a href="/" class="x y">Home</a>'),
        ("<hr><br>", "<hr>\n<br>"),
        (
            '<div><img src="a.png" alt="A"><pre>  x\n  y</pre></div>',
            '<div>\n\t<img src="a.png" alt="A">\n\t<pre>  x\n  y</pre>\n</div>',
        ),
    ],
)
def test_beautify_keeps_inline_content(markup: str, expected: str) -> None:
    """Only block boundaries gain line breaks, so displayed text is unchanged."""
    assert beautify_html(markup) == expected


def test_beautify_reindents_nested_output() -> None:
    inner = "<ul>\n\t<li>One</li>\n</ul>"
    assert beautify_html(f"<nav>{inner}</nav>") == (
        "<nav>\n\t<ul>\n\t\t<li>One</li>\n\t</ul>\n</nav>"
    )
