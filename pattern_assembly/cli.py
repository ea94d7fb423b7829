"""Cyclopts CLI entrypoint for building and previewing material catalogs.

The ``assemble`` console script defined here loads an options file, runs the
assembly setup, and either lists the resulting catalog or renders a single
material to stdout. It is meant for checking a toolkit's materials locally
or in CI before the page-writing stage runs.

Examples
--------
List every catalogued material:

>>> from pattern_assembly.cli import main
>>> main()  # doctest: +SKIP

Render one material with explicit arguments:

>>> from pattern_assembly.cli import app
>>> app(["render", "button", "--arg", "label=Go"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .assembly import Assembly, assemble
from .config import load_config_file

DEFAULT_CONFIG = Path("assembly.yaml")

app = App(name="assemble", config=cyclopts.config.Env("INPUT_", command=False))  # type: ignore[unknown-argument]


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load(config: Path) -> Assembly:
    options = load_config_file(config) if config.exists() else {"cwd": Path.cwd()}
    assembly = assemble(options)
    if assembly is None:  # pragma: no cover - handler reported and suppressed
        msg = "Assembly setup failed."
        raise SystemExit(msg)
    return assembly


def _parse_args(pairs: list[str] | None) -> dict[str, str]:
    """Turn ``KEY=VALUE`` strings into a mapping."""
    parsed: dict[str, str] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            msg = f"Expected KEY=VALUE, got '{pair}'."
            raise ValueError(msg)
        parsed[key.strip()] = value
    return parsed


@app.command(help="Build the material catalog and list its entries.")
def build(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to assembly options", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
    verbose: typ.Annotated[bool, Parameter(help="Log each setup phase")] = False,
) -> None:
    """Run setup and print one line per catalogued material.

    Parameters
    ----------
    config : Path, optional
        YAML options file; when it does not exist the defaults are used with
        the current directory as ``cwd``.
    verbose : bool, optional
        Enable INFO logging for each setup phase.
    """
    _configure_logging(verbose)
    assembly = _load(config)
    for collection_id, collection in assembly.catalog.items():
        for item_id, item in collection.items.items():
            line = f"{collection_id}/{item_id}"
            if item.variants:
                line = f"{line} [{', '.join(item.variants)}]"
            print(line)


@app.command(help="Render one material to stdout.")
def render(
    name: str,
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to assembly options", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
    arg: typ.Annotated[
        list[str] | None, Parameter(help="Template argument as KEY=VALUE")
    ] = None,
    verbose: typ.Annotated[bool, Parameter(help="Log each setup phase")] = False,
) -> None:
    """Render material ``name`` with optional ``KEY=VALUE`` arguments.

    Raises
    ------
    ValueError
        If an ``--arg`` value is not in ``KEY=VALUE`` form.
    """
    _configure_logging(verbose)
    explicit_args = _parse_args(arg)
    assembly = _load(config)
    html = assembly.render_material(name, **explicit_args)
    if html is not None:
        print(html)


def main() -> None:
    """Invoke the Cyclopts application that powers the ``assemble`` command."""
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
