"""Group material files into collections, items, and variants.

Each configured material root directory becomes a :class:`CollectionNode`.
Its immediate children are item boundaries: a directory is an item whose
first non-variant page template is the primary file, and a page template
sitting directly in the root is an item on its own. Files whose base name
carries the variant separator become :class:`VariantNode` entries of the
item they belong to. Every primary and variant body is registered as a
partial as the catalog is built, so the renderer can resolve any catalog
entry once :meth:`CatalogBuilder.build` returns.

A broken entry (bad front matter, invalid template syntax, missing primary
template, orphaned or duplicate ids) is reported and left out; the rest of
the catalog is still built.

Example
-------
>>> from pathlib import Path
>>> from jinja2 import Environment
>>> from pattern_assembly.catalog import CatalogBuilder
>>> from pattern_assembly.registry import PartialRegistry
>>> builder = CatalogBuilder(PartialRegistry(), Environment(), base_dir=Path("."))
>>> catalog = builder.build(["src/materials/*"])  # doctest: +SKIP
>>> list(catalog["components"].items)  # doctest: +SKIP
['button', 'card']
"""

from __future__ import annotations

import logging
import typing as typ

from pattern_assembly._constants import PAGE_EXTENSION, VARIANT_SEPARATOR
from pattern_assembly.errors import AssemblyError, ContentParseError
from pattern_assembly.files import expand_patterns
from pattern_assembly.front_matter import read_front_matter
from pattern_assembly.naming import CanonicalName, resolve_name, sort_key

from .models import Catalog, CollectionNode, ItemNode, VariantNode

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from jinja2 import Environment

    from pattern_assembly.front_matter import FrontMatterDocument
    from pattern_assembly.registry import PartialRegistry

logger = logging.getLogger(__name__)


def _visible(path: Path) -> bool:
    return not path.name.startswith(".")


class CatalogBuilder:
    """Build the material catalog and register its partials."""

    def __init__(
        self,
        registry: PartialRegistry,
        env: Environment,
        *,
        base_dir: Path,
        extension: str = PAGE_EXTENSION,
        separator: str = VARIANT_SEPARATOR,
        on_error: cabc.Callable[[AssemblyError], None] | None = None,
    ) -> None:
        """Initialize the builder.

        Parameters
        ----------
        registry : PartialRegistry
            Registry receiving every item and variant body.
        env : Environment
            Jinja environment used to syntax-check bodies before they are
            accepted into the catalog.
        base_dir : Path
            Directory relative root patterns resolve against.
        extension : str, optional
            Extension identifying page templates.
        separator : str, optional
            Token marking variant files.
        on_error : callable, optional
            Receives each skipped entry's error. When omitted, the first
            broken entry raises.
        """
        self.registry = registry
        self.env = env
        self.base_dir = base_dir
        self.extension = extension.lower()
        self.separator = separator
        self.on_error = on_error
        self._claimed: set[str] = set()
        self._owned: set[str] = set()
        self._skipped = 0

    def build(self, material_roots: str | cabc.Iterable[str]) -> Catalog:
        """Return ``collection id -> CollectionNode`` for every material root.

        Roots without any visible children are skipped. Items are ordered by
        numeric prefix, then by enumeration order. Partials registered by an
        earlier build are dropped first.
        """
        for partial_id in self._owned:
            self.registry.unregister(partial_id)
        self._owned = set()
        self._claimed = set()
        self._skipped = 0
        catalog: Catalog = {}
        roots = expand_patterns(material_roots, base_dir=self.base_dir, dirs_only=True)
        for root in roots:
            children = sorted(filter(_visible, root.iterdir()))
            if not children:
                logger.info("Skipping empty material root %s", root)
                continue
            name = resolve_name(root, separator="")
            collection = catalog.setdefault(
                name.id, CollectionNode(name=name.id, display_title=name.display_title)
            )
            self._populate(collection, children)

        produced = sum(len(collection.items) for collection in catalog.values())
        if self._skipped and not produced:
            msg = "No materials could be catalogued."
            self._report(ContentParseError(msg, reason="empty-catalog"))
        return catalog

    def _populate(self, collection: CollectionNode, children: list[Path]) -> None:
        ranked: list[tuple[tuple[bool, int, int], ItemNode]] = []
        loose_variants: list[tuple[Path, CanonicalName]] = []
        offset = len(collection.items)
        for position, child in enumerate(children, start=offset):
            if child.is_dir():
                item = self._build_directory_item(child)
            elif self._is_page(child):
                name = resolve_name(child, separator=self.separator)
                if name.is_variant:
                    loose_variants.append((child, name))
                    continue
                item = self._register_item(name, child)
            else:
                continue
            if item is not None:
                ranked.append((sort_key(item.order_rank, position), item))

        for _key, item in sorted(ranked, key=lambda pair: pair[0]):
            collection.items[item.id] = item

        for path, name in loose_variants:
            parent = collection.items.get(name.parent_id or "")
            if parent is None:
                msg = f"Variant '{name.id}' has no item named '{name.parent_id}'."
                self._report(ContentParseError(msg, reason="orphan-variant", path=path))
                continue
            self._attach_variant(parent, path, name)

    def _build_directory_item(self, directory: Path) -> ItemNode | None:
        files = sorted(
            path
            for path in directory.rglob("*")
            if path.is_file() and _visible(path) and self._is_page(path)
        )
        primary: Path | None = None
        variants: list[tuple[Path, CanonicalName]] = []
        for path in files:
            name = resolve_name(path, separator=self.separator)
            if name.is_variant:
                variants.append((path, name))
            elif primary is None:
                primary = path
            else:
                logger.debug("Ignoring extra template %s in %s", path, directory)

        if primary is None:
            msg = f"Material '{directory.name}' has no {self.extension} template."
            self._report(
                ContentParseError(msg, reason="missing-template", path=directory)
            )
            return None

        # the directory names the item; its primary file only supplies the body
        item = self._register_item(resolve_name(directory, separator=""), primary)
        if item is not None:
            for path, name in variants:
                self._attach_variant(item, path, name)
        return item

    def _register_item(self, name: CanonicalName, path: Path) -> ItemNode | None:
        if name.id in self._claimed:
            msg = f"Material id '{name.id}' is already in use."
            self._report(ContentParseError(msg, reason="duplicate-id", path=path))
            return None
        document = self._register_partial(name.id, path)
        if document is None:
            return None
        return ItemNode(
            id=name.id,
            display_title=name.display_title,
            order_rank=name.order_rank,
            source_path=path,
            front_matter=document.data,
            is_view=self._is_page(path),
        )

    def _attach_variant(self, item: ItemNode, path: Path, name: CanonicalName) -> None:
        if name.id in self._claimed:
            msg = f"Variant id '{name.id}' of '{item.id}' is already in use."
            self._report(ContentParseError(msg, reason="duplicate-id", path=path))
            return
        document = self._register_partial(name.id, path)
        if document is None:
            return
        item.variants[name.id] = VariantNode(
            id=name.id,
            display_title=name.display_title,
            source_path=path,
            front_matter=document.data,
        )

    def _register_partial(
        self, partial_id: str, path: Path
    ) -> FrontMatterDocument | None:
        """Read ``path`` and register its body, or report and return ``None``."""
        if partial_id in self.registry:
            existing = self.registry.get(partial_id).path
            msg = f"Partial id '{partial_id}' is already registered from {existing}."
            self._report(ContentParseError(msg, reason="duplicate-id", path=path))
            return None
        try:
            document = read_front_matter(path)
        except AssemblyError as exc:
            self._report(exc)
            return None
        self.registry.register(partial_id, document.body, path)
        try:
            self.registry.check_syntax(partial_id, self.env)
        except AssemblyError as exc:
            self.registry.unregister(partial_id)
            self._report(exc)
            return None
        self._claimed.add(partial_id)
        self._owned.add(partial_id)
        return document

    def _is_page(self, path: Path) -> bool:
        return path.suffix.lower() == self.extension

    def _report(self, error: AssemblyError) -> None:
        self._skipped += 1
        logger.warning("Skipping catalog entry: %s", error.message)
        if self.on_error is None:
            raise error
        self.on_error(error)


__all__ = ["CatalogBuilder"]
