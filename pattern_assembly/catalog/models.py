"""Catalog nodes produced by the collection builder."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path


@dc.dataclass(slots=True)
class VariantNode:
    """An alternate rendering of an item.

    Attributes
    ----------
    id : str
        The variant's own canonical id; also its partial id.
    display_title : str
        Title shown in navigation.
    source_path : Path
        Template file the variant was read from.
    front_matter : dict[str, Any]
        Header data from the variant file, if any.
    """

    id: str
    display_title: str
    source_path: Path
    front_matter: dict[str, typ.Any] = dc.field(default_factory=dict)

    def as_dict(self) -> dict[str, typ.Any]:
        """Return a plain mapping for template contexts."""
        return {
            "id": self.id,
            "name": self.display_title,
            "path": str(self.source_path),
            "data": dict(self.front_matter),
        }


@dc.dataclass(slots=True)
class ItemNode:
    """A single material within a collection.

    Attributes
    ----------
    id : str
        Canonical id, unique within the collection; also its partial id.
    display_title : str
        Title shown in navigation.
    order_rank : int or None
        Numeric ordering prefix, ``None`` when unordered.
    source_path : Path
        The item's primary page template.
    front_matter : dict[str, Any]
        Header data parsed from the primary template.
    variants : dict[str, VariantNode]
        Variants keyed by id, in enumeration order.
    is_view : bool
        Whether the primary file is a renderable page template.
    """

    id: str
    display_title: str
    order_rank: int | None
    source_path: Path
    front_matter: dict[str, typ.Any] = dc.field(default_factory=dict)
    variants: dict[str, VariantNode] = dc.field(default_factory=dict)
    is_view: bool = True

    def as_dict(self) -> dict[str, typ.Any]:
        """Return a plain mapping for template contexts."""
        return {
            "id": self.id,
            "name": self.display_title,
            "order": self.order_rank,
            "path": str(self.source_path),
            "data": dict(self.front_matter),
            "variants": {key: node.as_dict() for key, node in self.variants.items()},
            "is_view": self.is_view,
        }


@dc.dataclass(slots=True)
class CollectionNode:
    """Top-level grouping of items, one per material root directory."""

    name: str
    display_title: str
    items: dict[str, ItemNode] = dc.field(default_factory=dict)

    def as_dict(self) -> dict[str, typ.Any]:
        """Return a plain mapping for template contexts."""
        return {
            "id": self.name,
            "name": self.display_title,
            "items": {key: item.as_dict() for key, item in self.items.items()},
        }


Catalog = dict[str, CollectionNode]


__all__ = ["Catalog", "CollectionNode", "ItemNode", "VariantNode"]
