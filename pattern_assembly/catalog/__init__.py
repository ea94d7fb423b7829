"""Hierarchical material catalog: collections, items, and variants."""

from .builder import CatalogBuilder
from .models import Catalog, CollectionNode, ItemNode, VariantNode

__all__ = [
    "Catalog",
    "CatalogBuilder",
    "CollectionNode",
    "ItemNode",
    "VariantNode",
]
