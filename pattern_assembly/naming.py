r"""Turn file paths into canonical ids, display titles, and sort ranks.

Every lookup key in an assembly run comes from here: layouts, includes, data
files, catalog items and variants are all registered under the id this
module derives from their base file name. The rules are purely textual, so
the resolver never touches the filesystem and never fails.

Example
-------
>>> from pattern_assembly.naming import resolve_name
>>> name = resolve_name("src/materials/components/02-Button.html")
>>> (name.id, name.display_title, name.order_rank)
('button', 'Button', 2)
>>> resolve_name("button--large.html").id
'large'
"""

from __future__ import annotations

import dataclasses as dc
import os
import posixpath
import re

from ._constants import VARIANT_SEPARATOR

ORDER_PREFIX_PATTERN = re.compile(r"^[0-9.\-]+")
RANK_PATTERN = re.compile(r"^(\d+)")
WHITESPACE_PATTERN = re.compile(r"\s")
TITLE_WORD_PATTERN = re.compile(r"\w\S*")


@dc.dataclass(frozen=True, slots=True)
class CanonicalName:
    """Normalized naming facts derived from a single path.

    Attributes
    ----------
    id : str
        Lookup key: extension removed, whitespace dashed, ordering prefix
        stripped, lower-cased. For variants this is the variant's own id.
    display_title : str
        Human-readable title derived from ``id``.
    order_rank : int or None
        Leading numeric prefix, or ``None`` when the name is unordered.
    is_variant : bool
        ``True`` when the base name carries the variant separator.
    parent_id : str or None
        Id of the item a variant belongs to; ``None`` for non-variants.
    """

    id: str
    display_title: str
    order_rank: int | None
    is_variant: bool = False
    parent_id: str | None = None


def _base_stem(path: str) -> str:
    """Return the base name of ``path`` without its final extension."""
    base = posixpath.basename(str(path).replace("\\", "/").rstrip("/"))
    stem, _ext = os.path.splitext(base)
    return WHITESPACE_PATTERN.sub("-", stem)


def _normalize(label: str, *, preserve_numbers: bool) -> str:
    lowered = label.lower()
    if preserve_numbers:
        return lowered
    # an all-prefix label such as "01" keeps its numeral
    return ORDER_PREFIX_PATTERN.sub("", lowered) or lowered


def _order_rank(label: str) -> int | None:
    match = RANK_PATTERN.match(label)
    return int(match.group(1)) if match else None


def to_title_case(text: str) -> str:
    """Convert a dashed or underscored id into a title-cased label.

    >>> to_title_case("foo-bar_baz")
    'Foo Bar Baz'
    """
    spaced = re.sub(r"[-_]", " ", text)
    return TITLE_WORD_PATTERN.sub(
        lambda match: match.group(0)[0].upper() + match.group(0)[1:].lower(),
        spaced,
    )


def resolve_name(
    path: str | os.PathLike[str],
    preserve_numbers: bool = False,
    *,
    separator: str = VARIANT_SEPARATOR,
) -> CanonicalName:
    """Derive the canonical naming facts for ``path``.

    Parameters
    ----------
    path : str or os.PathLike
        File or directory path; only its base name is considered.
    preserve_numbers : bool, optional
        Keep the ordering prefix in ``id``. Used for directory labels that
        need their numbering; lookups always use the default ``False``.
    separator : str, optional
        Token marking a variant file, ``"--"`` by default.

    Returns
    -------
    CanonicalName
        Naming facts for the path. The resolver is total: any input yields a
        name, and an empty base name yields an empty id.
    """
    stem = _base_stem(os.fspath(path))
    if separator:
        parent_part, sep, variant_part = stem.partition(separator)
    else:
        parent_part, sep, variant_part = stem, "", ""
    if sep and parent_part.strip("-.") and variant_part.strip("-."):
        variant_id = _normalize(variant_part, preserve_numbers=preserve_numbers)
        return CanonicalName(
            id=variant_id,
            display_title=to_title_case(variant_id),
            order_rank=_order_rank(variant_part),
            is_variant=True,
            parent_id=_normalize(parent_part, preserve_numbers=preserve_numbers),
        )
    name_id = _normalize(stem, preserve_numbers=preserve_numbers)
    return CanonicalName(
        id=name_id,
        display_title=to_title_case(name_id),
        order_rank=_order_rank(stem),
    )


def normalize_reference(name: str, *, separator: str = VARIANT_SEPARATOR) -> str:
    """Normalize a partial reference used by templates into a registry id.

    References follow the same rules as registration: whitespace becomes
    dashes, a variant reference keeps only its variant part, and the whole
    ordering prefix is stripped, so ``"02.01-button"``, ``"02button"`` and
    ``"Button"`` all resolve to ``"button"``.

    >>> normalize_reference("02-Button"), normalize_reference("button--large")
    ('button', 'large')
    """
    key = WHITESPACE_PATTERN.sub("-", str(name).strip())
    if separator:
        parent_part, sep, variant_part = key.partition(separator)
        if sep and parent_part.strip("-.") and variant_part.strip("-."):
            key = variant_part
    return _normalize(key, preserve_numbers=False)


def sort_key(rank: int | None, position: int) -> tuple[bool, int, int]:
    """Return a key ordering numbered entries first, then enumeration order."""
    return (rank is None, rank if rank is not None else 0, position)


__all__ = [
    "CanonicalName",
    "normalize_reference",
    "resolve_name",
    "sort_key",
    "to_title_case",
]
