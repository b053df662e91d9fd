"""Domain equality testers for segment references.

A tester returns True or False when it recognizes the pair, and None
when it has no opinion and default equality should decide.
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from .references import ReferenceKind

_FIELDS_BY_KIND: dict[ReferenceKind, tuple[str, ...]] = {
    ReferenceKind.SEGMENT: (
        'position', 'start_time', 'end_time', 'start_byte', 'end_byte',
    ),
    ReferenceKind.INIT_SEGMENT: ('start_byte', 'end_byte'),
}


def reference_kind(value: Any) -> ReferenceKind | None:
    kind = getattr(type(value), 'kind', None)
    if isinstance(kind, ReferenceKind):
        return kind
    return None


def _same_uris(a: Any, b: Any) -> bool:
    for uris in (a, b):
        if isinstance(uris, (str, bytes)) or not isinstance(uris, Sequence):
            return False
    if len(a) != len(b):
        return False
    return all(x == y for x, y in zip(a, b))


def compare_references(first: Any, second: Any) -> bool | None:
    """Compare two segment references by their domain fields.

    Returns None unless both values are references of the same kind.
    Location lists are checked first, order-sensitively.
    """
    kind = reference_kind(first)
    if kind is None or kind is not reference_kind(second):
        return None

    if not _same_uris(first.get_uris(), second.get_uris()):
        return False

    return all(
        getattr(first, name) == getattr(second, name)
        for name in _FIELDS_BY_KIND[kind]
    )
