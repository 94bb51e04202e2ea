"""Capability contract and generic helpers for the structural diff engine.

Every entity kind (Universe, Package, VersionEntry) implements three
operations directly:

    is_empty()   -- no populated data anywhere below this node.
    equals(o)    -- structural equality, independent of map order.
    diff(o)      -- Diff(positive, negative), or Diff(None, None) when equal.

The helpers here compose those operations over mapping-valued fields.  Two
value shapes occur in maps: nested entities (``diff_entity_maps``) and
opaque constraint strings (``diff_leaf_maps``).  Neither helper mutates its
inputs; results are fresh dicts built in sorted key order.
"""

from __future__ import annotations

import copy
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Generic, Protocol, Self, TypeVar


class Entity(Protocol):
    """Structural contract shared by every node of the universe tree."""

    def is_empty(self) -> bool: ...

    def equals(self, other: Self) -> bool: ...

    def diff(self, other: Self) -> Diff[Self]: ...

    def to_dict(self) -> dict[str, object]: ...


E = TypeVar("E", bound=Entity)


@dataclass(frozen=True)
class Diff(Generic[E]):
    """Result of comparing two entities of the same kind.

    ``positive`` holds what the second entity adds or changes, ``negative``
    what the first entity had that is gone or changed.  A half is None when
    it carries nothing, so ``is_empty(half) == (half is None)`` always holds.
    """

    positive: E | None = None
    negative: E | None = None

    @property
    def is_absent(self) -> bool:
        return self.positive is None and self.negative is None

    def reversed(self) -> Diff[E]:
        """Swap the halves: the diff of (b, a) given the diff of (a, b)."""
        return Diff(positive=self.negative, negative=self.positive)

    def __iter__(self) -> Iterator[E | None]:
        yield self.positive
        yield self.negative


def equals(a: E | None, b: E | None) -> bool:
    """Structural equality that also accepts absent values."""
    if a is None or b is None:
        return a is None and b is None
    return a.equals(b)


def is_empty(entity: Entity | None) -> bool:
    return entity is None or entity.is_empty()


def collapse(entity: E) -> E | None:
    """Return None for an entity with no populated data, else the entity."""
    return None if entity.is_empty() else entity


def changed_scalar(a: str, b: str) -> tuple[str, str]:
    """Return (positive, negative) values for a scalar field."""
    if a == b:
        return "", ""
    return b, a


# ---------------------------------------------------------------------------
# Entity-valued maps
# ---------------------------------------------------------------------------


def entity_maps_equal(a: Mapping[str, E], b: Mapping[str, E]) -> bool:
    if a.keys() != b.keys():
        return False
    return all(a[key].equals(b[key]) for key in a)


def entity_map_is_empty(values: Mapping[str, Entity]) -> bool:
    return all(value.is_empty() for value in values.values())


def diff_entity_maps(a: Mapping[str, E], b: Mapping[str, E]) -> tuple[dict[str, E], dict[str, E]]:
    """Classify every key of ``a`` and ``b`` as added, removed, changed or unchanged.

    Returns the (positive, negative) maps.  Added and removed entries are
    deep copies of the whole subtree; changed entries are recursive diffs,
    with an absent sub-half left out of its map.
    """
    positive: dict[str, E] = {}
    negative: dict[str, E] = {}
    for key in sorted(a.keys() | b.keys()):
        if key not in b:
            negative[key] = copy.deepcopy(a[key])
        elif key not in a:
            positive[key] = copy.deepcopy(b[key])
        elif not a[key].equals(b[key]):
            sub = a[key].diff(b[key])
            if sub.positive is not None:
                positive[key] = sub.positive
            if sub.negative is not None:
                negative[key] = sub.negative
    return positive, negative


# ---------------------------------------------------------------------------
# Leaf (constraint string) maps
# ---------------------------------------------------------------------------


def leaf_map_is_empty(values: Mapping[str, str]) -> bool:
    return all(value == "" for value in values.values())


def diff_leaf_maps(a: Mapping[str, str], b: Mapping[str, str]) -> tuple[dict[str, str], dict[str, str]]:
    """Same classification as ``diff_entity_maps`` for opaque string values."""
    positive: dict[str, str] = {}
    negative: dict[str, str] = {}
    for key in sorted(a.keys() | b.keys()):
        if key not in b:
            negative[key] = a[key]
        elif key not in a:
            positive[key] = b[key]
        elif a[key] != b[key]:
            positive[key] = b[key]
            negative[key] = a[key]
    return positive, negative
