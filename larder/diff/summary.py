"""Cookbook-level classification of a universe diff."""

from __future__ import annotations

from dataclasses import dataclass, field

from larder.diff.base import Diff
from larder.models.universe import Universe


@dataclass(frozen=True)
class UniverseChangeSummary:
    """Sorted cookbook names per change class."""

    added: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    changed: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.added or self.removed or self.changed)

    @property
    def total(self) -> int:
        return len(self.added) + len(self.removed) + len(self.changed)


def summarize(old: Universe, new: Universe, diff: Diff[Universe]) -> UniverseChangeSummary:
    """Split the packages touched by *diff* into added, removed and changed.

    A package name in the positive half that *old* lacks was added; one in
    the negative half that *new* lacks was removed; any other touched name
    exists on both sides and changed.
    """
    positive = diff.positive.packages if diff.positive is not None else {}
    negative = diff.negative.packages if diff.negative is not None else {}

    added = sorted(name for name in positive if name not in old.packages)
    removed = sorted(name for name in negative if name not in new.packages)
    changed = sorted(
        name for name in positive.keys() | negative.keys() if name in old.packages and name in new.packages
    )
    return UniverseChangeSummary(added=added, removed=removed, changed=changed)
