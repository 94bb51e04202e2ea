"""Structural diff engine over the universe entity tree.

Exports:
    Entity       -- Protocol every tree node implements (is_empty/equals/diff).
    Diff         -- (positive, negative) result; both None when nothing differs.
    equals       -- Structural equality accepting absent values.
    is_empty     -- Emptiness predicate accepting absent values.
    collapse     -- Empty entity -> None.
    diff_to_dict -- JSON-ready rendering with absent halves omitted.

The cookbook-level summary lives in ``larder.diff.summary``.
"""

from larder.diff.base import Diff, Entity, collapse, equals, is_empty
from larder.diff.render import diff_to_dict

__all__ = [
    "Diff",
    "Entity",
    "collapse",
    "diff_to_dict",
    "equals",
    "is_empty",
]
