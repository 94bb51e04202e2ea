"""Plain-dict rendering of diff results for JSON consumers."""

from __future__ import annotations

from larder.diff.base import Diff, Entity


def diff_to_dict(diff: Diff[Entity]) -> dict[str, object]:
    """Render *diff* as ``{"positive": ..., "negative": ...}``.

    Absent halves are left out, so a key present in the output means that
    side actually changed.  An equal pair renders as ``{}``.
    """
    out: dict[str, object] = {}
    if diff.positive is not None:
        out["positive"] = diff.positive.to_dict()
    if diff.negative is not None:
        out["negative"] = diff.negative.to_dict()
    return out
