"""Fetch -> diff -> notify -> save pipeline behind ``larder sync``.

The previous universe comes from the snapshot store (an empty universe on
the first run), the current one from the registry.  Notification and the
snapshot write only happen when the run is not a dry run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

import structlog

from larder.client.supermarket import SupermarketClient
from larder.diff import Diff, diff_to_dict
from larder.diff.summary import UniverseChangeSummary, summarize
from larder.models.notice import ChangeNotice
from larder.models.universe import Universe
from larder.notifications.manager import NotificationDispatcher
from larder.snapshot import SnapshotStore

_log = structlog.get_logger(component="sync")


@dataclass
class SyncResult:
    """Outcome of one sync run."""

    summary: UniverseChangeSummary
    diff: Diff[Universe]
    notice: ChangeNotice | None = None
    deliveries: dict[str, bool] = field(default_factory=dict)
    saved: bool = False
    first_run: bool = False


async def run_sync(
    client: SupermarketClient,
    store: SnapshotStore,
    dispatcher: NotificationDispatcher,
    *,
    dry_run: bool = False,
) -> SyncResult:
    """Compare the stored snapshot with the live universe and act on the difference."""
    stored = store.load()
    previous = stored if stored is not None else Universe()
    current = await client.get_universe()

    diff = previous.diff(current)
    summary = summarize(previous, current, diff)
    result = SyncResult(summary=summary, diff=diff, first_run=stored is None)

    if not diff.is_absent:
        result.notice = ChangeNotice(
            endpoint=client.endpoint,
            detected_at=datetime.now(tz=UTC),
            added=summary.added,
            removed=summary.removed,
            changed=summary.changed,
            diff=diff_to_dict(diff),
        )
        if not dry_run:
            result.deliveries = await dispatcher.dispatch(result.notice)

    # Keep the old snapshot when no channel took the notice, so the next run reports it again.
    undelivered = bool(result.deliveries) and not any(result.deliveries.values())
    if undelivered:
        _log.warning("snapshot_held", path=str(store.path), channels=sorted(result.deliveries))
    elif not dry_run:
        store.save(current)
        result.saved = True

    _log.info(
        "sync_completed",
        added=len(summary.added),
        removed=len(summary.removed),
        changed=len(summary.changed),
        first_run=result.first_run,
        dry_run=dry_run,
    )
    return result
