"""Change notice data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from uuid import uuid4


@dataclass(frozen=True)
class ChangeNotice:
    """Emitted by ``larder sync`` when the universe changed, consumed by notification channels."""

    endpoint: str
    detected_at: datetime
    added: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    changed: list[str] = field(default_factory=list)
    diff: dict[str, object] = field(default_factory=dict)
    notice_id: str = field(default_factory=lambda: str(uuid4()))
