"""DTO for activity sink records."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from docvault.domain.enums import ActivityAction


@dataclass(frozen=True)
class ActivityRecord:
    action: ActivityAction
    actor_id: str | None
    document_id: str
    occurred_at: datetime
    details: dict[str, Any] = field(default_factory=dict)
