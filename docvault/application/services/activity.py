"""Fire-and-forget emission to the activity sink."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from docvault.application.dtos.activity import ActivityRecord
from docvault.shared.utils import utc_now

if TYPE_CHECKING:
    from docvault.application.interfaces.services import IActivitySink
    from docvault.domain.enums import ActivityAction

logger = logging.getLogger(__name__)


async def emit_activity(
    sink: IActivitySink | None,
    action: ActivityAction,
    actor_id: str | None,
    document_id: str,
    **details: Any,
) -> None:
    """Record an activity; sink failures are logged and never raised."""
    if sink is None:
        return
    record = ActivityRecord(
        action=action,
        actor_id=actor_id,
        document_id=document_id,
        occurred_at=utc_now(),
        details=details,
    )
    try:
        await sink.record(record)
    except Exception:
        logger.warning("Activity sink failed for %s on %s", action.value, document_id, exc_info=True)
