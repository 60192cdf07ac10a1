"""Activity sink that writes one structured log line per record.

Deployments with a real audit store replace app.state.activity_sink.
"""

import logging

from docvault.application.dtos.activity import ActivityRecord

logger = logging.getLogger("docvault.activity")


class LoggingActivitySink:
    """IActivitySink backed by the standard logger."""

    async def record(self, record: ActivityRecord) -> None:
        logger.info(
            "activity action=%s actor=%s document=%s details=%s",
            record.action.value,
            record.actor_id or "anonymous",
            record.document_id,
            record.details,
        )
