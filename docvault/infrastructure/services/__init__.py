"""Bundled implementations of outbound service ports."""

from docvault.infrastructure.services.activity_sink import LoggingActivitySink

__all__ = ["LoggingActivitySink"]
