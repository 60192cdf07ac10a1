"""Deployment-provided collaborators held on app.state (set in lifespan)."""

from __future__ import annotations

from fastapi import Request

from docvault.application.interfaces.services import (
    IActivitySink,
    IBroadcastChannel,
    IObjectStorage,
    IRasterizer,
)


def get_object_storage(request: Request) -> IObjectStorage | None:
    return getattr(request.app.state, "object_storage", None)


def get_rasterizer(request: Request) -> IRasterizer | None:
    return getattr(request.app.state, "rasterizer", None)


def get_activity_sink(request: Request) -> IActivitySink | None:
    return getattr(request.app.state, "activity_sink", None)


def get_broadcast(request: Request) -> IBroadcastChannel | None:
    return getattr(request.app.state, "broadcast", None)
