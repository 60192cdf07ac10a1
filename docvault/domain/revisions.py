"""Field-level change detection for document revisions.

Tracked fields are compared explicitly and shallowly. Tags compare as sets.
Whether the underlying file was replaced is supplied by the caller because
it cannot be inferred from two metadata snapshots.
"""

from dataclasses import dataclass, field
from typing import Any

TRACKED_FIELDS: tuple[str, ...] = ("title", "description", "tags", "is_public")


@dataclass(frozen=True)
class DocumentSnapshot:
    """Mutable metadata of a document at one point in time.

    version is the version the snapshot was read at; None when the caller
    does not want an optimistic version check.
    """

    title: str
    description: str | None
    tags: frozenset[str]
    is_public: bool
    version: int | None = None


@dataclass(frozen=True)
class FieldChange:
    old: Any
    new: Any


@dataclass(frozen=True)
class ChangeSet:
    """Per-field diff plus the out-of-band file replacement flag."""

    fields: dict[str, FieldChange] = field(default_factory=dict)
    file_replaced: bool = False

    @property
    def is_material(self) -> bool:
        return bool(self.fields) or self.file_replaced

    def to_summary(self) -> dict[str, Any]:
        """JSON-serializable change summary stored on the revision row."""
        return {
            "fields": {
                name: {"old": _jsonable(change.old), "new": _jsonable(change.new)}
                for name, change in self.fields.items()
            },
            "file_replaced": self.file_replaced,
        }


def _jsonable(value: Any) -> Any:
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    return value


def detect_changes(
    before: DocumentSnapshot, after: DocumentSnapshot, file_replaced: bool = False
) -> ChangeSet:
    """Diff two snapshots over TRACKED_FIELDS."""
    changes: dict[str, FieldChange] = {}
    for name in TRACKED_FIELDS:
        old = getattr(before, name)
        new = getattr(after, name)
        if old != new:
            changes[name] = FieldChange(old=old, new=new)
    return ChangeSet(fields=changes, file_replaced=file_replaced)
