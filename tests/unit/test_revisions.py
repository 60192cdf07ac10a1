"""Unit tests for change detection (domain.revisions)."""

from docvault.domain.revisions import DocumentSnapshot, detect_changes


def _snapshot(**overrides) -> DocumentSnapshot:
    values = {
        "title": "Report",
        "description": None,
        "tags": frozenset({"a", "b"}),
        "is_public": False,
        "version": 1,
    }
    values.update(overrides)
    return DocumentSnapshot(**values)


class TestDetectChanges:
    def test_identical_is_not_material(self) -> None:
        assert detect_changes(_snapshot(), _snapshot()).is_material is False

    def test_version_is_not_a_tracked_field(self) -> None:
        assert detect_changes(_snapshot(version=1), _snapshot(version=7)).is_material is False

    def test_tags_compare_as_sets(self) -> None:
        changes = detect_changes(
            _snapshot(tags=frozenset({"a", "b"})), _snapshot(tags=frozenset({"b", "a"}))
        )
        assert changes.is_material is False

    def test_file_replacement_alone_is_material(self) -> None:
        changes = detect_changes(_snapshot(), _snapshot(), file_replaced=True)
        assert changes.is_material is True
        assert changes.to_summary() == {"fields": {}, "file_replaced": True}

    def test_summary_lists_changed_fields_only(self) -> None:
        changes = detect_changes(
            _snapshot(), _snapshot(title="Final report", tags=frozenset({"c", "a"}))
        )
        assert changes.to_summary() == {
            "fields": {
                "title": {"old": "Report", "new": "Final report"},
                "tags": {"old": ["a", "b"], "new": ["a", "c"]},
            },
            "file_replaced": False,
        }
