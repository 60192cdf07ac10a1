"""Unit tests for domain exceptions (error codes and serialized shape)."""

from docvault.domain.enums import LinkDenialReason
from docvault.domain.exceptions import (
    AccessDeniedException,
    DocumentNotFoundException,
    DocumentVersionConflictException,
    DocVaultException,
    LinkUnavailableException,
    SearchStrategyTimeoutError,
    ValidationException,
)


class TestDocVaultException:
    def test_defaults_error_code_to_class_name(self) -> None:
        exc = DocVaultException("boom")
        assert exc.error_code == "DocVaultException"
        assert exc.to_dict() == {"error": "DocVaultException", "message": "boom", "details": {}}

    def test_validation_field(self) -> None:
        exc = ValidationException("bad title", field="title")
        assert exc.error_code == "VALIDATION_ERROR"
        assert exc.details == {"field": "title"}


class TestNotFoundParity:
    def test_access_denied_serializes_like_not_found(self) -> None:
        denied = AccessDeniedException("doc-1", "bob", "edit")
        assert isinstance(denied, DocumentNotFoundException)
        assert denied.to_dict() == DocumentNotFoundException("doc-1").to_dict()
        assert "bob" not in str(denied.to_dict())


class TestLinkUnavailable:
    def test_reason_in_code_and_details(self) -> None:
        exc = LinkUnavailableException(LinkDenialReason.EXPIRED)
        assert exc.error_code == "LINK_EXPIRED"
        assert exc.details == {"reason": "expired"}


class TestOtherErrors:
    def test_version_conflict_details(self) -> None:
        exc = DocumentVersionConflictException("doc-1", expected_version=1, current_version=3)
        assert exc.error_code == "DOCUMENT_VERSION_CONFLICT"
        assert exc.details == {"document_id": "doc-1", "expected_version": 1, "current_version": 3}

    def test_strategy_timeout_names_strategy(self) -> None:
        assert SearchStrategyTimeoutError("trigram").strategy == "trigram"
