"""Unit tests for the access lattice and grant reductions (domain.access)."""

from datetime import timedelta

import pytest

from docvault.domain.access import (
    AccessLevel,
    effective_grant_level,
    is_expired,
    link_denial_reason,
    satisfies,
)
from docvault.domain.enums import LinkDenialReason
from tests.factories import NOW, make_grant, make_link


class TestSatisfies:
    @pytest.mark.parametrize(
        ("have", "want", "expected"),
        [
            (AccessLevel.VIEW, AccessLevel.VIEW, True),
            (AccessLevel.VIEW, AccessLevel.DOWNLOAD, False),
            (AccessLevel.DOWNLOAD, AccessLevel.VIEW, True),
            (AccessLevel.DOWNLOAD, AccessLevel.EDIT, False),
            (AccessLevel.EDIT, AccessLevel.DOWNLOAD, True),
            (AccessLevel.OWNER, AccessLevel.EDIT, True),
            (AccessLevel.EDIT, AccessLevel.OWNER, False),
        ],
    )
    def test_order(self, have: AccessLevel, want: AccessLevel, expected: bool) -> None:
        assert satisfies(have, want) is expected

    def test_owner_not_grantable(self) -> None:
        assert AccessLevel.OWNER not in AccessLevel.grantable()

    def test_links_never_grant_edit(self) -> None:
        assert AccessLevel.linkable() == [AccessLevel.VIEW, AccessLevel.DOWNLOAD]


class TestExpiry:
    def test_no_expiry_never_expires(self) -> None:
        assert is_expired(None, NOW) is False

    def test_usable_strictly_before(self) -> None:
        assert is_expired(NOW + timedelta(seconds=1), NOW) is False

    def test_expired_at_boundary(self) -> None:
        assert is_expired(NOW, NOW) is True


class TestEffectiveGrantLevel:
    def test_none_without_grants(self) -> None:
        assert effective_grant_level([], NOW) is None

    def test_maximum_of_active_grants(self) -> None:
        grants = [
            make_grant(access_level=AccessLevel.VIEW),
            make_grant(id="share-2", access_level=AccessLevel.EDIT),
        ]
        assert effective_grant_level(grants, NOW) == AccessLevel.EDIT

    def test_revoked_and_expired_ignored(self) -> None:
        grants = [
            make_grant(access_level=AccessLevel.EDIT, is_revoked=True),
            make_grant(id="share-2", access_level=AccessLevel.DOWNLOAD, expires_at=NOW),
            make_grant(id="share-3", access_level=AccessLevel.VIEW),
        ]
        assert effective_grant_level(grants, NOW) == AccessLevel.VIEW


class TestLinkDenialReason:
    def test_usable(self) -> None:
        assert link_denial_reason(make_link(), NOW) is None

    def test_revoked_checked_first(self) -> None:
        link = make_link(is_revoked=True, expires_at=NOW, max_uses=1, use_count=1)
        assert link_denial_reason(link, NOW) == LinkDenialReason.REVOKED

    def test_expired_before_limit(self) -> None:
        link = make_link(expires_at=NOW - timedelta(days=1), max_uses=1, use_count=1)
        assert link_denial_reason(link, NOW) == LinkDenialReason.EXPIRED

    def test_use_limit(self) -> None:
        link = make_link(max_uses=3, use_count=3)
        assert link_denial_reason(link, NOW) == LinkDenialReason.USE_LIMIT_REACHED
