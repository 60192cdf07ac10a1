"""Grant and link repository integration tests. Require Postgres; rolled back after each test."""

from datetime import timedelta

import pytest
from sqlalchemy import update

from docvault.application.dtos.share import LinkGrantCreate, TargetedGrantCreate
from docvault.domain.access import AccessLevel
from docvault.infrastructure.persistence.models.document import Document
from docvault.infrastructure.persistence.repositories.link_grant_repo import (
    LinkGrantRepository,
)
from docvault.infrastructure.persistence.repositories.targeted_grant_repo import (
    TargetedGrantRepository,
)
from docvault.shared.utils import generate_share_token, utc_now
from tests.factories import insert_document


async def _link(repo: LinkGrantRepository, document_id: str, **overrides):
    values = {
        "document_id": document_id,
        "owner_id": "alice",
        "token": generate_share_token(),
        "access_level": AccessLevel.DOWNLOAD,
        "expires_at": None,
        "max_uses": None,
    }
    values.update(overrides)
    return await repo.create(LinkGrantCreate(**values))


@pytest.mark.requires_db
async def test_consume_increments_use_count(db_session) -> None:
    document = await insert_document(db_session)
    repo = LinkGrantRepository(db_session)
    link = await _link(repo, document.id)

    consumed = await repo.consume(link.token, utc_now())

    assert consumed is not None
    assert consumed.use_count == 1
    assert consumed.token == link.token


@pytest.mark.requires_db
async def test_consume_stops_at_max_uses(db_session) -> None:
    document = await insert_document(db_session)
    repo = LinkGrantRepository(db_session)
    link = await _link(repo, document.id, max_uses=2)
    now = utc_now()

    assert await repo.consume(link.token, now) is not None
    assert await repo.consume(link.token, now) is not None
    assert await repo.consume(link.token, now) is None

    stored = await repo.get_by_token(link.token)
    assert stored is not None
    assert stored.use_count == 2


@pytest.mark.requires_db
async def test_consume_refuses_expired_link(db_session) -> None:
    document = await insert_document(db_session)
    repo = LinkGrantRepository(db_session)
    now = utc_now()
    link = await _link(repo, document.id, expires_at=now + timedelta(days=1))

    assert await repo.consume(link.token, now + timedelta(days=1)) is None
    assert await repo.consume(link.token, now) is not None


@pytest.mark.requires_db
async def test_consume_refuses_revoked_link(db_session) -> None:
    document = await insert_document(db_session)
    repo = LinkGrantRepository(db_session)
    link = await _link(repo, document.id)

    revoked = await repo.revoke(link.id, "alice")

    assert revoked is not None and revoked.is_revoked
    assert await repo.consume(link.token, utc_now()) is None


@pytest.mark.requires_db
async def test_consume_refuses_link_on_deleted_document(db_session) -> None:
    document = await insert_document(db_session)
    repo = LinkGrantRepository(db_session)
    link = await _link(repo, document.id)
    await db_session.execute(
        update(Document).where(Document.id == document.id).values(deleted_at=utc_now())
    )

    assert await repo.consume(link.token, utc_now()) is None


@pytest.mark.requires_db
async def test_revoke_by_non_owner_returns_none(db_session) -> None:
    document = await insert_document(db_session)
    repo = LinkGrantRepository(db_session)
    link = await _link(repo, document.id)

    assert await repo.revoke(link.id, "mallory") is None
    assert [x.id for x in await repo.list_active_for_document(document.id, "alice", utc_now())] == [
        link.id
    ]


@pytest.mark.requires_db
async def test_targeted_grant_lifecycle(db_session) -> None:
    document = await insert_document(db_session, title="Board minutes")
    repo = TargetedGrantRepository(db_session)
    now = utc_now()

    grant = await repo.create(
        TargetedGrantCreate(
            document_id=document.id,
            owner_id="alice",
            recipient_id="bob",
            access_level=AccessLevel.VIEW,
            expires_at=None,
            message="fyi",
        )
    )
    assert (await repo.find_active(document.id, "alice", "bob", now)).id == grant.id

    accepted = await repo.accept(grant.id, "bob", now)
    assert accepted is not None and accepted.accepted_at is not None

    shared = await repo.list_shared_with("bob", now)
    assert [(item.grant.id, item.document_title) for item in shared] == [
        (grant.id, "Board minutes")
    ]

    upgraded = await repo.update_level(grant.id, "alice", AccessLevel.EDIT)
    assert upgraded is not None and upgraded.access_level == AccessLevel.EDIT

    assert await repo.revoke(grant.id, "alice") is not None
    assert await repo.find_active(document.id, "alice", "bob", now) is None
    assert await repo.list_shared_with("bob", now) == []


@pytest.mark.requires_db
async def test_accept_by_someone_else_returns_none(db_session) -> None:
    document = await insert_document(db_session)
    repo = TargetedGrantRepository(db_session)
    grant = await repo.create(
        TargetedGrantCreate(
            document_id=document.id,
            owner_id="alice",
            recipient_id="bob",
            access_level=AccessLevel.VIEW,
            expires_at=None,
            message=None,
        )
    )

    assert await repo.accept(grant.id, "carol", utc_now()) is None
