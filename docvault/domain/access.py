"""Access level lattice and pure grant reductions.

AccessLevel orders view < download < edit; OWNER is derived from document
ownership (never stored on a grant) and dominates every stored level.
The helpers here take grant-shaped objects and the current time and never
touch storage, so the resolver and link validator stay thin.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Protocol

from docvault.domain.enums import LinkDenialReason


class AccessLevel(str, Enum):
    """Graded permission tier. Compare with satisfies(), not with < on values."""

    VIEW = "view"
    DOWNLOAD = "download"
    EDIT = "edit"
    OWNER = "owner"

    @property
    def rank(self) -> float:
        return _RANKS[self]

    @classmethod
    def grantable(cls) -> list["AccessLevel"]:
        """Levels that may be stored on a targeted grant."""
        return [cls.VIEW, cls.DOWNLOAD, cls.EDIT]

    @classmethod
    def linkable(cls) -> list["AccessLevel"]:
        """Levels that may be stored on an anonymous link."""
        return [cls.VIEW, cls.DOWNLOAD]


_RANKS: dict[AccessLevel, float] = {
    AccessLevel.VIEW: 1,
    AccessLevel.DOWNLOAD: 2,
    AccessLevel.EDIT: 3,
    AccessLevel.OWNER: math.inf,
}


def satisfies(have: AccessLevel, want: AccessLevel) -> bool:
    """Return True if a holder of `have` may perform an operation requiring `want`."""
    return have.rank >= want.rank


@dataclass(frozen=True)
class AccessVerdict:
    """Result of access resolution: allowed with an effective level, or denied."""

    allowed: bool
    level: AccessLevel | None = None

    @classmethod
    def allow(cls, level: AccessLevel) -> "AccessVerdict":
        return cls(allowed=True, level=level)

    @classmethod
    def deny(cls) -> "AccessVerdict":
        return cls(allowed=False, level=None)


class GrantTerms(Protocol):
    """Fields of a targeted grant that decide whether it is active."""

    access_level: AccessLevel
    expires_at: datetime | None
    is_revoked: bool


class LinkTerms(Protocol):
    """Fields of an anonymous link that decide whether it is usable."""

    expires_at: datetime | None
    max_uses: int | None
    use_count: int
    is_revoked: bool


def is_expired(expires_at: datetime | None, now: datetime) -> bool:
    """A grant expires at `expires_at`: usable strictly before, not at or after."""
    return expires_at is not None and now >= expires_at


def is_grant_active(grant: GrantTerms, now: datetime) -> bool:
    return not grant.is_revoked and not is_expired(grant.expires_at, now)


def effective_grant_level(
    grants: Iterable[GrantTerms], now: datetime
) -> AccessLevel | None:
    """Highest level among active grants, or None when none is active.

    Duplicates are tolerated: several active grants for the same recipient
    reduce to the maximum.
    """
    active = [g.access_level for g in grants if is_grant_active(g, now)]
    return max(active, key=lambda level: level.rank, default=None)


def link_denial_reason(link: LinkTerms, now: datetime) -> LinkDenialReason | None:
    """First failing check in order revoked, expired, use limit; None if usable."""
    if link.is_revoked:
        return LinkDenialReason.REVOKED
    if is_expired(link.expires_at, now):
        return LinkDenialReason.EXPIRED
    if link.max_uses is not None and link.use_count >= link.max_uses:
        return LinkDenialReason.USE_LIMIT_REACHED
    return None
